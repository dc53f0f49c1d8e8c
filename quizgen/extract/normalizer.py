"""Reduce extracted content to the two shapes the generator accepts."""

from quizgen.models.content import (
    ExtractedContent,
    ExtractedImage,
    ExtractedText,
    ImagePayload,
    NormalizedContent,
    TextPayload,
)

MAX_CONTENT_CHARS = 100_000


def normalize_content(
    extracted: ExtractedContent, max_chars: int = MAX_CONTENT_CHARS
) -> NormalizedContent:
    """
    Re-tag extracted content for the generation request.

    Text longer than max_chars is cut silently to bound the request size.

    Args:
        extracted: Output of the extractor
        max_chars: Maximum number of characters of text to keep

    Returns:
        TextPayload or ImagePayload
    """
    if isinstance(extracted, ExtractedText):
        return TextPayload(text=extracted.content[:max_chars])
    if isinstance(extracted, ExtractedImage):
        return ImagePayload(mime_type=extracted.mime_type, data=extracted.base64_data)
    raise TypeError(f"Unknown extracted content: {type(extracted).__name__}")
