"""Turn uploaded PDFs, spreadsheets and images into generator-ready content."""

import logging

from quizgen.errors import FileReadError
from quizgen.models.content import ExtractedContent, ExtractedText, SourceFile

from .dispatch import FileFormat, detect_format, guess_media_type, read_source_file
from .image import encode_image
from .normalizer import MAX_CONTENT_CHARS, normalize_content
from .pdf import extract_pdf_text
from .spreadsheet import extract_spreadsheet_text

logger = logging.getLogger(__name__)


def extract_content(source: SourceFile) -> ExtractedContent:
    """
    Extract the content of one upload.

    Extraction is all-or-nothing: either the full content comes back or a
    single QuizGenError is raised.

    Args:
        source: The uploaded file

    Returns:
        ExtractedText for documents, ExtractedImage for images
    """
    file_format = detect_format(source.filename, source.media_type)
    if source.data is None:
        raise FileReadError("Failed to read file.")
    logger.debug(
        "Extracting %s as %s (%d bytes)",
        source.filename,
        file_format.value,
        len(source.data),
    )

    if file_format is FileFormat.PDF:
        return ExtractedText(content=extract_pdf_text(source.data))
    if file_format is FileFormat.SPREADSHEET:
        return ExtractedText(content=extract_spreadsheet_text(source.data))

    mime_type = source.media_type.split(";", 1)[0].strip().lower()
    if not mime_type.startswith("image/"):
        mime_type = guess_media_type(source.filename)
    return encode_image(source.data, mime_type)


__all__ = [
    "FileFormat",
    "MAX_CONTENT_CHARS",
    "detect_format",
    "encode_image",
    "extract_content",
    "extract_pdf_text",
    "extract_spreadsheet_text",
    "guess_media_type",
    "normalize_content",
    "read_source_file",
]
