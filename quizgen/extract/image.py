"""Images are passed through as base64; the generator does the reading."""

import base64

from quizgen.errors import FileReadError
from quizgen.models.content import ExtractedImage


def encode_image(data: bytes | None, mime_type: str) -> ExtractedImage:
    """Base64-encode raw image bytes, keeping their MIME type."""
    if not data:
        raise FileReadError("Failed to read file.")
    return ExtractedImage(
        mime_type=mime_type,
        base64_data=base64.b64encode(data).decode("ascii"),
    )
