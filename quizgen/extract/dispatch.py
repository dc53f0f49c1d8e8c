"""Pick the reader for an upload from its media type or extension."""

import logging
from enum import Enum
from pathlib import Path, PurePath

from quizgen.errors import FileReadError, UnsupportedTypeError
from quizgen.models.content import SourceFile

logger = logging.getLogger(__name__)


class FileFormat(str, Enum):
    """Source formats the extractor understands."""

    PDF = "pdf"
    SPREADSHEET = "spreadsheet"
    IMAGE = "image"


MEDIA_TYPES: dict[str, FileFormat] = {
    "application/pdf": FileFormat.PDF,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": FileFormat.SPREADSHEET,
    "application/vnd.ms-excel": FileFormat.SPREADSHEET,
    "image/png": FileFormat.IMAGE,
    "image/jpeg": FileFormat.IMAGE,
    "image/webp": FileFormat.IMAGE,
    "image/heic": FileFormat.IMAGE,
}

EXTENSIONS: dict[str, FileFormat] = {
    ".pdf": FileFormat.PDF,
    ".xlsx": FileFormat.SPREADSHEET,
    ".xls": FileFormat.SPREADSHEET,
    ".png": FileFormat.IMAGE,
    ".jpg": FileFormat.IMAGE,
    ".jpeg": FileFormat.IMAGE,
    ".webp": FileFormat.IMAGE,
    ".heic": FileFormat.IMAGE,
}

EXTENSION_MEDIA_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".heic": "image/heic",
}

UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload a PDF, Excel, or Image file."


def _base_media_type(media_type: str | None) -> str:
    """Drop parameters such as charset and lowercase the type."""
    if not media_type:
        return ""
    return media_type.split(";", 1)[0].strip().lower()


def _extension(filename: str) -> str:
    return PurePath(filename).suffix.lower()


def detect_format(filename: str, media_type: str | None = None) -> FileFormat:
    """
    Decide which reader handles a file without touching its contents.

    The declared media type wins; the filename extension is the fallback.

    Args:
        filename: Name of the uploaded file
        media_type: MIME type declared by the uploader, if any

    Returns:
        The matching FileFormat

    Raises:
        UnsupportedTypeError: If neither the media type nor the extension is allowed
    """
    declared = MEDIA_TYPES.get(_base_media_type(media_type))
    if declared is not None:
        return declared

    by_extension = EXTENSIONS.get(_extension(filename))
    if by_extension is not None:
        return by_extension

    raise UnsupportedTypeError(UNSUPPORTED_MESSAGE)


def guess_media_type(filename: str) -> str:
    """Media type implied by an allowed extension, or an empty string."""
    return EXTENSION_MEDIA_TYPES.get(_extension(filename), "")


def read_source_file(path: str | Path, media_type: str | None = None) -> SourceFile:
    """
    Load an upload from disk.

    The allow-list check runs before the file is opened, so a bad upload is
    rejected without any read.

    Args:
        path: Path to the file
        media_type: Declared MIME type; guessed from the extension when omitted

    Returns:
        SourceFile with the file's bytes

    Raises:
        UnsupportedTypeError: If the file type is not allowed
        FileReadError: If the file cannot be read
    """
    path = Path(path)
    detect_format(path.name, media_type)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise FileReadError(f"Failed to read file: {path.name}") from e

    logger.debug("Read %d bytes from %s", len(data), path)
    return SourceFile(
        filename=path.name,
        media_type=media_type or guess_media_type(path.name),
        data=data,
    )
