"""PDF text extraction using PyMuPDF."""

import logging

import fitz  # PyMuPDF

from quizgen.errors import CorruptFileError, EmptyContentError

logger = logging.getLogger(__name__)

# Index of the word text in the tuples returned by page.get_text("words")
_WORD_TEXT = 4


def page_marker(page_number: int) -> str:
    """Delimiter written ahead of each page's text."""
    return f"--- Page {page_number} ---"


def extract_pdf_text(data: bytes) -> str:
    """
    Extract the text of every page, in order, behind a page marker.

    Words on a page are joined with single spaces.

    Args:
        data: Raw PDF bytes

    Returns:
        Text of the whole document

    Raises:
        CorruptFileError: If the PDF cannot be opened or is password protected
        EmptyContentError: If no page yields any text (likely a scanned PDF)
    """
    pages: list[str] = []
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            if doc.needs_pass:
                raise CorruptFileError(
                    "Failed to read PDF file. It is password protected."
                )
            # A well-formed PDF has at least one page; repair can yield none
            if doc.page_count == 0:
                raise CorruptFileError(
                    "Failed to read PDF file. It might be corrupted."
                )
            for page in doc:
                words = page.get_text("words")
                pages.append(" ".join(word[_WORD_TEXT] for word in words))
    except CorruptFileError:
        raise
    except Exception as e:
        logger.warning("Error parsing PDF: %s", e, exc_info=True)
        raise CorruptFileError(
            "Failed to read PDF file. It might be corrupted or password protected."
        ) from e

    if not any(text.strip() for text in pages):
        raise EmptyContentError(
            "PDF appears to be empty or contains only images. "
            "Try taking a screenshot or converting it to an image for OCR."
        )

    logger.debug("Extracted %d pages of text", len(pages))
    return "".join(
        f"{page_marker(number)}\n{text}\n\n"
        for number, text in enumerate(pages, start=1)
    )
