"""
PDF text extraction plugin using pdfplumber.

Turns document bytes into one linear text buffer: the ordered text runs of
each page joined by a space, pages joined by a newline. Casing and
diacritics are preserved for snippet display.
"""

import io

import pdfplumber
import structlog

from gazette_watch.core.errors import ExtractionError

logger = structlog.get_logger(__name__)


def page_text_runs(page) -> list[str]:
    """Return the ordered text runs (words) of a pdfplumber page."""
    return [word["text"] for word in page.extract_words() if word.get("text")]


def extract_text(data: bytes) -> str:
    """
    Extract the text layer of a PDF document.

    Args:
        data: Raw PDF bytes

    Returns:
        Pages joined by newlines, runs within a page joined by spaces

    Raises:
        ExtractionError: If the bytes are not a readable PDF or a page
            cannot be decoded
    """
    if not data:
        raise ExtractionError("Empty document")

    try:
        pdf = pdfplumber.open(io.BytesIO(data))
    except Exception as e:
        raise ExtractionError(f"Unreadable PDF: {e}") from e

    pages: list[str] = []
    with pdf:
        for page_num, page in enumerate(pdf.pages, 1):
            try:
                runs = page_text_runs(page)
            except Exception as e:
                raise ExtractionError(f"Failed to decode page {page_num}: {e}") from e
            pages.append(" ".join(runs))

    text = "\n".join(pages)
    logger.info("pdf_extracted", pages=len(pages), chars=len(text))
    return text


class PdfTextExtractor:
    """Text extractor used by the orchestrator."""

    def extract(self, data: bytes) -> str:
        return extract_text(data)
