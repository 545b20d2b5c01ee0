"""
Plugins for document handling.

Plugins provide capabilities that depend on third-party parsers:
- pdf: PDF text-layer extraction with pdfplumber
"""

from .pdf import PdfTextExtractor, extract_text

__all__ = [
    "PdfTextExtractor",
    "extract_text",
]
