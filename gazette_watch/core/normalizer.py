"""
Text normalization shared by watch terms and document text.

Handles:
- Diacritic folding (NFD decomposition, combining marks dropped)
- Case folding
- Whitespace collapsing
- Comma-separated term list parsing
"""

import re
import unicodedata
from typing import Iterable, Optional

_WHITESPACE = re.compile(r"\s+")


def strip_diacritics(text: str) -> str:
    """Remove combining diacritical marks ("Palácio" -> "Palacio")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: Optional[str]) -> str:
    """
    Normalize text for diacritic- and case-insensitive comparison.

    The same transform is applied to watch terms and to extracted document
    text so both sides compare under identical rules.

    Args:
        text: Raw text (None is treated as empty)

    Returns:
        Lower-cased text without diacritics, whitespace runs collapsed to a
        single space
    """
    if not text:
        return ""

    folded = strip_diacritics(text).lower()
    return _WHITESPACE.sub(" ", folded)


def normalize_term(term: Optional[str]) -> str:
    """Normalize a configured watch term and trim surrounding spaces."""
    return normalize(term).strip()


def clean_term(term: Optional[str]) -> str:
    """
    Trim and lower-case a term while keeping its diacritics.

    Hits are reported as the configured term text, so the term list keeps
    its accents for display; matching always goes through normalize().
    """
    if not term:
        return ""
    return _WHITESPACE.sub(" ", str(term)).strip().lower()


def unique_terms(terms: Iterable[str]) -> list[str]:
    """Clean terms, dropping empties and duplicates while keeping order."""
    seen: set[str] = set()
    result: list[str] = []
    for term in terms:
        cleaned = clean_term(term)
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            result.append(cleaned)
    return result


def parse_terms(raw: Optional[str]) -> list[str]:
    """
    Parse a comma-separated term list ("prefeitura, Kaline ,").

    Args:
        raw: Comma-separated terms as given in TERMS or --terms

    Returns:
        Cleaned, de-duplicated terms in input order
    """
    if not raw:
        return []
    return unique_terms(raw.split(","))


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs for display, preserving case and accents."""
    return _WHITESPACE.sub(" ", text).strip()
