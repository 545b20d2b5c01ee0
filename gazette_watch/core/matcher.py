"""
Fuzzy, diacritic-insensitive term matching with snippet recovery.

A term is reduced to its letters and digits; between every pair of kept
characters the pattern tolerates any run of non-alphanumeric characters,
so "kaline" matches "ka-line", "ka line" and "KALINE". Term text is always
escaped: it is data, never pattern syntax.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from .models import MatchResult
from .normalizer import collapse_whitespace, normalize

logger = structlog.get_logger(__name__)

# Any run of non-alphanumeric characters between two kept term characters.
GAP = r"[\W_]*"

SNIPPET_RADIUS = 200


@dataclass(frozen=True)
class Span:
    """Location of a match inside normalized text."""
    offset: int
    length: int


def term_characters(term: str) -> str:
    """Return the alphanumeric characters of the normalized term."""
    return "".join(ch for ch in normalize(term) if ch.isalnum())


def build_pattern(term: str) -> re.Pattern:
    """
    Build the fuzzy matching pattern for a watch term.

    Args:
        term: Configured watch term

    Returns:
        Compiled case-insensitive pattern

    Raises:
        ValueError: If the term has no letters or digits
    """
    chars = term_characters(term)
    if not chars:
        raise ValueError(f"Term has nothing to match: {term!r}")

    source = GAP.join(re.escape(ch) for ch in chars)
    return re.compile(source, re.IGNORECASE)


def find(text: str, pattern: re.Pattern) -> Optional[Span]:
    """Return the first match of pattern in normalized text, if any."""
    match = pattern.search(text)
    if not match:
        return None
    return Span(offset=match.start(), length=match.end() - match.start())


def recover_snippet(
    raw: str,
    normalized: str,
    offset: int,
    radius: int = SNIPPET_RADIUS,
) -> str:
    """
    Cut a human-readable excerpt of the raw text around a match.

    Normalization does not preserve positions, so the raw offset is an
    approximation obtained by linear scaling of the normalized offset. The
    window may drift a few characters away from the exact hit on long
    documents with many stripped marks.

    Args:
        raw: Extracted text with original casing and diacritics
        normalized: normalize(raw)
        offset: Match offset inside the normalized text
        radius: Characters kept on each side of the projected offset

    Returns:
        Excerpt wrapped in ellipsis markers
    """
    if not raw or not normalized:
        return ""

    approx = offset * len(raw) // len(normalized)
    start = max(0, approx - radius)
    end = min(len(raw), approx + radius)
    return f"[…] {collapse_whitespace(raw[start:end])} […]"


def match_terms(
    raw_text: str,
    terms: Iterable[str],
    want_snippets: bool = False,
) -> MatchResult:
    """
    Test every term against the document text.

    Args:
        raw_text: Text extracted from the document
        terms: Watch terms, in the order hits should be reported
        want_snippets: Also recover an excerpt for each hit

    Returns:
        MatchResult with hits in first-match order over the input terms
    """
    normalized = normalize(raw_text)
    result = MatchResult()

    for term in terms:
        if term in result.hits:
            continue
        try:
            pattern = build_pattern(term)
        except ValueError:
            logger.warning("term_skipped_empty", term=term)
            continue

        span = find(normalized, pattern)
        if span is None:
            continue

        result.hits.append(term)
        if want_snippets:
            result.snippets.append(recover_snippet(raw_text, normalized, span.offset))

    logger.debug("terms_matched", terms=len(result.hits), chars=len(normalized))
    return result
