"""
Edition deduplication against the persisted per-source dedup key.

The decision is pure; advancing the key is left to the orchestrator, which
only does it for scheduled runs after extraction and matching succeeded.
"""

import structlog

from .models import DocumentMetadata, HistoryState

logger = structlog.get_logger(__name__)


def should_skip(source: str, current_key: str, history: HistoryState) -> bool:
    """
    Check whether this edition was already fully processed.

    Args:
        source: Source name (e.g., "DOE/PB")
        current_key: Dedup key of the edition found now
        history: Loaded history state

    Returns:
        True if the stored key for the source equals current_key
    """
    return history.last_seen.get(source) == current_key


def mark_processed(history: HistoryState, document: DocumentMetadata) -> None:
    """Advance the dedup key for the document's source."""
    previous = history.last_seen.get(document.source)
    history.last_seen[document.source] = document.dedup_key
    logger.debug(
        "dedup_key_advanced",
        source=document.source,
        previous=previous,
        current=document.dedup_key,
    )
