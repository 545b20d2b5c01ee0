"""
Core layer - stable foundation for the monitoring pipeline.

Components:
- models: DocumentMetadata, TermGroup, RunRecord, HistoryState dataclasses
- http_client: httpx wrapper with per-call timeouts
- normalizer: diacritic, case and whitespace folding
- matcher: fuzzy term patterns and snippet recovery
- deduplicator: per-source edition dedup decision
- router: subscriber group routing
- ledger: bounded run log and history persistence
- errors: pipeline exception taxonomy
"""

from .models import (
    DocumentMetadata,
    TermGroup,
    MatchResult,
    RunRecord,
    HistoryState,
    SourceResult,
    InvocationResult,
)
from .normalizer import normalize, normalize_term, parse_terms
from .matcher import build_pattern, find, match_terms, recover_snippet
from .deduplicator import should_skip, mark_processed
from .router import RoutedGroup, route, notification_targets, resolve_terms
from .ledger import append_run, load_history, save_history, migrate
from .errors import (
    GazetteWatchError,
    CollectionError,
    DownloadError,
    ExtractionError,
    ConfigurationError,
    NotificationError,
)

__all__ = [
    "DocumentMetadata",
    "TermGroup",
    "MatchResult",
    "RunRecord",
    "HistoryState",
    "SourceResult",
    "InvocationResult",
    "normalize",
    "normalize_term",
    "parse_terms",
    "build_pattern",
    "find",
    "match_terms",
    "recover_snippet",
    "should_skip",
    "mark_processed",
    "RoutedGroup",
    "route",
    "notification_targets",
    "resolve_terms",
    "append_run",
    "load_history",
    "save_history",
    "migrate",
    "GazetteWatchError",
    "CollectionError",
    "DownloadError",
    "ExtractionError",
    "ConfigurationError",
    "NotificationError",
]
