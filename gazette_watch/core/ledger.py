"""
Run ledger and history persistence.

History is stored as one JSON blob in the key-value store. Loading runs a
single explicit migration step so the rest of the code only ever sees the
current schema.
"""

import json
from typing import Optional

import structlog

from .models import HistoryState, RunRecord

logger = structlog.get_logger(__name__)

HISTORY_KEY = "history.json"
HISTORY_CAP = 300
SCHEMA_VERSION = 2


def append_run(history: HistoryState, record: RunRecord, cap: int = HISTORY_CAP) -> None:
    """Prepend a run record and truncate the log to cap entries."""
    history.runs.insert(0, record)
    del history.runs[cap:]


def migrate(data: dict, primary_source: str) -> dict:
    """
    Upgrade a raw history blob to the current schema.

    Version 1 blobs tracked a single source through "lastSeenHref". That
    value moves under the primary source in "lastSeen" and the legacy
    field is dropped. Legacy runs without a source get the primary source.

    Args:
        data: Parsed JSON blob (not modified)
        primary_source: Source that owned the legacy single-URL state

    Returns:
        Blob in the current schema
    """
    migrated = dict(data)
    last_seen = dict(migrated.get("lastSeen") or {})

    if "lastSeenHref" in migrated:
        legacy = migrated.pop("lastSeenHref")
        if legacy and primary_source not in last_seen:
            last_seen[primary_source] = legacy
        logger.info("history_migrated", source=primary_source, legacy=legacy)

    runs = []
    for run in migrated.get("runs") or []:
        if not run.get("source"):
            run = {**run, "source": primary_source}
        runs.append(run)

    migrated["lastSeen"] = last_seen
    migrated["runs"] = runs
    migrated["version"] = SCHEMA_VERSION
    return migrated


def history_from_dict(data: dict, primary_source: str) -> HistoryState:
    data = migrate(data, primary_source)
    return HistoryState(
        version=data["version"],
        last_seen={str(k): str(v) for k, v in data["lastSeen"].items() if v},
        runs=[RunRecord.from_dict(r, default_source=primary_source) for r in data["runs"]],
    )


def load_history(store, primary_source: str) -> HistoryState:
    """
    Read the history blob from the store.

    Args:
        store: KeyValueStore implementation
        primary_source: Source inheriting legacy single-URL state

    Returns:
        HistoryState (empty if nothing is stored yet)
    """
    raw: Optional[bytes] = store.get(HISTORY_KEY)
    if not raw:
        return HistoryState(version=SCHEMA_VERSION)

    history = history_from_dict(json.loads(raw), primary_source)
    logger.debug("history_loaded", runs=len(history.runs), sources=len(history.last_seen))
    return history


def save_history(store, history: HistoryState) -> None:
    """Write the history blob back to the store."""
    payload = json.dumps(history.to_dict(), ensure_ascii=False)
    store.set(HISTORY_KEY, payload.encode("utf-8"))
    logger.debug("history_saved", runs=len(history.runs))
