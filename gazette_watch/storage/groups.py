"""
Subscriber group configuration.

Groups are edited by the admin surface and stored as one JSON blob
({"groups": [...]}) under the "config.json" key. The pipeline only reads
them.
"""

import json

import structlog

from gazette_watch.core.models import TermGroup

logger = structlog.get_logger(__name__)

CONFIG_KEY = "config.json"


def load_groups(store) -> list[TermGroup]:
    """
    Load subscriber groups from the store.

    Args:
        store: KeyValueStore implementation

    Returns:
        Parsed groups; entries without a name are ignored
    """
    raw = store.get(CONFIG_KEY)
    if not raw:
        return []

    config = json.loads(raw)
    groups = []
    for data in config.get("groups", []):
        if not data.get("name"):
            logger.warning("group_without_name", group_id=data.get("id"))
            continue
        groups.append(TermGroup.from_dict(data))

    logger.debug("groups_loaded", count=len(groups))
    return groups


def save_groups(store, groups: list[TermGroup]) -> None:
    """Write groups back (used by tests and local seeding)."""
    payload = json.dumps({"groups": [g.to_dict() for g in groups]}, ensure_ascii=False)
    store.set(CONFIG_KEY, payload.encode("utf-8"))
