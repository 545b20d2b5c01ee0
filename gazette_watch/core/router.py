"""
Group routing: which subscriber groups care about a set of hits.

A group matches when the source is in its source set and at least one of
its terms is among the hits. Hits are the literal configured terms, so the
intersection is exact string equality.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from .models import TermGroup
from .normalizer import unique_terms

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RoutedGroup:
    """A matched group with the hits it subscribed to, in hit order."""
    group: TermGroup
    matched_terms: tuple

    @property
    def notifiable(self) -> bool:
        return self.group.notify and bool(self.group.address)


def route(source: str, hits: Iterable[str], groups: Iterable[TermGroup]) -> list[RoutedGroup]:
    """
    Match hits against subscriber groups.

    Args:
        source: Source that produced the hits
        hits: Terms found in the document
        groups: Configured subscriber groups

    Returns:
        Matched groups in configuration order
    """
    hit_list = list(hits)
    routed: list[RoutedGroup] = []

    for group in groups:
        if source not in group.sources:
            continue
        group_terms = set(group.terms)
        matched = tuple(hit for hit in hit_list if hit in group_terms)
        if matched:
            routed.append(RoutedGroup(group=group, matched_terms=matched))

    return routed


def notification_targets(routed: Iterable[RoutedGroup]) -> list[RoutedGroup]:
    """Keep matched groups that asked for notification and have an address."""
    targets = []
    for item in routed:
        if item.notifiable:
            targets.append(item)
        elif item.group.notify:
            logger.warning("group_without_address", group=item.group.name)
    return targets


def resolve_terms(
    source: str,
    groups: Iterable[TermGroup],
    global_terms: Iterable[str] = (),
    override: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    Resolve the watch terms for one source.

    An explicit override replaces everything. Otherwise the global term list
    comes first, followed by the terms of every group watching the source.
    """
    if override:
        return unique_terms(override)

    terms = list(global_terms)
    for group in groups:
        if source in group.sources:
            terms.extend(group.terms)
    return unique_terms(terms)
