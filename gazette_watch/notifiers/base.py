"""
Notification payload and transport contract.

Transports are silent no-ops when their credentials are not configured;
delivery failures are raised as NotificationError so the caller can
isolate them per recipient.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class Alert:
    """Everything a transport needs to describe one finding."""

    kind: str  # found | empty | group
    source: str
    edition_label: Optional[str]
    url: str
    hits: tuple = ()
    snippets: tuple = ()

    # Group-scoped alerts only
    group_name: Optional[str] = None
    group_terms: tuple = ()

    @property
    def parameters(self) -> dict:
        """Structured parameters for templated transports."""
        return {
            "kind": self.kind,
            "source": self.source,
            "edition": self.edition_label,
            "url": self.url,
            "hits": list(self.hits),
            "snippets": list(self.snippets),
            "group_name": self.group_name,
            "group_terms": list(self.group_terms),
        }


class EmailTransport(Protocol):
    async def send(self, alert: Alert, to: Optional[str] = None) -> bool:
        ...


class ChatTransport(Protocol):
    async def send(self, alert: Alert) -> bool:
        ...
