"""
Data models for the monitoring pipeline.

HistoryState is the only persisted aggregate. It carries a schema version
and is migrated once on load (see core.ledger).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from .normalizer import unique_terms


@dataclass(frozen=True)
class DocumentMetadata:
    """
    Candidate edition produced by a collector.

    Built fresh on every invocation, never persisted on its own.
    """
    source: str
    url: str
    edition_label: str
    dedup_key: str


@dataclass(frozen=True)
class TermGroup:
    """
    Subscriber group: which sources to watch, for which terms, and where to
    send alerts. Read-only input for the pipeline.
    """
    id: str
    name: str
    sources: frozenset = frozenset()
    terms: tuple = ()
    notify: bool = False
    address: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "TermGroup":
        """
        Create from the persisted group configuration.

        Accepts both field spellings written by the admin surface over time:
        "notify"/"address" and "notifyEmail"/"email"/"emails".
        """
        address = data.get("address") or data.get("email")
        if not address and data.get("emails"):
            emails = [str(e).strip() for e in data["emails"] if str(e).strip()]
            address = ", ".join(emails) or None

        notify = data.get("notify", data.get("notifyEmail", False))

        return cls(
            id=str(data.get("id") or data.get("name", "")),
            name=str(data.get("name", "")),
            sources=frozenset(str(s) for s in data.get("sources", [])),
            terms=tuple(unique_terms(data.get("terms", []))),
            notify=bool(notify),
            address=address.strip() if address else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "sources": sorted(self.sources),
            "terms": list(self.terms),
            "notify": self.notify,
            "address": self.address,
        }


@dataclass
class MatchResult:
    """Hits in first-match order, with snippets aligned when requested."""
    hits: list[str] = field(default_factory=list)
    snippets: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.hits)


@dataclass(frozen=True)
class RunRecord:
    """
    One processing outcome in the run log. Immutable once written.

    Serialized with the key names of the historical run entries ("when",
    "edition", "pdfUrl") so old logs load without conversion.
    """
    timestamp: datetime
    source: str
    edition_label: Optional[str]
    url: str
    found: bool
    hits: tuple = ()
    matched_groups: tuple = ()
    manual: bool = False

    def to_dict(self) -> dict:
        return {
            "when": self.timestamp.isoformat(),
            "source": self.source,
            "edition": self.edition_label,
            "pdfUrl": self.url,
            "found": self.found,
            "hits": list(self.hits),
            "groups": list(self.matched_groups),
            "manual": self.manual,
        }

    @classmethod
    def from_dict(cls, data: dict, default_source: str = "") -> "RunRecord":
        when = data.get("when")
        try:
            timestamp = datetime.fromisoformat(when.replace("Z", "+00:00")) if when else None
        except ValueError:
            timestamp = None

        return cls(
            timestamp=timestamp or datetime.fromtimestamp(0, timezone.utc),
            source=data.get("source") or default_source,
            edition_label=data.get("edition"),
            url=data.get("pdfUrl") or data.get("url") or "",
            found=bool(data.get("found", False)),
            hits=tuple(data.get("hits") or ()),
            matched_groups=tuple(data.get("groups") or ()),
            manual=bool(data.get("manual", False)),
        )


@dataclass
class HistoryState:
    """Per-source dedup keys plus the bounded, newest-first run log."""
    version: int = 2
    last_seen: dict[str, str] = field(default_factory=dict)
    runs: list[RunRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "lastSeen": dict(self.last_seen),
            "runs": [r.to_dict() for r in self.runs],
        }


@dataclass
class SourceResult:
    """Outcome of one source within an invocation."""
    source: str
    url: Optional[str] = None
    edition_label: Optional[str] = None
    found: bool = False
    hits: list[str] = field(default_factory=list)
    snippets: list[str] = field(default_factory=list)
    skipped: bool = False
    message: Optional[str] = None
    error: Optional[str] = None
    groups_notified: list[str] = field(default_factory=list)
    notification_failures: int = 0

    @property
    def count(self) -> int:
        return len(self.hits)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "source": self.source,
            "url": self.url,
            "edition": self.edition_label,
            "found": self.found,
            "hits": self.hits,
            "count": self.count,
        }
        if self.skipped:
            data["skipped"] = True
        if self.message:
            data["message"] = self.message
        if self.error:
            data["error"] = self.error
        if self.snippets:
            data["snippets"] = self.snippets
        if self.groups_notified:
            data["groupsNotified"] = self.groups_notified
        if self.notification_failures:
            data["notificationFailures"] = self.notification_failures
        return data


@dataclass
class InvocationResult:
    """Structured outcome of one check invocation."""
    terms_used: list[str] = field(default_factory=list)
    results: list[SourceResult] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not any(r.failed for r in self.results)

    def to_dict(self) -> dict:
        data = {
            "ok": self.ok,
            "termsUsed": self.terms_used,
            "results": [r.to_dict() for r in self.results],
        }
        if self.message:
            data["message"] = self.message
        return data
