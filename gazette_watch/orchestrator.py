"""
Master orchestrator for the monitoring pipeline.

Drives one invocation. Sources are processed strictly in order, each one
going through:

    collect -> dedup check -> download -> extract -> match -> route
            -> notify -> record

History is read once at the start and written once at the end, only when
something changed. Collection, download and extraction errors abort the
affected source only and never touch its history.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx
import structlog

from .collectors import COLLECTORS, ManualCollector, SourceConfig
from .config.loader import primary_source
from .config.settings import Settings
from .core.deduplicator import mark_processed, should_skip
from .core.errors import (
    CollectionError,
    ConfigurationError,
    DownloadError,
    ExtractionError,
    NotificationError,
)
from .core.http_client import HttpClient
from .core.ledger import append_run, load_history, save_history
from .core.matcher import match_terms
from .core.models import (
    DocumentMetadata,
    HistoryState,
    InvocationResult,
    MatchResult,
    RunRecord,
    SourceResult,
    TermGroup,
)
from .core.normalizer import unique_terms
from .core.router import RoutedGroup, notification_targets, resolve_terms, route
from .notifiers import Alert, EmailNotifier, TelegramNotifier
from .plugins.pdf import PdfTextExtractor
from .storage.groups import load_groups

logger = structlog.get_logger(__name__)


@dataclass
class CheckRequest:
    """
    Parameters of one invocation.

    A request with an explicit URL is a manual run: the dedup check is
    bypassed and the per-source dedup key is only advanced when persist
    is set.
    """
    url: Optional[str] = None
    sources: Optional[list[str]] = None
    terms: Optional[list[str]] = None
    dry_run: bool = False
    snippets: bool = False
    persist: bool = False

    @property
    def manual(self) -> bool:
        return bool(self.url)


class Monitor:
    """
    Orchestrator for gazette checks.

    Collaborators are injected so the same pipeline serves scheduled runs,
    manual runs and tests.
    """

    def __init__(
        self,
        sources: list[SourceConfig],
        store,
        settings: Optional[Settings] = None,
        http_client: Optional[HttpClient] = None,
        extractor=None,
        email=None,
        chat=None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            sources: Configured sources, in processing order
            store: KeyValueStore holding history and group configuration
            settings: Runtime settings (defaults to the environment)
            http_client: Shared HTTP client (creates own if not provided)
            extractor: Object with extract(bytes) -> str
            email: Email transport (send(alert, to=None))
            chat: Chat transport (send(alert))
            clock: Returns the current time for run records
        """
        self.sources = sources
        self.store = store
        self.settings = settings or Settings.from_env()
        self.http_client = http_client
        self.extractor = extractor or PdfTextExtractor()
        self.email = email or EmailNotifier(self.settings.smtp)
        self.chat = chat or TelegramNotifier(self.settings.telegram)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.primary_source = primary_source(sources)

    async def run(self, request: Optional[CheckRequest] = None) -> InvocationResult:
        """
        Run one invocation.

        Args:
            request: Invocation parameters (defaults to a scheduled run)

        Returns:
            InvocationResult with one entry per processed source
        """
        request = request or CheckRequest()
        try:
            selected = self._select_sources(request)
        except ConfigurationError as e:
            logger.warning("invalid_request", error=e.message)
            return InvocationResult(message=e.message)

        groups = load_groups(self.store)

        try:
            terms_by_source = self._resolve_terms(selected, groups, request)
        except ConfigurationError as e:
            logger.info("no_terms_configured", sources=[s.source_id for s in selected])
            return InvocationResult(message=e.message)

        terms_used = unique_terms(t for terms in terms_by_source.values() for t in terms)
        logger.info(
            "starting_check",
            sources=[s.source_id for s in selected],
            terms=len(terms_used),
            manual=request.manual,
            dry_run=request.dry_run,
        )

        history = load_history(self.store, self.primary_source)
        result = InvocationResult(terms_used=terms_used)
        changed = False

        owns_client = self.http_client is None
        if owns_client:
            self.http_client = HttpClient()
            await self.http_client.__aenter__()

        try:
            for source in selected:
                terms = terms_by_source.get(source.source_id, [])
                if not terms:
                    result.results.append(
                        SourceResult(
                            source=source.source_id,
                            skipped=True,
                            message="no terms configured",
                        )
                    )
                    continue

                source_result, recorded = await self._process_source(
                    source, terms, groups, history, request
                )
                result.results.append(source_result)
                changed = changed or recorded
        finally:
            if owns_client:
                await self.http_client.__aexit__(None, None, None)
                self.http_client = None
            # Sources completed before an unexpected error keep their records.
            if changed:
                save_history(self.store, history)

        logger.info(
            "check_complete",
            processed=len(result.results),
            failed=sum(1 for r in result.results if r.failed),
            found=sum(1 for r in result.results if r.found),
        )
        return result

    def _select_sources(self, request: CheckRequest) -> list[SourceConfig]:
        names = request.sources
        if not names:
            if request.manual:
                # An explicit document belongs to one source only.
                return [s for s in self.sources if s.source_id == self.primary_source]
            return list(self.sources)

        wanted = set(names)
        known = {s.source_id for s in self.sources}
        for name in wanted - known:
            logger.warning("unknown_source", source=name)
        selected = [s for s in self.sources if s.source_id in wanted]

        if request.manual and len(selected) > 1:
            raise ConfigurationError("a document URL applies to a single source")
        return selected

    def _resolve_terms(
        self,
        sources: list[SourceConfig],
        groups: list[TermGroup],
        request: CheckRequest,
    ) -> dict[str, list[str]]:
        """
        Resolve terms per source.

        Raises:
            ConfigurationError: If no source has any term
        """
        terms_by_source = {
            source.source_id: resolve_terms(
                source.source_id,
                groups,
                global_terms=self.settings.terms,
                override=request.terms,
            )
            for source in sources
        }
        if not any(terms_by_source.values()):
            raise ConfigurationError("no terms configured")
        return terms_by_source

    async def _process_source(
        self,
        source: SourceConfig,
        terms: list[str],
        groups: list[TermGroup],
        history: HistoryState,
        request: CheckRequest,
    ) -> tuple[SourceResult, bool]:
        """
        Process a single source.

        Returns:
            (result, recorded) where recorded tells whether history changed
        """
        log = logger.bind(source=source.source_id)

        try:
            document = await self._collect(source, request)
        except CollectionError as e:
            log.error("collection_failed", error=e.message)
            return self._failure(source.source_id, e), False

        result = SourceResult(
            source=source.source_id,
            url=document.url,
            edition_label=document.edition_label,
        )

        if not request.manual and should_skip(source.source_id, document.dedup_key, history):
            log.info("edition_already_processed", url=document.url)
            result.skipped = True
            result.message = "no new edition"
            return result, False

        try:
            text = await self._fetch_text(document)
        except (DownloadError, ExtractionError) as e:
            log.error("document_failed", url=document.url, error=e.message, kind=type(e).__name__)
            result.error = type(e).__name__
            result.message = e.message
            return result, False

        match = match_terms(text, terms, want_snippets=request.snippets)
        result.found = match.found
        result.hits = list(match.hits)
        result.snippets = list(match.snippets)
        log.info("terms_checked", edition=document.edition_label, hits=match.hits)

        routed = route(source.source_id, match.hits, groups)
        await self._notify(document, match, routed, result, request)

        record = RunRecord(
            timestamp=self.clock(),
            source=source.source_id,
            edition_label=document.edition_label,
            url=document.url,
            found=match.found,
            hits=tuple(match.hits),
            matched_groups=tuple(r.group.name for r in routed),
            manual=request.manual,
        )
        append_run(history, record, cap=self.settings.history_cap)

        if not request.manual or request.persist:
            mark_processed(history, document)

        return result, True

    async def _collect(self, source: SourceConfig, request: CheckRequest) -> DocumentMetadata:
        if request.manual:
            collector = ManualCollector(request.url)
        else:
            collector_class = COLLECTORS.get(source.collector)
            if collector_class is None:
                raise CollectionError(
                    f"Unknown collector: {source.collector}", source=source.source_id
                )
            collector = collector_class(http_client=self.http_client)
        return await collector.collect(source)

    async def _fetch_text(self, document: DocumentMetadata) -> str:
        """
        Download and extract the document.

        Raises:
            DownloadError: If the body cannot be fetched
            ExtractionError: If the body is not a readable document
        """
        try:
            data = await self.http_client.download(document.url)
        except (httpx.HTTPError, OSError) as e:
            raise DownloadError(
                f"Failed to download document: {e}", source=document.source
            ) from e

        try:
            return self.extractor.extract(data)
        except ExtractionError as e:
            e.source = document.source
            raise

    async def _notify(
        self,
        document: DocumentMetadata,
        match: MatchResult,
        routed: list[RoutedGroup],
        result: SourceResult,
        request: CheckRequest,
    ) -> None:
        """
        Dispatch group, global and empty-result notifications.

        Each delivery is isolated: a failing recipient is logged and counted
        without stopping the others.
        """
        snippets = tuple(match.snippets) if request.snippets else ()

        for item in notification_targets(routed):
            matched = set(item.matched_terms)
            alert = Alert(
                kind="group",
                source=document.source,
                edition_label=document.edition_label,
                url=document.url,
                hits=item.matched_terms,
                snippets=tuple(s for h, s in zip(match.hits, snippets) if h in matched),
                group_name=item.group.name,
                group_terms=item.group.terms,
            )
            if await self._deliver(self.email.send(alert, to=item.group.address), result):
                result.groups_notified.append(item.group.name)

        if request.dry_run:
            return

        if match.found:
            alert = Alert(
                kind="found",
                source=document.source,
                edition_label=document.edition_label,
                url=document.url,
                hits=tuple(match.hits),
                snippets=snippets,
            )
        elif self.settings.send_empty:
            alert = Alert(
                kind="empty",
                source=document.source,
                edition_label=document.edition_label,
                url=document.url,
            )
        else:
            return

        await self._deliver(self.email.send(alert), result)
        await self._deliver(self.chat.send(alert), result)

    async def _deliver(self, send, result: SourceResult) -> bool:
        try:
            return bool(await send)
        except NotificationError as e:
            logger.warning(
                "notification_failed",
                source=result.source,
                recipient=e.recipient,
                error=e.message,
            )
            result.notification_failures += 1
            return False

    @staticmethod
    def _failure(source: str, error: Exception) -> SourceResult:
        return SourceResult(
            source=source,
            error=type(error).__name__,
            message=getattr(error, "message", str(error)),
        )
