"""
Exception taxonomy for the monitoring pipeline.

Source-level errors (collection, download, extraction) abort only the
affected source. Notification errors are isolated per recipient.
"""

from typing import Optional


class GazetteWatchError(Exception):
    """Base class for all pipeline errors."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.source = source


class CollectionError(GazetteWatchError):
    """Listing page or edition metadata could not be fetched or parsed."""


class DownloadError(GazetteWatchError):
    """Document body could not be downloaded."""


class ExtractionError(GazetteWatchError):
    """Parser rejected the document bytes or a page failed to decode."""


class ConfigurationError(GazetteWatchError):
    """No watch terms resolved for the requested sources."""


class NotificationError(GazetteWatchError):
    """A transport failed to deliver a notification."""

    def __init__(self, message: str, recipient: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.recipient = recipient
