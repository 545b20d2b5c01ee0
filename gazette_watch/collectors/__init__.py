"""
Collector strategies for edition discovery.

Collectors handle the discovery phase - finding the current edition of
a monitored source.

Strategies:
- ListingPageCollector: listing page -> first dated document link
- FixedUrlCollector: stable URL, edition from Last-Modified
- ManualCollector: explicit URL override
"""

from .base import CollectorStrategy, SourceConfig
from .listing import ListingPageCollector
from .fixed_url import FixedUrlCollector
from .manual import ManualCollector

COLLECTORS = {
    "listing": ListingPageCollector,
    "fixed_url": FixedUrlCollector,
}

__all__ = [
    "COLLECTORS",
    "CollectorStrategy",
    "SourceConfig",
    "ListingPageCollector",
    "FixedUrlCollector",
    "ManualCollector",
]
