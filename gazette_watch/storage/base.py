"""
Key-value store contract.

The pipeline only needs get/set of opaque bytes with read-after-write
consistency; history and group configuration are JSON blobs on top.
"""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Storage operations required by the pipeline."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...
