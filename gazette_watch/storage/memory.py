"""In-memory key-value store (tests, dry local runs)."""

from typing import Optional


class MemoryKeyValueStore:
    """Dictionary-backed KeyValueStore."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def __contains__(self, key: str) -> bool:
        return key in self._data
