"""
Storage adapters.

- base: KeyValueStore protocol
- file_store: directory-backed store used by the CLI
- memory: in-memory store
- groups: subscriber group configuration blob
"""

from .base import KeyValueStore
from .file_store import FileKeyValueStore
from .memory import MemoryKeyValueStore
from .groups import CONFIG_KEY, load_groups, save_groups

__all__ = [
    "KeyValueStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "CONFIG_KEY",
    "load_groups",
    "save_groups",
]
