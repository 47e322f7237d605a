"""
Storage adapters for flatc4.

Provides pluggable persistence backends for model snapshots:
- SQLiteStorage: Local persistence in a single database file
- MemoryStorage: Ephemeral storage for tests and headless sessions
"""

from .base import StorageAdapter, bind_storage
from .memory import MemoryStorage
from .sqlite import SQLiteStorage

__all__ = ["StorageAdapter", "SQLiteStorage", "MemoryStorage", "bind_storage"]
