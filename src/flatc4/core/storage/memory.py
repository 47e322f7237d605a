"""
In-memory storage adapter.
"""

from typing import Optional

from ..types import FlatC4Model
from .base import StorageAdapter


class MemoryStorage(StorageAdapter):
    """Holds the serialised snapshot in memory, like browser local storage."""

    def __init__(self, payload: Optional[str] = None):
        self.payload = payload
        self.saves = 0

    def save_model(self, model: FlatC4Model) -> None:
        self.payload = self.encode(model)
        self.saves += 1

    def load_model(self) -> Optional[FlatC4Model]:
        return self.decode(self.payload)

    def clear(self) -> None:
        self.payload = None
