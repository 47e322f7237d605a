"""
Storage adapter interface and store binding.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

from pydantic import ValidationError

from ..types import FlatC4Model

if TYPE_CHECKING:
    from ..store import FlatC4Store

logger = logging.getLogger(__name__)


class StorageAdapter(ABC):
    """Persists one model snapshot."""

    @abstractmethod
    def save_model(self, model: FlatC4Model) -> None:
        ...

    @abstractmethod
    def load_model(self) -> Optional[FlatC4Model]:
        """The stored snapshot, or None when nothing readable is stored."""
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def close(self) -> None:
        """Release any held resources."""
        pass

    @staticmethod
    def decode(payload: Optional[str]) -> Optional[FlatC4Model]:
        if not payload:
            return None
        try:
            return FlatC4Model.model_validate_json(payload)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable snapshot: {e.error_count()} errors")
            return None

    @staticmethod
    def encode(model: FlatC4Model) -> str:
        return model.model_dump_json(by_alias=True)


def bind_storage(store: "FlatC4Store", adapter: StorageAdapter) -> Callable[[], None]:
    """
    Hydrate ``store`` from ``adapter`` and persist every later snapshot.

    Returns the handle that stops persistence.
    """
    stored = adapter.load_model()
    if stored is not None:
        store.set_model(stored)
        logger.info("Hydrated model from storage")

    def persist(model: FlatC4Model, previous: FlatC4Model) -> None:
        adapter.save_model(model)

    return store.subscribe(persist)
