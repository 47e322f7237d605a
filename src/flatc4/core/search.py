"""
Cross-level search by name.

Results leave out clones, the blocks already on screen at the current
view level, and originals whose clone is on screen.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Set, Tuple

from .types import Block, FlatC4Model, ViewLevel
from .views import filtered_entities

if TYPE_CHECKING:
    from .store import FlatC4Store

logger = logging.getLogger(__name__)


def visible_blocks(model: FlatC4Model) -> List[Block]:
    """Blocks on screen at the current view level."""
    if model.view_level is ViewLevel.SYSTEM:
        return list(model.systems)
    return filtered_entities(model).collection(model.view_level)


def _on_screen(block: Block, model: FlatC4Model) -> bool:
    level = model.view_level
    if level is ViewLevel.SYSTEM:
        return block.type is ViewLevel.SYSTEM
    if level is ViewLevel.CONTAINER:
        return block.type is ViewLevel.CONTAINER and block.system_id == model.active_system_id
    if level is ViewLevel.COMPONENT:
        return block.type is ViewLevel.COMPONENT and block.container_id == model.active_container_id
    return block.type is ViewLevel.CODE and block.component_id == model.active_component_id


def search_entities(model: FlatC4Model, query: Optional[str]) -> List[Block]:
    """
    Blocks whose name contains ``query``, case-insensitively.

    A blank query matches nothing. Order is systems, containers,
    components, then code elements, each in insertion order.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return []

    shadowed: Set[str] = {b.original.id for b in visible_blocks(model) if b.original}

    results = []
    for block in model.iter_blocks():
        if needle not in block.name.lower():
            continue
        if block.is_clone:
            continue
        if _on_screen(block, model):
            continue
        if block.id in shadowed:
            continue
        results.append(block)
    return results


class FlatSearch:
    """Current search value and its results for a store."""

    def __init__(self, store: "FlatC4Store", search_value: str = ""):
        self.store = store
        self.search_value = search_value
        self._cache: Optional[Tuple[int, str, List[Block]]] = None

    def set_search_value(self, value: str) -> None:
        self.search_value = value

    @property
    def search_results(self) -> List[Block]:
        version = self.store.version
        if self._cache is None or self._cache[:2] != (version, self.search_value):
            results = search_entities(self.store.model, self.search_value)
            logger.debug(f"Search {self.search_value!r} matched {len(results)} blocks")
            self._cache = (version, self.search_value, results)
        return self._cache[2]
