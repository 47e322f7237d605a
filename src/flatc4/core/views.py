"""
Derived views over a model snapshot.

``filtered_entities`` narrows each child collection to the children of the
active parent. ``active_entities`` resolves the active pointers to blocks.
Both are pure; ``ViewCache`` memoises them per store version.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .types import (
    Block,
    CodeBlock,
    ComponentBlock,
    ContainerBlock,
    FlatC4Model,
    SystemBlock,
    ViewLevel,
)

if TYPE_CHECKING:
    from .store import FlatC4Store

logger = logging.getLogger(__name__)


class FilteredEntities(BaseModel):
    """Children of the active parents at each level."""
    model_config = ConfigDict(frozen=True)

    containers: List[ContainerBlock]
    components: List[ComponentBlock]
    code_elements: List[CodeBlock]
    view_level: ViewLevel

    def collection(self, level: ViewLevel) -> List[Block]:
        if level is ViewLevel.CONTAINER:
            return self.containers
        if level is ViewLevel.COMPONENT:
            return self.components
        if level is ViewLevel.CODE:
            return self.code_elements
        return []


class ActiveEntities(BaseModel):
    model_config = ConfigDict(frozen=True)

    active_system: Optional[SystemBlock] = None
    active_container: Optional[ContainerBlock] = None
    active_component: Optional[ComponentBlock] = None
    view_level: ViewLevel


def filtered_entities(model: FlatC4Model) -> FilteredEntities:
    """
    Containers of the active system, components of the active container and
    code elements of the active component.

    A collection is empty when its governing pointer is unset.
    """
    sid = model.active_system_id
    cid = model.active_container_id
    coid = model.active_component_id

    return FilteredEntities(
        containers=[c for c in model.containers if sid and c.system_id == sid],
        components=[c for c in model.components if cid and c.container_id == cid],
        code_elements=[c for c in model.code_elements if coid and c.component_id == coid],
        view_level=model.view_level,
    )


def _first(blocks: List[Block], block_id: Optional[str]) -> Optional[Block]:
    if not block_id:
        return None
    return next((b for b in blocks if b.id == block_id), None)


def active_entities(model: FlatC4Model) -> ActiveEntities:
    """Blocks the active pointers refer to; unknown ids resolve to None."""
    return ActiveEntities(
        active_system=_first(model.systems, model.active_system_id),
        active_container=_first(model.containers, model.active_container_id),
        active_component=_first(model.components, model.active_component_id),
        view_level=model.view_level,
    )


class ViewCache:
    """Per-version memo of the derived views of a store."""

    def __init__(self, store: "FlatC4Store"):
        self.store = store
        self._filtered: Optional[Tuple[int, FilteredEntities]] = None
        self._active: Optional[Tuple[int, ActiveEntities]] = None

    @property
    def filtered(self) -> FilteredEntities:
        version = self.store.version
        if self._filtered is None or self._filtered[0] != version:
            logger.debug(f"Recomputing filtered view at version {version}")
            self._filtered = (version, filtered_entities(self.store.model))
        return self._filtered[1]

    @property
    def active(self) -> ActiveEntities:
        version = self.store.version
        if self._active is None or self._active[0] != version:
            self._active = (version, active_entities(self.store.model))
        return self._active[1]
