"""
Breadcrumb paths for cloned blocks.

A clone shows where its original lives, e.g.
``"Parent System / Parent Container / Original Component"``. Missing
ancestors shorten the path from the left; a missing original yields None.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .types import Block, FlatC4Model, ViewLevel

if TYPE_CHECKING:
    from .store import FlatC4Store

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " / "


def _lookup(blocks: List[Block], block_id: Optional[str]) -> Optional[Block]:
    if not block_id:
        return None
    return next((b for b in blocks if b.id == block_id), None)


def _ancestor_chain(block: Block, model: FlatC4Model) -> List[Block]:
    """``block`` and its resolvable ancestors, outermost first."""
    chain = [block]
    current = block
    while current.type is not ViewLevel.SYSTEM:
        if current.type is ViewLevel.CODE:
            parent = _lookup(model.components, current.component_id)
        elif current.type is ViewLevel.COMPONENT:
            parent = _lookup(model.containers, current.container_id)
        else:
            parent = _lookup(model.systems, current.system_id)
        if parent is None:
            break
        chain.insert(0, parent)
        current = parent
    return chain


def resolve_clone_path(item: Block, model: FlatC4Model) -> Optional[str]:
    """Path to the original of ``item``, or None when it is not a displayable clone."""
    original = item.original
    if original is None:
        return None

    kind = original.type or item.type
    if kind is ViewLevel.SYSTEM:
        return None

    source = _lookup(model.collection(kind), original.id)
    if source is None:
        return None

    return PATH_SEPARATOR.join(b.name for b in _ancestor_chain(source, model))


class ClonePathResolver:
    """
    Memoised ``resolve_clone_path`` for one store.

    Entries are tied to the store version, so any mutation invalidates them
    and an unchanged version returns the identical string.
    """

    def __init__(self, store: "FlatC4Store"):
        self.store = store
        self._version = store.version
        self._memo: Dict[Tuple, Optional[str]] = {}

    def __call__(self, item: Block) -> Optional[str]:
        if self.store.version != self._version:
            self._memo.clear()
            self._version = self.store.version

        original = item.original
        key = (item.id, item.type, original.id if original else None, original.type if original else None)
        if key not in self._memo:
            self._memo[key] = resolve_clone_path(item, self.store.model)
        return self._memo[key]
