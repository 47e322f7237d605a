"""
Editor-level actions on a store.

These sit between canvas gestures and the store: add a fresh element at
the current view level, save an edit dialog, delete the node under the
cursor, or wipe the whole diagram.
"""

import logging
import random
from typing import Any, Dict, Mapping, Optional

from .store import FlatC4Store
from .storage import StorageAdapter
from .types import (
    DEFAULT_NAMES,
    Block,
    CodePatch,
    CodeType,
    Position,
    SystemPatch,
    ViewLevel,
)

logger = logging.getLogger(__name__)

# Fields an edit dialog may change on a non-code block.
EDITABLE_FIELDS = ("name", "description", "technology", "url")


class ModelActions:
    """Actions that operate at the store's current view level."""

    def __init__(
        self,
        store: FlatC4Store,
        storage: Optional[StorageAdapter] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.storage = storage
        self.rng = rng or random.Random()

    def random_position(self) -> Position:
        return Position(x=self.rng.random() * 400 + 100, y=self.rng.random() * 300 + 100)

    def add_element(
        self,
        properties: Optional[Mapping[str, Any]] = None,
        labels: Optional[Mapping[str, str]] = None,
    ) -> Optional[Block]:
        """
        Add a new element at the current level under the active parent.

        Returns None when the level needs an active parent that is not set.
        """
        model = self.store.model
        level = model.view_level
        labels = labels or {}

        data: Dict[str, Any] = {
            "name": labels.get(level.value) or DEFAULT_NAMES[level],
            "description": "",
            "position": self.random_position(),
            "connections": [],
            "technology": "",
            "url": "",
        }
        if level is ViewLevel.CODE:
            data.update(code_type=CodeType.CLASS, code="")
        data.update(properties or {})

        if level is ViewLevel.SYSTEM:
            return self.store.add_system(data)
        if level is ViewLevel.CONTAINER and model.active_system_id:
            return self.store.add_container(model.active_system_id, data)
        if level is ViewLevel.COMPONENT and model.active_container_id:
            if self.store.find(ViewLevel.CONTAINER, model.active_container_id):
                return self.store.add_component(model.active_container_id, data)
        if level is ViewLevel.CODE and model.active_component_id:
            return self.store.add_code_element(model.active_component_id, data)

        logger.debug(f"Add ignored: no active parent for {level} view")
        return None

    def handle_add_element(self) -> Optional[Block]:
        return self.add_element()

    def handle_element_save(self, block_id: str, data: Mapping[str, Any]) -> None:
        """
        Apply an edit dialog's fields to the block at the current level.

        Only fields present in ``data`` are changed.
        """
        level = self.store.model.view_level
        fields = {name: data[name] for name in EDITABLE_FIELDS if name in data}

        if level is ViewLevel.CODE:
            code_type = data.get("code_type") or data.get("codeType") or CodeType.OTHER
            if "code" in data:
                fields["code"] = data["code"]
            patch = CodePatch(**fields, code_type=code_type)
        else:
            patch = SystemPatch(**fields)
        self.store.update_block(level, block_id, patch.changes())

    def handle_node_delete(self, block_id: str) -> None:
        self.store.remove_block(self.store.model.view_level, block_id)

    def reset_store(self) -> None:
        """Clear persisted state and return the store to an empty model."""
        if self.storage is not None:
            self.storage.clear()
        self.store.reset()
