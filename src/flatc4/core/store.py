"""
Flat C4 model store.

The store owns the authoritative ``FlatC4Model`` snapshot. It manages:
- Structural mutations (add/update/remove/connect) across the four levels.
- Cascading deletes down the System -> Container -> Component -> Code tree.
- Navigation pointers and the current view level.
- Snapshot publication: every mutation builds a new model, swaps it in as
  one step, bumps ``version`` and notifies subscribers.

Lookups by id are linear scans; failed lookups degrade to None or no-ops.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Union

from .ids import IdFactory, generate_id
from .types import (
    BLOCK_CLASSES,
    COLLECTION_FIELDS,
    DEFAULT_NAMES,
    PATCH_CLASSES,
    VIEW_LEVELS,
    Block,
    BlockPatch,
    CodeBlock,
    ComponentBlock,
    Connection,
    ConnectionPatch,
    ContainerBlock,
    FlatC4Model,
    SystemBlock,
    ViewLevel,
)

logger = logging.getLogger(__name__)

Listener = Callable[[FlatC4Model, FlatC4Model], None]
BlockData = Union[Mapping[str, Any], Block]
PatchData = Union[Mapping[str, Any], BlockPatch]
ConnectionData = Union[Mapping[str, Any], Connection]

# Pointer fields ordered by the level whose view they select.
POINTER_FIELDS: List[str] = [
    "active_system_id",
    "active_container_id",
    "active_component_id",
]


def empty_model() -> FlatC4Model:
    return FlatC4Model()


def clear_pointers_below(level: ViewLevel) -> Dict[str, None]:
    """Pointer updates that clear every pointer not meaningful at ``level``."""
    return {name: None for name in POINTER_FIELDS[level.depth:]}


class FlatC4Store:
    """
    Single source of truth for a diagram.

    Construct one per editor session and pass it to every consumer.
    """

    def __init__(
        self,
        model: Optional[FlatC4Model] = None,
        id_factory: IdFactory = generate_id,
    ):
        self._model = model if model is not None else empty_model()
        self._id_factory = id_factory
        self._listeners: List[Listener] = []
        self._version = 0

    # =========================================================================
    # Snapshot access
    # =========================================================================

    @property
    def model(self) -> FlatC4Model:
        return self._model

    @property
    def version(self) -> int:
        """Monotonic counter bumped on every published mutation."""
        return self._version

    def get_state(self) -> FlatC4Model:
        """The whole model, for persistence adapters."""
        return self._model

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register ``listener(new_model, old_model)``.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, model: FlatC4Model) -> None:
        previous = self._model
        self._model = model
        self._version += 1
        for listener in list(self._listeners):
            try:
                listener(model, previous)
            except Exception as e:
                logger.warning(f"Store listener {listener!r} failed: {e}")

    def _replace(self, **changes: Any) -> None:
        self._commit(self._model.model_copy(update=changes))

    # =========================================================================
    # Bulk load / reset
    # =========================================================================

    def set_model(self, model: Union[FlatC4Model, Mapping[str, Any]]) -> None:
        """
        Replace the model, or merge a partial one.

        A ``FlatC4Model`` replaces the snapshot wholesale; a mapping is
        validated field by field and merged over the current snapshot.
        Passing the current snapshot back is a no-op.
        """
        if model is self._model:
            return
        if isinstance(model, FlatC4Model):
            self._commit(model)
            return

        merged = self._model.to_wire()
        partial = FlatC4Model.model_validate(model)
        for name in partial.model_fields_set:
            field = FlatC4Model.model_fields[name]
            merged[field.alias or name] = getattr(partial, name)
        self._commit(FlatC4Model.model_validate(merged))

    def reset(self) -> None:
        """Return to empty collections at the system level."""
        self._commit(empty_model())
        logger.info("Model store has been reset.")

    # =========================================================================
    # Queries
    # =========================================================================

    def get_block_by_id(self, block_id: str) -> Optional[Block]:
        """First block of any kind with this id."""
        for block in self._model.iter_blocks():
            if block.id == block_id:
                return block
        return None

    def find(self, level: ViewLevel, block_id: Optional[str]) -> Optional[Block]:
        """Block with this id in the collection of ``level``."""
        if not block_id:
            return None
        for block in self._model.collection(level):
            if block.id == block_id:
                return block
        return None

    # =========================================================================
    # Add
    # =========================================================================

    def _new_block(self, level: ViewLevel, data: BlockData, **links: Any) -> Block:
        if isinstance(data, Mapping):
            fields = dict(data)
        else:
            fields = data.model_dump(exclude_unset=True)
        fields["id"] = self._id_factory()
        fields["type"] = level
        if not fields.get("name"):
            fields["name"] = DEFAULT_NAMES[level]

        block = BLOCK_CLASSES[level].model_validate(fields)
        return block.model_copy(update=links)

    def _append(self, level: ViewLevel, block: Block) -> Block:
        field = COLLECTION_FIELDS[level]
        self._replace(**{field: [*getattr(self._model, field), block]})
        logger.debug(f"Added {level} {block.id} ({block.name})")
        return block

    def add_system(self, data: BlockData) -> SystemBlock:
        return self._append(ViewLevel.SYSTEM, self._new_block(ViewLevel.SYSTEM, data))

    def add_container(self, system_id: str, data: BlockData) -> ContainerBlock:
        block = self._new_block(ViewLevel.CONTAINER, data, system_id=system_id)
        return self._append(ViewLevel.CONTAINER, block)

    def add_component(self, container_id: str, data: BlockData) -> ComponentBlock:
        container = self.find(ViewLevel.CONTAINER, container_id)
        block = self._new_block(
            ViewLevel.COMPONENT,
            data,
            container_id=container_id,
            system_id=container.system_id if container else None,
        )
        return self._append(ViewLevel.COMPONENT, block)

    def add_code_element(self, component_id: str, data: BlockData) -> CodeBlock:
        block = self._new_block(ViewLevel.CODE, data, component_id=component_id)
        return self._append(ViewLevel.CODE, block)

    # =========================================================================
    # Update
    # =========================================================================

    def _update(self, level: ViewLevel, block_id: str, patch: PatchData) -> None:
        if isinstance(patch, Mapping):
            patch = PATCH_CLASSES[level].model_validate(patch)
        changes = patch.changes()
        changes.pop("id", None)
        changes.pop("type", None)

        field = COLLECTION_FIELDS[level]
        blocks = getattr(self._model, field)
        for i, block in enumerate(blocks):
            if block.id == block_id:
                updated = [*blocks]
                updated[i] = block.model_copy(update=changes)
                self._replace(**{field: updated})
                return
        logger.debug(f"Update ignored: no {level} with id {block_id}")

    def update_system(self, system_id: str, patch: PatchData) -> None:
        self._update(ViewLevel.SYSTEM, system_id, patch)

    def update_container(self, container_id: str, patch: PatchData) -> None:
        self._update(ViewLevel.CONTAINER, container_id, patch)

    def update_component(self, component_id: str, patch: PatchData) -> None:
        self._update(ViewLevel.COMPONENT, component_id, patch)

    def update_code_element(self, code_id: str, patch: PatchData) -> None:
        self._update(ViewLevel.CODE, code_id, patch)

    def update_block(self, level: ViewLevel, block_id: str, patch: PatchData) -> None:
        self._update(ViewLevel(level), block_id, patch)

    # =========================================================================
    # Remove (cascading)
    # =========================================================================

    def _remove(
        self,
        system_ids: Set[str] = frozenset(),
        container_ids: Set[str] = frozenset(),
        component_ids: Set[str] = frozenset(),
        code_ids: Set[str] = frozenset(),
    ) -> None:
        model = self._model
        container_ids = set(container_ids) | {
            c.id for c in model.containers if c.system_id in system_ids
        }
        component_ids = set(component_ids) | {
            c.id for c in model.components if c.container_id in container_ids
        }
        code_ids = set(code_ids) | {
            c.id for c in model.code_elements if c.component_id in component_ids
        }

        systems = [b for b in model.systems if b.id not in system_ids]
        containers = [b for b in model.containers if b.id not in container_ids]
        components = [b for b in model.components if b.id not in component_ids]
        code_elements = [b for b in model.code_elements if b.id not in code_ids]

        removed = (
            len(model.systems) - len(systems),
            len(model.containers) - len(containers),
            len(model.components) - len(components),
            len(model.code_elements) - len(code_elements),
        )
        if not any(removed):
            logger.debug("Remove ignored: no matching blocks")
            return

        self._replace(
            systems=systems,
            containers=containers,
            components=components,
            code_elements=code_elements,
        )
        logger.debug(
            f"Removed {removed[0]} systems, {removed[1]} containers, "
            f"{removed[2]} components, {removed[3]} code elements"
        )

    def remove_system(self, system_id: str) -> None:
        self._remove(system_ids={system_id})

    def remove_container(self, container_id: str) -> None:
        self._remove(container_ids={container_id})

    def remove_component(self, component_id: str) -> None:
        self._remove(component_ids={component_id})

    def remove_code_element(self, code_id: str) -> None:
        self._remove(code_ids={code_id})

    def remove_block(self, level: ViewLevel, block_id: str) -> None:
        level = ViewLevel(level)
        if level is ViewLevel.SYSTEM:
            self.remove_system(block_id)
        elif level is ViewLevel.CONTAINER:
            self.remove_container(block_id)
        elif level is ViewLevel.COMPONENT:
            self.remove_component(block_id)
        else:
            self.remove_code_element(block_id)

    def prune_dangling_connections(self) -> int:
        """
        Drop connections whose target no longer exists at the source's level.

        Removal leaves such edges in place; this is the explicit cleanup.
        Returns the number of connections dropped.
        """
        dropped = 0
        changes: Dict[str, List[Block]] = {}
        for level in VIEW_LEVELS:
            blocks = self._model.collection(level)
            ids = {b.id for b in blocks}
            updated = []
            for block in blocks:
                kept = [c for c in block.connections if c.target_id in ids]
                if len(kept) != len(block.connections):
                    dropped += len(block.connections) - len(kept)
                    block = block.model_copy(update={"connections": kept})
                updated.append(block)
            changes[COLLECTION_FIELDS[level]] = updated

        if dropped:
            self._replace(**changes)
            logger.info(f"Pruned {dropped} dangling connections")
        return dropped

    # =========================================================================
    # Connections
    # =========================================================================

    def _with_connections(
        self,
        level: ViewLevel,
        source_id: str,
        edit: Callable[[List[Connection]], Optional[List[Connection]]],
    ) -> bool:
        field = COLLECTION_FIELDS[level]
        blocks = getattr(self._model, field)
        for i, block in enumerate(blocks):
            if block.id != source_id:
                continue
            connections = edit(block.connections)
            if connections is None:
                return False
            updated = [*blocks]
            updated[i] = block.model_copy(update={"connections": connections})
            self._replace(**{field: updated})
            return True
        return False

    def connect(self, level: ViewLevel, source_id: str, connection: ConnectionData) -> bool:
        """
        Append a connection from ``source_id`` unless one to the same target exists.

        The first connection to a target wins. Returns True when a
        connection was added.
        """
        if not isinstance(connection, Connection):
            connection = Connection.model_validate(connection)
        if not source_id or not connection.target_id:
            logger.debug("Connect ignored: missing source or target id")
            return False

        def append(existing: List[Connection]) -> Optional[List[Connection]]:
            if any(c.target_id == connection.target_id for c in existing):
                return None
            return [*existing, connection]

        return self._with_connections(ViewLevel(level), source_id, append)

    def connect_systems(self, source_id: str, connection: ConnectionData) -> bool:
        return self.connect(ViewLevel.SYSTEM, source_id, connection)

    def connect_containers(self, source_id: str, connection: ConnectionData) -> bool:
        return self.connect(ViewLevel.CONTAINER, source_id, connection)

    def connect_components(self, source_id: str, connection: ConnectionData) -> bool:
        return self.connect(ViewLevel.COMPONENT, source_id, connection)

    def connect_code_elements(self, source_id: str, connection: ConnectionData) -> bool:
        return self.connect(ViewLevel.CODE, source_id, connection)

    def update_connection(
        self,
        level: ViewLevel,
        source_id: str,
        target_id: str,
        patch: Union[Mapping[str, Any], ConnectionPatch],
    ) -> None:
        if isinstance(patch, Mapping):
            patch = ConnectionPatch.model_validate(patch)
        changes = patch.changes()

        def merge(existing: List[Connection]) -> Optional[List[Connection]]:
            for i, conn in enumerate(existing):
                if conn.target_id == target_id:
                    updated = [*existing]
                    updated[i] = conn.model_copy(update=changes)
                    return updated
            return None

        self._with_connections(ViewLevel(level), source_id, merge)

    def remove_connection(self, level: ViewLevel, source_id: str, target_id: str) -> None:
        def drop(existing: List[Connection]) -> Optional[List[Connection]]:
            kept = [c for c in existing if c.target_id != target_id]
            return kept if len(kept) != len(existing) else None

        self._with_connections(ViewLevel(level), source_id, drop)

    # =========================================================================
    # Navigation pointers
    # =========================================================================

    def _set_pointers(self, **changes: Any) -> None:
        if all(getattr(self._model, name) == value for name, value in changes.items()):
            return
        self._replace(**changes)

    def set_active_system(self, system_id: Optional[str]) -> None:
        if system_id:
            level = ViewLevel.CONTAINER
            self._set_pointers(view_level=level, **clear_pointers_below(level), active_system_id=system_id)
        else:
            self._set_pointers(view_level=ViewLevel.SYSTEM, **clear_pointers_below(ViewLevel.SYSTEM))

    def set_active_container(self, container_id: Optional[str]) -> None:
        if container_id:
            level = ViewLevel.COMPONENT
            self._set_pointers(view_level=level, **clear_pointers_below(level), active_container_id=container_id)
        else:
            self._set_pointers(view_level=ViewLevel.CONTAINER, **clear_pointers_below(ViewLevel.CONTAINER))

    def set_active_component(self, component_id: Optional[str]) -> None:
        if component_id:
            self._set_pointers(view_level=ViewLevel.CODE, active_component_id=component_id)
        else:
            self._set_pointers(view_level=ViewLevel.COMPONENT, **clear_pointers_below(ViewLevel.COMPONENT))

    def set_view_level(self, level: ViewLevel) -> None:
        level = ViewLevel(level)
        self._set_pointers(view_level=level, **clear_pointers_below(level))
