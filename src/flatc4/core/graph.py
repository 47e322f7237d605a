"""
Nodes and edges for the diagram canvas.

Translates the current view of a store into positioned nodes and styled
edges, and routes canvas gestures (drag, connect, edge edits) back into
store mutations at the current view level.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from pydantic import ConfigDict

from ..config import DEFAULT_EDGE_COLOR, MARKER_SIZE
from .result import ConnectError, Err, Ok, Result
from .store import FlatC4Store
from .types import (
    Block,
    C4Model,
    Connection,
    ConnectionInfo,
    ConnectionPatch,
    Position,
    ViewLevel,
)
from .views import filtered_entities

logger = logging.getLogger(__name__)

EditCallback = Callable[[str], None]
ConnectionCallback = Callable[[ConnectionInfo], None]
ColorLookup = Callable[[Optional[str]], str]


class Node(C4Model):
    """A positioned block on the canvas."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    type: ViewLevel
    position: Position
    data: Dict[str, Any]


class Marker(C4Model):
    type: str = "arrowclosed"
    width: int = MARKER_SIZE
    height: int = MARKER_SIZE
    color: str = DEFAULT_EDGE_COLOR


class EdgeData(C4Model):
    technology: Optional[str] = None
    description: Optional[str] = None
    label_position: Optional[float] = None
    bidirectional: Optional[bool] = None


class Edge(C4Model):
    """A directed connection on the canvas, identified as ``source->target``."""
    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    label: Optional[str] = None
    data: EdgeData
    type: str
    marker_start: Marker
    marker_end: Marker


@dataclass
class NodeCallbacks:
    on_edit_system: Optional[EditCallback] = None
    on_edit_container: Optional[EditCallback] = None
    on_edit_component: Optional[EditCallback] = None
    on_edit_code: Optional[EditCallback] = None

    def for_level(self, level: ViewLevel) -> Optional[EditCallback]:
        return getattr(self, f"on_edit_{level.value}")


@dataclass
class EdgeCallbacks:
    on_connection_dialog: Optional[ConnectionCallback] = None
    on_connection_save: Optional[ConnectionCallback] = None
    on_connection_delete: Optional[ConnectionCallback] = None
    get_technology_color: Optional[ColorLookup] = None


def default_technology_color(technology_id: Optional[str] = None) -> str:
    return DEFAULT_EDGE_COLOR


def current_blocks(store: FlatC4Store) -> List[Block]:
    """Blocks drawn at the store's current view level."""
    model = store.model
    if model.view_level is ViewLevel.SYSTEM:
        return list(model.systems)
    return filtered_entities(model).collection(model.view_level)


class FlatNodes:
    """Canvas nodes per view level."""

    def __init__(self, store: FlatC4Store, callbacks: Optional[NodeCallbacks] = None):
        self.store = store
        self.callbacks = callbacks or NodeCallbacks()

    def _to_node(self, block: Block) -> Node:
        data = block.model_dump()
        on_edit = self.callbacks.for_level(block.type)
        if on_edit is not None:
            data["on_edit"] = partial(on_edit, block.id)
        return Node(id=block.id, type=block.type, position=block.position, data=data)

    @property
    def system_nodes(self) -> List[Node]:
        return [self._to_node(b) for b in self.store.model.systems]

    @property
    def container_nodes(self) -> List[Node]:
        model = self.store.model
        if not model.active_system_id:
            return []
        return [self._to_node(b) for b in filtered_entities(model).containers]

    @property
    def component_nodes(self) -> List[Node]:
        model = self.store.model
        if not model.active_container_id:
            return []
        return [self._to_node(b) for b in filtered_entities(model).components]

    @property
    def code_nodes(self) -> List[Node]:
        model = self.store.model
        if not model.active_component_id:
            return []
        return [self._to_node(b) for b in filtered_entities(model).code_elements]

    @property
    def current_nodes(self) -> List[Node]:
        level = self.store.model.view_level
        if level is ViewLevel.SYSTEM:
            return self.system_nodes
        if level is ViewLevel.CONTAINER:
            return self.container_nodes
        if level is ViewLevel.COMPONENT:
            return self.component_nodes
        if level is ViewLevel.CODE:
            return self.code_nodes
        return []

    def get_node_by_id(self, node_id: str) -> Optional[Node]:
        for nodes in (self.system_nodes, self.container_nodes, self.component_nodes, self.code_nodes):
            for node in nodes:
                if node.id == node_id:
                    return node
        return None

    def handle_node_position_change(self, node_id: str, position: Position | Dict[str, float]) -> None:
        if not isinstance(position, Position):
            position = Position.model_validate(position)
        self.store.update_block(self.store.model.view_level, node_id, {"position": position})


class FlatEdges:
    """Canvas edges for the current view level and the edge gesture handlers."""

    def __init__(self, store: FlatC4Store, callbacks: Optional[EdgeCallbacks] = None):
        self.store = store
        self.callbacks = callbacks or EdgeCallbacks()

    def _marker(self, technology: Optional[str]) -> Marker:
        lookup = self.callbacks.get_technology_color or default_technology_color
        return Marker(color=lookup(technology))

    def _to_edge(self, source: Block, conn: Connection) -> Edge:
        return Edge(
            id=ConnectionInfo.edge_id(source.id, conn.target_id),
            source=source.id,
            target=conn.target_id,
            source_handle=conn.source_handle,
            target_handle=conn.target_handle,
            label=conn.label,
            data=EdgeData(
                technology=conn.technology,
                description=conn.description,
                label_position=conn.label_position,
                bidirectional=conn.bidirectional,
            ),
            type="technology" if conn.technology or conn.label else "default",
            marker_start=self._marker(conn.technology),
            marker_end=self._marker(conn.technology),
        )

    @property
    def edges(self) -> List[Edge]:
        return [
            self._to_edge(block, conn)
            for block in current_blocks(self.store)
            for conn in block.connections
        ]

    def on_connect(
        self,
        source: Optional[str],
        target: Optional[str],
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> Result[ConnectionInfo, ConnectError]:
        """
        Connect two nodes at the current level and open the connection dialog.

        The dialog opens even when the store already had this connection.
        """
        if not source:
            logger.debug("Connect ignored: no source node")
            return Err(ConnectError.MISSING_SOURCE)
        if not target:
            logger.debug("Connect ignored: no target node")
            return Err(ConnectError.MISSING_TARGET)

        self.store.connect(
            self.store.model.view_level,
            source,
            Connection(target_id=target, source_handle=source_handle, target_handle=target_handle),
        )
        info = ConnectionInfo(
            id=ConnectionInfo.edge_id(source, target),
            source_id=source,
            target_id=target,
            source_handle=source_handle,
            target_handle=target_handle,
        )
        if self.callbacks.on_connection_dialog:
            self.callbacks.on_connection_dialog(info)
        return Ok(info)

    def handle_edge_click(self, edge: Edge) -> ConnectionInfo:
        info = ConnectionInfo(
            id=edge.id,
            source_id=edge.source,
            target_id=edge.target,
            label=edge.label,
            technology=edge.data.technology,
            description=edge.data.description,
            label_position=edge.data.label_position,
            bidirectional=edge.data.bidirectional,
        )
        if self.callbacks.on_connection_dialog:
            self.callbacks.on_connection_dialog(info)
        return info

    def handle_connection_save(self, info: ConnectionInfo) -> None:
        patch = ConnectionPatch(
            label=info.label,
            technology=info.technology,
            description=info.description,
            label_position=info.label_position,
            bidirectional=info.bidirectional,
        )
        self.store.update_connection(self.store.model.view_level, info.source_id, info.target_id, patch)
        if self.callbacks.on_connection_save:
            self.callbacks.on_connection_save(info)

    def handle_connection_delete(self, info: Optional[ConnectionInfo]) -> None:
        if info is None:
            return
        self.store.remove_connection(self.store.model.view_level, info.source_id, info.target_id)
        if self.callbacks.on_connection_delete:
            self.callbacks.on_connection_delete(info)
