"""
Core model-state engine for flatc4.

Exports the store, its types, and the pure views derived from it.
"""

from .actions import ModelActions
from .ancestry import ClonePathResolver, resolve_clone_path
from .graph import EdgeCallbacks, FlatEdges, FlatNodes, NodeCallbacks
from .ids import generate_id
from .navigation import (
    HistoryBackend,
    InMemoryHistory,
    NavigationController,
    NavigationTarget,
    build_path,
    parse_path,
    transition,
    validate_target,
)
from .result import ConnectError, Err, NavigationError, Ok, Result
from .search import FlatSearch, search_entities
from .store import FlatC4Store
from .types import (
    CodeBlock,
    CodeType,
    ComponentBlock,
    Connection,
    ConnectionInfo,
    ContainerBlock,
    FlatC4Model,
    SystemBlock,
    ViewLevel,
)
from .views import ViewCache, active_entities, filtered_entities

__all__ = [
    "ClonePathResolver",
    "CodeBlock",
    "CodeType",
    "ComponentBlock",
    "ConnectError",
    "Connection",
    "ConnectionInfo",
    "ContainerBlock",
    "EdgeCallbacks",
    "Err",
    "FlatC4Model",
    "FlatC4Store",
    "FlatEdges",
    "FlatNodes",
    "FlatSearch",
    "HistoryBackend",
    "InMemoryHistory",
    "ModelActions",
    "NavigationController",
    "NavigationError",
    "NavigationTarget",
    "NodeCallbacks",
    "Ok",
    "Result",
    "SystemBlock",
    "ViewCache",
    "ViewLevel",
    "active_entities",
    "build_path",
    "filtered_entities",
    "generate_id",
    "parse_path",
    "resolve_clone_path",
    "search_entities",
    "transition",
    "validate_target",
]
