"""
Navigation between view levels, kept in sync with a history backend.

Validation and the model transition are pure functions. The
``NavigationController`` applies them to a store and mirrors each
successful move into history as a hash path::

    #/system
    #/system/{sid}/container
    #/system/{sid}/container/{cid}/component
    #/system/{sid}/container/{cid}/component/{coid}/code
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from pydantic import BaseModel, ConfigDict

from .result import Err, NavigationError, Ok, Result
from .store import FlatC4Store, clear_pointers_below
from .types import VIEW_LEVELS, FlatC4Model, ViewLevel

logger = logging.getLogger(__name__)

HistoryState = Dict[str, str]
PopStateListener = Callable[[Optional[HistoryState]], None]

EMPTY_HASHES = frozenset({"", "#", "#/"})

PATH_PATTERNS: List[Tuple[re.Pattern, ViewLevel]] = [
    (re.compile(r"^#?/system/([^/]+)/container/([^/]+)/component/([^/]+)/code/?$"), ViewLevel.CODE),
    (re.compile(r"^#?/system/([^/]+)/container/([^/]+)/component/?$"), ViewLevel.COMPONENT),
    (re.compile(r"^#?/system/([^/]+)/container/?$"), ViewLevel.CONTAINER),
    (re.compile(r"^#?/system/?$"), ViewLevel.SYSTEM),
]


class NavigationTarget(BaseModel):
    """A validated navigation position; ids deeper than ``level`` are None."""
    model_config = ConfigDict(frozen=True)

    level: ViewLevel
    system_id: Optional[str] = None
    container_id: Optional[str] = None
    component_id: Optional[str] = None

    def to_state(self) -> HistoryState:
        state = {"level": self.level.value}
        if self.system_id:
            state["systemId"] = self.system_id
        if self.container_id:
            state["containerId"] = self.container_id
        if self.component_id:
            state["componentId"] = self.component_id
        return state

    @classmethod
    def from_model(cls, model: FlatC4Model) -> "NavigationTarget":
        """
        Position held by a model.

        A view level whose ancestor ids are unset falls back to the deepest
        level those ids do support.
        """
        ids = [model.active_system_id, model.active_container_id, model.active_component_id]
        for depth in range(model.view_level.depth, 0, -1):
            result = validate_target(VIEW_LEVELS[depth], *ids[:depth])
            if result.is_ok():
                return result.value
        return cls(level=ViewLevel.SYSTEM)


# =============================================================================
# Pure functions
# =============================================================================

def validate_target(
    level: ViewLevel | str,
    system_id: Optional[str] = None,
    container_id: Optional[str] = None,
    component_id: Optional[str] = None,
) -> Result[NavigationTarget, NavigationError]:
    """
    Check that every id the target level requires is present.

    Empty strings count as missing. Ids deeper than the level are dropped.
    """
    try:
        level = ViewLevel(level)
    except ValueError:
        return Err(NavigationError.UNKNOWN_LEVEL)

    depth = level.depth
    if depth >= 1 and not system_id:
        return Err(NavigationError.MISSING_SYSTEM_ID)
    if depth >= 2 and not container_id:
        return Err(NavigationError.MISSING_CONTAINER_ID)
    if depth >= 3 and not component_id:
        return Err(NavigationError.MISSING_COMPONENT_ID)

    return Ok(NavigationTarget(
        level=level,
        system_id=system_id if depth >= 1 else None,
        container_id=container_id if depth >= 2 else None,
        component_id=component_id if depth >= 3 else None,
    ))


def transition(model: FlatC4Model, target: NavigationTarget) -> FlatC4Model:
    """Model with the view level and active pointers of ``target``."""
    changes: Dict[str, Any] = {"view_level": target.level, **clear_pointers_below(target.level)}
    if target.system_id:
        changes["active_system_id"] = target.system_id
    if target.container_id:
        changes["active_container_id"] = target.container_id
    if target.component_id:
        changes["active_component_id"] = target.component_id
    return model.model_copy(update=changes)


def build_path(target: NavigationTarget) -> str:
    path = "#/system"
    if target.level is ViewLevel.SYSTEM:
        return path
    path += f"/{target.system_id}/container"
    if target.level is ViewLevel.CONTAINER:
        return path
    path += f"/{target.container_id}/component"
    if target.level is ViewLevel.COMPONENT:
        return path
    return path + f"/{target.component_id}/code"


def parse_path(location_hash: Optional[str]) -> NavigationTarget:
    """Target encoded in a hash path; anything unrecognised is the system level."""
    for pattern, level in PATH_PATTERNS:
        match = pattern.match(location_hash or "")
        if match:
            ids = list(match.groups()) + [None] * (3 - len(match.groups()))
            return NavigationTarget(
                level=level,
                system_id=ids[0],
                container_id=ids[1],
                component_id=ids[2],
            )
    return NavigationTarget(level=ViewLevel.SYSTEM)


def target_from_state(state: Optional[Dict[str, Any]]) -> Optional[NavigationTarget]:
    """Target carried by a history state object, if it is a valid one."""
    if not state or "level" not in state:
        return None
    result = validate_target(
        state["level"],
        state.get("systemId"),
        state.get("containerId"),
        state.get("componentId"),
    )
    return result.value if result.is_ok() else None


# =============================================================================
# History
# =============================================================================

class HistoryBackend(Protocol):
    """What the controller needs from a browser-style history."""

    @property
    def location_hash(self) -> str: ...

    def push_state(self, state: HistoryState, title: str, url: str) -> None: ...

    def replace_state(self, state: HistoryState, title: str, url: str) -> None: ...

    def add_listener(self, listener: PopStateListener) -> None: ...

    def remove_listener(self, listener: PopStateListener) -> None: ...


class InMemoryHistory:
    """
    History stack held in memory.

    ``back`` and ``forward`` move through the stack and dispatch the stored
    state to listeners, like a browser popstate event.
    """

    def __init__(self, location_hash: str = ""):
        self.entries: List[Tuple[Optional[HistoryState], str]] = [(None, location_hash)]
        self.index = 0
        self.listeners: List[PopStateListener] = []

    @property
    def location_hash(self) -> str:
        return self.entries[self.index][1]

    @property
    def state(self) -> Optional[HistoryState]:
        return self.entries[self.index][0]

    def push_state(self, state: HistoryState, title: str, url: str) -> None:
        del self.entries[self.index + 1:]
        self.entries.append((dict(state), url))
        self.index += 1

    def replace_state(self, state: HistoryState, title: str, url: str) -> None:
        self.entries[self.index] = (dict(state), url)

    def add_listener(self, listener: PopStateListener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: PopStateListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def _dispatch(self) -> None:
        for listener in list(self.listeners):
            listener(self.state)

    def back(self) -> None:
        if self.index > 0:
            self.index -= 1
            self._dispatch()

    def forward(self) -> None:
        if self.index < len(self.entries) - 1:
            self.index += 1
            self._dispatch()


# =============================================================================
# Controller
# =============================================================================

class NavigationController:
    """Applies navigation to a store and mirrors it into history."""

    def __init__(self, store: FlatC4Store, history: Optional[HistoryBackend] = None):
        self.store = store
        self.history = history
        self._mounted = False

    def navigate_to_view(
        self,
        level: ViewLevel | str,
        system_id: Optional[str] = None,
        container_id: Optional[str] = None,
        component_id: Optional[str] = None,
    ) -> Result[NavigationTarget, NavigationError]:
        result = validate_target(level, system_id, container_id, component_id)
        if result.is_err():
            logger.debug(f"Navigation to {level} rejected: {result.error}")
            return result

        target = result.value
        self._apply(target)
        if self.history is not None:
            self.history.push_state(target.to_state(), "", build_path(target))
        return result

    def navigate_to_system(self) -> Result[NavigationTarget, NavigationError]:
        return self.navigate_to_view(ViewLevel.SYSTEM)

    def navigate_to_container(self, system_id: str) -> Result[NavigationTarget, NavigationError]:
        return self.navigate_to_view(ViewLevel.CONTAINER, system_id)

    def navigate_to_component(
        self, system_id: str, container_id: str
    ) -> Result[NavigationTarget, NavigationError]:
        return self.navigate_to_view(ViewLevel.COMPONENT, system_id, container_id)

    def navigate_to_code(
        self, system_id: str, container_id: str, component_id: str
    ) -> Result[NavigationTarget, NavigationError]:
        return self.navigate_to_view(ViewLevel.CODE, system_id, container_id, component_id)

    def _apply(self, target: NavigationTarget) -> None:
        self.store.set_model(transition(self.store.model, target))

    def mount(self) -> None:
        """Sync an empty location from the store, then start listening."""
        if self.history is None or self._mounted:
            return
        if self.history.location_hash in EMPTY_HASHES:
            target = NavigationTarget.from_model(self.store.model)
            self.history.replace_state(target.to_state(), "", build_path(target))
        self.history.add_listener(self.handle_pop_state)
        self._mounted = True

    def unmount(self) -> None:
        if self.history is None or not self._mounted:
            return
        self.history.remove_listener(self.handle_pop_state)
        self._mounted = False

    def handle_pop_state(self, state: Optional[Dict[str, Any]]) -> None:
        """Apply a back/forward move without pushing a new entry."""
        target = target_from_state(state)
        if target is None:
            location = self.history.location_hash if self.history is not None else ""
            target = parse_path(location)
        logger.debug(f"History moved to {target.level}")
        self._apply(target)
