"""
Result Type Implementation.

Store lookups fail soft (None or a no-op), so the only outcomes worth
surfacing to callers are rejected requests: a navigation missing its
ancestor ids, or a connect gesture missing an endpoint. Those return an
explicit ``Ok``/``Err`` instead of raising.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A request that was applied."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """A request that was rejected without touching any state."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok[T], Err[E]]


class NavigationError(StrEnum):
    """Why a navigation request was rejected."""
    MISSING_SYSTEM_ID = "missing_system_id"
    MISSING_CONTAINER_ID = "missing_container_id"
    MISSING_COMPONENT_ID = "missing_component_id"
    UNKNOWN_LEVEL = "unknown_level"


class ConnectError(StrEnum):
    """Why a connect gesture was rejected."""
    MISSING_SOURCE = "missing_source"
    MISSING_TARGET = "missing_target"
