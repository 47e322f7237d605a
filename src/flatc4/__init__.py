"""
flatc4 - Flat C4 model-state engine.

Holds a C4 architecture diagram (System -> Container -> Component -> Code)
as four flat collections linked by parent ids, and derives everything an
editor needs from it: the blocks visible at the current navigation
position, cross-level search, clone breadcrumbs and history-synced
navigation.

Key Components:
- core.store: The model store and its mutations
- core.views: Filtered and active entities for the current position
- core.navigation: Navigation state machine and history sync
- core.search: Name search across levels
- core.ancestry: Breadcrumb paths for cloned blocks
- core.storage: SQLite and in-memory persistence

Usage:
    from flatc4 import FlatC4Store, NavigationController

    store = FlatC4Store()
    system = store.add_system({"name": "Payments"})
    NavigationController(store).navigate_to_container(system.id)
"""

__version__ = "0.1.0"

from .core.navigation import NavigationController
from .core.store import FlatC4Store
from .core.types import FlatC4Model, ViewLevel

__all__ = [
    "__version__",
    "FlatC4Store",
    "FlatC4Model",
    "NavigationController",
    "ViewLevel",
]
