"""
navcard: website navigation card with a three-level ordered forest engine.

Architecture:
- Core: OrderedForest (flat ID order + keyed records), selection and
  visibility helpers. No Qt imports.
- Protocols: record store, order store and ID generator contracts, plus the
  global NavConfig
- IO: in-memory store implementations
- Theming / Widgets: PyQt6 card bound to the engine

Key Features:
- Contiguous-subtree order preserved by every mutation
- Cascade delete with selection clearing
- Sibling-scoped block moves
- Collapse-aware visibility
"""

__version__ = "0.1.0"

from navcard.core import (
    NavigationError,
    InvalidLevelError,
    NavItem,
    NavLevel,
    OrderedForest,
    SelectionState,
    is_hidden,
    indent_level,
    visible_items,
)
from navcard.protocols import NavConfig, set_nav_config, get_nav_config

__all__ = [
    "__version__",
    "NavigationError",
    "InvalidLevelError",
    "NavItem",
    "NavLevel",
    "OrderedForest",
    "SelectionState",
    "is_hidden",
    "indent_level",
    "visible_items",
    "NavConfig",
    "set_nav_config",
    "get_nav_config",
]
