"""
Core navigation engine.

The ordered forest, its item records, and the read-side selection and
visibility helpers. No Qt imports live here.
"""

from .exceptions import NavigationError, InvalidLevelError
from .nav_item import NavItem, NavLevel, PAYLOAD_FIELDS
from .id_generator import RandomIdGenerator
from .selection import SelectionState, is_hidden, indent_level, child_level_for, visible_items
from .ordered_forest import OrderedForest

__all__ = [
    "NavigationError",
    "InvalidLevelError",
    "NavItem",
    "NavLevel",
    "PAYLOAD_FIELDS",
    "RandomIdGenerator",
    "SelectionState",
    "is_hidden",
    "indent_level",
    "child_level_for",
    "visible_items",
    "OrderedForest",
]
