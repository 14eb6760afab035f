"""
Selection and visibility helpers.

Read-side layer over the ordered forest: which item is selected, which items
are hidden behind a collapsed ancestor, and how far each row is indented.
Nothing here mutates the forest.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Set, Tuple

from navcard.core.nav_item import NavItem, NavLevel

if TYPE_CHECKING:
    from navcard.core.ordered_forest import OrderedForest

logger = logging.getLogger(__name__)


class SelectionState:
    """Holds at most one selected item ID.

    The selection is only changed explicitly. Removing the selected item
    clears it; it never moves on to a sibling or parent.
    """

    def __init__(self, selected_id: Optional[str] = None):
        self._selected_id = selected_id

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def select(self, item_id: str) -> None:
        self._selected_id = item_id

    def clear(self) -> None:
        self._selected_id = None

    def is_selected(self, item_id: str) -> bool:
        return self._selected_id is not None and self._selected_id == item_id

    def discard(self, item_ids: Iterable[str]) -> bool:
        """Clear the selection if it is one of item_ids.

        Returns:
            True if the selection was cleared
        """
        if self._selected_id is None:
            return False
        if self._selected_id in set(item_ids):
            logger.debug(f"Selection {self._selected_id!r} removed")
            self._selected_id = None
            return True
        return False


def is_hidden(forest: OrderedForest, item_id: str) -> bool:
    """True if any ancestor of item_id is collapsed.

    A parent reference that does not resolve ends the walk (not hidden from
    there up); so does revisiting an item in a corrupted parent cycle.
    """
    item = forest.get_item(item_id)
    if item is None:
        return False

    seen: Set[str] = {item_id}
    parent_id = item.parent_id
    while parent_id is not None:
        if parent_id in seen:
            logger.warning(f"Parent cycle at {parent_id!r} while resolving visibility of {item_id!r}")
            return False
        seen.add(parent_id)
        parent = forest.get_item(parent_id)
        if parent is None:
            return False
        if parent.collapsed:
            return True
        parent_id = parent.parent_id
    return False


def indent_level(item: NavItem) -> int:
    """0 for primary, 1 for secondary, 2 for tertiary."""
    return item.level.indent


def child_level_for(level: NavLevel) -> Optional[NavLevel]:
    return level.child_level


def visible_items(forest: OrderedForest) -> List[Tuple[NavItem, int]]:
    """Rows to render: every non-hidden item in order with its indent."""
    rows = []
    for item in forest:
        if not is_hidden(forest, item.id):
            rows.append((item, indent_level(item)))
    return rows
