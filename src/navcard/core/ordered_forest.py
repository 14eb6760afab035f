"""
Ordered forest engine for the navigation card.

Stores a shallow forest (primary, secondary, tertiary items) as one flat,
totally ordered sequence of IDs plus a keyed record store. The sequence is
always a depth-first pre-order of the forest: every item is immediately
followed by the contiguous run of its descendants. All structural edits are
slice operations on that sequence.

Every mutator reads a snapshot of both stores, computes the complete new
state, and only then writes. The order store is written with a single
whole-sequence replace, so a reader never sees a half-applied move. When a
store write fails partway, the records and order touched so far are put
back from the snapshot before the error propagates.

Stale IDs are expected (the card is edited by direct manipulation), so
operations on unknown IDs and moves past a sibling boundary are no-ops that
return False rather than raising.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from navcard.core.exceptions import NavigationError
from navcard.core.id_generator import RandomIdGenerator
from navcard.core.nav_item import PAYLOAD_FIELDS, NavItem, NavLevel
from navcard.core.selection import SelectionState
from navcard.io.memory_store import InMemoryOrderStore, InMemoryRecordStore
from navcard.protocols.nav_config import NavConfig, get_nav_config
from navcard.protocols.storage import IdGenerator, OrderStore, RecordStore

logger = logging.getLogger(__name__)

_Snapshot = Tuple[List[str], Dict[str, NavItem]]


class OrderedForest:
    """Hierarchical ordered list with sibling-scoped block moves.

    Usage:
        forest = OrderedForest()
        home = forest.add_item(NavLevel.PRIMARY)
        about = forest.add_item(NavLevel.SECONDARY, home)
        forest.move_down(about)   # no-op, about is the only child
        forest.delete_item(home)  # removes home and about
    """

    def __init__(
        self,
        records: Optional[RecordStore] = None,
        order: Optional[OrderStore] = None,
        id_generator: Optional[IdGenerator] = None,
        config: Optional[NavConfig] = None,
        selection: Optional[SelectionState] = None,
    ):
        self._config = config or get_nav_config()
        self._records = records if records is not None else InMemoryRecordStore()
        self._order = order if order is not None else InMemoryOrderStore()
        self._id_generator = id_generator or RandomIdGenerator(self._config.id_digits)
        self.selection = selection if selection is not None else SelectionState()

    @property
    def config(self) -> NavConfig:
        return self._config

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _snapshot(self) -> _Snapshot:
        """Read the order and every record it references."""
        order = self._order.get()
        items: Dict[str, NavItem] = {}
        for item_id in order:
            item = self._records.get(item_id)
            if item is not None:
                items[item_id] = item
        return order, items

    def ids(self) -> List[str]:
        """All live IDs in order."""
        return self._order.get()

    def get_item(self, item_id: Optional[str]) -> Optional[NavItem]:
        """Return a copy of the record for item_id, or None."""
        if item_id is None:
            return None
        return self._records.get(item_id)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._records

    def __len__(self) -> int:
        return len(self._order.get())

    def __iter__(self):
        order, items = self._snapshot()
        return iter([items[item_id] for item_id in order if item_id in items])

    @staticmethod
    def _children_in(order: List[str], items: Dict[str, NavItem], parent_id: Optional[str]) -> List[str]:
        return [
            item_id for item_id in order
            if item_id in items and items[item_id].parent_id == parent_id
        ]

    def get_children(self, parent_id: Optional[str]) -> List[str]:
        """Direct children of parent_id in order. None yields the primary items."""
        order, items = self._snapshot()
        return self._children_in(order, items, parent_id)

    def has_children(self, item_id: str) -> bool:
        return bool(self.get_children(item_id))

    def _descendants_in(self, order: List[str], items: Dict[str, NavItem], parent_id: str) -> List[str]:
        descendants: List[str] = []
        visited: Set[str] = {parent_id}
        self._collect_descendants(order, items, parent_id, descendants, visited)
        return descendants

    def _collect_descendants(
        self,
        order: List[str],
        items: Dict[str, NavItem],
        parent_id: str,
        out: List[str],
        visited: Set[str],
    ) -> None:
        for child_id in self._children_in(order, items, parent_id):
            if child_id in visited:
                logger.warning(f"Parent cycle through {child_id!r}; stopping descent")
                continue
            visited.add(child_id)
            out.append(child_id)
            self._collect_descendants(order, items, child_id, out, visited)

    def get_all_descendants(self, parent_id: str) -> List[str]:
        """All descendants of parent_id in pre-order."""
        order, items = self._snapshot()
        return self._descendants_in(order, items, parent_id)

    def _block_in(self, order: List[str], items: Dict[str, NavItem], item_id: str) -> List[str]:
        members = {item_id, *self._descendants_in(order, items, item_id)}
        return [other_id for other_id in order if other_id in members]

    def get_block(self, item_id: str) -> List[str]:
        """item_id followed by its descendants, as laid out in order."""
        order, items = self._snapshot()
        if item_id not in items:
            return []
        return self._block_in(order, items, item_id)

    # ------------------------------------------------------------------
    # Initialization and insertion
    # ------------------------------------------------------------------

    def ensure_initialized(self) -> bool:
        """Seed the default item into empty stores, once per stored state.

        The flag lives in the order store, so a forest reopened over stores
        the user already emptied does not bring the default item back.

        Returns:
            True if the default item was created
        """
        if self._order.is_initialized():
            return False

        seeded = False
        order, items = self._snapshot()
        stores_empty = not order and not any(True for _ in self._records.keys())
        if self._config.seed_default_item and stores_empty:
            default_id = self._config.default_item_id
            item = NavItem(id=default_id, level=NavLevel.PRIMARY, label=self._config.default_item_label)
            try:
                self._records.set(default_id, item)
                self._order.replace([default_id])
            except Exception:
                self._rollback(order, items, [default_id])
                raise
            logger.debug(f"Seeded default item {default_id!r}")
            seeded = True

        self._order.mark_initialized()
        return seeded

    def _rollback(self, order: List[str], items: Dict[str, NavItem], touched: Iterable[str]) -> None:
        """Put touched records and the order back to a snapshot."""
        logger.warning(f"Store write failed; restoring {len(order)} ids from snapshot")
        for item_id in touched:
            if item_id in items:
                self._records.set(item_id, items[item_id])
            else:
                self._records.delete(item_id)
        self._order.replace(order)

    def _allocate_id(self, order: Iterable[str]) -> str:
        taken = set(order)
        attempts = 0
        while True:
            candidate = self._id_generator()
            if candidate not in taken and candidate not in self._records:
                return candidate
            attempts += 1
            logger.debug(f"ID collision on {candidate!r} (attempt {attempts})")
            limit = self._config.max_id_attempts
            if limit is not None and attempts >= limit:
                raise NavigationError(f"No free ID after {attempts} attempts")

    def _violates_hierarchy(self, level: NavLevel, parent: Optional[NavItem]) -> Optional[str]:
        if parent is None:
            if level is not NavLevel.PRIMARY:
                return f"{level.value} item requires a parent"
            return None
        if parent.level.child_level is not level:
            return f"{parent.level.value} parent cannot hold a {level.value} child"
        return None

    def add_item(self, level: Union[NavLevel, str], parent_id: Optional[str] = None) -> Optional[str]:
        """Create an item and select it.

        A root is appended after everything else. A child is inserted right
        after its parent's current block, becoming the parent's last child.

        Args:
            level: Level of the new item
            parent_id: Parent ID, None for a primary item

        Returns:
            The new ID, or None if the parent is unknown or the level is
            rejected by hierarchy enforcement
        """
        level = NavLevel.coerce(level)
        order, items = self._snapshot()

        parent = None
        if parent_id is not None:
            parent = items.get(parent_id)
            if parent is None:
                logger.debug(f"add_item: parent {parent_id!r} not found")
                return None

        if self._config.enforce_level_hierarchy:
            problem = self._violates_hierarchy(level, parent)
            if problem:
                logger.warning(f"add_item rejected: {problem}")
                return None

        new_id = self._allocate_id(order)
        item = NavItem(id=new_id, level=level, parent_id=parent_id)

        new_order = list(order)
        if parent_id is None:
            new_order.append(new_id)
        else:
            parent_block = self._block_in(order, items, parent_id)
            new_order.insert(order.index(parent_block[-1]) + 1, new_id)

        try:
            self._records.set(new_id, item)
            self._order.replace(new_order)
        except Exception:
            self._rollback(order, items, [new_id])
            raise
        self.selection.select(new_id)
        logger.debug(f"Added {level.value} item {new_id!r} under {parent_id!r}")
        return new_id

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_item(self, item_id: str) -> bool:
        """Remove item_id and its whole descendant block.

        Clears the selection if it pointed anywhere inside the block.
        """
        order, items = self._snapshot()
        if item_id not in items:
            logger.debug(f"delete_item: {item_id!r} not found")
            return False

        doomed = [item_id, *self._descendants_in(order, items, item_id)]
        doomed_set = set(doomed)

        # Records first, order last: the order is the single commit point
        try:
            for doomed_id in doomed:
                self._records.delete(doomed_id)
            self._order.replace([other_id for other_id in order if other_id not in doomed_set])
        except Exception:
            self._rollback(order, items, doomed)
            raise
        self.selection.discard(doomed_set)
        logger.debug(f"Deleted {item_id!r} with {len(doomed) - 1} descendants")
        return True

    # ------------------------------------------------------------------
    # Sibling-scoped moves
    # ------------------------------------------------------------------

    def _siblings_in(self, order: List[str], items: Dict[str, NavItem], item: NavItem) -> List[str]:
        return [
            other_id for other_id in order
            if other_id in items and items[other_id].is_sibling_of(item)
        ]

    def _plan_move(self, item_id: str, step: int) -> Optional[List[str]]:
        """Compute the order after swapping item_id's block with a sibling block.

        Args:
            item_id: Item whose block moves
            step: -1 to swap with the previous sibling, +1 with the next

        Returns:
            New order, or None when the move is a no-op
        """
        order, items = self._snapshot()
        item = items.get(item_id)
        if item is None:
            return None

        siblings = self._siblings_in(order, items, item)
        target = siblings.index(item_id) + step
        if target < 0 or target >= len(siblings):
            return None
        neighbor_id = siblings[target]

        block = self._block_in(order, items, item_id)
        block_set = set(block)
        if neighbor_id in block_set:
            logger.warning(f"Sibling {neighbor_id!r} lies inside the block of {item_id!r}; not moving")
            return None

        remaining = [other_id for other_id in order if other_id not in block_set]
        if step < 0:
            insert_at = remaining.index(neighbor_id)
        else:
            neighbor_block = self._block_in(order, items, neighbor_id)
            insert_at = remaining.index(neighbor_block[-1]) + 1
        return remaining[:insert_at] + block + remaining[insert_at:]

    def can_move_up(self, item_id: str) -> bool:
        return self._plan_move(item_id, -1) is not None

    def can_move_down(self, item_id: str) -> bool:
        return self._plan_move(item_id, 1) is not None

    def move_up(self, item_id: str) -> bool:
        """Swap item_id's block with the previous sibling's block."""
        new_order = self._plan_move(item_id, -1)
        if new_order is None:
            return False
        self._order.replace(new_order)
        logger.debug(f"Moved {item_id!r} up")
        return True

    def move_down(self, item_id: str) -> bool:
        """Swap item_id's block with the next sibling's block."""
        new_order = self._plan_move(item_id, 1)
        if new_order is None:
            return False
        self._order.replace(new_order)
        logger.debug(f"Moved {item_id!r} down")
        return True

    # ------------------------------------------------------------------
    # In-place record edits
    # ------------------------------------------------------------------

    def toggle_collapsed(self, item_id: str) -> bool:
        item = self._records.get(item_id)
        if item is None:
            return False
        self._records.set(item_id, replace(item, collapsed=not item.collapsed))
        return True

    def update(self, item_id: str, fields: Mapping[str, str]) -> bool:
        """Merge payload field changes into an item.

        Only label, page_title and url are writable here; identity, level,
        parent, collapsed state and position are left alone.

        Returns:
            True if the record was rewritten
        """
        item = self._records.get(item_id)
        if item is None:
            logger.debug(f"update: {item_id!r} not found")
            return False

        changes = {}
        for name, value in fields.items():
            if name in PAYLOAD_FIELDS:
                changes[name] = "" if value is None else str(value)
            else:
                logger.warning(f"update: ignoring non-payload field {name!r}")
        if not changes:
            return False

        self._records.set(item_id, replace(item, **changes))
        return True

    def update_label(self, item_id: str, label: str) -> bool:
        return self.update(item_id, {"label": label})

    def update_page_title(self, item_id: str, page_title: str) -> bool:
        return self.update(item_id, {"page_title": page_title})

    def update_url(self, item_id: str, url: str) -> bool:
        return self.update(item_id, {"url": url})

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, item_id: Optional[str]) -> bool:
        """Select a live item, or clear the selection with None."""
        if item_id is None:
            self.selection.clear()
            return True
        if item_id not in self._records:
            return False
        self.selection.select(item_id)
        return True

    @property
    def selected_id(self) -> Optional[str]:
        """Current selection, or None if it names an item that is gone."""
        selected = self.selection.selected_id
        if selected is not None and selected not in self._records:
            return None
        return selected

    def drop_stale_selection(self) -> bool:
        """Clear a selection whose item was removed behind the forest's back.

        Returns:
            True if the selection was cleared
        """
        selected = self.selection.selected_id
        if selected is None or selected in self._records:
            return False
        self.selection.clear()
        return True

    def selected_item(self) -> Optional[NavItem]:
        return self.get_item(self.selected_id)

    def addable_levels(self) -> List[NavLevel]:
        """Levels an add action may create given the current selection.

        Primary items can always be added; a child level is offered for the
        selected item when its level has one.
        """
        levels = [NavLevel.PRIMARY]
        selected = self.selected_item()
        if selected is not None and selected.level.child_level is not None:
            levels.append(selected.level.child_level)
        return levels
