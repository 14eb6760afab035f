"""
In-memory storage backends.

Default record and order stores used when the host does not supply durable
ones. Records are copied on the way in and out so callers never hold an
alias to the stored object.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from navcard.core.nav_item import NavItem

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """Dictionary-backed RecordStore."""

    def __init__(self, items: Optional[Iterable[Tuple[str, NavItem]]] = None):
        self._items: Dict[str, NavItem] = {}
        for item_id, item in items or ():
            self.set(item_id, item)

    def get(self, item_id: str) -> Optional[NavItem]:
        item = self._items.get(item_id)
        return replace(item) if item is not None else None

    def set(self, item_id: str, item: NavItem) -> None:
        self._items[item_id] = replace(item)

    def delete(self, item_id: str) -> None:
        self._items.pop(item_id, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._items))

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)


class InMemoryOrderStore:
    """List-backed OrderStore."""

    def __init__(self, ids: Optional[Sequence[str]] = None, initialized: bool = False):
        self._ids: List[str] = list(ids or ())
        self._initialized = initialized

    def get(self) -> List[str]:
        return list(self._ids)

    def replace(self, ids: Sequence[str]) -> None:
        self._ids = list(ids)
        logger.debug(f"Order replaced with {len(self._ids)} ids")

    def is_initialized(self) -> bool:
        return self._initialized

    def mark_initialized(self) -> None:
        self._initialized = True

    def __len__(self) -> int:
        return len(self._ids)
