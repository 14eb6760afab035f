"""Storage protocols for the navigation forest.

The forest never owns durable state itself. The host supplies a keyed record
store and an ordered ID sequence (which also carries the one-time
initialization flag); both are expected to be synchronously
consistent. A pluggable ID generator supplies candidate IDs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Optional, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from navcard.core.nav_item import NavItem


@runtime_checkable
class RecordStore(Protocol):
    """Keyed record store mapping item IDs to NavItem records."""

    def get(self, item_id: str) -> Optional[NavItem]:
        """Return the record for item_id, or None if absent."""
        ...

    def set(self, item_id: str, item: NavItem) -> None:
        ...

    def delete(self, item_id: str) -> None:
        """Remove item_id. Removing an absent key is a no-op."""
        ...

    def keys(self) -> Iterator[str]:
        ...

    def __contains__(self, item_id: object) -> bool:
        ...


@runtime_checkable
class OrderStore(Protocol):
    """Ordered ID sequence plus the durable "initialized" flag.

    Only whole-sequence replacement is supported.
    """

    def get(self) -> List[str]:
        """Return a copy of the current sequence."""
        ...

    def replace(self, ids: Sequence[str]) -> None:
        ...

    def is_initialized(self) -> bool:
        """Whether the default item was ever seeded (or skipped) for this state."""
        ...

    def mark_initialized(self) -> None:
        ...


@runtime_checkable
class IdGenerator(Protocol):
    """Supplies candidate IDs. Uniqueness is checked by the caller."""

    def __call__(self) -> str:
        ...
