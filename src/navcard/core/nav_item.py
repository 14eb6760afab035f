"""Navigation item record and level definitions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from navcard.core.exceptions import InvalidLevelError


class NavLevel(Enum):
    """Depth tag of a navigation item. Values match the stored strings."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"

    @property
    def indent(self) -> int:
        return _INDENTS[self]

    @property
    def child_level(self) -> Optional["NavLevel"]:
        """Level a child of this level gets, or None at the deepest level."""
        return _CHILD_LEVELS[self]

    @classmethod
    def coerce(cls, value: Union["NavLevel", str]) -> "NavLevel":
        """Accept a NavLevel or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidLevelError(f"Unknown navigation level: {value!r}") from None


_INDENTS = {
    NavLevel.PRIMARY: 0,
    NavLevel.SECONDARY: 1,
    NavLevel.TERTIARY: 2,
}

_CHILD_LEVELS = {
    NavLevel.PRIMARY: NavLevel.SECONDARY,
    NavLevel.SECONDARY: NavLevel.TERTIARY,
    NavLevel.TERTIARY: None,
}

# Free-form display fields; the engine treats them as opaque payload
PAYLOAD_FIELDS = ("label", "page_title", "url")


@dataclass
class NavItem:
    """One node of the navigation forest.

    Attributes:
        id: Opaque unique identifier, stable for the item's lifetime
        level: Depth tag
        parent_id: ID of the parent item, None for primary items
        collapsed: Whether descendants are hidden (meaningful only with children)
        label: Display label
        page_title: Page title (richer card variant)
        url: Page URL (richer card variant)
    """
    id: str
    level: NavLevel
    parent_id: Optional[str] = None
    collapsed: bool = False
    label: str = ""
    page_title: str = ""
    url: str = ""

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def is_sibling_of(self, other: "NavItem") -> bool:
        """Same parent and same level."""
        return self.parent_id == other.parent_id and self.level == other.level
