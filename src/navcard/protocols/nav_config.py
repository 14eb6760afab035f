"""Base configuration class for the navigation card.

Provides hooks for applications to customize ID generation, default seeding
and level enforcement.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class NavConfig:
    """Configuration for navigation forest behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        id_digits: Width of generated zero-padded numeric IDs
        default_item_id: ID of the item seeded into an empty forest
        default_item_label: Label of the seeded item
        seed_default_item: Whether ensure_initialized() seeds the default item
        enforce_level_hierarchy: Reject add_item calls whose level does not
            match the parent's child level
        indent_width: Pixels of indentation per level in the card widget
        max_id_attempts: Collision retries before giving up (None retries forever)
    """

    id_digits: int = 6
    default_item_id: str = "000001"
    default_item_label: str = "Home"
    seed_default_item: bool = True
    enforce_level_hierarchy: bool = False
    indent_width: int = 20
    max_id_attempts: Optional[int] = None


# Global config instance (set by application)
_nav_config: Optional[NavConfig] = None


def set_nav_config(config: Optional[NavConfig]) -> None:
    """Set the global navigation configuration.

    Args:
        config: NavConfig instance, or None to restore defaults
    """
    global _nav_config
    _nav_config = config


def get_nav_config() -> NavConfig:
    """Get the current navigation configuration.

    Returns:
        Current NavConfig or default if not set
    """
    if _nav_config is None:
        return NavConfig()
    return _nav_config
