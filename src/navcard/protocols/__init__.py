"""
Collaborator protocols and configuration.

Storage and ID-generation contracts supplied by the host environment,
plus the global navigation configuration.
"""

from .storage import RecordStore, OrderStore, IdGenerator
from .nav_config import NavConfig, set_nav_config, get_nav_config

__all__ = [
    "RecordStore",
    "OrderStore",
    "IdGenerator",
    "NavConfig",
    "set_nav_config",
    "get_nav_config",
]
