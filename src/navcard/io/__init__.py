"""Storage backends for the navigation forest."""

from .memory_store import InMemoryRecordStore, InMemoryOrderStore

__all__ = [
    "InMemoryRecordStore",
    "InMemoryOrderStore",
]
