"""Storage adapters — in-memory object references."""

from snapbridge.storage.adapters.memory import InMemoryStorageReference

__all__ = ["InMemoryStorageReference"]
