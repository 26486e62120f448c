"""Snapshots adapters — in-memory data sources."""

from snapbridge.snapshots.adapters.memory import (
    InMemoryCollectionReference,
    InMemoryDocumentReference,
    InMemoryDocumentStore,
    MemoryDocumentChange,
    MemoryDocumentSnapshot,
    MemoryListenerRegistration,
    MemoryMetadata,
    MemoryQuerySnapshot,
    ScriptedSnapshotSource,
)

__all__ = [
    "InMemoryCollectionReference",
    "InMemoryDocumentReference",
    "InMemoryDocumentStore",
    "MemoryDocumentChange",
    "MemoryDocumentSnapshot",
    "MemoryListenerRegistration",
    "MemoryMetadata",
    "MemoryQuerySnapshot",
    "ScriptedSnapshotSource",
]
