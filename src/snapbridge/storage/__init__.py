"""SnapBridge Storage — awaitable object storage operations."""

from snapbridge.storage.adapters.memory import InMemoryStorageReference
from snapbridge.storage.operations import delete_object, update_metadata
from snapbridge.storage.ports.outbound import StorageMetadata, StorageReference

__all__ = [
    "InMemoryStorageReference",
    "StorageMetadata",
    "StorageReference",
    "delete_object",
    "update_metadata",
]
