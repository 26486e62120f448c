"""Storage ports — object references of the storage client."""

from snapbridge.storage.ports.outbound import StorageMetadata, StorageReference

__all__ = ["StorageMetadata", "StorageReference"]
