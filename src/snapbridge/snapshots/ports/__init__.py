"""Snapshots ports — listener contracts of the push data source."""

from snapbridge.snapshots.ports.outbound import (
    DocumentSnapshot,
    ListenerRegistration,
    QuerySnapshot,
    RawDocumentChange,
    SnapshotListener,
    SnapshotMetadata,
    SnapshotSource,
)

__all__ = [
    "DocumentSnapshot",
    "ListenerRegistration",
    "QuerySnapshot",
    "RawDocumentChange",
    "SnapshotListener",
    "SnapshotMetadata",
    "SnapshotSource",
]
