# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""SnapBridge Snapshots — push snapshot listeners as async streams.

Usage::

    from snapbridge.snapshots import DocumentChanges, snapshot_changes

    async with snapshot_changes(orders_query, mapping=Order.from_raw) as stream:
        async for event in stream:
            if isinstance(event, DocumentChanges):
                handle(event.models)
"""

from snapbridge.kernel.types import OverflowPolicy
from snapbridge.snapshots.flows import (
    DocumentTranslator,
    QueryChangesTranslator,
    document_snapshots,
    document_values,
    snapshot_changes,
    snapshot_models,
)
from snapbridge.snapshots.ports.outbound import (
    DocumentSnapshot,
    ListenerRegistration,
    QuerySnapshot,
    SnapshotSource,
)
from snapbridge.snapshots.registration import register, subscriber
from snapbridge.snapshots.stream import PendingEvent, SnapshotStream, StreamState
from snapbridge.snapshots.types import (
    ChangeEvent,
    ChangeKind,
    DocumentChange,
    DocumentChanges,
    Empty,
    NoPendingWrites,
    ResultDocument,
    SingleDocument,
    changes_summary,
    default_document_mapping,
)

__all__ = [
    # Events
    "ChangeEvent",
    "ChangeKind",
    "DocumentChange",
    "DocumentChanges",
    "Empty",
    "NoPendingWrites",
    "ResultDocument",
    "SingleDocument",
    "changes_summary",
    "default_document_mapping",
    # Streams
    "OverflowPolicy",
    "PendingEvent",
    "SnapshotStream",
    "StreamState",
    "DocumentTranslator",
    "QueryChangesTranslator",
    "document_snapshots",
    "document_values",
    "snapshot_changes",
    "snapshot_models",
    # Listeners
    "DocumentSnapshot",
    "ListenerRegistration",
    "QuerySnapshot",
    "SnapshotSource",
    "register",
    "subscriber",
]
