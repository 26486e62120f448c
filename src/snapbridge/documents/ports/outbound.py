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
"""Outbound port protocols for document and collection references."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from snapbridge.snapshots.ports.outbound import (
    DocumentSnapshot,
    ListenerRegistration,
    QuerySnapshot,
    SnapshotListener,
)
from snapbridge.tasks.ports.outbound import OperationHandle


class Source(Enum):
    """Where a one-shot read is served from."""

    DEFAULT = "DEFAULT"
    SERVER = "SERVER"
    CACHE = "CACHE"


@runtime_checkable
class CollectionReference(Protocol):
    @property
    def path(self) -> str: ...

    def document(self, document_id: str | None = None) -> DocumentReference:
        """Reference to a child document; a new id is generated when omitted."""
        ...

    def add(self, data: Mapping[str, Any]) -> OperationHandle[DocumentReference]: ...

    def get(self, source: Source = Source.DEFAULT) -> OperationHandle[QuerySnapshot]: ...

    def add_snapshot_listener(
        self,
        listener: SnapshotListener,
        include_metadata_changes: bool = False,
    ) -> ListenerRegistration: ...


@runtime_checkable
class DocumentReference(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def path(self) -> str: ...

    def collection(self, path: str) -> CollectionReference: ...

    def get(self, source: Source = Source.DEFAULT) -> OperationHandle[DocumentSnapshot]: ...

    def set(self, data: Mapping[str, Any], merge: bool = False) -> OperationHandle[None]: ...

    def update(self, data: Mapping[str, Any]) -> OperationHandle[None]:
        """Fails when the document does not exist."""
        ...

    def delete(self) -> OperationHandle[None]: ...

    def add_snapshot_listener(
        self,
        listener: SnapshotListener,
        include_metadata_changes: bool = False,
    ) -> ListenerRegistration: ...
