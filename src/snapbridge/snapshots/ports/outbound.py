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
"""Outbound port protocols for push snapshot listeners of the data source."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

SnapshotListener = Callable[[Any | None, BaseException | None], None]
"""Upstream callback shape: ``(snapshot, None)`` on data, ``(None, error)`` on failure."""


@runtime_checkable
class SnapshotMetadata(Protocol):
    @property
    def has_pending_writes(self) -> bool: ...

    @property
    def is_from_cache(self) -> bool: ...


@runtime_checkable
class DocumentSnapshot(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def exists(self) -> bool: ...

    @property
    def metadata(self) -> SnapshotMetadata: ...

    def to_dict(self) -> dict[str, Any] | None: ...

    def get(self, field_name: str) -> Any: ...


@runtime_checkable
class RawDocumentChange(Protocol):
    @property
    def kind(self) -> Any: ...

    @property
    def document(self) -> DocumentSnapshot: ...


@runtime_checkable
class QuerySnapshot(Protocol):
    @property
    def is_empty(self) -> bool:
        """True when the query currently matches no documents."""
        ...

    @property
    def documents(self) -> Sequence[DocumentSnapshot]: ...

    @property
    def document_changes(self) -> Sequence[RawDocumentChange]:
        """Changes since the previous snapshot delivered to the same listener."""
        ...

    @property
    def metadata(self) -> SnapshotMetadata: ...


@runtime_checkable
class ListenerRegistration(Protocol):
    """Disposal handle of a registered listener."""

    def remove(self) -> None: ...


@runtime_checkable
class SnapshotSource(Protocol):
    """Anything a snapshot listener can be attached to (a document or a query)."""

    def add_snapshot_listener(
        self,
        listener: SnapshotListener,
        include_metadata_changes: bool = False,
    ) -> ListenerRegistration: ...
