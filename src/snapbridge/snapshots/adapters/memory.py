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
"""In-memory data source for testing and single-process applications.

Two flavours:

* :class:`ScriptedSnapshotSource` -- nothing happens until the caller pushes
  snapshots or errors with :meth:`~ScriptedSnapshotSource.emit` and
  :meth:`~ScriptedSnapshotSource.fail`. Useful to reproduce exact
  cache/server sequences.
* :class:`InMemoryDocumentStore` -- a small document database. Writes
  notify document and collection listeners; reads and writes return
  already-completed operation handles.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from snapbridge.kernel.exceptions import ResourceNotFoundException
from snapbridge.snapshots.ports.outbound import SnapshotListener
from snapbridge.snapshots.types import ChangeKind
from snapbridge.tasks.adapters.completion_source import CompletionSource


@dataclass(frozen=True)
class MemoryMetadata:
    has_pending_writes: bool = False
    is_from_cache: bool = False


SERVER = MemoryMetadata()
CACHE = MemoryMetadata(is_from_cache=True)


@dataclass(frozen=True)
class MemoryDocumentSnapshot:
    id: str
    data: Mapping[str, Any] | None = None
    metadata: MemoryMetadata = SERVER

    @property
    def exists(self) -> bool:
        return self.data is not None

    def to_dict(self) -> dict[str, Any] | None:
        return None if self.data is None else dict(self.data)

    def get(self, field_name: str) -> Any:
        """Value at a dotted field path, ``None`` when absent."""
        current: Any = self.data
        for part in field_name.split("."):
            if not isinstance(current, Mapping):
                return None
            current = current.get(part)
        return current


@dataclass(frozen=True)
class MemoryDocumentChange:
    kind: ChangeKind
    document: MemoryDocumentSnapshot


@dataclass(frozen=True)
class MemoryQuerySnapshot:
    documents: tuple[MemoryDocumentSnapshot, ...] = ()
    document_changes: tuple[MemoryDocumentChange, ...] = ()
    metadata: MemoryMetadata = SERVER

    @property
    def is_empty(self) -> bool:
        return not self.documents


class MemoryListenerRegistration:
    """Registration that counts ``remove()`` calls; only the first one detaches."""

    def __init__(self, on_remove: Callable[[], None]) -> None:
        self._on_remove = on_remove
        self.remove_calls = 0

    @property
    def removed(self) -> bool:
        return self.remove_calls > 0

    def remove(self) -> None:
        self.remove_calls += 1
        if self.remove_calls == 1:
            self._on_remove()


class _ListenerRegistry:
    def __init__(self, on_empty: Callable[[], None] | None = None) -> None:
        self._listeners: dict[int, tuple[SnapshotListener, bool]] = {}
        self._next_id = 0
        self._on_empty = on_empty
        self.registrations: list[MemoryListenerRegistration] = []

    def add(self, listener: SnapshotListener, include_metadata_changes: bool) -> MemoryListenerRegistration:
        listener_id = self._next_id
        self._next_id += 1
        self._listeners[listener_id] = (listener, include_metadata_changes)
        registration = MemoryListenerRegistration(lambda: self._remove(listener_id))
        self.registrations.append(registration)
        return registration

    def _remove(self, listener_id: int) -> None:
        self._listeners.pop(listener_id, None)
        if not self._listeners and self._on_empty is not None:
            self._on_empty()

    def listeners(self) -> list[tuple[SnapshotListener, bool]]:
        return list(self._listeners.values())

    def __len__(self) -> int:
        return len(self._listeners)


class ScriptedSnapshotSource:
    """Snapshot source whose snapshots are pushed by hand."""

    def __init__(self) -> None:
        self._registry = _ListenerRegistry()

    @property
    def registrations(self) -> list[MemoryListenerRegistration]:
        return list(self._registry.registrations)

    @property
    def active_listeners(self) -> int:
        return len(self._registry)

    @property
    def remove_calls(self) -> int:
        return sum(registration.remove_calls for registration in self._registry.registrations)

    @property
    def include_metadata_changes(self) -> list[bool]:
        return [include for _, include in self._registry.listeners()]

    def add_snapshot_listener(
        self,
        listener: SnapshotListener,
        include_metadata_changes: bool = False,
    ) -> MemoryListenerRegistration:
        return self._registry.add(listener, include_metadata_changes)

    def emit(self, snapshot: Any) -> None:
        """Deliver *snapshot* to every active listener."""
        for listener, _ in self._registry.listeners():
            listener(snapshot, None)

    def fail(self, error: BaseException) -> None:
        """Deliver *error* to every active listener."""
        for listener, _ in self._registry.listeners():
            listener(None, error)


class InMemoryDocumentStore:
    """Dictionary-backed document database with live listeners.

    Paths alternate collection and document ids: ``"users/42/orders/7"``.
    Set :attr:`failure` to make every subsequent operation fail with it.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._document_listeners: dict[str, _ListenerRegistry] = {}
        self._collection_listeners: dict[str, _ListenerRegistry] = {}
        self.failure: BaseException | None = None

    def collection(self, path: str) -> InMemoryCollectionReference:
        return InMemoryCollectionReference(self, path.strip("/"))

    def document(self, path: str) -> InMemoryDocumentReference:
        collection_path, _, document_id = path.strip("/").rpartition("/")
        if not collection_path:
            raise ValueError(f"Document path '{path}' must be '<collection>/<id>'")
        return InMemoryDocumentReference(self, collection_path, document_id)

    def active_listeners(self) -> int:
        registries = [*self._document_listeners.values(), *self._collection_listeners.values()]
        return sum(len(registry) for registry in registries)

    def listened_paths(self) -> list[str]:
        """Document and collection paths that currently have listeners."""
        return sorted({*self._document_listeners, *self._collection_listeners})

    def _listen(
        self,
        registries: dict[str, _ListenerRegistry],
        path: str,
        listener: SnapshotListener,
        include_metadata_changes: bool,
    ) -> MemoryListenerRegistration:
        registry = registries.get(path)
        if registry is None:

            def drop() -> None:
                if registries.get(path) is registry:
                    del registries[path]

            registry = registries[path] = _ListenerRegistry(on_empty=drop)
        return registry.add(listener, include_metadata_changes)

    # -- reads ---------------------------------------------------------------

    def _document_snapshot(self, collection_path: str, document_id: str) -> MemoryDocumentSnapshot:
        data = self._collections.get(collection_path, {}).get(document_id)
        return MemoryDocumentSnapshot(document_id, None if data is None else dict(data))

    def _query_snapshot(
        self,
        collection_path: str,
        changes: tuple[MemoryDocumentChange, ...] | None = None,
    ) -> MemoryQuerySnapshot:
        documents = tuple(
            MemoryDocumentSnapshot(document_id, dict(data))
            for document_id, data in self._collections.get(collection_path, {}).items()
        )
        if changes is None:
            changes = tuple(MemoryDocumentChange(ChangeKind.ADDED, document) for document in documents)
        return MemoryQuerySnapshot(documents, changes)

    # -- writes --------------------------------------------------------------

    def _write(self, collection_path: str, document_id: str, data: dict[str, Any] | None) -> None:
        documents = self._collections.setdefault(collection_path, {})
        existed = document_id in documents
        if data is None:
            if not existed:
                return
            removed = documents.pop(document_id)
            kind = ChangeKind.REMOVED
            changed = MemoryDocumentSnapshot(document_id, removed)
        else:
            documents[document_id] = dict(data)
            kind = ChangeKind.MODIFIED if existed else ChangeKind.ADDED
            changed = MemoryDocumentSnapshot(document_id, dict(data))

        path = f"{collection_path}/{document_id}"
        document_snapshot = self._document_snapshot(collection_path, document_id)
        for listener, _ in self._document_listeners.get(path, _ListenerRegistry()).listeners():
            listener(document_snapshot, None)

        query_snapshot = self._query_snapshot(collection_path, (MemoryDocumentChange(kind, changed),))
        for listener, _ in self._collection_listeners.get(collection_path, _ListenerRegistry()).listeners():
            listener(query_snapshot, None)


class InMemoryDocumentReference:
    def __init__(self, store: InMemoryDocumentStore, collection_path: str, document_id: str) -> None:
        self._store = store
        self._collection_path = collection_path
        self._id = document_id

    def __repr__(self) -> str:
        return f"<InMemoryDocumentReference {self.path}>"

    @property
    def id(self) -> str:
        return self._id

    @property
    def path(self) -> str:
        return f"{self._collection_path}/{self._id}"

    def collection(self, path: str) -> InMemoryCollectionReference:
        return InMemoryCollectionReference(self._store, f"{self.path}/{path.strip('/')}")

    def get(self, source: Any = None) -> CompletionSource[MemoryDocumentSnapshot]:
        if self._store.failure is not None:
            return CompletionSource.failed(self._store.failure)
        return CompletionSource.completed(self._store._document_snapshot(self._collection_path, self._id))

    def set(self, data: Mapping[str, Any], merge: bool = False) -> CompletionSource[None]:
        if self._store.failure is not None:
            return CompletionSource.failed(self._store.failure)
        current = self._store._collections.get(self._collection_path, {}).get(self._id)
        new_data = {**current, **data} if merge and current is not None else dict(data)
        self._store._write(self._collection_path, self._id, new_data)
        return CompletionSource.completed(None)

    def update(self, data: Mapping[str, Any]) -> CompletionSource[None]:
        if self._store.failure is not None:
            return CompletionSource.failed(self._store.failure)
        current = self._store._collections.get(self._collection_path, {}).get(self._id)
        if current is None:
            return CompletionSource.failed(
                ResourceNotFoundException(
                    f"No document to update: {self.path}",
                    code="NOT_FOUND",
                    context={"path": self.path},
                )
            )
        self._store._write(self._collection_path, self._id, {**current, **data})
        return CompletionSource.completed(None)

    def delete(self) -> CompletionSource[None]:
        if self._store.failure is not None:
            return CompletionSource.failed(self._store.failure)
        self._store._write(self._collection_path, self._id, None)
        return CompletionSource.completed(None)

    def add_snapshot_listener(
        self,
        listener: SnapshotListener,
        include_metadata_changes: bool = False,
    ) -> MemoryListenerRegistration:
        registration = self._store._listen(
            self._store._document_listeners, self.path, listener, include_metadata_changes
        )
        listener(self._store._document_snapshot(self._collection_path, self._id), None)
        return registration


class InMemoryCollectionReference:
    def __init__(self, store: InMemoryDocumentStore, path: str) -> None:
        self._store = store
        self._path = path

    def __repr__(self) -> str:
        return f"<InMemoryCollectionReference {self._path}>"

    @property
    def path(self) -> str:
        return self._path

    def document(self, document_id: str | None = None) -> InMemoryDocumentReference:
        return InMemoryDocumentReference(self._store, self._path, document_id or uuid.uuid4().hex)

    def add(self, data: Mapping[str, Any]) -> CompletionSource[InMemoryDocumentReference]:
        if self._store.failure is not None:
            return CompletionSource.failed(self._store.failure)
        reference = self.document()
        self._store._write(self._path, reference.id, dict(data))
        return CompletionSource.completed(reference)

    def get(self, source: Any = None) -> CompletionSource[MemoryQuerySnapshot]:
        if self._store.failure is not None:
            return CompletionSource.failed(self._store.failure)
        return CompletionSource.completed(self._store._query_snapshot(self._path))

    def add_snapshot_listener(
        self,
        listener: SnapshotListener,
        include_metadata_changes: bool = False,
    ) -> MemoryListenerRegistration:
        registration = self._store._listen(
            self._store._collection_listeners, self._path, listener, include_metadata_changes
        )
        listener(self._store._query_snapshot(self._path), None)
        return registration
