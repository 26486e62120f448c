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
"""Snapshot streams over queries and documents.

Usage::

    stream = snapshot_changes(query, skip_first_cache_hit=True, mapping=Order.from_raw)
    async with stream:
        async for event in stream:
            if isinstance(event, DocumentChanges):
                ...
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Generic, cast

from snapbridge.config.properties.streams import StreamProperties
from snapbridge.kernel.types import OverflowPolicy
from snapbridge.snapshots.ports.outbound import (
    DocumentSnapshot,
    ListenerRegistration,
    QuerySnapshot,
    RawDocumentChange,
    SnapshotSource,
)
from snapbridge.snapshots.registration import ErrorCallback, EventCallback, Subscriber, subscriber
from snapbridge.snapshots.stream import PendingEvent, SnapshotStream
from snapbridge.snapshots.types import (
    ChangeEvent,
    ChangeKind,
    DocumentChange,
    DocumentChanges,
    DocumentMapping,
    Empty,
    M,
    ModelMapping,
    NoPendingWrites,
    ResultDocument,
    SingleDocument,
    default_document_mapping,
)

logger = logging.getLogger(__name__)


class QueryChangesTranslator(Generic[M]):
    """Turns query snapshots into change events, with first-cache-hit coalescing.

    When ``skip_first_cache_hit`` is set and the very first snapshot of the
    subscription comes from the local cache, its changes are held back and
    prepended to the changes of the next snapshot, so consumers get one
    event instead of a cache event quickly followed by the server event.
    The window closes after the first snapshot whatever its origin.
    """

    def __init__(
        self,
        *,
        skip_first_cache_hit: bool,
        mapping: ModelMapping[M],
        document_mapping: DocumentMapping = default_document_mapping,
    ) -> None:
        self._skip_first_cache_hit = skip_first_cache_hit
        self._mapping = mapping
        self._document_mapping = document_mapping
        self._first_snapshot_seen = False
        self._cached_changes: list[RawDocumentChange] | None = None

    def __call__(self, snapshot: QuerySnapshot) -> list[PendingEvent[ChangeEvent[M]]]:
        is_first = not self._first_snapshot_seen
        self._first_snapshot_seen = True
        changes = list(snapshot.document_changes)
        pending: list[PendingEvent[ChangeEvent[M]]] = []

        # is_empty only covers current documents: a delta that removed the
        # last document is still a change.
        if snapshot.is_empty and not changes:
            if self._cached_changes is not None:
                pending.append(self._changes_event(self._take_cached_changes()))
            else:
                pending.append(PendingEvent(Empty, Empty))
        elif self._skip_first_cache_hit and is_first and snapshot.metadata.is_from_cache:
            self._cached_changes = changes
            logger.debug("first_cache_hit_buffered", extra={"changes": len(changes)})
        else:
            if self._cached_changes is not None:
                changes = self._take_cached_changes() + changes
            pending.append(self._changes_event(changes))

        if not snapshot.metadata.has_pending_writes:
            pending.append(PendingEvent(NoPendingWrites, NoPendingWrites))
        return pending

    def _take_cached_changes(self) -> list[RawDocumentChange]:
        cached, self._cached_changes = self._cached_changes or [], None
        logger.debug("first_cache_hit_flushed", extra={"changes": len(cached)})
        return cached

    def _changes_event(self, changes: Sequence[RawDocumentChange]) -> PendingEvent[ChangeEvent[M]]:
        mapping = self._mapping
        document_mapping = self._document_mapping

        def build() -> DocumentChanges[M]:
            return DocumentChanges(
                [
                    DocumentChange(
                        document=ResultDocument.from_snapshot(change.document, mapping, document_mapping),
                        kind=ChangeKind.from_raw(change.kind),
                    )
                    for change in changes
                ]
            )

        return PendingEvent(DocumentChanges, build)


class DocumentTranslator(Generic[M]):
    """Turns document snapshots into ``SingleDocument``/``Empty`` events."""

    def __init__(
        self,
        *,
        mapping: ModelMapping[M],
        document_mapping: DocumentMapping = default_document_mapping,
        include_metadata: bool = True,
    ) -> None:
        self._mapping = mapping
        self._document_mapping = document_mapping
        self._include_metadata = include_metadata

    def __call__(self, snapshot: DocumentSnapshot) -> list[PendingEvent[ChangeEvent[M]]]:
        pending: list[PendingEvent[ChangeEvent[M]]] = []
        if snapshot.exists:
            pending.append(PendingEvent(SingleDocument, lambda: SingleDocument(self._map(snapshot))))
        else:
            pending.append(PendingEvent(Empty, Empty))
        if self._include_metadata and not snapshot.metadata.has_pending_writes:
            pending.append(PendingEvent(NoPendingWrites, NoPendingWrites))
        return pending

    def _map(self, snapshot: DocumentSnapshot) -> ResultDocument[M]:
        return ResultDocument.from_snapshot(snapshot, self._mapping, self._document_mapping)


def _stream_options(
    properties: StreamProperties | None,
    capacity: int | None,
    overflow: OverflowPolicy | None,
) -> tuple[int, OverflowPolicy]:
    properties = properties or StreamProperties()
    return (
        properties.capacity if capacity is None else capacity,
        properties.overflow if overflow is None else overflow,
    )


def snapshot_changes(
    query: SnapshotSource,
    *,
    mapping: ModelMapping[M],
    skip_first_cache_hit: bool | None = None,
    document_mapping: DocumentMapping = default_document_mapping,
    capacity: int | None = None,
    overflow: OverflowPolicy | None = None,
    properties: StreamProperties | None = None,
) -> SnapshotStream[ChangeEvent[M]]:
    """Stream :data:`ChangeEvent` values for *query*.

    The listener always includes metadata-only snapshots, since those carry
    the pending-writes transitions. Options left as ``None`` come from
    *properties* (or the :class:`StreamProperties` defaults).
    """
    properties = properties or StreamProperties()
    capacity, overflow = _stream_options(properties, capacity, overflow)
    translator: QueryChangesTranslator[M] = QueryChangesTranslator(
        skip_first_cache_hit=(
            properties.skip_first_cache_hit if skip_first_cache_hit is None else skip_first_cache_hit
        ),
        mapping=mapping,
        document_mapping=document_mapping,
    )
    return SnapshotStream(
        subscriber(query, include_metadata_changes=True),
        translator,
        capacity=capacity,
        overflow=overflow,
        name="snapshot_changes",
    )


def snapshot_models(
    query: SnapshotSource,
    *,
    mapping: ModelMapping[M],
    skip_first_cache_hit: bool | None = None,
    document_mapping: DocumentMapping = default_document_mapping,
    capacity: int | None = None,
    overflow: OverflowPolicy | None = None,
    properties: StreamProperties | None = None,
) -> SnapshotStream[list[M]]:
    """Stream the models of each ``DocumentChanges`` event of *query*.

    ``Empty`` and ``NoPendingWrites`` events are skipped.
    """
    properties = properties or StreamProperties()
    capacity, overflow = _stream_options(properties, capacity, overflow)
    changes: QueryChangesTranslator[M] = QueryChangesTranslator(
        skip_first_cache_hit=(
            properties.skip_first_cache_hit if skip_first_cache_hit is None else skip_first_cache_hit
        ),
        mapping=mapping,
        document_mapping=document_mapping,
    )

    def translate(snapshot: QuerySnapshot) -> list[PendingEvent[list[M]]]:
        return [_models_of(pending) for pending in changes(snapshot) if pending.kind is DocumentChanges]

    return SnapshotStream(
        subscriber(query, include_metadata_changes=True),
        translate,
        capacity=capacity,
        overflow=overflow,
        name="snapshot_models",
    )


def document_snapshots(
    document: SnapshotSource,
    *,
    mapping: ModelMapping[M],
    document_mapping: DocumentMapping = default_document_mapping,
    include_metadata: bool | None = None,
    capacity: int | None = None,
    overflow: OverflowPolicy | None = None,
    properties: StreamProperties | None = None,
) -> SnapshotStream[ChangeEvent[M]]:
    """Stream ``SingleDocument``/``Empty`` events for *document*.

    With ``include_metadata`` the listener also receives metadata-only
    snapshots and a trailing ``NoPendingWrites`` follows every snapshot
    whose writes are all acknowledged.
    """
    properties = properties or StreamProperties()
    capacity, overflow = _stream_options(properties, capacity, overflow)
    if include_metadata is None:
        include_metadata = properties.include_metadata_changes
    translator: DocumentTranslator[M] = DocumentTranslator(
        mapping=mapping,
        document_mapping=document_mapping,
        include_metadata=include_metadata,
    )
    return SnapshotStream(
        subscriber(document, include_metadata_changes=include_metadata),
        translator,
        capacity=capacity,
        overflow=overflow,
        name="document_snapshots",
    )


def document_values(
    document: SnapshotSource,
    *,
    mapping: ModelMapping[M],
    document_mapping: DocumentMapping = default_document_mapping,
    close_on_error: bool = True,
    capacity: int | None = None,
    overflow: OverflowPolicy | None = None,
    properties: StreamProperties | None = None,
) -> SnapshotStream[M]:
    """Stream the mapped model of *document* each time it exists in a snapshot.

    Snapshots of a missing document produce nothing. With
    ``close_on_error=False`` upstream errors are logged and the stream keeps
    listening instead of terminating.
    """
    capacity, overflow = _stream_options(properties, capacity, overflow)

    def translate(snapshot: DocumentSnapshot) -> list[PendingEvent[M]]:
        if not snapshot.exists:
            return []
        return [
            PendingEvent(
                object,
                lambda: ResultDocument.from_snapshot(snapshot, mapping, document_mapping).model,
            )
        ]

    subscribe = subscriber(document)
    if not close_on_error:
        subscribe = _logging_errors(subscribe)

    return SnapshotStream(subscribe, translate, capacity=capacity, overflow=overflow, name="document_values")


def _models_of(pending: PendingEvent[ChangeEvent[M]]) -> PendingEvent[list[M]]:
    def build() -> list[M]:
        event = cast(DocumentChanges[M], pending.build())
        return event.models

    return PendingEvent(list, build)


def _logging_errors(subscribe: Subscriber) -> Subscriber:
    def subscribe_ignoring_errors(on_event: EventCallback, on_error: ErrorCallback) -> ListenerRegistration:
        def log_error(error: BaseException) -> None:
            logger.warning("snapshot_listener_error_ignored", extra={"error": repr(error)})

        return subscribe(on_event, log_error)

    return subscribe_ignoring_errors
