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
"""Change events delivered by snapshot streams.

:data:`ChangeEvent` is a closed union of four variants:

* :class:`DocumentChanges` -- ordered ``(document, kind)`` changes of a query.
* :class:`SingleDocument` -- the current state of one document.
* :class:`Empty` -- the query or document currently holds no data.
* :class:`NoPendingWrites` -- every local write has been acknowledged by the
  server as of the snapshot that produced it.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeAlias, TypeVar, Union

from snapbridge.kernel.exceptions import EmptyResultException, MappingException
from snapbridge.snapshots.ports.outbound import DocumentSnapshot

M = TypeVar("M")

ModelMapping: TypeAlias = Callable[[Any, str], M]
"""Turns a raw model and its document id into an application model."""

DocumentMapping: TypeAlias = Callable[[DocumentSnapshot], Any]
"""Extracts the raw model from a document snapshot; ``None`` means it cannot."""


def default_document_mapping(snapshot: DocumentSnapshot) -> Any:
    """Use the document's field dictionary as the raw model."""
    return snapshot.to_dict()


class ChangeKind(Enum):
    """Kind of a change within a query snapshot."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    REMOVED = "REMOVED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_raw(cls, value: Any) -> ChangeKind:
        """Map a data-source change kind (enum member or name) to a ChangeKind."""
        if isinstance(value, ChangeKind):
            return value
        name = getattr(value, "name", value)
        if isinstance(name, str):
            try:
                return cls[name.upper()]
            except KeyError:
                pass
        return cls.UNKNOWN


@dataclass(frozen=True)
class ResultDocument(Generic[M]):
    """An application model together with the metadata of its snapshot."""

    model: M
    has_pending_writes: bool
    is_from_cache: bool

    @classmethod
    def from_snapshot(
        cls,
        snapshot: DocumentSnapshot,
        mapping: ModelMapping[M],
        document_mapping: DocumentMapping = default_document_mapping,
    ) -> ResultDocument[M]:
        """Map an existing document snapshot.

        Raises:
            EmptyResultException: The document does not exist.
            MappingException: ``document_mapping`` produced no raw model.
        """
        if not snapshot.exists:
            raise EmptyResultException(
                "Document is empty",
                code="DOCUMENT_EMPTY",
                context={"id": snapshot.id},
            )
        raw = document_mapping(snapshot)
        if raw is None:
            raise MappingException(
                f"Document '{snapshot.id}' could not be mapped to a model",
                code="DOCUMENT_MAPPING_EMPTY",
                context={"id": snapshot.id},
            )
        return cls(
            model=mapping(raw, snapshot.id),
            has_pending_writes=snapshot.metadata.has_pending_writes,
            is_from_cache=snapshot.metadata.is_from_cache,
        )


@dataclass(frozen=True)
class DocumentChange(Generic[M]):
    """One changed document of a query snapshot."""

    document: ResultDocument[M]
    kind: ChangeKind = ChangeKind.UNKNOWN


@dataclass(frozen=True)
class DocumentChanges(Generic[M]):
    """Ordered document changes. Only produced by query streams."""

    changes: list[DocumentChange[M]] = field(default_factory=list)

    @property
    def models(self) -> list[M]:
        return [change.document.model for change in self.changes]


@dataclass(frozen=True)
class SingleDocument(Generic[M]):
    """Current state of a document. Only produced by document streams."""

    document: ResultDocument[M]


@dataclass(frozen=True)
class Empty:
    """The query or document exists as a target but currently holds no data."""


@dataclass(frozen=True)
class NoPendingWrites:
    """All locally queued writes were confirmed by the server."""


ChangeEvent: TypeAlias = Union[DocumentChanges[M], SingleDocument[M], Empty, NoPendingWrites]


def changes_summary(event: DocumentChanges[Any]) -> dict[ChangeKind, int]:
    """Count the changes of *event* per kind. Meant for debug logging."""
    return dict(Counter(change.kind for change in event.changes))
