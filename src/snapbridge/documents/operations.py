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
"""One-shot document reads and writes awaited through the future bridge."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from snapbridge.documents.ports.outbound import CollectionReference, DocumentReference, Source
from snapbridge.kernel.exceptions import EmptyResultException
from snapbridge.snapshots.ports.outbound import DocumentSnapshot
from snapbridge.snapshots.types import DocumentMapping, M, ModelMapping, default_document_mapping
from snapbridge.tasks.bridge import await_handle

logger = logging.getLogger(__name__)


def _to_model(
    snapshot: DocumentSnapshot,
    mapping: ModelMapping[M],
    document_mapping: DocumentMapping,
) -> M | None:
    if not snapshot.exists:
        return None
    raw = document_mapping(snapshot)
    if raw is None:
        return None
    return mapping(raw, snapshot.id)


async def get_document_or_none(
    document: DocumentReference,
    mapping: ModelMapping[M],
    *,
    source: Source = Source.DEFAULT,
    document_mapping: DocumentMapping = default_document_mapping,
) -> M | None:
    """Read *document* once; ``None`` when it is missing or cannot be mapped."""
    snapshot = await await_handle(document.get(source))
    logger.debug("document_fetched", extra={"path": document.path, "exists": snapshot.exists})
    return _to_model(snapshot, mapping, document_mapping)


async def get_document(
    document: DocumentReference,
    mapping: ModelMapping[M],
    *,
    source: Source = Source.DEFAULT,
    document_mapping: DocumentMapping = default_document_mapping,
) -> M:
    """Read *document* once.

    Raises:
        EmptyResultException: The document is missing or cannot be mapped.
    """
    model = await get_document_or_none(document, mapping, source=source, document_mapping=document_mapping)
    if model is None:
        raise EmptyResultException(
            f"Document '{document.path}' is empty",
            code="DOCUMENT_EMPTY",
            context={"path": document.path},
        )
    return model


async def get_collection(
    collection: CollectionReference,
    mapping: ModelMapping[M],
    *,
    source: Source = Source.DEFAULT,
    document_mapping: DocumentMapping = default_document_mapping,
) -> list[M]:
    """Read every document of *collection* once, skipping those that cannot be mapped."""
    snapshot = await await_handle(collection.get(source))
    models = [_to_model(document, mapping, document_mapping) for document in snapshot.documents]
    logger.debug("collection_fetched", extra={"path": collection.path, "documents": len(models)})
    return [model for model in models if model is not None]


async def get_subcollection(
    document: DocumentReference,
    path: str,
    mapping: ModelMapping[M],
    *,
    source: Source = Source.DEFAULT,
    document_mapping: DocumentMapping = default_document_mapping,
) -> list[M]:
    """Read the collection at *path* below *document*."""
    return await get_collection(
        document.collection(path),
        mapping,
        source=source,
        document_mapping=document_mapping,
    )


async def add_document(collection: CollectionReference, data: Mapping[str, Any]) -> DocumentReference:
    """Create a document with a generated id and return its reference."""
    reference = await await_handle(collection.add(data))
    logger.debug("document_added", extra={"path": reference.path})
    return reference


async def set_document(document: DocumentReference, data: Mapping[str, Any], *, merge: bool = False) -> None:
    """Overwrite *document*, or merge *data* into it with ``merge=True``."""
    await await_handle(document.set(data, merge=merge))


async def update_document(document: DocumentReference, data: Mapping[str, Any]) -> None:
    await await_handle(document.update(data))


async def update_field(document: DocumentReference, field_name: str, value: Any) -> None:
    await update_document(document, {field_name: value})


async def delete_document(document: DocumentReference) -> None:
    await await_handle(document.delete())
    logger.debug("document_deleted", extra={"path": document.path})
