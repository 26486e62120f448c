"""SnapBridge Documents — awaitable one-shot document operations.

Usage::

    from snapbridge.documents import get_document

    order = await get_document(orders.document(order_id), Order.from_raw)
"""

from snapbridge.documents.operations import (
    add_document,
    delete_document,
    get_collection,
    get_document,
    get_document_or_none,
    get_subcollection,
    set_document,
    update_document,
    update_field,
)
from snapbridge.documents.ports.outbound import CollectionReference, DocumentReference, Source

__all__ = [
    "CollectionReference",
    "DocumentReference",
    "Source",
    "add_document",
    "delete_document",
    "get_collection",
    "get_document",
    "get_document_or_none",
    "get_subcollection",
    "set_document",
    "update_document",
    "update_field",
]
