"""Documents ports — references to documents and collections."""

from snapbridge.documents.ports.outbound import CollectionReference, DocumentReference, Source

__all__ = ["CollectionReference", "DocumentReference", "Source"]
