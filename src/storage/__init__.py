"""Persistence in a managed document database (Firestore)."""

from src.storage.firestore import (
    DocumentExistsError,
    DocumentNotFoundError,
    DocumentStore,
    FirestoreDocumentStore,
    get_document_store,
)

__all__ = [
    "DocumentExistsError",
    "DocumentNotFoundError",
    "DocumentStore",
    "FirestoreDocumentStore",
    "get_document_store",
]
