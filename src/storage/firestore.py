"""Firestore-backed document store.

Records are untyped dictionaries addressed by ``(collection, document_id)``.
The Firestore client is built lazily on first use and reused for the life of
the process.
"""

import json
import logging
import os
from typing import Any, Protocol

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core.exceptions import Conflict

logger = logging.getLogger(__name__)


class DocumentExistsError(Exception):
    """Raised when a create-if-absent write finds an existing document."""

    pass


class DocumentNotFoundError(Exception):
    """Raised when updating a document that does not exist."""

    pass


class DocumentStore(Protocol):
    """Minimal document database interface used by the payment flow."""

    def get(self, collection: str, document_id: str) -> dict[str, Any] | None: ...

    def set(self, collection: str, document_id: str, data: dict[str, Any]) -> None: ...

    def create(self, collection: str, document_id: str, data: dict[str, Any]) -> None: ...

    def update(self, collection: str, document_id: str, changes: dict[str, Any]) -> None: ...

    def transition(
        self,
        collection: str,
        document_id: str,
        field: str,
        expected: Any,
        changes: dict[str, Any],
    ) -> bool: ...


class FirestoreDocumentStore:
    """DocumentStore implementation on top of the Firebase Admin SDK."""

    def __init__(self, client: Any) -> None:
        self._client = client

    def _ref(self, collection: str, document_id: str) -> Any:
        return self._client.collection(collection).document(document_id)

    def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        snapshot = self._ref(collection, document_id).get()
        return snapshot.to_dict() if snapshot.exists else None

    def set(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        self._ref(collection, document_id).set(data)

    def create(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        try:
            self._ref(collection, document_id).create(data)
        except Conflict as e:
            raise DocumentExistsError(f"{collection}/{document_id} already exists") from e

    def update(self, collection: str, document_id: str, changes: dict[str, Any]) -> None:
        ref = self._ref(collection, document_id)
        if not ref.get().exists:
            raise DocumentNotFoundError(f"{collection}/{document_id} not found")
        ref.update(changes)

    def transition(
        self,
        collection: str,
        document_id: str,
        field: str,
        expected: Any,
        changes: dict[str, Any],
    ) -> bool:
        """Apply ``changes`` only while ``field`` still equals ``expected``.

        The read and the write run in one Firestore transaction, so two
        concurrent callbacks cannot both move a record out of ``expected``.

        Returns:
            True if the write was applied.
        """
        ref = self._ref(collection, document_id)

        @firestore.transactional
        def _apply(transaction: Any) -> bool:
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise DocumentNotFoundError(f"{collection}/{document_id} not found")
            if (snapshot.to_dict() or {}).get(field) != expected:
                return False
            transaction.update(ref, changes)
            return True

        return _apply(self._client.transaction())


def _init_firebase_app() -> firebase_admin.App:
    """Initialize the default Firebase app once.

    Uses ``FIREBASE_SERVICE_ACCOUNT`` (service account JSON) when set and
    falls back to application default credentials otherwise.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    service_account = os.getenv("FIREBASE_SERVICE_ACCOUNT")
    if service_account:
        cred = credentials.Certificate(json.loads(service_account))
        logger.info("Initializing Firebase with service account credentials")
    else:
        cred = credentials.ApplicationDefault()
        logger.info("Initializing Firebase with application default credentials")
    return firebase_admin.initialize_app(cred)


# Module-level singleton instance
_document_store: FirestoreDocumentStore | None = None


def get_document_store() -> DocumentStore:
    """Get or create the process-wide Firestore document store.

    Returns:
        The FirestoreDocumentStore instance.
    """
    global _document_store
    if _document_store is None:
        app = _init_firebase_app()
        _document_store = FirestoreDocumentStore(firestore.client(app))
    return _document_store
