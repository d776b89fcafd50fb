"""Document store contract and an in-process implementation.

Documents are plain dicts keyed by an opaque id inside a named collection,
mirroring the hosted document database the mobile app writes to.
"""

import copy
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any, ClassVar

# Collection names shared with the mobile app
TRANSACTIONS = "transactions"
LEARNED_MAPPINGS = "learned_mappings"
LEARNED_DEPOSIT_PATTERNS = "learned_deposit_patterns"
SAVINGS_CONTRIBUTIONS = "savings_contributions"
PENDING_DUPLICATES = "pending_duplicates"
DUPLICATE_RULES = "duplicate_rules"


class DocumentStore(ABC):
    """Abstract document store used for all persisted records."""

    name: ClassVar[str] = "abstract"

    @abstractmethod
    def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str | None:
        """
        Create a document.

        Args:
            collection: Collection name
            data: Document fields
            doc_id: Id to use; a random id is generated when omitted

        Returns:
            The new document id, or None if a document with doc_id exists
        """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return a copy of the document, or None if it does not exist."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> bool:
        """Merge fields into an existing document. Returns False if missing."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Deleting a missing document is not an error.

        Returns:
            True if this call removed the document
        """

    @abstractmethod
    def query(self, collection: str, **equals: Any) -> list[tuple[str, dict[str, Any]]]:
        """Return (id, document) pairs whose fields equal all given values."""

    @abstractmethod
    def increment(
        self,
        collection: str,
        doc_id: str,
        field: str,
        amount: int = 1,
        extra: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Atomically add to a numeric field, optionally setting other fields.

        Returns:
            The document after the update, or None if it does not exist
        """

    @abstractmethod
    def compare_and_update(
        self,
        collection: str,
        doc_id: str,
        expected: dict[str, Any],
        fields: dict[str, Any],
    ) -> bool:
        """
        Update a document only if its current fields equal ``expected``.

        Returns:
            True if this call applied the update
        """

    def create_if_absent(self, collection: str, doc_id: str, data: dict[str, Any]) -> bool:
        """Create a document with a fixed id; False if it already existed."""
        return self.create(collection, data, doc_id=doc_id) is not None


class InMemoryStore(DocumentStore):
    """Thread-safe dict-backed store used by tests and the command line."""

    name = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _docs(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def create(self, collection: str, data: dict[str, Any], doc_id: str | None = None) -> str | None:
        with self._lock:
            docs = self._docs(collection)
            doc_id = doc_id or uuid.uuid4().hex
            if doc_id in docs:
                return None
            docs[doc_id] = copy.deepcopy(data)
            return doc_id

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        with self._lock:
            doc = self._docs(collection).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> bool:
        with self._lock:
            doc = self._docs(collection).get(doc_id)
            if doc is None:
                return False
            doc.update(copy.deepcopy(fields))
            return True

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            return self._docs(collection).pop(doc_id, None) is not None

    def query(self, collection: str, **equals: Any) -> list[tuple[str, dict[str, Any]]]:
        with self._lock:
            return [
                (doc_id, copy.deepcopy(doc))
                for doc_id, doc in self._docs(collection).items()
                if all(doc.get(key) == value for key, value in equals.items())
            ]

    def increment(
        self,
        collection: str,
        doc_id: str,
        field: str,
        amount: int = 1,
        extra: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        with self._lock:
            doc = self._docs(collection).get(doc_id)
            if doc is None:
                return None
            current = doc.get(field)
            if not isinstance(current, int) or isinstance(current, bool):
                current = 0
            doc[field] = current + amount
            if extra:
                doc.update(copy.deepcopy(extra))
            return copy.deepcopy(doc)

    def compare_and_update(
        self,
        collection: str,
        doc_id: str,
        expected: dict[str, Any],
        fields: dict[str, Any],
    ) -> bool:
        with self._lock:
            doc = self._docs(collection).get(doc_id)
            if doc is None:
                return False
            if any(doc.get(key) != value for key, value in expected.items()):
                return False
            doc.update(copy.deepcopy(fields))
            return True
