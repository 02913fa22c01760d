"""
Document store interface shared by the SQLite and Firestore backends.

Documents are plain dicts. Every stored document carries its own ``id`` and
timestamps are ISO-8601 strings, so both backends sort and compare them the
same way.
"""

import logging
import re
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .schemas import COLLECTIONS, DOCUMENT_VALIDATORS

logger = logging.getLogger(__name__)

Number = Union[int, float]

FIELD_PATH_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class DocumentExistsError(Exception):
    """Raised by ``create_document`` when the ID is already taken."""


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def new_document_id() -> str:
    return uuid.uuid4().hex


def set_path(document: Dict[str, Any], field_path: str, value: Any) -> None:
    """Set a dotted ``field_path`` on ``document``, creating parent maps as needed."""
    *parents, leaf = field_path.split(".")
    target = document
    for key in parents:
        child = target.get(key)
        if not isinstance(child, dict):
            child = {}
            target[key] = child
        target = child
    target[leaf] = value


def get_path(document: Dict[str, Any], field_path: str, default: Any = None) -> Any:
    target: Any = document
    for key in field_path.split("."):
        if not isinstance(target, dict) or key not in target:
            return default
        target = target[key]
    return target


def apply_updates(document: Dict[str, Any], updates: Dict[str, Any]) -> None:
    for field_path, value in updates.items():
        set_path(document, field_path, value)


def apply_increments(document: Dict[str, Any], increments: Dict[str, Number]) -> None:
    for field_path, amount in increments.items():
        current = get_path(document, field_path, 0) or 0
        set_path(document, field_path, current + amount)


class DocumentStore(ABC):
    """Unified interface for document-based database operations"""

    def _check_collection(self, collection: str) -> None:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")

    def _check_field_path(self, field_path: str) -> str:
        if not FIELD_PATH_PATTERN.match(field_path):
            raise ValueError(f"Invalid field path: {field_path!r}")
        return field_path

    def _validate_document(self, collection: str, document: Dict[str, Any]) -> None:
        """Validate document against schema"""
        if collection in DOCUMENT_VALIDATORS:
            try:
                DOCUMENT_VALIDATORS[collection](document)
            except Exception as e:
                logger.error(f"Document validation failed for {collection}: {e}")
                raise ValueError(f"Document validation failed: {e}")

    @abstractmethod
    def init_collections(self) -> None:
        """Prepare the backing storage for every known collection."""

    @abstractmethod
    def create_document(
        self, collection: str, document: Dict[str, Any], doc_id: Optional[str] = None
    ) -> str:
        """Insert a new document and return its ID.

        A generated ID is used when ``doc_id`` is omitted. Raises
        ``DocumentExistsError`` when a document with ``doc_id`` already exists.
        """

    @abstractmethod
    def set_document(self, collection: str, doc_id: str, document: Dict[str, Any]) -> None:
        """Create or overwrite the document stored under ``doc_id``."""

    @abstractmethod
    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document or ``None``."""

    @abstractmethod
    def _mutate(
        self, collection: str, doc_id: str, mutate: Callable[[Dict[str, Any]], None]
    ) -> bool:
        """Atomically read, change and write back one document."""

    def update_document(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> bool:
        """
        Merge ``updates`` into a document.

        Keys may be dotted field paths (``"profile.address.city"``). A dict value
        replaces the whole sub-document at that path. Returns ``False`` when the
        document does not exist.
        """
        self._check_collection(collection)
        for field_path in updates:
            self._check_field_path(field_path)
        return self._mutate(collection, doc_id, lambda document: apply_updates(document, updates))

    def increment_fields(
        self,
        collection: str,
        doc_id: str,
        increments: Dict[str, Number],
        updates: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Atomically add to numeric fields, optionally setting other fields in the same write."""
        self._check_collection(collection)
        for field_path in list(increments) + list(updates or {}):
            self._check_field_path(field_path)

        def mutate(document: Dict[str, Any]) -> None:
            apply_increments(document, increments)
            if updates:
                apply_updates(document, updates)

        return self._mutate(collection, doc_id, mutate)

    def modify_document(
        self, collection: str, doc_id: str, mutate: Callable[[Dict[str, Any]], None]
    ) -> bool:
        """
        Apply ``mutate`` to a document in place inside one transaction.

        Exceptions raised by ``mutate`` abort the write and propagate.
        """
        self._check_collection(collection)
        return self._mutate(collection, doc_id, mutate)

    @abstractmethod
    def delete_document(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns ``False`` when it did not exist."""

    @abstractmethod
    def query_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        *,
        array_contains: Optional[Tuple[str, Any]] = None,
        prefix: Optional[Tuple[str, str]] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Query documents with equality filters.

        ``array_contains`` is a ``(field, value)`` pair matching documents whose
        array field holds ``value``. ``prefix`` is a ``(field, text)`` pair
        matching string fields that start with ``text``; prefix queries are
        ordered by that field ascending and ignore ``order_by``.
        """

    @abstractmethod
    def count_documents(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching equality filters."""
