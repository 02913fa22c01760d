"""
Firestore document store used by cloud deployments.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from firebase_admin import firestore as firebase_firestore
from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .document_store import DocumentExistsError, DocumentStore

logger = logging.getLogger(__name__)

# Last code point of the BMP private use area; closes a prefix range query
PREFIX_RANGE_END = "\uf8ff"


class FirestoreDocumentStore(DocumentStore):
    """Document store backed by Cloud Firestore collections"""

    def __init__(self, client: Optional[firestore.Client] = None, app=None):
        self.client = client or firebase_firestore.client(app)

    def _collection(self, collection: str):
        self._check_collection(collection)
        return self.client.collection(collection)

    def init_collections(self) -> None:
        # Firestore creates collections on first write
        logger.info("Using Firestore collections; nothing to initialize")

    def create_document(
        self, collection: str, document: Dict[str, Any], doc_id: Optional[str] = None
    ) -> str:
        coll = self._collection(collection)
        ref = coll.document(doc_id) if doc_id else coll.document()
        document = {**document, "id": ref.id}
        self._validate_document(collection, document)
        try:
            ref.create(document)
        except AlreadyExists:
            raise DocumentExistsError(f"Document {ref.id} already exists in {collection}")
        logger.info(f"Created document in {collection} with ID: {ref.id}")
        return ref.id

    def set_document(self, collection: str, doc_id: str, document: Dict[str, Any]) -> None:
        document = {**document, "id": doc_id}
        self._validate_document(collection, document)
        self._collection(collection).document(doc_id).set(document)
        logger.info(f"Stored document in {collection} with ID: {doc_id}")

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        snapshot = self._collection(collection).document(doc_id).get()
        if snapshot.exists:
            return snapshot.to_dict()
        return None

    def _mutate(
        self, collection: str, doc_id: str, mutate: Callable[[Dict[str, Any]], None]
    ) -> bool:
        ref = self._collection(collection).document(doc_id)

        @firestore.transactional
        def run(transaction) -> bool:
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                return False
            document = snapshot.to_dict()
            mutate(document)
            self._validate_document(collection, document)
            transaction.set(ref, document)
            return True

        success = run(self.client.transaction())
        if success:
            logger.info(f"Updated document in {collection} with ID: {doc_id}")
        else:
            logger.warning(f"No document found to update in {collection} with ID: {doc_id}")
        return success

    def delete_document(self, collection: str, doc_id: str) -> bool:
        ref = self._collection(collection).document(doc_id)

        @firestore.transactional
        def run(transaction) -> bool:
            if not ref.get(transaction=transaction).exists:
                return False
            transaction.delete(ref)
            return True

        success = run(self.client.transaction())
        if success:
            logger.info(f"Deleted document from {collection} with ID: {doc_id}")
        else:
            logger.warning(f"No document found to delete in {collection} with ID: {doc_id}")
        return success

    def _filtered_query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]],
        array_contains: Optional[Tuple[str, Any]] = None,
    ):
        query = self._collection(collection)
        for field_path, value in (filters or {}).items():
            query = query.where(filter=FieldFilter(self._check_field_path(field_path), "==", value))
        if array_contains:
            field_path, value = array_contains
            query = query.where(filter=FieldFilter(self._check_field_path(field_path), "array_contains", value))
        return query

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
        query = self._filtered_query(collection, filters, array_contains)

        if prefix:
            field_path, text = prefix
            field_path = self._check_field_path(field_path)
            query = (
                query.order_by(field_path)
                .start_at({field_path: text})
                .end_at({field_path: text + PREFIX_RANGE_END})
            )
        elif order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(self._check_field_path(order_by), direction=direction)

        if offset:
            query = query.offset(offset)
        query = query.limit(limit)
        return [snapshot.to_dict() for snapshot in query.stream()]

    def count_documents(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> int:
        results = self._filtered_query(collection, filters).count().get()
        return int(results[0][0].value)
