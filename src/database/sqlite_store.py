"""
SQLite JSON document store.
Each collection is a table of JSON documents queried through ``json_extract``.
Used for local development and tests.
"""

import json
import logging
import sqlite3
from contextlib import closing, contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .document_store import DocumentExistsError, DocumentStore, new_document_id
from .schemas import COLLECTIONS

logger = logging.getLogger(__name__)

# (collection, field) pairs that get an expression index
INDEXED_FIELDS = [
    ("users", "email"),
    ("designs", "user_id"),
    ("designs", "status"),
    ("designs", "created_at"),
    ("design_likes", "design_id"),
    ("orders", "buyer_id"),
    ("orders", "created_at"),
]


class SQLiteDocumentStore(DocumentStore):
    """Document store backed by one SQLite table per collection"""

    def __init__(self, db_path: str = "shop.db"):
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection in autocommit mode; transactions are explicit."""
        conn = sqlite3.connect(self.db_path, isolation_level=None, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except Exception:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def _table(self, collection: str) -> str:
        self._check_collection(collection)
        return f"{collection}_docs"

    def _json_path(self, field_path: str) -> str:
        return f"$.{self._check_field_path(field_path)}"

    def _serialize_document(self, document: Dict[str, Any]) -> str:
        return json.dumps(document)

    def _deserialize_document(self, json_str: str) -> Dict[str, Any]:
        return json.loads(json_str)

    def init_collections(self) -> None:
        """Initialize document collections (tables)"""
        with closing(self._get_connection()) as conn:
            for collection in COLLECTIONS:
                conn.execute(f'''
                    CREATE TABLE IF NOT EXISTS {collection}_docs (
                        doc_id TEXT PRIMARY KEY,
                        document TEXT NOT NULL,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                ''')
            for collection, field in INDEXED_FIELDS:
                conn.execute(f'''
                    CREATE INDEX IF NOT EXISTS idx_{collection}_{field}
                    ON {collection}_docs(json_extract(document, '$.{field}'))
                ''')
        logger.info("Document collections initialized successfully")

    def create_document(
        self, collection: str, document: Dict[str, Any], doc_id: Optional[str] = None
    ) -> str:
        table = self._table(collection)
        doc_id = doc_id or new_document_id()
        document = {**document, "id": doc_id}
        self._validate_document(collection, document)
        try:
            with self._transaction() as conn:
                conn.execute(
                    f"INSERT INTO {table} (doc_id, document) VALUES (?, ?)",
                    (doc_id, self._serialize_document(document)),
                )
        except sqlite3.IntegrityError:
            raise DocumentExistsError(f"Document {doc_id} already exists in {collection}")
        logger.info(f"Created document in {collection} with ID: {doc_id}")
        return doc_id

    def set_document(self, collection: str, doc_id: str, document: Dict[str, Any]) -> None:
        table = self._table(collection)
        document = {**document, "id": doc_id}
        self._validate_document(collection, document)
        with self._transaction() as conn:
            conn.execute(
                f'''
                INSERT INTO {table} (doc_id, document) VALUES (?, ?)
                ON CONFLICT(doc_id) DO UPDATE SET
                    document = excluded.document,
                    updated_at = CURRENT_TIMESTAMP
                ''',
                (doc_id, self._serialize_document(document)),
            )
        logger.info(f"Stored document in {collection} with ID: {doc_id}")

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        table = self._table(collection)
        with closing(self._get_connection()) as conn:
            row = conn.execute(f"SELECT document FROM {table} WHERE doc_id = ?", (doc_id,)).fetchone()
        if row:
            return self._deserialize_document(row["document"])
        return None

    def _mutate(
        self, collection: str, doc_id: str, mutate: Callable[[Dict[str, Any]], None]
    ) -> bool:
        table = self._table(collection)
        with self._transaction() as conn:
            row = conn.execute(f"SELECT document FROM {table} WHERE doc_id = ?", (doc_id,)).fetchone()
            if row is None:
                logger.warning(f"No document found to update in {collection} with ID: {doc_id}")
                return False
            document = self._deserialize_document(row["document"])
            mutate(document)
            self._validate_document(collection, document)
            conn.execute(
                f"UPDATE {table} SET document = ?, updated_at = CURRENT_TIMESTAMP WHERE doc_id = ?",
                (self._serialize_document(document), doc_id),
            )
        logger.info(f"Updated document in {collection} with ID: {doc_id}")
        return True

    def delete_document(self, collection: str, doc_id: str) -> bool:
        table = self._table(collection)
        with self._transaction() as conn:
            success = conn.execute(f"DELETE FROM {table} WHERE doc_id = ?", (doc_id,)).rowcount > 0

        if success:
            logger.info(f"Deleted document from {collection} with ID: {doc_id}")
        else:
            logger.warning(f"No document found to delete in {collection} with ID: {doc_id}")
        return success

    def _where_clause(
        self,
        filters: Optional[Dict[str, Any]],
        array_contains: Optional[Tuple[str, Any]] = None,
        prefix: Optional[Tuple[str, str]] = None,
    ) -> Tuple[str, List[Any]]:
        where_clauses = []
        params: List[Any] = []

        for field_path, value in (filters or {}).items():
            json_path = self._json_path(field_path)
            if value is None:
                where_clauses.append(f"json_extract(document, '{json_path}') IS NULL")
            else:
                where_clauses.append(f"json_extract(document, '{json_path}') = ?")
                params.append(value)

        if array_contains:
            field_path, value = array_contains
            json_path = self._json_path(field_path)
            where_clauses.append(
                f"EXISTS (SELECT 1 FROM json_each(document, '{json_path}') WHERE json_each.value = ?)"
            )
            params.append(value)

        if prefix:
            field_path, text = prefix
            json_path = self._json_path(field_path)
            where_clauses.append(f"substr(json_extract(document, '{json_path}'), 1, ?) = ?")
            params.extend([len(text), text])

        if not where_clauses:
            return "", params
        return " WHERE " + " AND ".join(where_clauses), params

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
        table = self._table(collection)
        where, params = self._where_clause(filters, array_contains, prefix)

        if prefix:
            order = f" ORDER BY json_extract(document, '{self._json_path(prefix[0])}') ASC, rowid ASC"
        elif order_by:
            direction = "DESC" if descending else "ASC"
            order = f" ORDER BY json_extract(document, '{self._json_path(order_by)}') {direction}, rowid {direction}"
        else:
            order = " ORDER BY rowid ASC"

        query = f"SELECT document FROM {table}{where}{order} LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        with closing(self._get_connection()) as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._deserialize_document(row["document"]) for row in rows]

    def count_documents(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> int:
        table = self._table(collection)
        where, params = self._where_clause(filters)
        with closing(self._get_connection()) as conn:
            row = conn.execute(f"SELECT COUNT(*) AS total FROM {table}{where}", params).fetchone()
        return row["total"]
