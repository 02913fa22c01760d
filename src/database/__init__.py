"""
Document storage for the shop API.

Provides a unified document interface over SQLite JSON tables (local
development) and Cloud Firestore (cloud deployments).
"""

from .document_store import DocumentExistsError, DocumentStore, utc_now
from .local import get_document_store, init_db
from .sqlite_store import SQLiteDocumentStore

__all__ = [
    'DocumentExistsError', 'DocumentStore', 'utc_now',
    'get_document_store', 'init_db',
    'SQLiteDocumentStore',
]
