import logging
from typing import Optional

from .document_store import DocumentStore, utc_now
from .sqlite_store import SQLiteDocumentStore

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("graphic", "Graphic", "Illustrations and graphic artwork"),
    ("typography", "Typography", "Text-based designs and lettering"),
    ("nature", "Nature", "Plants, animals and landscapes"),
    ("abstract", "Abstract", "Shapes, patterns and abstract art"),
    ("sports", "Sports", "Teams, athletes and sporting themes"),
    ("music", "Music", "Bands, instruments and music culture"),
    ("funny", "Funny", "Jokes, memes and humorous designs"),
    ("vintage", "Vintage", "Retro and vintage styles"),
]


def get_document_store(
    deployment_mode: str = "local-dev",
    db_path: str = "shop.db",
    firebase_app=None,
) -> DocumentStore:
    """Return the document store for the deployment mode."""
    if deployment_mode == "cloud":
        from .firestore_store import FirestoreDocumentStore
        return FirestoreDocumentStore(app=firebase_app)
    return SQLiteDocumentStore(db_path)


def init_db(store: Optional[DocumentStore] = None, db_path: str = "shop.db") -> DocumentStore:
    """Initialize collections and seed the default design categories."""
    store = store or get_document_store(db_path=db_path)
    store.init_collections()

    seeded = 0
    for category_id, name, description in DEFAULT_CATEGORIES:
        if store.get_document("categories", category_id) is None:
            store.set_document("categories", category_id, {
                "name": name,
                "description": description,
                "created_at": utc_now(),
            })
            seeded += 1

    if seeded:
        logger.info(f"Seeded {seeded} default categories")
    return store
