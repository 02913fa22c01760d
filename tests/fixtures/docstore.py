"""Document store fixtures for tests."""
import os
from typing import Any, Dict

import pytest
from google.cloud import firestore

from database import SQLiteDocumentStore, init_db, utc_now
from database.firestore_store import FirestoreDocumentStore
from database.schemas import COLLECTIONS

FIRESTORE_TEST_PROJECT = "tshirt-shop-test"


@pytest.fixture
def document_store(tmp_path) -> SQLiteDocumentStore:
    """A seeded SQLite document store in a temporary directory."""
    store = SQLiteDocumentStore(str(tmp_path / "test_shop.db"))
    init_db(store)
    return store


def clear_firestore(client: firestore.Client) -> None:
    for collection in COLLECTIONS:
        for ref in client.collection(collection).list_documents():
            ref.delete()


@pytest.fixture
def firestore_store() -> FirestoreDocumentStore:
    """
    A seeded Firestore document store on the local emulator.

    Start the emulator with ``gcloud emulators firestore start`` and export
    ``FIRESTORE_EMULATOR_HOST``; tests using this fixture are skipped otherwise.
    """
    if not os.environ.get("FIRESTORE_EMULATOR_HOST"):
        pytest.skip("FIRESTORE_EMULATOR_HOST is not set")
    client = firestore.Client(project=FIRESTORE_TEST_PROJECT)
    clear_firestore(client)
    store = FirestoreDocumentStore(client=client)
    init_db(store)
    yield store
    clear_firestore(client)


def make_design_doc(**overrides: Any) -> Dict[str, Any]:
    """A valid design document; override any field."""
    now = utc_now()
    design = {
        "user_id": "alice-uid",
        "name": "Sunset Surfer",
        "description": "",
        "elements": [{"type": "text", "value": "Surf's up"}],
        "tshirt_color": "white",
        "tshirt_size": "M",
        "preview_image": None,
        "is_public": True,
        "tags": [],
        "likes": 0,
        "views": 0,
        "downloads": 0,
        "status": "published",
        "created_at": now,
        "updated_at": now,
    }
    design.update(overrides)
    return design
