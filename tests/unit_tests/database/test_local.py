import sqlite3

from database import SQLiteDocumentStore, get_document_store, init_db
from database.local import DEFAULT_CATEGORIES


def test_init_db_creates_collection_tables(tmp_path):
    db_path = str(tmp_path / "init.db")
    init_db(db_path=db_path)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()
    cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")
    tables = {row[0] for row in cursor.fetchall()}
    conn.close()

    for collection in ("users", "designs", "design_likes", "categories", "orders", "carts"):
        assert f"{collection}_docs" in tables


def test_init_db_seeds_categories_once(tmp_path):
    store = SQLiteDocumentStore(str(tmp_path / "seed.db"))

    init_db(store)
    init_db(store)

    assert store.count_documents("categories") == len(DEFAULT_CATEGORIES)
    graphic = store.get_document("categories", "graphic")
    assert graphic["name"] == "Graphic"
    assert graphic["id"] == "graphic"


def test_get_document_store_defaults_to_sqlite(tmp_path):
    store = get_document_store("local-dev", str(tmp_path / "mode.db"))
    assert isinstance(store, SQLiteDocumentStore)
