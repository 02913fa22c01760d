"""
Firestore store against a mocked client: checks the calls made to Firestore.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore

from database import DocumentExistsError
from database.firestore_store import PREFIX_RANGE_END, FirestoreDocumentStore
from tests.fixtures.docstore import make_design_doc

CHAINED_QUERY_METHODS = ("where", "order_by", "start_at", "end_at", "offset", "limit")


@pytest.fixture
def client():
    return MagicMock(spec=firestore.Client)


@pytest.fixture
def query(client):
    query = MagicMock()
    for method in CHAINED_QUERY_METHODS:
        getattr(query, method).return_value = query
    query.stream.return_value = []
    client.collection.return_value = query
    return query


@pytest.fixture
def store(client) -> FirestoreDocumentStore:
    return FirestoreDocumentStore(client=client)


@pytest.fixture
def run_transactions_inline(monkeypatch):
    """Run transactional functions once with the mocked transaction."""
    monkeypatch.setattr(firestore, "transactional", lambda func: func)


def applied_filters(query):
    return [
        (call.kwargs["filter"].field_path, call.kwargs["filter"].op_string, call.kwargs["filter"].value)
        for call in query.where.call_args_list
    ]


def snapshot(document):
    return SimpleNamespace(exists=document is not None, to_dict=lambda: dict(document or {}))


def test_query_with_filters_and_prefix(store, client, query):
    query.stream.return_value = [snapshot({"id": "d1", "name": "Sunset"})]

    results = store.query_documents(
        "designs",
        {"is_public": True, "status": "published"},
        array_contains=("tags", "nature"),
        prefix=("name", "Sun"),
        order_by="created_at",
        limit=5,
        offset=10,
    )

    assert results == [{"id": "d1", "name": "Sunset"}]
    client.collection.assert_called_once_with("designs")
    assert applied_filters(query) == [
        ("is_public", "==", True),
        ("status", "==", "published"),
        ("tags", "array_contains", "nature"),
    ]
    query.order_by.assert_called_once_with("name")
    query.start_at.assert_called_once_with({"name": "Sun"})
    query.end_at.assert_called_once_with({"name": "Sun" + PREFIX_RANGE_END})
    query.offset.assert_called_once_with(10)
    query.limit.assert_called_once_with(5)


def test_query_ordering(store, query):
    store.query_documents("orders", {"buyer_id": "bob-uid"}, order_by="created_at")
    store.query_documents("orders", order_by="created_at", descending=False)

    assert query.order_by.call_args_list[0].args == ("created_at",)
    assert query.order_by.call_args_list[0].kwargs == {"direction": firestore.Query.DESCENDING}
    assert query.order_by.call_args_list[1].kwargs == {"direction": firestore.Query.ASCENDING}
    query.offset.assert_not_called()
    query.start_at.assert_not_called()


def test_query_rejects_unsafe_field_paths(store, query):
    with pytest.raises(ValueError, match="Invalid field path"):
        store.query_documents("designs", {"name') --": "x"})


def test_count_documents(store, query):
    query.count.return_value.get.return_value = [[SimpleNamespace(value=3)]]

    assert store.count_documents("designs", {"user_id": "alice-uid"}) == 3
    assert applied_filters(query) == [("user_id", "==", "alice-uid")]


def test_create_document_with_taken_id(store, client):
    ref = client.collection.return_value.document.return_value
    ref.id = "d1_u1"
    ref.create.side_effect = AlreadyExists("document already exists")

    with pytest.raises(DocumentExistsError):
        store.create_document("design_likes", {"design_id": "d1", "user_id": "u1"}, doc_id="d1_u1")

    client.collection.return_value.document.assert_called_once_with("d1_u1")


def test_increment_runs_in_transaction(store, client, run_transactions_inline):
    ref = client.collection.return_value.document.return_value
    ref.get.return_value = snapshot({**make_design_doc(views=2), "id": "d1"})
    transaction = client.transaction.return_value

    assert store.increment_fields("designs", "d1", {"views": 1}) is True

    ref.get.assert_called_once_with(transaction=transaction)
    written = transaction.set.call_args.args[1]
    assert transaction.set.call_args.args[0] is ref
    assert written["views"] == 3


def test_modify_missing_document(store, client, run_transactions_inline):
    ref = client.collection.return_value.document.return_value
    ref.get.return_value = snapshot(None)

    assert store.update_document("designs", "missing", {"name": "x"}) is False
    client.transaction.return_value.set.assert_not_called()


def test_modify_aborts_on_error(store, client, run_transactions_inline):
    ref = client.collection.return_value.document.return_value
    ref.get.return_value = snapshot({**make_design_doc(), "id": "d1"})

    def mutate(document):
        raise RuntimeError("stop")

    with pytest.raises(RuntimeError):
        store.modify_document("designs", "d1", mutate)

    client.transaction.return_value.set.assert_not_called()


def test_delete_runs_in_transaction(store, client, run_transactions_inline):
    ref = client.collection.return_value.document.return_value
    transaction = client.transaction.return_value

    ref.get.return_value = snapshot({"id": "d1_u1"})
    assert store.delete_document("design_likes", "d1_u1") is True
    transaction.delete.assert_called_once_with(ref)

    ref.get.return_value = snapshot(None)
    assert store.delete_document("design_likes", "d1_u1") is False
    assert transaction.delete.call_count == 1
