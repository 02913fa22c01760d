import threading

from shop_api.services.designs import LIKES_COLLECTION, DesignService, like_id
from tests.fixtures.docstore import make_design_doc

SIMULTANEOUS_TAPS = 8


def test_like_then_unlike(document_store):
    designs = DesignService(document_store)
    design_id = document_store.create_document("designs", make_design_doc())

    assert designs.toggle_like(design_id, "bob-uid") == {"liked": True, "likes": 1}
    assert designs.is_liked_by(design_id, "bob-uid") is True
    assert designs.toggle_like(design_id, "bob-uid") == {"liked": False, "likes": 0}
    assert document_store.get_document(LIKES_COLLECTION, like_id(design_id, "bob-uid")) is None


def test_simultaneous_likes_from_one_user_count_once(document_store, monkeypatch):
    designs = DesignService(document_store)
    design_id = document_store.create_document("designs", make_design_doc())

    # Hold every request after its unlike attempt so all of them try to like at once
    barrier = threading.Barrier(SIMULTANEOUS_TAPS, timeout=10)
    delete_document = document_store.delete_document

    def delete_then_wait(collection, doc_id):
        deleted = delete_document(collection, doc_id)
        barrier.wait()
        return deleted

    monkeypatch.setattr(document_store, "delete_document", delete_then_wait)

    results = []

    def tap():
        results.append(designs.toggle_like(design_id, "bob-uid"))

    threads = [threading.Thread(target=tap) for _ in range(SIMULTANEOUS_TAPS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == SIMULTANEOUS_TAPS
    assert all(result["liked"] for result in results)
    assert document_store.get_document("designs", design_id)["likes"] == 1
    assert document_store.count_documents(LIKES_COLLECTION, {"design_id": design_id}) == 1
