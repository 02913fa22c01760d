from decimal import Decimal

import pytest

from shop_api.errors import InvalidRequestError, NotFoundError
from shop_api.services.carts import CartService
from tests.fixtures.api_helpers import SHIPPING_ADDRESS
from tests.fixtures.docstore import make_design_doc


@pytest.fixture
def carts(document_store) -> CartService:
    return CartService(document_store, Decimal("29.99"))


def cart_designs(cart):
    return [line["design_id"] for line in cart["items"]]


def test_checkout_orders_lines_and_empties_cart(carts, document_store):
    design_id = document_store.create_document("designs", make_design_doc())
    carts.add_item("bob-uid", design_id, quantity=2)

    order = carts.checkout("bob-uid", SHIPPING_ADDRESS, "card")

    assert [(item["design_id"], item["quantity"]) for item in order["items"]] == [(design_id, 2)]
    assert order["total"] == 59.98
    cart = carts.get("bob-uid")
    assert cart["items"] == []
    assert cart["total"] == 0


def test_line_added_during_checkout_stays_in_cart(carts, document_store, monkeypatch):
    sunset = document_store.create_document("designs", make_design_doc(name="Sunset"))
    moon = document_store.create_document("designs", make_design_doc(name="Moon"))
    carts.add_item("bob-uid", sunset)
    create_order = carts.orders.create_order

    def add_while_ordering(*args, **kwargs):
        carts.add_item("bob-uid", moon, size="L")
        return create_order(*args, **kwargs)

    monkeypatch.setattr(carts.orders, "create_order", add_while_ordering)

    order = carts.checkout("bob-uid", SHIPPING_ADDRESS, "card")

    assert [item["design_id"] for item in order["items"]] == [sunset]
    cart = carts.get("bob-uid")
    assert cart_designs(cart) == [moon]
    assert cart["item_count"] == 1
    assert cart["total"] == 29.99


def test_second_checkout_finds_empty_cart(carts, document_store):
    design_id = document_store.create_document("designs", make_design_doc())
    carts.add_item("bob-uid", design_id)
    carts.checkout("bob-uid", SHIPPING_ADDRESS, "card")

    with pytest.raises(InvalidRequestError) as exc_info:
        carts.checkout("bob-uid", SHIPPING_ADDRESS, "card")

    assert exc_info.value.error == "Cart is empty"
    assert document_store.count_documents("orders", {"buyer_id": "bob-uid"}) == 1


def test_checkout_without_cart(carts):
    with pytest.raises(InvalidRequestError):
        carts.checkout("nobody-uid", SHIPPING_ADDRESS, "card")


def test_rejected_checkout_puts_lines_back(carts, document_store):
    design_id = document_store.create_document("designs", make_design_doc())
    carts.add_item("bob-uid", design_id, quantity=3, size="L")
    document_store.delete_document("designs", design_id)

    with pytest.raises(NotFoundError):
        carts.checkout("bob-uid", SHIPPING_ADDRESS, "card")

    cart = carts.get("bob-uid")
    assert cart_designs(cart) == [design_id]
    assert cart["items"][0]["quantity"] == 3
    assert cart["item_count"] == 3
    assert document_store.count_documents("orders") == 0
