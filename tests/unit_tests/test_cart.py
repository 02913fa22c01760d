from decimal import Decimal

from shop_api import cart as cart_lines

DESIGN = {"id": "d1", "name": "Sunset Surfer", "preview_image": "https://example.com/d1.png"}
OTHER_DESIGN = {"id": "d2", "name": "Moon", "preview_image": None}


def test_to_money_rounds_half_up():
    assert cart_lines.to_money("0.125") == Decimal("0.13")
    assert cart_lines.to_money(29.99) == Decimal("29.99")
    assert cart_lines.to_money(0.1 + 0.2) == Decimal("0.30")


def test_add_item_creates_line():
    cart = cart_lines.empty_cart("u1")

    line = cart_lines.add_item(cart, DESIGN, Decimal("29.99"), quantity=2, size="L", color="black")

    assert line["design_id"] == "d1"
    assert line["design_name"] == "Sunset Surfer"
    assert line["price"] == 29.99
    assert cart["item_count"] == 2
    assert cart["total"] == 59.98


def test_add_same_design_size_and_color_merges_lines():
    cart = cart_lines.empty_cart("u1")

    cart_lines.add_item(cart, DESIGN, "29.99", quantity=2)
    cart_lines.add_item(cart, DESIGN, "29.99", quantity=1)

    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3
    assert cart["item_count"] == 3
    assert cart["total"] == 89.97


def test_different_size_gets_its_own_line():
    cart = cart_lines.empty_cart("u1")

    cart_lines.add_item(cart, DESIGN, "29.99", size="M")
    cart_lines.add_item(cart, DESIGN, "29.99", size="XL")
    cart_lines.add_item(cart, OTHER_DESIGN, "19.50", quantity=2)

    assert len(cart["items"]) == 3
    assert cart["item_count"] == 4
    assert cart["total"] == 98.98


def test_merged_quantity_is_capped():
    cart = cart_lines.empty_cart("u1")

    cart_lines.add_item(cart, DESIGN, "29.99", quantity=8)
    cart_lines.add_item(cart, DESIGN, "29.99", quantity=5)

    assert cart["items"][0]["quantity"] == cart_lines.MAX_LINE_QUANTITY


def test_update_quantity_clamps():
    cart = cart_lines.empty_cart("u1")
    line = cart_lines.add_item(cart, DESIGN, "29.99", quantity=3)

    cart_lines.update_quantity(cart, line["id"], 0)
    assert cart["items"][0]["quantity"] == 1
    assert cart["total"] == 29.99

    cart_lines.update_quantity(cart, line["id"], 50)
    assert cart["items"][0]["quantity"] == 10
    assert cart["item_count"] == 10


def test_update_unknown_line_returns_none():
    cart = cart_lines.empty_cart("u1")
    assert cart_lines.update_quantity(cart, "missing", 2) is None


def test_remove_item():
    cart = cart_lines.empty_cart("u1")
    line = cart_lines.add_item(cart, DESIGN, "29.99", quantity=2)
    cart_lines.add_item(cart, OTHER_DESIGN, "29.99")

    assert cart_lines.remove_item(cart, line["id"]) is True
    assert cart_lines.remove_item(cart, line["id"]) is False
    assert [item["design_id"] for item in cart["items"]] == ["d2"]
    assert cart["item_count"] == 1
    assert cart["total"] == 29.99


def test_take_lines_empties_cart():
    cart = cart_lines.empty_cart("u1")
    cart_lines.add_item(cart, DESIGN, "29.99", quantity=2)

    taken = cart_lines.take_lines(cart)

    assert [line["design_id"] for line in taken] == ["d1"]
    assert cart["items"] == []
    assert (cart["item_count"], cart["total"]) == (0, 0.0)


def test_restore_lines_merges_with_lines_added_since():
    cart = cart_lines.empty_cart("u1")
    cart_lines.add_item(cart, DESIGN, "29.99", quantity=2)
    taken = cart_lines.take_lines(cart)
    cart_lines.add_item(cart, DESIGN, "29.99", quantity=1)
    cart_lines.add_item(cart, OTHER_DESIGN, "29.99", quantity=1)

    cart_lines.restore_lines(cart, taken)

    assert [(line["design_id"], line["quantity"]) for line in cart["items"]] == [("d1", 3), ("d2", 1)]
    assert cart["item_count"] == 4
