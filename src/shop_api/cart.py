"""
Cart bookkeeping.

A cart is a plain document: a list of lines keyed by (design, size, color)
plus the derived ``item_count`` and ``total``. The derived fields are always
recomputed from the lines after every change.
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

MIN_LINE_QUANTITY = 1
MAX_LINE_QUANTITY = 10
CENT = Decimal("0.01")

Money = Union[Decimal, float, int, str]


def to_money(value: Money) -> Decimal:
    """Round to cents, half up. Floats go through ``str`` so 29.99 stays 29.99."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(price: Money, quantity: int) -> Decimal:
    return to_money(to_money(price) * quantity)


def lines_total(lines: Iterable[Dict[str, Any]], price_field: str = "price") -> Decimal:
    """Sum of price x quantity over ``lines``."""
    return to_money(sum((line_total(line[price_field], line["quantity"]) for line in lines), Decimal("0")))


def clamp_quantity(quantity: int) -> int:
    return max(MIN_LINE_QUANTITY, min(MAX_LINE_QUANTITY, quantity))


def empty_cart(cart_id: str) -> Dict[str, Any]:
    return {"id": cart_id, "items": [], "item_count": 0, "total": 0.0}


def recalculate(cart: Dict[str, Any]) -> Dict[str, Any]:
    cart["item_count"] = sum(line["quantity"] for line in cart["items"])
    cart["total"] = float(lines_total(cart["items"]))
    return cart


def find_line(cart: Dict[str, Any], item_id: str) -> Optional[Dict[str, Any]]:
    return next((line for line in cart["items"] if line["id"] == item_id), None)


def matching_line(cart: Dict[str, Any], design_id: str, size: str, color: str) -> Optional[Dict[str, Any]]:
    return next(
        (
            line
            for line in cart["items"]
            if line["design_id"] == design_id and line["size"] == size and line["color"] == color
        ),
        None,
    )


def add_item(
    cart: Dict[str, Any],
    design: Dict[str, Any],
    price: Money,
    quantity: int = 1,
    size: str = "M",
    color: str = "white",
) -> Dict[str, Any]:
    """Add ``quantity`` of a design, merging into an existing line with the same size and color."""
    line = matching_line(cart, design["id"], size, color)
    if line is not None:
        line["quantity"] = clamp_quantity(line["quantity"] + quantity)
        recalculate(cart)
        return line

    line = {
        "id": uuid.uuid4().hex,
        "design_id": design["id"],
        "design_name": design.get("name"),
        "preview_image": design.get("preview_image"),
        "quantity": clamp_quantity(quantity),
        "size": size,
        "color": color,
        "price": float(to_money(price)),
    }
    cart["items"].append(line)
    recalculate(cart)
    return line


def update_quantity(cart: Dict[str, Any], item_id: str, quantity: int) -> Optional[Dict[str, Any]]:
    """Set a line's quantity, clamped to the allowed range. Returns ``None`` for an unknown line."""
    line = find_line(cart, item_id)
    if line is None:
        return None
    line["quantity"] = clamp_quantity(quantity)
    recalculate(cart)
    return line


def remove_item(cart: Dict[str, Any], item_id: str) -> bool:
    remaining = [line for line in cart["items"] if line["id"] != item_id]
    removed = len(remaining) != len(cart["items"])
    cart["items"] = remaining
    recalculate(cart)
    return removed


def take_lines(cart: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Empty ``cart`` and return the lines it held."""
    lines = cart["items"]
    cart["items"] = []
    recalculate(cart)
    return lines


def restore_lines(cart: Dict[str, Any], lines: Iterable[Dict[str, Any]]) -> None:
    """Put ``lines`` back, merging them into lines added since for the same design, size and color."""
    for line in lines:
        existing = matching_line(cart, line["design_id"], line["size"], line["color"])
        if existing is None:
            cart["items"].append(line)
        else:
            existing["quantity"] = clamp_quantity(existing["quantity"] + line["quantity"])
    recalculate(cart)
