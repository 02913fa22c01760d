"""Server-side shopping cart, one document per user."""

import logging
from decimal import Decimal
from typing import Any, Dict, List

from database import DocumentStore, utc_now
from shop_api import cart as cart_lines
from shop_api.errors import InvalidRequestError, NotFoundError
from shop_api.services.designs import DesignService
from shop_api.services.orders import OrderService

logger = logging.getLogger(__name__)

COLLECTION = "carts"


class CartService:
    def __init__(self, store: DocumentStore, unit_price: Decimal):
        self.store = store
        self.unit_price = unit_price
        self.designs = DesignService(store)
        self.orders = OrderService(store, unit_price)

    def get(self, user_id: str) -> Dict[str, Any]:
        return self.store.get_document(COLLECTION, user_id) or cart_lines.empty_cart(user_id)

    def _ensure_cart(self, user_id: str) -> None:
        if self.store.get_document(COLLECTION, user_id) is None:
            self.store.set_document(
                COLLECTION, user_id, {**cart_lines.empty_cart(user_id), "updated_at": utc_now()}
            )

    def add_item(
        self, user_id: str, design_id: str, quantity: int = 1, size: str = "M", color: str = "white"
    ) -> Dict[str, Any]:
        """Add a design to the cart; the same design, size and color share one line."""
        design = self.designs.get_visible_to(design_id, user_id)
        self._ensure_cart(user_id)

        def mutate(cart: Dict[str, Any]) -> None:
            cart_lines.add_item(cart, design, self.unit_price, quantity=quantity, size=size, color=color)
            cart["updated_at"] = utc_now()

        self.store.modify_document(COLLECTION, user_id, mutate)
        logger.info(f"Added {quantity} x {design_id} ({size}/{color}) to cart of {user_id}")
        return self.get(user_id)

    def update_quantity(self, user_id: str, item_id: str, quantity: int) -> Dict[str, Any]:
        """Set a line's quantity; values outside 1..10 are clamped."""

        def mutate(cart: Dict[str, Any]) -> None:
            if cart_lines.update_quantity(cart, item_id, quantity) is None:
                raise NotFoundError("Cart item does not exist", error="Cart item not found")
            cart["updated_at"] = utc_now()

        if not self.store.modify_document(COLLECTION, user_id, mutate):
            raise NotFoundError("Cart item does not exist", error="Cart item not found")
        return self.get(user_id)

    def remove_item(self, user_id: str, item_id: str) -> Dict[str, Any]:
        def mutate(cart: Dict[str, Any]) -> None:
            if not cart_lines.remove_item(cart, item_id):
                raise NotFoundError("Cart item does not exist", error="Cart item not found")
            cart["updated_at"] = utc_now()

        if not self.store.modify_document(COLLECTION, user_id, mutate):
            raise NotFoundError("Cart item does not exist", error="Cart item not found")
        logger.info(f"Removed item {item_id} from cart of {user_id}")
        return self.get(user_id)

    def clear(self, user_id: str) -> Dict[str, Any]:
        cart = {**cart_lines.empty_cart(user_id), "updated_at": utc_now()}
        self.store.set_document(COLLECTION, user_id, cart)
        logger.info(f"Cleared cart of {user_id}")
        return cart

    def checkout(
        self, user_id: str, shipping_address: Dict[str, Any], payment_method: str
    ) -> Dict[str, Any]:
        """
        Turn the cart's lines into an order.

        The lines are taken out of the cart in one write before the order is
        placed, so lines added meanwhile stay in the cart and a second checkout
        cannot order the same lines again. If the order is rejected the lines
        are put back.
        """
        ordered: List[Dict[str, Any]] = []

        def take(cart: Dict[str, Any]) -> None:
            if not cart["items"]:
                raise InvalidRequestError("Add items to your cart before checking out", error="Cart is empty")
            ordered[:] = cart_lines.take_lines(cart)
            cart["updated_at"] = utc_now()

        if not self.store.modify_document(COLLECTION, user_id, take):
            raise InvalidRequestError("Add items to your cart before checking out", error="Cart is empty")

        try:
            order = self.orders.create_order(user_id, ordered, shipping_address, payment_method)
        except Exception:
            self._restore(user_id, ordered)
            raise
        logger.info(f"Checked out cart of {user_id} as order {order['id']}")
        return order

    def _restore(self, user_id: str, lines: List[Dict[str, Any]]) -> None:
        def put_back(cart: Dict[str, Any]) -> None:
            cart_lines.restore_lines(cart, lines)
            cart["updated_at"] = utc_now()

        self.store.modify_document(COLLECTION, user_id, put_back)
        logger.info(f"Returned {len(lines)} lines to cart of {user_id} after a failed checkout")
