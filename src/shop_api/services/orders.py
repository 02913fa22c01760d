"""
Order service.
Orders snapshot the ordered designs and the unit price at purchase time.
Payment is not processed here; every order starts with a pending payment.
"""

import logging
import uuid
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from database import DocumentStore, utc_now
from shop_api.cart import line_total, lines_total, to_money
from shop_api.errors import ConflictError, NotFoundError, PermissionDeniedError
from shop_api.services.designs import DesignService
from shop_api.services.users import UserService

logger = logging.getLogger(__name__)

COLLECTION = "orders"


class OrderService:
    """Service for placing, listing and cancelling orders"""

    def __init__(self, store: DocumentStore, unit_price: Decimal):
        self.store = store
        self.unit_price = to_money(unit_price)
        self.designs = DesignService(store)
        self.users = UserService(store)

    def _order_item(self, buyer_id: str, item: Dict[str, Any]) -> Dict[str, Any]:
        design = self.designs.get(item["design_id"])
        if design is None:
            raise NotFoundError(
                f"Design {item['design_id']} does not exist", error="Design not found"
            )
        if not design["is_public"] and design["user_id"] != buyer_id:
            raise PermissionDeniedError(f"Design {item['design_id']} is private")
        return {
            "design_id": design["id"],
            "design_name": design.get("name"),
            "quantity": item["quantity"],
            "size": item["size"],
            "color": item["color"],
            "unit_price": float(self.unit_price),
            "line_total": float(line_total(self.unit_price, item["quantity"])),
        }

    def create_order(
        self,
        buyer_id: str,
        items: Iterable[Dict[str, Any]],
        shipping_address: Dict[str, Any],
        payment_method: str,
    ) -> Dict[str, Any]:
        """
        Place an order for ``buyer_id``.

        Every referenced design must exist and be public or owned by the buyer.
        The buyer's ``orders_placed`` and ``total_spent`` stats are updated when
        a profile exists.
        """
        order_items = [self._order_item(buyer_id, item) for item in items]
        total = lines_total(order_items, price_field="unit_price")

        now = utc_now()
        order_doc = {
            "buyer_id": buyer_id,
            "items": order_items,
            "shipping_address": shipping_address,
            "payment_method": payment_method,
            "status": "pending",
            "payment_status": "pending",
            "total": float(total),
            "tracking_info": {},
            "cancelled_at": None,
            "created_at": now,
            "updated_at": now,
        }
        order_id = self.store.create_document(COLLECTION, order_doc)
        self.users.record_spending(buyer_id, total, orders_placed=1)
        logger.info(f"Created order {order_id} for {buyer_id}: {len(order_items)} lines, total {total}")
        return {**order_doc, "id": order_id}

    def get_order(self, order_id: str, buyer_id: str) -> Dict[str, Any]:
        """Return an order of ``buyer_id``. Other buyers' orders are reported as missing."""
        order = self.store.get_document(COLLECTION, order_id)
        if order is None or order["buyer_id"] != buyer_id:
            raise NotFoundError("Order does not exist", error="Order not found")
        return order

    def list_orders(self, buyer_id: str, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
        try:
            return self.store.query_documents(
                COLLECTION, {"buyer_id": buyer_id}, order_by="created_at", limit=limit, offset=offset
            )
        except Exception as e:
            logger.error(f"Error listing orders for {buyer_id}: {e}")
            raise

    def cancel_order(self, order_id: str, buyer_id: str) -> Dict[str, Any]:
        """Cancel a pending order and take its total back out of the buyer's spending."""
        self.get_order(order_id, buyer_id)

        def mutate(order: Dict[str, Any]) -> None:
            if order["status"] != "pending":
                raise ConflictError(
                    f"Only pending orders can be cancelled; this order is {order['status']}",
                    error="Order cannot be cancelled",
                )
            now = utc_now()
            order["status"] = "cancelled"
            order["cancelled_at"] = now
            order["updated_at"] = now

        self.store.modify_document(COLLECTION, order_id, mutate)
        order = self.get_order(order_id, buyer_id)
        self.users.record_spending(buyer_id, -to_money(order["total"]))
        logger.info(f"Cancelled order {order_id}")
        return order

    def create_payment_intent(self, amount: int, currency: str = "usd", buyer_id: Optional[str] = None) -> Dict[str, Any]:
        """Placeholder payment intent; no payment processor is contacted."""
        intent_id = f"pi_{uuid.uuid4().hex[:24]}"
        logger.info(f"Issued placeholder payment intent {intent_id} ({amount} {currency}) for {buyer_id}")
        return {
            "id": intent_id,
            "client_secret": f"{intent_id}_secret_{uuid.uuid4().hex[:24]}",
            "amount": amount,
            "currency": currency.lower(),
            "status": "requires_payment_method",
        }
