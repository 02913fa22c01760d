"""
User profile service.
Profiles are keyed by the identity platform's uid and embed preferences,
contact details and activity counters.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from database import DocumentStore, utc_now
from shop_api.cart import to_money
from shop_api.errors import InvalidRequestError, NotFoundError
from shop_api.security import Principal

logger = logging.getLogger(__name__)

COLLECTION = "users"

DEFAULT_PREFERENCES = {"theme": "light", "notifications": True, "language": "en"}
DEFAULT_ADDRESS = {"street": None, "city": None, "state": None, "zip_code": None, "country": None}
DEFAULT_PROFILE = {"first_name": None, "last_name": None, "phone": None, "address": DEFAULT_ADDRESS}


class UserService:
    """Service for managing user profile documents"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def create_profile(self, principal: Principal) -> Dict[str, Any]:
        if self.get_user(principal.uid) is not None:
            raise InvalidRequestError(
                "User profile has already been created",
                error="Profile already exists",
            )

        now = utc_now()
        user_doc = {
            "uid": principal.uid,
            "email": principal.email,
            "name": principal.name,
            "picture": principal.picture,
            "preferences": dict(DEFAULT_PREFERENCES),
            "profile": {**DEFAULT_PROFILE, "address": dict(DEFAULT_ADDRESS)},
            "stats": {"designs_created": 0, "orders_placed": 0, "total_spent": 0},
            "created_at": now,
            "updated_at": now,
        }
        self.store.create_document(COLLECTION, user_doc, doc_id=principal.uid)
        logger.info(f"Created user profile: {principal.uid}")
        return {**user_doc, "id": principal.uid}

    def get_user(self, uid: str) -> Optional[Dict[str, Any]]:
        return self.store.get_document(COLLECTION, uid)

    def require_user(self, uid: str) -> Dict[str, Any]:
        user = self.get_user(uid)
        if user is None:
            raise NotFoundError("User profile does not exist", error="User not found")
        return user

    def update_profile(self, uid: str, profile: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the profile sub-document; fields left out fall back to empty values."""
        self.require_user(uid)
        address = {**DEFAULT_ADDRESS, **(profile.get("address") or {})}
        merged = {**DEFAULT_PROFILE, **profile, "address": address}
        self.store.update_document(COLLECTION, uid, {"profile": merged, "updated_at": utc_now()})
        return self.require_user(uid)

    def update_preferences(self, uid: str, preferences: Dict[str, Any]) -> Dict[str, Any]:
        """Merge the given preference fields into the stored ones."""
        self.require_user(uid)
        updates = {f"preferences.{key}": value for key, value in preferences.items()}
        updates["updated_at"] = utc_now()
        self.store.update_document(COLLECTION, uid, updates)
        return self.require_user(uid)["preferences"]

    def increment_stats(self, uid: str, **amounts: float) -> bool:
        """Add to activity counters. Users without a profile are skipped."""
        increments = {f"stats.{name}": amount for name, amount in amounts.items()}
        updated = self.store.increment_fields(COLLECTION, uid, increments, {"updated_at": utc_now()})
        if not updated:
            logger.info(f"No profile for {uid}; stats {list(amounts)} not recorded")
        return updated

    def record_spending(self, uid: str, amount: Decimal, orders_placed: int = 0) -> bool:
        """Add ``amount`` (negative for refunds) to ``stats.total_spent``, rounded to cents."""

        def mutate(user: Dict[str, Any]) -> None:
            stats = user.setdefault("stats", {})
            spent = to_money(stats.get("total_spent", 0)) + amount
            stats["total_spent"] = float(max(spent, Decimal("0")))
            stats["orders_placed"] = stats.get("orders_placed", 0) + orders_placed
            user["updated_at"] = utc_now()

        updated = self.store.modify_document(COLLECTION, uid, mutate)
        if not updated:
            logger.info(f"No profile for {uid}; spending of {amount} not recorded")
        return updated

    def set_picture(self, uid: str, url: str) -> bool:
        return self.store.update_document(COLLECTION, uid, {"picture": url, "updated_at": utc_now()})

    def delete_user(self, uid: str) -> None:
        if not self.store.delete_document(COLLECTION, uid):
            raise NotFoundError("User profile does not exist", error="User not found")
        logger.info(f"Deleted user profile: {uid}")
