"""
Design service for the shop's NoSQL operations.
Designs live in their own collection; likes are stored as one document per
(design, user) pair so a user can like a design at most once.
"""

import logging
from typing import Any, Dict, List, Optional

from database import DocumentExistsError, DocumentStore, utc_now
from shop_api.errors import NotFoundError, PermissionDeniedError
from shop_api.security import Principal
from shop_api.services.users import UserService

logger = logging.getLogger(__name__)

COLLECTION = "designs"
LIKES_COLLECTION = "design_likes"
CATEGORIES_COLLECTION = "categories"

COPY_SUFFIX = " (Copy)"


def like_id(design_id: str, user_id: str) -> str:
    return f"{design_id}_{user_id}"


class DesignService:
    """Service for managing design documents, likes and categories"""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.users = UserService(store)

    def create(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create a draft design owned by ``user_id`` and count it on the owner's profile."""
        now = utc_now()
        design_doc = {
            "user_id": user_id,
            "name": fields["name"],
            "description": fields.get("description", ""),
            "elements": fields.get("elements", []),
            "tshirt_color": fields.get("tshirt_color", "white"),
            "tshirt_size": fields.get("tshirt_size", "M"),
            "preview_image": fields.get("preview_image"),
            "is_public": fields.get("is_public", False),
            "tags": fields.get("tags", []),
            "likes": 0,
            "views": 0,
            "downloads": 0,
            "status": "draft",
            "created_at": now,
            "updated_at": now,
        }
        design_id = self.store.create_document(COLLECTION, design_doc)
        self.users.increment_stats(user_id, designs_created=1)
        logger.info(f"Created design {design_id} for user {user_id}")
        return self.require(design_id)

    def get(self, design_id: str) -> Optional[Dict[str, Any]]:
        return self.store.get_document(COLLECTION, design_id)

    def require(self, design_id: str) -> Dict[str, Any]:
        design = self.get(design_id)
        if design is None:
            raise NotFoundError("Design does not exist", error="Design not found")
        return design

    def require_owned(self, design_id: str, user_id: str) -> Dict[str, Any]:
        design = self.require(design_id)
        if design["user_id"] != user_id:
            raise PermissionDeniedError("You can only modify your own designs")
        return design

    def get_visible_to(self, design_id: str, user_id: Optional[str]) -> Dict[str, Any]:
        """Return a design ``user_id`` may see: public designs, or private ones they own."""
        design = self.require(design_id)
        if not design["is_public"] and design["user_id"] != user_id:
            raise PermissionDeniedError("This design is private")
        return design

    def get_visible(self, design_id: str, principal: Optional[Principal]) -> Dict[str, Any]:
        return self.get_visible_to(design_id, principal.uid if principal else None)

    def view(self, design_id: str, principal: Optional[Principal]) -> Dict[str, Any]:
        """Fetch a design for display, counting the view and flagging whether the caller liked it."""
        design = self.get_visible(design_id, principal)
        self.store.increment_fields(COLLECTION, design_id, {"views": 1})
        design["views"] = design.get("views", 0) + 1
        design["is_liked"] = principal is not None and self.is_liked_by(design_id, principal.uid)
        return design

    def update(self, design_id: str, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        self.require_owned(design_id, user_id)
        if changes:
            self.store.update_document(COLLECTION, design_id, {**changes, "updated_at": utc_now()})
            logger.info(f"Updated design {design_id}: {sorted(changes)}")
        return self.require(design_id)

    def delete(self, design_id: str, user_id: str) -> None:
        self.require_owned(design_id, user_id)
        self.store.delete_document(COLLECTION, design_id)
        logger.info(f"Deleted design {design_id}")

    def list_user(
        self, user_id: str, status: Optional[str] = None, limit: int = 20, offset: int = 0
    ) -> List[Dict[str, Any]]:
        """Designs owned by ``user_id``, newest first."""
        filters: Dict[str, Any] = {"user_id": user_id}
        if status:
            filters["status"] = status
        return self.store.query_documents(
            COLLECTION, filters, order_by="created_at", limit=limit, offset=offset
        )

    def list_public(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Published public designs.

        ``category`` keeps designs tagged with it; ``search`` keeps designs whose
        name starts with it. Plain listings are newest first, name searches are
        in name order.
        """
        try:
            return self.store.query_documents(
                COLLECTION,
                {"is_public": True, "status": "published"},
                array_contains=("tags", category) if category else None,
                prefix=("name", search) if search else None,
                order_by="created_at",
                limit=limit,
                offset=offset,
            )
        except Exception as e:
            logger.error(f"Error listing public designs: {e}")
            raise

    def is_liked_by(self, design_id: str, user_id: str) -> bool:
        return self.store.get_document(LIKES_COLLECTION, like_id(design_id, user_id)) is not None

    def toggle_like(self, design_id: str, user_id: str) -> Dict[str, Any]:
        """Like the design, or take the like back when the user already liked it."""
        self.require(design_id)
        doc_id = like_id(design_id, user_id)
        if self.store.delete_document(LIKES_COLLECTION, doc_id):
            self.store.increment_fields(COLLECTION, design_id, {"likes": -1})
            liked = False
        else:
            liked = True
            try:
                self.store.create_document(
                    LIKES_COLLECTION,
                    {"design_id": design_id, "user_id": user_id, "created_at": utc_now()},
                    doc_id=doc_id,
                )
            except DocumentExistsError:
                # A concurrent request from the same user already counted this like
                logger.info(f"User {user_id} already likes design {design_id}")
            else:
                self.store.increment_fields(COLLECTION, design_id, {"likes": 1})
        likes = self.require(design_id).get("likes", 0)
        logger.info(f"User {user_id} {'liked' if liked else 'unliked'} design {design_id}")
        return {"liked": liked, "likes": likes}

    def duplicate(self, design_id: str, principal: Principal) -> Dict[str, Any]:
        """Copy a visible design into a private draft owned by the caller."""
        source = self.get_visible(design_id, principal)
        copy_fields = {
            "name": f"{source['name']}{COPY_SUFFIX}"[:100],
            "description": source.get("description", ""),
            "elements": source.get("elements", []),
            "tshirt_color": source.get("tshirt_color", "white"),
            "tshirt_size": source.get("tshirt_size", "M"),
            "preview_image": source.get("preview_image"),
            "is_public": False,
            "tags": list(source.get("tags", [])),
        }
        copy = self.create(principal.uid, copy_fields)
        logger.info(f"Duplicated design {design_id} as {copy['id']}")
        return copy

    def set_preview_image(self, design_id: str, url: str) -> bool:
        return self.store.update_document(
            COLLECTION, design_id, {"preview_image": url, "updated_at": utc_now()}
        )

    def list_categories(self) -> List[Dict[str, Any]]:
        categories = self.store.query_documents(CATEGORIES_COLLECTION, limit=1000)
        return sorted(categories, key=lambda category: category.get("name", ""))
