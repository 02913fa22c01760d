"""
JSON schemas for document validation.
This module defines schemas for validating documents in the shop collections.
"""

from typing import Dict, Any

import jsonschema


TIMESTAMP = {"type": "string", "format": "date-time"}
NULLABLE_STRING = {"type": ["string", "null"]}

ADDRESS_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "street": NULLABLE_STRING,
        "city": NULLABLE_STRING,
        "state": NULLABLE_STRING,
        "zip_code": NULLABLE_STRING,
        "country": NULLABLE_STRING,
    },
}

USER_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "uid": {"type": "string", "minLength": 1},
        "email": NULLABLE_STRING,
        "name": NULLABLE_STRING,
        "picture": NULLABLE_STRING,
        "preferences": {
            "type": "object",
            "properties": {
                "theme": {"enum": ["light", "dark"]},
                "notifications": {"type": "boolean"},
                "language": {"enum": ["en", "es", "fr", "de"]},
            },
        },
        "profile": {
            "type": "object",
            "properties": {
                "first_name": NULLABLE_STRING,
                "last_name": NULLABLE_STRING,
                "phone": NULLABLE_STRING,
                "address": ADDRESS_JSON_SCHEMA,
            },
        },
        "stats": {
            "type": "object",
            "properties": {
                "designs_created": {"type": "integer", "minimum": 0},
                "orders_placed": {"type": "integer", "minimum": 0},
                "total_spent": {"type": "number", "minimum": 0},
            },
        },
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
    },
    "required": ["id", "uid", "preferences", "profile", "stats"],
}

DESIGN_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "user_id": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1, "maxLength": 100},
        "description": {"type": "string", "maxLength": 500},
        "elements": {"type": "array", "items": {"type": "object"}},
        "tshirt_color": {"type": "string"},
        "tshirt_size": {"type": "string"},
        "preview_image": NULLABLE_STRING,
        "is_public": {"type": "boolean"},
        "tags": {"type": "array", "items": {"type": "string"}},
        "likes": {"type": "integer"},
        "views": {"type": "integer", "minimum": 0},
        "downloads": {"type": "integer", "minimum": 0},
        "status": {"enum": ["draft", "published", "archived"]},
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
    },
    "required": ["id", "user_id", "name", "is_public", "status", "likes", "views"],
}

DESIGN_LIKE_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "design_id": {"type": "string", "minLength": 1},
        "user_id": {"type": "string", "minLength": 1},
        "created_at": TIMESTAMP,
    },
    "required": ["id", "design_id", "user_id"],
}

CATEGORY_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1},
        "description": NULLABLE_STRING,
    },
    "required": ["id", "name"],
}

ORDER_ITEM_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "design_id": {"type": "string", "minLength": 1},
        "design_name": NULLABLE_STRING,
        "quantity": {"type": "integer", "minimum": 1, "maximum": 10},
        "size": {"type": "string"},
        "color": {"type": "string"},
        "unit_price": {"type": "number", "minimum": 0},
        "line_total": {"type": "number", "minimum": 0},
    },
    "required": ["design_id", "quantity", "size", "color", "unit_price"],
}

ORDER_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "buyer_id": {"type": "string", "minLength": 1},
        "items": {"type": "array", "minItems": 1, "items": ORDER_ITEM_JSON_SCHEMA},
        "shipping_address": ADDRESS_JSON_SCHEMA,
        "payment_method": {"type": "string"},
        "status": {"enum": ["pending", "cancelled"]},
        "payment_status": {"enum": ["pending"]},
        "total": {"type": "number", "minimum": 0},
        "tracking_info": {"type": "object"},
        "cancelled_at": {"type": ["string", "null"], "format": "date-time"},
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
    },
    "required": ["id", "buyer_id", "items", "status", "payment_status", "total"],
}

CART_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "design_id": {"type": "string", "minLength": 1},
                    "quantity": {"type": "integer", "minimum": 1},
                    "size": {"type": "string"},
                    "color": {"type": "string"},
                    "price": {"type": "number", "minimum": 0},
                },
                "required": ["id", "design_id", "quantity", "size", "color", "price"],
            },
        },
        "item_count": {"type": "integer", "minimum": 0},
        "total": {"type": "number", "minimum": 0},
        "updated_at": TIMESTAMP,
    },
    "required": ["id", "items", "item_count", "total"],
}


def _validator(schema: Dict[str, Any]):
    def validate(document: Dict[str, Any]) -> None:
        jsonschema.validate(document, schema)
    return validate


# Schema mapping for easy access
DOCUMENT_SCHEMAS = {
    'users': USER_JSON_SCHEMA,
    'designs': DESIGN_JSON_SCHEMA,
    'design_likes': DESIGN_LIKE_JSON_SCHEMA,
    'categories': CATEGORY_JSON_SCHEMA,
    'orders': ORDER_JSON_SCHEMA,
    'carts': CART_JSON_SCHEMA,
}

DOCUMENT_VALIDATORS = {
    collection: _validator(schema) for collection, schema in DOCUMENT_SCHEMAS.items()
}

COLLECTIONS = tuple(DOCUMENT_SCHEMAS)
