"""
Shop services.

Each service wraps the document store (and the image bucket) for one resource
and raises ``shop_api.errors`` exceptions that the routers turn into responses.
"""

from .carts import CartService
from .designs import DesignService
from .images import ImageFile, ImageService
from .orders import OrderService
from .users import UserService

__all__ = [
    'CartService',
    'DesignService',
    'ImageFile', 'ImageService',
    'OrderService',
    'UserService',
]
