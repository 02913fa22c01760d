####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
)

DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100
MAX_SIGNED_URL_MINUTES = 7 * 24 * 60

DataT = TypeVar("DataT")


class Pagination(BaseModel):
    limit: int
    offset: int
    count: int


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope for single-object responses."""
    success: bool = True
    message: Optional[str] = None
    data: DataT


class PaginatedResponse(BaseModel, Generic[DataT]):
    """Envelope for list responses."""
    success: bool = True
    data: List[DataT]
    pagination: Pagination


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class PageQueryParams(BaseModel):
    """Query parameters shared by paginated listings."""
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE)
    offset: int = Field(0, ge=0)


def paginate(items: List[Any], params: PageQueryParams) -> dict:
    return {
        "data": items,
        "pagination": {"limit": params.limit, "offset": params.offset, "count": len(items)},
    }


##########################
# --- Users and auth --- #
##########################

class Address(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class Preferences(BaseModel):
    theme: Literal["light", "dark"] = "light"
    notifications: bool = True
    language: Literal["en", "es", "fr", "de"] = "en"


class Profile(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone: Optional[str] = Field(
        None,
        pattern=r"^\+?[0-9][0-9 \-]{5,18}[0-9]$",
        json_schema_extra={"example": "+1 555-010-0199"},
    )
    address: Address = Field(default_factory=Address)


class UserStats(BaseModel):
    designs_created: int = 0
    orders_placed: int = 0
    total_spent: float = 0


class User(BaseModel):
    """A user profile document."""
    id: str
    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    preferences: Preferences
    profile: Profile
    stats: UserStats
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseModel):
    """Body of `PUT /v1/users/profile`."""
    profile: Profile

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "profile": {
                    "first_name": "Ada",
                    "last_name": "Lovelace",
                    "phone": "+44 20 7946 0958",
                    "address": {"street": "12 St James's Square", "city": "London", "country": "UK"},
                }
            }
        }
    )


class PreferencesUpdate(BaseModel):
    theme: Optional[Literal["light", "dark"]] = None
    notifications: Optional[bool] = None
    language: Optional[Literal["en", "es", "fr", "de"]] = None


class CurrentUser(BaseModel):
    """Response data of `GET /v1/auth/me`."""
    uid: str
    email: Optional[str] = None
    email_verified: bool
    name: Optional[str] = None
    picture: Optional[str] = None
    profile_exists: bool
    profile: Optional[User] = None


class EmailVerificationStatus(BaseModel):
    email_verified: bool
    email: Optional[str] = None


class TokenStatus(BaseModel):
    uid: str
    email: Optional[str] = None


###################
# --- Designs --- #
###################

class DesignStatus(str, Enum):
    """Lifecycle of a design"""
    DRAFT = 'draft'
    PUBLISHED = 'published'
    ARCHIVED = 'archived'


class DesignCreate(BaseModel):
    """Body of `POST /v1/designs`."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Sunset Surfer",
                "description": "Retro surf print",
                "elements": [{"type": "text", "value": "Surf's up", "x": 120, "y": 80}],
                "tshirt_color": "navy",
                "tshirt_size": "L",
                "is_public": True,
                "tags": ["vintage", "nature"],
            }
        },
    )

    name: str = Field(min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    elements: List[Dict[str, Any]]
    tshirt_color: str = "white"
    tshirt_size: str = "M"
    preview_image: Optional[HttpUrl] = None
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)


class DesignUpdate(BaseModel):
    """Body of `PUT /v1/designs/{design_id}`; only the fields sent are changed."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    elements: Optional[List[Dict[str, Any]]] = None
    tshirt_color: Optional[str] = None
    tshirt_size: Optional[str] = None
    preview_image: Optional[HttpUrl] = None
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None
    status: Optional[DesignStatus] = None


class Design(BaseModel):
    """A design document."""
    id: str
    user_id: str
    name: str
    description: str = ""
    elements: List[Dict[str, Any]] = Field(default_factory=list)
    tshirt_color: str
    tshirt_size: str
    preview_image: Optional[str] = None
    is_public: bool
    tags: List[str] = Field(default_factory=list)
    likes: int = 0
    views: int = 0
    downloads: int = 0
    status: DesignStatus
    created_at: datetime
    updated_at: datetime


class DesignDetail(Design):
    is_liked: bool = False


class PublicDesignsQueryParams(PageQueryParams):
    """Query parameters for `GET /v1/designs`."""
    category: Optional[str] = Field(None, description="Only designs tagged with this category.")
    search: Optional[str] = Field(None, min_length=1, description="Design name prefix.")


class MyDesignsQueryParams(PageQueryParams):
    status: Optional[DesignStatus] = None


class LikeResult(BaseModel):
    liked: bool
    likes: int


class Category(BaseModel):
    id: str
    name: str
    description: Optional[str] = None


##################
# --- Orders --- #
##################

class OrderStatus(str, Enum):
    PENDING = 'pending'
    CANCELLED = 'cancelled'


class ShippingAddress(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    country: str = Field(min_length=1)


class OrderItemIn(BaseModel):
    design_id: str = Field(min_length=1)
    quantity: int = Field(ge=1, le=10)
    size: str = Field(min_length=1)
    color: str = Field(min_length=1)


class OrderCreate(BaseModel):
    """Body of `POST /v1/orders`."""
    items: List[OrderItemIn] = Field(min_length=1)
    shipping_address: ShippingAddress
    payment_method: str = Field(min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [{"design_id": "4f1c0f5e9b", "quantity": 2, "size": "M", "color": "black"}],
                "shipping_address": {
                    "street": "1 Infinite Loop",
                    "city": "Cupertino",
                    "state": "CA",
                    "zip_code": "95014",
                    "country": "US",
                },
                "payment_method": "card",
            }
        }
    )


class OrderItem(BaseModel):
    design_id: str
    design_name: Optional[str] = None
    quantity: int
    size: str
    color: str
    unit_price: float
    line_total: float


class Order(BaseModel):
    """An order document."""
    id: str
    buyer_id: str
    items: List[OrderItem]
    shipping_address: ShippingAddress
    payment_method: str
    status: OrderStatus
    payment_status: str
    total: float
    tracking_info: Dict[str, Any] = Field(default_factory=dict)
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PaymentIntentRequest(BaseModel):
    amount: int = Field(ge=100, description="Amount in the smallest currency unit (cents).")
    currency: str = Field("usd", pattern=r"^[A-Za-z]{3}$")


class PaymentIntent(BaseModel):
    id: str
    client_secret: str
    amount: int
    currency: str
    status: str


################
# --- Cart --- #
################

class CartItemIn(BaseModel):
    """Body of `POST /v1/cart/items`."""
    design_id: str = Field(min_length=1)
    quantity: int = Field(1, ge=1, le=10)
    size: str = Field("M", min_length=1)
    color: str = Field("white", min_length=1)


class CartQuantityUpdate(BaseModel):
    """Body of `PATCH /v1/cart/items/{item_id}`; the quantity is clamped to 1..10."""
    quantity: int


class CartItem(BaseModel):
    id: str
    design_id: str
    design_name: Optional[str] = None
    preview_image: Optional[str] = None
    quantity: int
    size: str
    color: str
    price: float


class Cart(BaseModel):
    id: str
    items: List[CartItem]
    item_count: int
    total: float
    updated_at: Optional[datetime] = None


class CheckoutRequest(BaseModel):
    shipping_address: ShippingAddress
    payment_method: str = Field(min_length=1)


##################
# --- Images --- #
##################

class UploadedImage(BaseModel):
    url: str
    file_name: str = Field(
        description="Object key of the image in the bucket.",
        json_schema_extra={"example": "uploads/u123/1718000000000_front.png"},
    )
    original_name: str
    size: int
    content_type: str
    uploaded_at: datetime


class UploadedDesignImage(UploadedImage):
    design_id: str


class ImageMetadata(BaseModel):
    name: str
    size: int
    content_type: str
    last_modified: datetime
    metadata: Dict[str, str] = Field(default_factory=dict)


class StoredImage(BaseModel):
    file_name: str
    url: str
    size: int
    last_modified: datetime


class SignedUrlRequest(BaseModel):
    file_name: str = Field(min_length=1)
    expiration_minutes: int = Field(60, ge=1, le=MAX_SIGNED_URL_MINUTES)


class SignedUrl(BaseModel):
    signed_url: str
    expires_in: int = Field(description="Minutes until the URL expires.")
