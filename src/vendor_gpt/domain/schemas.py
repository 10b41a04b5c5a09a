"""Pydantic v2 schemas for API request/response validation.

JSON field names are camelCase to match the stored documents
(``bidPrice``, ``wholesalerId``); Python attributes stay snake_case and
either form is accepted on input.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserLocation(CamelModel):
    """Location saved on a user profile (manually entered or detected)."""

    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    is_manual: bool = False
    detected_at: datetime | None = None
    updated_at: datetime | None = None


class UserUpsert(CamelModel):
    """Create or update a user profile."""

    name: str
    email: str | None = None
    role: str = "vendor"
    photo_url: str | None = Field(default=None, alias="photoURL")


class UserResponse(CamelModel):
    """Schema for user API responses."""

    id: str
    name: str
    email: str | None = None
    role: str
    photo_url: str | None = Field(default=None, alias="photoURL")
    location: UserLocation | None = None


class PincodeResponse(BaseModel):
    """City/state resolved from a 6-digit pincode."""

    pincode: str
    city: str
    state: str


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class ProductBase(CamelModel):
    """Fields a wholesaler fills in on the product form."""

    name: str
    description: str = ""
    address: str = ""
    city: str = ""
    mobile_no: str = ""
    country_code: str = "+91"
    price: float
    min_order: int = 1
    quantity: int = 0
    image_url: str = ""


class ProductCreate(ProductBase):
    """Schema for listing a new product."""

    wholesaler_id: str
    wholesaler_name: str = ""
    wholesaler_photo: str = ""


class ProductUpdate(CamelModel):
    """Partial product edit. ``wholesaler_id`` identifies the acting owner."""

    wholesaler_id: str
    name: str | None = None
    description: str | None = None
    address: str | None = None
    city: str | None = None
    mobile_no: str | None = None
    country_code: str | None = None
    price: float | None = None
    min_order: int | None = None
    quantity: int | None = None
    image_url: str | None = None


class ProductResponse(ProductBase):
    """Schema for product API responses."""

    id: str
    wholesaler_id: str
    wholesaler_name: str | None = None
    wholesaler_photo: str | None = None


class PurchaseRequest(CamelModel):
    """Direct purchase of listed stock."""

    vendor_id: str
    quantity: int


class PurchaseReceipt(CamelModel):
    """Outcome of a direct purchase."""

    id: str
    product_id: str
    product_name: str
    quantity: int
    amount: float
    status: str
    created_at: datetime
    wholesaler_id: str
    vendor_id: str


# ---------------------------------------------------------------------------
# Bid requests
# ---------------------------------------------------------------------------


class BidCreate(CamelModel):
    """Schema for creating a bid request outside the chat flow."""

    vendor_id: str
    vendor_name: str
    vendor_email: str
    product_name: str
    description: str = ""
    quantity: int
    bid_price: float
    urgency: str = "this_week"
    location: str = "Not specified"


class BidAcceptRequest(CamelModel):
    """Wholesaler identity for accepting a bid."""

    wholesaler_id: str
    wholesaler_name: str = "Wholesaler"
    wholesaler_contact: str = ""


class BidResponse(CamelModel):
    """Schema for bid request API responses."""

    id: str
    vendor_id: str
    vendor_name: str
    vendor_email: str
    product_name: str
    description: str | None = None
    quantity: int
    bid_price: float
    urgency: str
    location: str | None = None
    status: str
    created_at: datetime
    accepted_by: str | None = None
    accepted_at: datetime | None = None
    wholesaler_name: str | None = None
    wholesaler_contact: str | None = None
    order_id: str | None = None
    order_placed_at: datetime | None = None
    rejected_at: datetime | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class OrderResponse(CamelModel):
    """Schema for order API responses."""

    id: str
    bid_request_id: str
    product_name: str
    quantity: int
    price_per_unit: float
    total_amount: float
    vendor_id: str
    vendor_name: str
    wholesaler_id: str
    wholesaler_name: str
    status: str
    created_at: datetime
    updated_at: datetime | None = None
    delivery_address: str | None = None
    estimated_delivery: datetime | None = None


class OrderStatusUpdate(CamelModel):
    """Requested order status change."""

    status: str


class AcceptBidResponse(CamelModel):
    """Bid and the order created with it."""

    bid: BidResponse
    order: OrderResponse


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatRequest(CamelModel):
    """Inbound chat turn with the caller-supplied identity."""

    message: str
    location: str | None = None
    user_id: str | None = None
    user_name: str | None = None
    user_email: str | None = None


class ChatMessage(CamelModel):
    """One bot turn. Not persisted."""

    id: str
    message: str
    is_bot: bool = True
    timestamp: datetime
    products: list[ProductResponse] | None = None


# ---------------------------------------------------------------------------
# Polling feeds
# ---------------------------------------------------------------------------


class WholesalerFeed(CamelModel):
    """What a wholesaler dashboard re-fetches on each poll."""

    pending_bids: list[BidResponse]
    orders: list[OrderResponse]
    fetched_at: datetime


class VendorFeed(CamelModel):
    """What a vendor dashboard re-fetches on each poll."""

    bids: list[BidResponse]
    orders: list[OrderResponse]
    fetched_at: datetime
