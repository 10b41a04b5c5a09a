"""SQLAlchemy ORM models for the VendorGPT marketplace.

Each model backs one document collection. Table and column names keep the
collection's field names (``bidRequests``, ``bidPrice``, ...) so existing
documents stay compatible; Python attributes are snake_case.

All models use SQLite-compatible types:
- String(36) for UUID primary keys
- JSON for nested data (user location)
- DateTime for timestamps
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, JSON, String, Text

from vendor_gpt.infra.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Marketplace participant, either a vendor or a wholesaler."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, index=True)
    role = Column(String(20), nullable=False, default="vendor")  # vendor, wholesaler
    photo_url = Column("photoURL", String(500), nullable=True)
    # {city, state, pincode, address, latitude, longitude, isManual, detectedAt, updatedAt}
    location = Column(JSON, nullable=True)
    created_at = Column("createdAt", DateTime, default=_now)
    updated_at = Column("updatedAt", DateTime, default=_now, onupdate=_now)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class Product(Base):
    """Inventory listed by a wholesaler."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    address = Column(String(500), default="")
    city = Column(String(100), default="")
    mobile_no = Column("mobileNo", String(20), default="")
    country_code = Column("countryCode", String(8), default="+91")
    price = Column(Float, nullable=False)
    min_order = Column("minOrder", Integer, nullable=False, default=1)
    quantity = Column(Integer, nullable=False, default=0)
    image_url = Column("imageUrl", String(500), default="")
    wholesaler_id = Column("wholesalerId", String(36), nullable=False, index=True)
    # Copies taken at write time. Read paths prefer the live users row.
    wholesaler_name = Column("wholesalerName", String(255), default="")
    wholesaler_photo = Column("wholesalerPhoto", String(500), default="")
    created_at = Column("createdAt", DateTime, default=_now)
    updated_at = Column("updatedAt", DateTime, default=_now, onupdate=_now)


# ---------------------------------------------------------------------------
# Bids and orders
# ---------------------------------------------------------------------------


class BidRequest(Base):
    """Vendor ask for a product that was not found in inventory."""

    __tablename__ = "bidRequests"

    id = Column(String(36), primary_key=True, default=_uuid)
    vendor_id = Column("vendorId", String(36), nullable=False, index=True)
    vendor_name = Column("vendorName", String(255), nullable=False)
    vendor_email = Column("vendorEmail", String(255), nullable=False)
    product_name = Column("productName", String(255), nullable=False)
    description = Column(Text, default="")
    quantity = Column(Integer, nullable=False)
    bid_price = Column("bidPrice", Float, nullable=False, default=0.0)
    urgency = Column(String(20), nullable=False, default="this_week")
    location = Column(String(500), default="Not specified")
    status = Column(String(20), nullable=False, default="pending", index=True)
    created_at = Column("createdAt", DateTime, default=_now)

    # Set by wholesaler actions
    accepted_by = Column("acceptedBy", String(36), nullable=True)
    accepted_at = Column("acceptedAt", DateTime, nullable=True)
    wholesaler_name = Column("wholesalerName", String(255), nullable=True)
    wholesaler_contact = Column("wholesalerContact", String(255), nullable=True)
    order_id = Column("orderId", String(36), nullable=True)
    order_placed_at = Column("orderPlacedAt", DateTime, nullable=True)
    rejected_at = Column("rejectedAt", DateTime, nullable=True)


class Order(Base):
    """Order created atomically with the acceptance of a bid request."""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=_uuid)
    # Back-reference only; the bid does not own the order
    bid_request_id = Column("bidRequestId", String(36), nullable=False, index=True)
    product_name = Column("productName", String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price_per_unit = Column("pricePerUnit", Float, nullable=False)
    total_amount = Column("totalAmount", Float, nullable=False)
    vendor_id = Column("vendorId", String(36), nullable=False, index=True)
    vendor_name = Column("vendorName", String(255), nullable=False)
    wholesaler_id = Column("wholesalerId", String(36), nullable=False, index=True)
    wholesaler_name = Column("wholesalerName", String(255), nullable=False)
    status = Column(String(20), nullable=False, default="confirmed")
    created_at = Column("createdAt", DateTime, default=_now)
    updated_at = Column("updatedAt", DateTime, nullable=True)
    delivery_address = Column("deliveryAddress", String(500), nullable=True)
    estimated_delivery = Column("estimatedDelivery", DateTime, nullable=True)


COLLECTIONS: dict[str, type[Base]] = {
    "users": User,
    "products": Product,
    "bidRequests": BidRequest,
    "orders": Order,
}
