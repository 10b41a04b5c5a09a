"""Domain enumerations for the VendorGPT marketplace.

All enums use the (str, Enum) pattern to ensure JSON serialization compatibility.
"""

from enum import Enum


class UserRole(str, Enum):
    """Which side of the marketplace a user acts on."""

    VENDOR = "vendor"
    WHOLESALER = "wholesaler"


class Intent(str, Enum):
    """Classified purpose of a chat message."""

    BUY = "buy"
    INQUIRY = "inquiry"
    PRICE_CHECK = "price_check"
    AVAILABILITY = "availability"
    BID = "bid"
    GENERAL = "general"


class Urgency(str, Enum):
    """Coarse delivery hint attached to a bid request. Not enforced by any scheduler."""

    IMMEDIATE = "immediate"
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this_week"


class BidStatus(str, Enum):
    """Status of a vendor bid request."""

    PENDING = "pending"
    ACCEPTED = "accepted"  # legacy: accepted without an order
    REJECTED = "rejected"
    COMPLETED = "completed"
    ORDER_PLACED = "order_placed"


class OrderStatus(str, Enum):
    """Status of an order created from an accepted bid."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
