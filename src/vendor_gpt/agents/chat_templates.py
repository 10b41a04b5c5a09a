"""Reply templates for the VendorGPT chat.

Tone: friendly helper for a street food vendor ordering stock on a phone.
Markdown bold (``**``) is rendered by the chat UI.
"""

from vendor_gpt.agents.contracts import PurchaseIntent
from vendor_gpt.domain.models import BidRequest
from vendor_gpt.domain.schemas import ProductResponse

GENERIC_ERROR = "Sorry, I'm having trouble processing your request right now. Please try again."

NO_MATCH = """Sorry, I couldn't find any {product} suppliers in your area right now.

Would you like to:
1. **Create a Bid Request** - Tell wholesalers what you need and your budget
2. Search in nearby areas (within 10km)?
3. Get notified when suppliers become available?

To create a bid request, just say something like:
"I want to bid ₹{budget} for {quantity} {product}\""""

BID_CLARIFICATION = """To create a bid request, I need more details:

Please provide:
- What product do you need?
- How much quantity?
- Your budget per unit
- When do you need it?

Example: "I need 20kg onions, budget ₹30 per kg, needed tomorrow\""""

BID_CREATED = """✅ **Bid Request Created Successfully!**

**Request Details:**
- Product: {product}
- Quantity: {quantity} units
- Your Bid: {bid}
- Urgency: {urgency}

Your request has been sent to all nearby wholesalers. You'll be notified when someone accepts your bid!

**Request ID:** {bid_id}"""

_LISTING_ITEM = """{index}. **{name}** - ₹{price}/unit
   📍 {address}, {city}
   👤 {wholesaler}
   📦 Available: {quantity} units (Min order: {min_order})
   📞 {country_code} {mobile_no}"""

_LISTING_FOOTER = """Would you like to:
• View detailed photos of any product
• Contact a supplier directly
• Check delivery options"""


def _price(value: float) -> str:
    return f"{value:g}"


def product_listing(intent: PurchaseIntent, products: list[ProductResponse]) -> str:
    """Enumerated list of matching products."""
    count = len(products)
    header = f"Great! I found {count} supplier{'s' if count > 1 else ''} for {intent.product_type}:"
    items = [
        _LISTING_ITEM.format(
            index=index,
            name=product.name,
            price=_price(product.price),
            address=product.address,
            city=product.city,
            wholesaler=product.wholesaler_name or "Supplier",
            quantity=product.quantity,
            min_order=product.min_order,
            country_code=product.country_code,
            mobile_no=product.mobile_no,
        )
        for index, product in enumerate(products, start=1)
    ]
    return "\n\n".join([header, *items, _LISTING_FOOTER])


def no_match(intent: PurchaseIntent) -> str:
    """Offer to create a bid. Nothing is created yet."""
    return NO_MATCH.format(
        product=intent.product_type,
        budget=intent.budget_amount and _price(intent.budget_amount) or "50",
        quantity=intent.quantity or "10kg",
    )


def bid_created(bid: BidRequest) -> str:
    return BID_CREATED.format(
        product=bid.product_name,
        quantity=bid.quantity,
        bid=f"₹{_price(bid.bid_price)}" if bid.bid_price else "Not specified",
        urgency=bid.urgency.replace("_", " ").capitalize(),
        bid_id=bid.id,
    )
