"""Product Matcher: catalog candidates for an extracted purchase intent.

A product matches when its name or description contains the requested
product type (case-insensitive), it has stock, and its price is within
``budget * budget_tolerance``. The tolerance (1.2 by default) keeps results
coming when prices sit just above what the vendor said.

Results are ordered by ascending price; equal prices keep store order.

The location hint is accepted but only used when a ``location_filter`` is
injected. No location filtering happens by default.
"""

import logging
from typing import Callable, Optional

from vendor_gpt.agents.contracts import first_number
from vendor_gpt.app.config import get_settings
from vendor_gpt.domain.models import Product
from vendor_gpt.infra.document_store import DocumentStore

logger = logging.getLogger(__name__)

LocationFilter = Callable[[Product, str], bool]


def matches_product_type(product: Product, product_type: str) -> bool:
    """Case-insensitive substring match on name or description."""
    needle = product_type.strip().lower()
    if not needle:
        return False
    name = (product.name or "").lower()
    description = (product.description or "").lower()
    return needle in name or needle in description


def budget_ceiling(budget, tolerance: float) -> Optional[float]:
    """Highest acceptable price for *budget*, or None when there is no budget.

    *budget* may be a number or free text ("₹300", "300 rupees"); text with
    no number in it does not constrain the price.
    """
    if budget is None:
        return None
    amount = budget if isinstance(budget, (int, float)) else first_number(budget)
    if amount is None:
        return None
    return round(float(amount) * tolerance, 6)


def city_or_address_contains(product: Product, location_hint: str) -> bool:
    """Location filter that keeps products whose city or address mentions the hint."""
    hint = location_hint.strip().lower()
    if not hint:
        return True
    return hint in (product.city or "").lower() or hint in (product.address or "").lower()


class ProductMatcher:
    """Finds up to ``limit`` in-stock, affordable products for a product type."""

    def __init__(
        self,
        store: DocumentStore,
        limit: Optional[int] = None,
        budget_tolerance: Optional[float] = None,
        location_filter: Optional[LocationFilter] = None,
    ):
        settings = get_settings()
        self.store = store
        self.limit = limit or settings.match_limit
        self.budget_tolerance = budget_tolerance or settings.budget_tolerance
        self.location_filter = location_filter

    async def find_matches(
        self,
        product_type: str,
        budget=None,
        location_hint: Optional[str] = None,
    ) -> list[Product]:
        """Return matching products; an empty list means "offer a bid".

        Args:
            product_type: What the vendor asked for ("onions").
            budget: Per-unit budget as a number or free text, or None.
            location_hint: Free-text location, only used by an injected
                location filter.
        """
        if not product_type or not product_type.strip():
            return []

        ranges = {"quantity": {"gt": 0}}
        ceiling = budget_ceiling(budget, self.budget_tolerance)
        if ceiling is not None:
            ranges["price"] = {"lte": ceiling}

        # No text index: stock and price are filtered by the store,
        # the substring match happens here.
        candidates = await self.store.find("products", ranges=ranges)
        matches = [p for p in candidates if matches_product_type(p, product_type)]

        if self.location_filter and location_hint:
            matches = [p for p in matches if self.location_filter(p, location_hint)]

        matches.sort(key=lambda p: p.price)
        logger.info(
            "Matched %d/%d products for %r (ceiling=%s)",
            len(matches),
            len(candidates),
            product_type,
            ceiling,
        )
        return matches[: self.limit]
