"""Product catalog: wholesaler listings, vendor browsing and direct purchase.

Wholesaler name and photo are stored on each product when it is listed,
but those copies go stale when a profile changes. Everything shown to a
vendor resolves them from ``users`` at read time and only falls back to the
stored copy when the user row is gone.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from vendor_gpt.domain.errors import ConflictError, PermissionDeniedError, ValidationError
from vendor_gpt.domain.models import Product
from vendor_gpt.domain.schemas import ProductResponse, PurchaseReceipt
from vendor_gpt.infra.document_store import DocumentStore

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {
    "name", "description", "address", "city", "mobile_no", "country_code",
    "price", "min_order", "quantity", "image_url",
}


def validate_product(data: dict) -> None:
    """Check the product form rules.

    Raises:
        ValidationError: listing the offending fields.
    """
    errors = []
    if not (data.get("name") or "").strip():
        errors.append("name")
    if not (data.get("mobile_no") or "").strip():
        errors.append("mobileNo")
    price = data.get("price")
    if price is None or price <= 0:
        errors.append("price")
    min_order = data.get("min_order")
    if min_order is None or min_order < 1:
        errors.append("minOrder")
    quantity = data.get("quantity")
    if quantity is None or quantity < 0:
        errors.append("quantity")
    if errors:
        raise ValidationError(f"Invalid product fields: {', '.join(errors)}", errors)


def _matches_query(view: ProductResponse, query: str) -> bool:
    needle = query.lower()
    return (
        needle in view.name.lower()
        or needle in (view.description or "").lower()
        or needle in (view.wholesaler_name or "").lower()
    )


class ProductCatalog:
    """CRUD for a wholesaler's products plus vendor-side browse and purchase."""

    def __init__(self, store: DocumentStore):
        self.store = store

    # ------------------------------------------------------------------
    # Wholesaler side
    # ------------------------------------------------------------------

    async def create(self, data: dict) -> Product:
        """List a new product for ``data["wholesaler_id"]``."""
        if not data.get("wholesaler_id"):
            raise ValidationError("Missing fields: wholesalerId", ["wholesalerId"])
        validate_product(data)

        async with self.store.transaction():
            product = await self.store.insert(
                "products",
                {
                    **data,
                    "wholesaler_name": data.get("wholesaler_name") or "Wholesaler",
                    "wholesaler_photo": data.get("wholesaler_photo") or "",
                    "created_at": datetime.now(timezone.utc),
                },
            )
        logger.info("Product %s listed by %s: %s", product.id, product.wholesaler_id, product.name)
        return product

    async def update(self, product_id: str, wholesaler_id: str, changes: dict) -> Product:
        """Apply a partial edit. Only the owning wholesaler may edit."""
        changes = {k: v for k, v in changes.items() if k in _EDITABLE_FIELDS and v is not None}

        async with self.store.transaction():
            product = await self._owned(product_id, wholesaler_id)
            merged = {field: getattr(product, field) for field in _EDITABLE_FIELDS}
            merged.update(changes)
            validate_product(merged)
            product = await self.store.update("products", product_id, changes)

        logger.info("Product %s updated: %s", product_id, sorted(changes))
        return product

    async def delete(self, product_id: str, wholesaler_id: str) -> None:
        """Remove a product. Only the owning wholesaler may delete."""
        async with self.store.transaction():
            await self._owned(product_id, wholesaler_id)
            await self.store.delete("products", product_id)
        logger.info("Product %s deleted by %s", product_id, wholesaler_id)

    async def list_for_wholesaler(self, wholesaler_id: str) -> list[Product]:
        return await self.store.find("products", where={"wholesaler_id": wholesaler_id})

    async def _owned(self, product_id: str, wholesaler_id: str) -> Product:
        product = await self.store.get_or_raise("products", product_id)
        if product.wholesaler_id != wholesaler_id:
            raise PermissionDeniedError(f"Product {product_id} belongs to another wholesaler")
        return product

    # ------------------------------------------------------------------
    # Vendor side
    # ------------------------------------------------------------------

    async def get(self, product_id: str) -> Product:
        return await self.store.get_or_raise("products", product_id)

    async def resolve_wholesalers(self, products: list[Product]) -> list[ProductResponse]:
        """Attach live wholesaler name/photo to each product."""
        wholesaler_ids = sorted({p.wholesaler_id for p in products})
        users = {}
        if wholesaler_ids:
            users = {u.id: u for u in await self.store.find("users", where={"id": wholesaler_ids})}

        views = []
        for product in products:
            view = ProductResponse.model_validate(product)
            user = users.get(product.wholesaler_id)
            if user is not None:
                view.wholesaler_name = user.name
                view.wholesaler_photo = user.photo_url
            elif not view.wholesaler_name:
                view.wholesaler_name = "Unknown"
            views.append(view)
        return views

    async def browse(
        self,
        city: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        query: Optional[str] = None,
    ) -> list[ProductResponse]:
        """Vendor browse with the dashboard filters.

        Args:
            city: Substring of the product's city or address.
            min_price: Exclusive lower price bound.
            max_price: Inclusive upper price bound.
            query: Substring of name, description or wholesaler name.
        """
        price_range = {}
        if min_price is not None:
            price_range["gt"] = min_price
        if max_price is not None:
            price_range["lte"] = max_price
        ranges = {"price": price_range} if price_range else None

        products = await self.store.find("products", ranges=ranges)
        if city:
            needle = city.lower()
            products = [
                p for p in products
                if needle in (p.city or "").lower() or needle in (p.address or "").lower()
            ]

        views = await self.resolve_wholesalers(products)
        if query:
            views = [v for v in views if _matches_query(v, query)]
        return views

    async def purchase(self, product_id: str, vendor_id: str, quantity: int) -> PurchaseReceipt:
        """Buy listed stock directly, decrementing inventory.

        Raises:
            ValidationError: quantity below the product's minimum order.
            ConflictError: not enough stock left at commit time.
        """
        async with self.store.transaction():
            product = await self.store.get_or_raise("products", product_id)
            if quantity is None or quantity < max(product.min_order, 1):
                raise ValidationError(
                    f"Minimum order for {product.name} is {product.min_order}", ["quantity"],
                )

            changed = await self.store.update_where(
                "products",
                product_id,
                increments={"quantity": -quantity},
                ranges={"quantity": {"gte": quantity}},
            )
            if not changed:
                raise ConflictError(f"Not enough stock of {product.name}")

            receipt = PurchaseReceipt(
                id=str(uuid.uuid4()),
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                amount=product.price * quantity,
                status="success",
                created_at=datetime.now(timezone.utc),
                wholesaler_id=product.wholesaler_id,
                vendor_id=vendor_id,
            )

        logger.info(
            "Vendor %s bought %d x %s (%s)", vendor_id, quantity, receipt.product_name, product_id,
        )
        return receipt
