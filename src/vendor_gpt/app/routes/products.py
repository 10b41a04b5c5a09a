"""Product catalog API.

Wholesalers manage their own listings; vendors browse and buy directly.
The acting wholesaler is identified by ``wholesalerId`` in the body (edit)
or query string (delete).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from vendor_gpt.app.dependencies import get_catalog
from vendor_gpt.domain.schemas import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    PurchaseReceipt,
    PurchaseRequest,
)
from vendor_gpt.services.product_catalog import ProductCatalog

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=list[ProductResponse])
async def browse_products(
    city: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    q: Optional[str] = None,
    wholesaler_id: Optional[str] = Query(None, alias="wholesalerId"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Vendor browse, or a wholesaler's own listings when ``wholesalerId`` is given."""
    if wholesaler_id:
        products = await catalog.list_for_wholesaler(wholesaler_id)
        return await catalog.resolve_wholesalers(products)
    return await catalog.browse(city=city, min_price=min_price, max_price=max_price, query=q)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    product = await catalog.get(product_id)
    views = await catalog.resolve_wholesalers([product])
    return views[0]


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(body: ProductCreate, catalog: ProductCatalog = Depends(get_catalog)):
    return await catalog.create(body.model_dump())


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: ProductUpdate,
    catalog: ProductCatalog = Depends(get_catalog),
):
    changes = body.model_dump(exclude={"wholesaler_id"}, exclude_none=True)
    return await catalog.update(product_id, body.wholesaler_id, changes)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: str,
    wholesaler_id: str = Query(..., alias="wholesalerId"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    await catalog.delete(product_id, wholesaler_id)


@router.post("/{product_id}/purchase", response_model=PurchaseReceipt)
async def purchase_product(
    product_id: str,
    body: PurchaseRequest,
    catalog: ProductCatalog = Depends(get_catalog),
):
    return await catalog.purchase(product_id, body.vendor_id, body.quantity)
