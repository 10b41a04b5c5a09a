"""Order API: listing and status updates."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from vendor_gpt.app.dependencies import get_orders
from vendor_gpt.domain.schemas import OrderResponse, OrderStatusUpdate
from vendor_gpt.services.order_lifecycle import OrderLifecycleManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    vendor_id: Optional[str] = Query(None, alias="vendorId"),
    wholesaler_id: Optional[str] = Query(None, alias="wholesalerId"),
    orders: OrderLifecycleManager = Depends(get_orders),
):
    return await orders.list(vendor_id=vendor_id, wholesaler_id=wholesaler_id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, orders: OrderLifecycleManager = Depends(get_orders)):
    return await orders.get(order_id)


@router.post("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: OrderStatusUpdate,
    orders: OrderLifecycleManager = Depends(get_orders),
):
    """Advance an order (confirmed -> shipped -> delivered, or cancelled)."""
    return await orders.advance_status(order_id, body.status)
