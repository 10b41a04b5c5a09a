"""Bid request API: vendor asks, wholesaler responses."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from vendor_gpt.app.dependencies import get_bids
from vendor_gpt.domain.schemas import (
    AcceptBidResponse,
    BidAcceptRequest,
    BidCreate,
    BidResponse,
    OrderResponse,
)
from vendor_gpt.services.bid_lifecycle import BidLifecycleManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/bids", tags=["bids"])


@router.post("", response_model=BidResponse, status_code=201)
async def create_bid(body: BidCreate, bids: BidLifecycleManager = Depends(get_bids)):
    return await bids.create(**body.model_dump())


@router.get("", response_model=list[BidResponse])
async def list_bids(
    vendor_id: Optional[str] = Query(None, alias="vendorId"),
    status: Optional[str] = None,
    bids: BidLifecycleManager = Depends(get_bids),
):
    """A vendor's bids, or every bid in one status (``status=pending`` for wholesalers)."""
    return await bids.list(vendor_id=vendor_id, status=status)


@router.get("/{bid_id}", response_model=BidResponse)
async def get_bid(bid_id: str, bids: BidLifecycleManager = Depends(get_bids)):
    return await bids.get(bid_id)


@router.post("/{bid_id}/reject", response_model=BidResponse)
async def reject_bid(bid_id: str, bids: BidLifecycleManager = Depends(get_bids)):
    return await bids.reject(bid_id)


@router.post("/{bid_id}/accept", response_model=AcceptBidResponse)
async def accept_bid(
    bid_id: str,
    body: BidAcceptRequest,
    bids: BidLifecycleManager = Depends(get_bids),
):
    """Accept a pending bid and place its order. 409 if someone got there first."""
    bid, order = await bids.accept_and_create_order(
        bid_id,
        wholesaler_id=body.wholesaler_id,
        wholesaler_name=body.wholesaler_name,
        wholesaler_contact=body.wholesaler_contact,
    )
    return AcceptBidResponse(
        bid=BidResponse.model_validate(bid),
        order=OrderResponse.model_validate(order),
    )
