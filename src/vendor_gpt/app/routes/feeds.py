"""Dashboard feeds, re-fetched by clients on a fixed interval."""

from fastapi import APIRouter, Depends

from vendor_gpt.app.dependencies import get_feeds
from vendor_gpt.domain.schemas import VendorFeed, WholesalerFeed
from vendor_gpt.services.feed_service import FeedService

router = APIRouter(prefix="/api/feeds", tags=["feeds"])


@router.get("/wholesaler/{wholesaler_id}", response_model=WholesalerFeed)
async def wholesaler_feed(wholesaler_id: str, feeds: FeedService = Depends(get_feeds)):
    return await feeds.wholesaler_feed(wholesaler_id)


@router.get("/vendor/{vendor_id}", response_model=VendorFeed)
async def vendor_feed(vendor_id: str, feeds: FeedService = Depends(get_feeds)):
    return await feeds.vendor_feed(vendor_id)
