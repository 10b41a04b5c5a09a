"""Polling feeds for the vendor and wholesaler dashboards.

There is no push channel. Dashboards re-fetch a snapshot on a fixed
interval, so a newly created bid shows up for wholesalers within one poll.
``FeedPoller`` is the in-process version of that loop.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from vendor_gpt.app.config import get_settings
from vendor_gpt.domain.enums import BidStatus
from vendor_gpt.domain.schemas import BidResponse, OrderResponse, VendorFeed, WholesalerFeed
from vendor_gpt.services.bid_lifecycle import BidLifecycleManager
from vendor_gpt.services.order_lifecycle import OrderLifecycleManager

logger = logging.getLogger(__name__)


class FeedService:
    """Builds dashboard snapshots from bids and orders."""

    def __init__(self, bids: BidLifecycleManager, orders: OrderLifecycleManager):
        self.bids = bids
        self.orders = orders

    async def wholesaler_feed(self, wholesaler_id: str) -> WholesalerFeed:
        """All pending bids (any wholesaler may take them) plus this wholesaler's orders."""
        pending = await self.bids.list(status=BidStatus.PENDING.value)
        orders = await self.orders.list(wholesaler_id=wholesaler_id)
        return WholesalerFeed(
            pending_bids=[BidResponse.model_validate(b) for b in pending],
            orders=[OrderResponse.model_validate(o) for o in orders],
            fetched_at=datetime.now(timezone.utc),
        )

    async def vendor_feed(self, vendor_id: str) -> VendorFeed:
        """The vendor's own bids in every status plus their orders."""
        bids = await self.bids.list(vendor_id=vendor_id)
        orders = await self.orders.list(vendor_id=vendor_id)
        return VendorFeed(
            bids=[BidResponse.model_validate(b) for b in bids],
            orders=[OrderResponse.model_validate(o) for o in orders],
            fetched_at=datetime.now(timezone.utc),
        )


class FeedPoller:
    """Run *fetch* every *interval* seconds and hand each result to *deliver*.

    A failed fetch or delivery is logged and the loop carries on with the
    next tick. ``stop()`` ends the loop after the current tick.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable],
        deliver: Callable[[object], Awaitable],
        interval: Optional[float] = None,
    ):
        self.fetch = fetch
        self.deliver = deliver
        self.interval = interval if interval is not None else get_settings().poll_interval_seconds
        self._stopped = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> bool:
        """One fetch-and-deliver round. Returns False if it failed."""
        try:
            snapshot = await self.fetch()
            await self.deliver(snapshot)
            return True
        except Exception as e:
            logger.error("Feed poll error: %s", e)
            return False

    async def run(self) -> None:
        while not self._stopped.is_set():
            await self.tick()
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

    def start(self) -> asyncio.Task:
        self._stopped.clear()
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        self._stopped.set()
        if self._task is not None:
            await self._task
            self._task = None
