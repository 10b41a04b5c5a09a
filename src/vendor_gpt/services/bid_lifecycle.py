"""Bid Lifecycle Manager: vendor bid requests and wholesaler responses.

A bid starts ``pending`` and leaves that state exactly once:

- ``rejected`` by a wholesaler,
- ``order_placed`` by a wholesaler accepting it (an order is created in
  the same transaction),
- ``accepted`` via the older accept-without-order path.

Wholesalers discover pending bids by polling (see ``feed_service``), so two
of them can act on the same bid. Every write is a compare-and-set on
``status = 'pending'``; the loser gets ``ConflictError``.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from vendor_gpt.domain.enums import BidStatus, Urgency
from vendor_gpt.domain.errors import ConflictError, ValidationError
from vendor_gpt.domain.models import BidRequest, Order
from vendor_gpt.infra.document_store import DocumentStore
from vendor_gpt.services.order_lifecycle import OrderLifecycleManager
from vendor_gpt.services.state_machine import LifecycleStateMachine

logger = logging.getLogger(__name__)

S = BidStatus

BID_TRANSITIONS: dict[BidStatus, set[BidStatus]] = {
    S.PENDING: {S.ACCEPTED, S.REJECTED, S.ORDER_PLACED},
    S.ACCEPTED: set(),
    S.REJECTED: set(),
    S.COMPLETED: set(),
    S.ORDER_PLACED: set(),
}

bid_state_machine = LifecycleStateMachine("bid", BID_TRANSITIONS)

BID_UNAVAILABLE = "bid no longer available"


class BidLifecycleManager:
    """Creates, transitions and queries bid requests."""

    def __init__(
        self,
        store: DocumentStore,
        orders: Optional[OrderLifecycleManager] = None,
    ):
        self.store = store
        self.orders = orders or OrderLifecycleManager(store)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create(
        self,
        vendor_id: str,
        vendor_name: str,
        vendor_email: str,
        product_name: str,
        description: str,
        quantity: int,
        bid_price: float,
        urgency: str = Urgency.THIS_WEEK.value,
        location: str = "Not specified",
    ) -> BidRequest:
        """Persist a new pending bid request.

        Nobody is notified; wholesalers see it on their next poll.

        Raises:
            ValidationError: Missing identity or product, quantity < 1,
                negative price, or unknown urgency.
        """
        missing = [
            name for name, value in (
                ("vendorId", vendor_id),
                ("vendorName", vendor_name),
                ("vendorEmail", vendor_email),
                ("productName", product_name),
            )
            if not value or not str(value).strip()
        ]
        if missing:
            raise ValidationError(f"Missing fields: {', '.join(missing)}", missing)
        if quantity is None or quantity < 1:
            raise ValidationError("quantity must be at least 1", ["quantity"])
        if bid_price is None or bid_price < 0:
            raise ValidationError("bidPrice must not be negative", ["bidPrice"])
        try:
            urgency = Urgency(urgency).value
        except ValueError:
            raise ValidationError(f"Unknown urgency: {urgency}", ["urgency"]) from None

        async with self.store.transaction():
            bid = await self.store.insert(
                "bidRequests",
                {
                    "vendor_id": vendor_id,
                    "vendor_name": vendor_name,
                    "vendor_email": vendor_email,
                    "product_name": product_name.strip(),
                    "description": description,
                    "quantity": int(quantity),
                    "bid_price": float(bid_price),
                    "urgency": urgency,
                    "location": location or "Not specified",
                    "status": BidStatus.PENDING.value,
                    "created_at": datetime.now(timezone.utc),
                },
            )

        logger.info(
            "Bid %s created by vendor %s: %s x%d @ %.2f",
            bid.id, vendor_id, bid.product_name, bid.quantity, bid.bid_price,
        )
        return bid

    # ------------------------------------------------------------------
    # Wholesaler actions
    # ------------------------------------------------------------------

    async def reject(self, bid_id: str) -> BidRequest:
        """Reject a pending bid.

        Rejecting a bid that is no longer pending changes nothing and
        returns it as stored.
        """
        async with self.store.transaction():
            bid = await self.store.get_or_raise("bidRequests", bid_id)
            if not bid_state_machine.can_transition(bid.status, BidStatus.REJECTED):
                logger.info("Reject ignored for bid %s in status %s", bid_id, bid.status)
                return bid

            changed = await self.store.update_where(
                "bidRequests",
                bid_id,
                values={
                    "status": BidStatus.REJECTED.value,
                    "rejected_at": datetime.now(timezone.utc),
                },
                expect={"status": BidStatus.PENDING.value},
            )

        if changed:
            logger.info("Bid %s: pending → rejected", bid_id)
        return await self.store.get_or_raise("bidRequests", bid_id)

    async def accept(
        self,
        bid_id: str,
        wholesaler_id: str,
        wholesaler_name: str,
        wholesaler_contact: str = "",
    ) -> BidRequest:
        """Accept a pending bid without creating an order (older flow).

        Raises:
            ConflictError: The bid is no longer pending.
        """
        now = datetime.now(timezone.utc)
        async with self.store.transaction():
            await self._require_pending(bid_id, BidStatus.ACCEPTED)
            changed = await self.store.update_where(
                "bidRequests",
                bid_id,
                values={
                    "status": BidStatus.ACCEPTED.value,
                    "accepted_by": wholesaler_id,
                    "accepted_at": now,
                    "wholesaler_name": wholesaler_name,
                    "wholesaler_contact": wholesaler_contact,
                },
                expect={"status": BidStatus.PENDING.value},
            )
            if not changed:
                raise ConflictError(BID_UNAVAILABLE)

        logger.info("Bid %s: pending → accepted by %s", bid_id, wholesaler_id)
        return await self.store.get_or_raise("bidRequests", bid_id)

    async def accept_and_create_order(
        self,
        bid_id: str,
        wholesaler_id: str,
        wholesaler_name: str,
        wholesaler_contact: str = "",
    ) -> tuple[BidRequest, Order]:
        """Accept a pending bid and create its order, atomically.

        Both writes share one transaction: the bid moves to
        ``order_placed`` referencing the new order, and the order
        references the bid. If the bid stopped being pending before
        commit, nothing is written.

        Raises:
            NotFoundError: No such bid.
            ConflictError: The bid is no longer pending.
        """
        now = datetime.now(timezone.utc)
        order_id = str(uuid.uuid4())

        async with self.store.transaction():
            bid = await self._require_pending(bid_id, BidStatus.ORDER_PLACED)

            changed = await self.store.update_where(
                "bidRequests",
                bid_id,
                values={
                    "status": BidStatus.ORDER_PLACED.value,
                    "accepted_by": wholesaler_id,
                    "accepted_at": now,
                    "wholesaler_name": wholesaler_name,
                    "wholesaler_contact": wholesaler_contact,
                    "order_id": order_id,
                    "order_placed_at": now,
                },
                expect={"status": BidStatus.PENDING.value},
            )
            if not changed:
                raise ConflictError(BID_UNAVAILABLE)

            order = await self.orders.create_from_bid(
                bid, wholesaler_id, wholesaler_name, now=now, order_id=order_id,
            )

        logger.info(
            "Bid %s: pending → order_placed by %s (order %s, total %.2f)",
            bid_id, wholesaler_id, order.id, order.total_amount,
        )
        bid = await self.store.get_or_raise("bidRequests", bid_id)
        return bid, order

    async def _require_pending(self, bid_id: str, target: BidStatus) -> BidRequest:
        bid = await self.store.get_or_raise("bidRequests", bid_id)
        if not bid_state_machine.can_transition(bid.status, target):
            raise ConflictError(BID_UNAVAILABLE)
        return bid

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get(self, bid_id: str) -> BidRequest:
        return await self.store.get_or_raise("bidRequests", bid_id)

    async def list(
        self,
        vendor_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[BidRequest]:
        """Bids filtered by vendor and/or status, newest first."""
        where = {}
        if vendor_id:
            where["vendor_id"] = vendor_id
        if status:
            try:
                where["status"] = BidStatus(status).value
            except ValueError:
                raise ValidationError(f"Unknown bid status: {status}", ["status"]) from None
        return await self.store.find("bidRequests", where=where, order_by="-created_at")
