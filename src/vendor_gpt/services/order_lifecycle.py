"""Order Lifecycle Manager: orders created from accepted bids.

Orders start as ``confirmed`` and move strictly forward
(confirmed -> shipped -> delivered) or divert once to ``cancelled``.
Transitions are validated here, not only by which buttons a UI shows.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from vendor_gpt.app.config import get_settings
from vendor_gpt.domain.enums import OrderStatus
from vendor_gpt.domain.errors import ConflictError, ValidationError
from vendor_gpt.domain.models import BidRequest, Order
from vendor_gpt.infra.document_store import DocumentStore
from vendor_gpt.services.state_machine import LifecycleStateMachine

logger = logging.getLogger(__name__)

S = OrderStatus

ORDER_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    S.PENDING: {S.CONFIRMED, S.CANCELLED},
    S.CONFIRMED: {S.SHIPPED, S.CANCELLED},
    S.SHIPPED: {S.DELIVERED, S.CANCELLED},
    S.DELIVERED: set(),
    S.CANCELLED: set(),
}

order_state_machine = LifecycleStateMachine("order", ORDER_TRANSITIONS)


class OrderLifecycleManager:
    """Creates, advances and lists orders.

    Write methods that stand alone (``advance_status``) run in their own
    transaction. ``create_from_bid`` only stages the insert; it is called
    from inside the bid acceptance transaction.
    """

    def __init__(self, store: DocumentStore, delivery_sla_hours: Optional[int] = None):
        self.store = store
        if delivery_sla_hours is None:
            delivery_sla_hours = get_settings().delivery_sla_hours
        self.delivery_sla = timedelta(hours=delivery_sla_hours)

    def build_from_bid(
        self,
        bid: BidRequest,
        wholesaler_id: str,
        wholesaler_name: str,
        now: Optional[datetime] = None,
    ) -> dict:
        """Return the fields of a new confirmed order for *bid*."""
        now = now or datetime.now(timezone.utc)
        return {
            "id": str(uuid.uuid4()),
            "bid_request_id": bid.id,
            "product_name": bid.product_name,
            "quantity": bid.quantity,
            "price_per_unit": bid.bid_price,
            "total_amount": bid.bid_price * bid.quantity,
            "vendor_id": bid.vendor_id,
            "vendor_name": bid.vendor_name,
            "wholesaler_id": wholesaler_id,
            "wholesaler_name": wholesaler_name,
            "status": OrderStatus.CONFIRMED.value,
            "created_at": now,
            "delivery_address": bid.location,
            "estimated_delivery": now + self.delivery_sla,
        }

    async def create_from_bid(
        self,
        bid: BidRequest,
        wholesaler_id: str,
        wholesaler_name: str,
        now: Optional[datetime] = None,
        order_id: Optional[str] = None,
    ) -> Order:
        """Stage a confirmed order for *bid* in the current transaction."""
        data = self.build_from_bid(bid, wholesaler_id, wholesaler_name, now)
        if order_id:
            data["id"] = order_id
        return await self.store.insert("orders", data)

    async def get(self, order_id: str) -> Order:
        return await self.store.get_or_raise("orders", order_id)

    async def advance_status(self, order_id: str, new_status) -> Order:
        """Move an order to *new_status*.

        Raises:
            ValidationError: *new_status* is not an order status.
            NotFoundError: No such order.
            InvalidTransitionError: *new_status* is not a legal successor.
            ConflictError: The order changed status while this call ran.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown order status: {new_status}", ["status"]) from None

        async with self.store.transaction():
            order = await self.store.get_or_raise("orders", order_id)
            current = order.status
            order_state_machine.validate_transition(current, target)

            changed = await self.store.update_where(
                "orders",
                order_id,
                values={"status": target.value, "updated_at": datetime.now(timezone.utc)},
                expect={"status": current},
            )
            if not changed:
                raise ConflictError(f"Order {order_id} changed status concurrently")

        logger.info("Order %s: %s → %s", order_id, current, target.value)
        return await self.get(order_id)

    async def list(
        self,
        vendor_id: Optional[str] = None,
        wholesaler_id: Optional[str] = None,
    ) -> list[Order]:
        """Orders for a vendor and/or wholesaler, newest first."""
        where = {}
        if vendor_id:
            where["vendor_id"] = vendor_id
        if wholesaler_id:
            where["wholesaler_id"] = wholesaler_id
        return await self.store.find("orders", where=where, order_by="-created_at")
