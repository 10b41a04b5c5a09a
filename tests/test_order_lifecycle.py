"""Tests for OrderLifecycleManager and the order transition map."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from vendor_gpt.domain.enums import OrderStatus
from vendor_gpt.domain.errors import InvalidTransitionError, NotFoundError, ValidationError
from vendor_gpt.services.order_lifecycle import (
    ORDER_TRANSITIONS,
    OrderLifecycleManager,
    order_state_machine,
)

S = OrderStatus


@pytest.fixture
def orders(store):
    return OrderLifecycleManager(store, delivery_sla_hours=4)


@pytest.fixture
def make_order(orders, make_bid, store):
    async def _factory(status: str = "confirmed", vendor_id: str = "vendor-1", wholesaler_id: str = "wholesaler-1"):
        bid = await make_bid(vendor_id=vendor_id)
        async with store.transaction():
            order = await orders.create_from_bid(bid, wholesaler_id, "Ravi Traders")
            if status != "confirmed":
                order.status = status
        return order

    return _factory


def _bid(**kwargs):
    defaults = {
        "id": "bid-1",
        "product_name": "potatoes",
        "quantity": 20,
        "bid_price": 15.0,
        "vendor_id": "vendor-1",
        "vendor_name": "Asha",
        "location": "Dadar, Mumbai",
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestBuildFromBid:
    def test_fields_copied_and_total_computed(self, orders):
        now = datetime(2025, 7, 1, 10, 0, tzinfo=timezone.utc)
        data = orders.build_from_bid(_bid(), "wholesaler-1", "Ravi Traders", now=now)

        assert data["total_amount"] == 300
        assert data["price_per_unit"] == 15.0
        assert data["status"] == "confirmed"
        assert data["bid_request_id"] == "bid-1"
        assert data["delivery_address"] == "Dadar, Mumbai"
        assert data["created_at"] == now
        assert data["estimated_delivery"] == now + timedelta(hours=4)

    def test_total_is_not_rounded(self, orders):
        data = orders.build_from_bid(_bid(quantity=3, bid_price=0.1), "w", "W")
        assert data["total_amount"] == 0.1 * 3

    def test_sla_is_configurable(self, store):
        now = datetime(2025, 7, 1, 10, 0, tzinfo=timezone.utc)
        data = OrderLifecycleManager(store, delivery_sla_hours=24).build_from_bid(_bid(), "w", "W", now=now)
        assert data["estimated_delivery"] == now + timedelta(hours=24)


class TestAdvanceStatus:
    @pytest.mark.parametrize(
        "path",
        [
            ["shipped", "delivered"],
            ["cancelled"],
            ["shipped", "cancelled"],
        ],
    )
    async def test_legal_paths(self, orders, make_order, path):
        order = await make_order()
        for status in path:
            order = await orders.advance_status(order.id, status)
            assert order.status == status
            assert order.updated_at is not None

    @pytest.mark.parametrize(
        "start,target",
        [
            ("delivered", "shipped"),
            ("delivered", "cancelled"),
            ("cancelled", "confirmed"),
            ("confirmed", "delivered"),
            ("shipped", "confirmed"),
        ],
    )
    async def test_illegal_transitions_rejected(self, orders, make_order, start, target):
        order = await make_order(status=start)
        order_id = order.id

        with pytest.raises(InvalidTransitionError) as exc_info:
            await orders.advance_status(order_id, target)

        assert exc_info.value.current_status == start
        assert exc_info.value.target_status == target
        assert (await orders.get(order_id)).status == start

    async def test_unknown_status(self, orders, make_order):
        order = await make_order()
        with pytest.raises(ValidationError):
            await orders.advance_status(order.id, "lost_in_transit")

    async def test_missing_order(self, orders):
        with pytest.raises(NotFoundError):
            await orders.advance_status("nope", "shipped")


class TestList:
    async def test_filters_by_party(self, orders, make_order):
        mine = await make_order(vendor_id="vendor-1", wholesaler_id="wholesaler-1")
        await make_order(vendor_id="vendor-2", wholesaler_id="wholesaler-2")

        assert [o.id for o in await orders.list(vendor_id="vendor-1")] == [mine.id]
        assert [o.id for o in await orders.list(wholesaler_id="wholesaler-1")] == [mine.id]
        assert len(await orders.list()) == 2


class TestOrderTransitionMap:
    def test_terminal_states(self):
        assert order_state_machine.terminal_states == {"delivered", "cancelled"}

    def test_every_non_terminal_state_can_cancel(self):
        for status, targets in ORDER_TRANSITIONS.items():
            if targets:
                assert S.CANCELLED in targets

    def test_allowed_from_confirmed(self):
        assert order_state_machine.get_allowed_transitions("confirmed") == ["cancelled", "shipped"]
