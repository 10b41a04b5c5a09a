"""HTTP-level tests for the FastAPI routes.

Runs the real app over the in-memory session via dependency overrides; the
text generator and pincode lookup are replaced with fakes.
"""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from vendor_gpt.app.dependencies import get_generator, get_pincode_lookup
from vendor_gpt.app.main import app
from vendor_gpt.infra.database import get_db
from vendor_gpt.services.pincode_service import PincodeResult


class StubPincodeLookup:
    async def lookup(self, pincode):
        if pincode == "400703":
            return PincodeResult("400703", "Thane", "Maharashtra", "Vashi, Thane, Maharashtra")
        return None


@pytest.fixture
def generator(fake_generator):
    return fake_generator(json.dumps({"intent": "general"}), "Hello from VendorGPT")


@pytest.fixture
async def client(db_session, generator):
    async def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_generator] = lambda: generator
    app.dependency_overrides[get_pincode_lookup] = lambda: StubPincodeLookup()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


BID_BODY = {
    "vendorId": "vendor-1",
    "vendorName": "Asha",
    "vendorEmail": "asha@example.com",
    "productName": "potatoes",
    "description": "Looking for potatoes",
    "quantity": 20,
    "bidPrice": 15,
}

PRODUCT_BODY = {
    "wholesalerId": "wholesaler-1",
    "name": "Red Onions",
    "address": "APMC Market, Vashi",
    "city": "Navi Mumbai",
    "mobileNo": "9876543210",
    "price": 28,
    "minOrder": 5,
    "quantity": 200,
}


class TestHealthAndChat:
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "service": "vendor-gpt"}

    async def test_chat_general_reply(self, client):
        resp = await client.post("/api/chat/messages", json={"message": "hello"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Hello from VendorGPT"
        assert body["isBot"] is True
        assert body["products"] is None


class TestBidsAndOrders:
    async def test_accept_flow(self, client):
        created = await client.post("/api/bids", json=BID_BODY)
        assert created.status_code == 201
        bid_id = created.json()["id"]

        pending = await client.get("/api/bids", params={"status": "pending"})
        assert [b["id"] for b in pending.json()] == [bid_id]

        accepted = await client.post(
            f"/api/bids/{bid_id}/accept",
            json={"wholesalerId": "wholesaler-1", "wholesalerName": "Ravi Traders"},
        )
        assert accepted.status_code == 200
        body = accepted.json()
        assert body["bid"]["status"] == "order_placed"
        assert body["order"]["totalAmount"] == 300
        assert body["bid"]["orderId"] == body["order"]["id"]

        again = await client.post(
            f"/api/bids/{bid_id}/accept", json={"wholesalerId": "wholesaler-2"},
        )
        assert again.status_code == 409
        assert again.json()["detail"] == "bid no longer available"

        order_id = body["order"]["id"]
        shipped = await client.post(f"/api/orders/{order_id}/status", json={"status": "shipped"})
        assert shipped.status_code == 200
        assert shipped.json()["status"] == "shipped"

        backwards = await client.post(f"/api/orders/{order_id}/status", json={"status": "confirmed"})
        assert backwards.status_code == 400

        orders = await client.get("/api/orders", params={"vendorId": "vendor-1"})
        assert [o["id"] for o in orders.json()] == [order_id]

    async def test_invalid_bid(self, client):
        resp = await client.post("/api/bids", json={**BID_BODY, "quantity": 0})
        assert resp.status_code == 422
        assert resp.json()["fields"] == ["quantity"]

    async def test_reject(self, client):
        bid_id = (await client.post("/api/bids", json=BID_BODY)).json()["id"]
        resp = await client.post(f"/api/bids/{bid_id}/reject")
        assert resp.json()["status"] == "rejected"

    async def test_missing_order(self, client):
        resp = await client.get("/api/orders/nope")
        assert resp.status_code == 404


class TestProducts:
    async def test_crud_and_ownership(self, client):
        created = await client.post("/api/products", json=PRODUCT_BODY)
        assert created.status_code == 201
        product_id = created.json()["id"]

        forbidden = await client.put(
            f"/api/products/{product_id}", json={"wholesalerId": "wholesaler-2", "price": 1},
        )
        assert forbidden.status_code == 403

        updated = await client.put(
            f"/api/products/{product_id}", json={"wholesalerId": "wholesaler-1", "price": 25},
        )
        assert updated.json()["price"] == 25

        browse = await client.get("/api/products", params={"city": "vashi", "maxPrice": 30})
        assert [p["id"] for p in browse.json()] == [product_id]

        deleted = await client.delete(f"/api/products/{product_id}", params={"wholesalerId": "wholesaler-1"})
        assert deleted.status_code == 204
        assert (await client.get(f"/api/products/{product_id}")).status_code == 404

    async def test_purchase(self, client):
        product_id = (await client.post("/api/products", json=PRODUCT_BODY)).json()["id"]

        receipt = await client.post(
            f"/api/products/{product_id}/purchase", json={"vendorId": "vendor-1", "quantity": 10},
        )
        assert receipt.status_code == 200
        assert receipt.json()["amount"] == 280

        too_few = await client.post(
            f"/api/products/{product_id}/purchase", json={"vendorId": "vendor-1", "quantity": 1},
        )
        assert too_few.status_code == 422

        too_many = await client.post(
            f"/api/products/{product_id}/purchase", json={"vendorId": "vendor-1", "quantity": 500},
        )
        assert too_many.status_code == 409


class TestUsersAndFeeds:
    async def test_profile_and_location(self, client):
        resp = await client.put(
            "/api/users/u-1",
            json={"name": "Ravi Traders", "email": "ravi@example.com", "role": "wholesaler", "photoURL": "p.png"},
        )
        assert resp.status_code == 200
        assert resp.json()["photoURL"] == "p.png"

        loc = await client.put("/api/users/u-1/location", json={"city": "Thane", "pincode": "400703"})
        assert loc.json()["location"]["city"] == "Thane"

        assert (await client.get("/api/users/ghost")).status_code == 404

    async def test_pincode(self, client):
        ok = await client.get("/api/users/pincode/400703")
        assert ok.json() == {"pincode": "400703", "city": "Thane", "state": "Maharashtra"}
        assert (await client.get("/api/users/pincode/000000")).status_code == 404

    async def test_feeds(self, client):
        bid_id = (await client.post("/api/bids", json=BID_BODY)).json()["id"]

        wholesaler = await client.get("/api/feeds/wholesaler/wholesaler-1")
        assert [b["id"] for b in wholesaler.json()["pendingBids"]] == [bid_id]

        vendor = await client.get("/api/feeds/vendor/vendor-1")
        assert [b["id"] for b in vendor.json()["bids"]] == [bid_id]
        assert "fetchedAt" in vendor.json()
