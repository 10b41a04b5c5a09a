"""Shared test infrastructure for the VendorGPT test suite.

Provides:
- db_session: async SQLite in-memory session with all tables created
- store: DocumentStore over db_session
- fake_generator: scripted TextGenerator (no Gemini calls)
- make_user / make_product / make_bid: row factories (committed, so a
  rolled-back service transaction does not take them with it)
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Import Base first, then models to register all tables
from vendor_gpt.infra.database import Base

import vendor_gpt.domain.models  # noqa: F401

from vendor_gpt.agents.base import AgentResult
from vendor_gpt.domain.models import BidRequest, Product, User
from vendor_gpt.infra.document_store import DocumentStore


# ---------------------------------------------------------------------------
# Database session fixture
# ---------------------------------------------------------------------------

@pytest.fixture
async def db_session():
    """Async SQLite in-memory session with all tables created.

    Creates a fresh engine + tables for each test, yields a session,
    then rolls back and tears down.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def store(db_session):
    return DocumentStore(db_session)


# ---------------------------------------------------------------------------
# Text generator fake
# ---------------------------------------------------------------------------

class FakeGenerator:
    """Returns scripted AgentResults in order and records every prompt.

    Script entries may be a string (success), an AgentResult, or an
    exception instance (raised). When the script runs out the last entry
    is repeated.
    """

    def __init__(self, *script):
        self.script = list(script) or [AgentResult.failure("no script")]
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> AgentResult:
        self.prompts.append(prompt)
        entry = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(entry, BaseException):
            raise entry
        if isinstance(entry, AgentResult):
            return entry
        return AgentResult.success(data=entry)


@pytest.fixture
def fake_generator():
    """Factory: ``fake_generator('{"intent": "buy"}', "Hello!")``."""
    return FakeGenerator


# ---------------------------------------------------------------------------
# Row factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(db_session):
    """Factory that creates a User row.

    Usage:
        wholesaler = await make_user(name="Ravi Traders", role="wholesaler")
    """
    async def _factory(
        name: str = "Test Vendor",
        email: str = "vendor@test.com",
        role: str = "vendor",
        photo_url: str | None = None,
        user_id: str | None = None,
    ) -> User:
        user = User(
            id=user_id or str(uuid.uuid4()),
            name=name,
            email=email,
            role=role,
            photo_url=photo_url,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _factory


@pytest.fixture
def make_product(db_session):
    """Factory that creates a Product row.

    Usage:
        onions = await make_product(name="Red Onions", price=300, quantity=50)
    """
    async def _factory(
        name: str = "Red Onions",
        price: float = 30.0,
        quantity: int = 100,
        description: str = "",
        city: str = "Mumbai",
        address: str = "APMC Market, Vashi",
        min_order: int = 1,
        wholesaler_id: str = "wholesaler-1",
        wholesaler_name: str = "Stored Name",
        mobile_no: str = "9876543210",
    ) -> Product:
        product = Product(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            address=address,
            city=city,
            mobile_no=mobile_no,
            country_code="+91",
            price=price,
            min_order=min_order,
            quantity=quantity,
            wholesaler_id=wholesaler_id,
            wholesaler_name=wholesaler_name,
        )
        db_session.add(product)
        await db_session.commit()
        return product

    return _factory


@pytest.fixture
def make_bid(db_session):
    """Factory that creates a BidRequest row (pending by default)."""
    async def _factory(
        product_name: str = "potatoes",
        quantity: int = 20,
        bid_price: float = 15.0,
        vendor_id: str = "vendor-1",
        status: str = "pending",
        location: str = "Dadar, Mumbai",
        created_at: datetime | None = None,
    ) -> BidRequest:
        bid = BidRequest(
            id=str(uuid.uuid4()),
            vendor_id=vendor_id,
            vendor_name="Test Vendor",
            vendor_email="vendor@test.com",
            product_name=product_name,
            description=f"Looking for {product_name}",
            quantity=quantity,
            bid_price=bid_price,
            urgency="this_week",
            location=location,
            status=status,
            created_at=created_at or datetime.now(timezone.utc) - timedelta(minutes=1),
        )
        db_session.add(bid)
        await db_session.commit()
        return bid

    return _factory
