"""FastAPI dependencies: per-request services over one database session.

The text generator is built once per process and shared; everything else
is cheap and created per request around the request's session.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_gpt.agents.base import BaseAgent, TextGenerator
from vendor_gpt.agents.conversation_agent import ConversationAgent
from vendor_gpt.agents.intent_extractor import IntentExtractor
from vendor_gpt.app.config import get_settings
from vendor_gpt.infra.database import get_db
from vendor_gpt.infra.document_store import DocumentStore
from vendor_gpt.services.bid_lifecycle import BidLifecycleManager
from vendor_gpt.services.conversation_orchestrator import ConversationOrchestrator
from vendor_gpt.services.feed_service import FeedService
from vendor_gpt.services.order_lifecycle import OrderLifecycleManager
from vendor_gpt.services.pincode_service import PincodeLookup
from vendor_gpt.services.product_catalog import ProductCatalog
from vendor_gpt.services.product_matcher import ProductMatcher
from vendor_gpt.services.user_directory import UserDirectory


@lru_cache
def get_generator() -> TextGenerator:
    return BaseAgent(agent_name="vendor_gpt")


@lru_cache
def get_pincode_lookup() -> PincodeLookup:
    return PincodeLookup(get_settings().pincode_api_url)


def get_store(db: AsyncSession = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def get_orders(store: DocumentStore = Depends(get_store)) -> OrderLifecycleManager:
    return OrderLifecycleManager(store)


def get_bids(
    store: DocumentStore = Depends(get_store),
    orders: OrderLifecycleManager = Depends(get_orders),
) -> BidLifecycleManager:
    return BidLifecycleManager(store, orders)


def get_catalog(store: DocumentStore = Depends(get_store)) -> ProductCatalog:
    return ProductCatalog(store)


def get_users(store: DocumentStore = Depends(get_store)) -> UserDirectory:
    return UserDirectory(store)


def get_feeds(
    bids: BidLifecycleManager = Depends(get_bids),
    orders: OrderLifecycleManager = Depends(get_orders),
) -> FeedService:
    return FeedService(bids, orders)


def get_orchestrator(
    store: DocumentStore = Depends(get_store),
    bids: BidLifecycleManager = Depends(get_bids),
    catalog: ProductCatalog = Depends(get_catalog),
    generator: TextGenerator = Depends(get_generator),
) -> ConversationOrchestrator:
    return ConversationOrchestrator(
        extractor=IntentExtractor(generator),
        matcher=ProductMatcher(store),
        bids=bids,
        catalog=catalog,
        conversation=ConversationAgent(generator),
    )
