"""Conversation Orchestrator: one chat turn from text to bot reply.

Branch order per message:

1. ``buy`` with a product -> Product Matcher -> listing, or an offer to bid.
2. ``bid`` intent, or the text contains the word "bid" -> create the bid
   when identity and product are known, otherwise ask for details.
3. anything else -> open conversation.

The "bid" keyword check is a plain substring match on the raw text, so
"forbidden" also routes to bid handling.

Whatever goes wrong, the caller gets a ``ChatMessage`` back.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from vendor_gpt.agents import chat_templates
from vendor_gpt.agents.contracts import PurchaseIntent
from vendor_gpt.agents.conversation_agent import ConversationAgent
from vendor_gpt.agents.intent_extractor import IntentExtractor
from vendor_gpt.domain.enums import Intent, Urgency
from vendor_gpt.domain.errors import ValidationError
from vendor_gpt.domain.schemas import ChatMessage, ProductResponse
from vendor_gpt.services.bid_lifecycle import BidLifecycleManager
from vendor_gpt.services.product_catalog import ProductCatalog
from vendor_gpt.services.product_matcher import ProductMatcher

logger = logging.getLogger(__name__)

BID_KEYWORD = "bid"

DEFAULT_BID_QUANTITY = 10
DEFAULT_BID_PRICE = 0.0
DEFAULT_LOCATION = "Not specified"


def mentions_bid(text: str) -> bool:
    """Keyword fallback for bid intent (case-insensitive substring)."""
    return BID_KEYWORD in (text or "").lower()


class ConversationOrchestrator:
    """Sequences extractor, matcher and bid manager for each inbound message."""

    def __init__(
        self,
        extractor: IntentExtractor,
        matcher: ProductMatcher,
        bids: BidLifecycleManager,
        catalog: ProductCatalog,
        conversation: ConversationAgent,
    ):
        self.extractor = extractor
        self.matcher = matcher
        self.bids = bids
        self.catalog = catalog
        self.conversation = conversation

    async def process_message(
        self,
        text: str,
        location: Optional[str] = None,
        user_id: Optional[str] = None,
        user_name: Optional[str] = None,
        user_email: Optional[str] = None,
    ) -> ChatMessage:
        """Answer one chat message. Never raises."""
        try:
            intent = await self.extractor.extract(text)

            if intent.intent == Intent.BUY.value and intent.product_type:
                return await self._handle_buy(intent, location)

            if intent.intent == Intent.BID.value or mentions_bid(text):
                return await self._handle_bid(intent, location, user_id, user_name, user_email)

            reply = await self.conversation.reply(text)
            return self._bot_message(reply)

        except Exception:
            logger.exception("Chat turn failed for user %s", user_id)
            return self._bot_message(chat_templates.GENERIC_ERROR)

    async def _handle_buy(self, intent: PurchaseIntent, location: Optional[str]) -> ChatMessage:
        matches = await self.matcher.find_matches(intent.product_type, intent.budget, location)
        if not matches:
            return self._bot_message(chat_templates.no_match(intent))

        products = await self.catalog.resolve_wholesalers(matches)
        return self._bot_message(chat_templates.product_listing(intent, products), products)

    async def _handle_bid(
        self,
        intent: PurchaseIntent,
        location: Optional[str],
        user_id: Optional[str],
        user_name: Optional[str],
        user_email: Optional[str],
    ) -> ChatMessage:
        if not (user_id and user_name and user_email and intent.product_type):
            return self._bot_message(chat_templates.BID_CLARIFICATION)

        try:
            bid = await self.bids.create(
                vendor_id=user_id,
                vendor_name=user_name,
                vendor_email=user_email,
                product_name=intent.product_type,
                description=f"Looking for {intent.product_type}",
                quantity=intent.quantity_units or DEFAULT_BID_QUANTITY,
                bid_price=intent.budget_amount or DEFAULT_BID_PRICE,
                urgency=intent.urgency or Urgency.THIS_WEEK.value,
                location=location or DEFAULT_LOCATION,
            )
        except ValidationError as exc:
            logger.info("Bid from chat needs clarification: %s", exc)
            return self._bot_message(chat_templates.BID_CLARIFICATION)

        return self._bot_message(chat_templates.bid_created(bid))

    @staticmethod
    def _bot_message(text: str, products: Optional[list[ProductResponse]] = None) -> ChatMessage:
        return ChatMessage(
            id=f"bot_{uuid.uuid4()}",
            message=text,
            is_bot=True,
            timestamp=datetime.now(timezone.utc),
            products=products or None,
        )
