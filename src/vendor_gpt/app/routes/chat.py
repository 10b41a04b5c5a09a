"""Chat API: one VendorGPT turn per request."""

import logging

from fastapi import APIRouter, Depends

from vendor_gpt.app.dependencies import get_orchestrator
from vendor_gpt.domain.schemas import ChatMessage, ChatRequest
from vendor_gpt.services.conversation_orchestrator import ConversationOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/messages", response_model=ChatMessage)
async def post_message(
    body: ChatRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """Answer a chat message. Always 200; failures come back as an apology."""
    return await orchestrator.process_message(
        body.message,
        location=body.location,
        user_id=body.user_id,
        user_name=body.user_name,
        user_email=body.user_email,
    )
