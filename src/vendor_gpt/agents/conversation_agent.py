"""Open-conversation replies for messages that are neither searches nor bids."""

import logging

from vendor_gpt.agents.base import TextGenerator
from vendor_gpt.agents.prompts.conversation import CONVERSATION_PROMPT
from vendor_gpt.domain.errors import ExternalCapabilityError

logger = logging.getLogger(__name__)


class ConversationAgent:
    """Second, separately prompted generation call whose text is the reply."""

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def reply(self, text: str) -> str:
        """Return the model's reply verbatim.

        Raises:
            ExternalCapabilityError: The generation failed or returned nothing.
        """
        prompt = CONVERSATION_PROMPT.replace("{text}", text)
        result = await self.generator.generate(prompt)
        if not result.ok:
            raise ExternalCapabilityError(result.error or "generation failed")
        if not result.data:
            raise ExternalCapabilityError("empty generation")
        return result.data
