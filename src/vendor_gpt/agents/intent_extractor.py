"""Structured purchase-intent extraction from free-text chat."""

import json
import logging

from vendor_gpt.agents.base import TextGenerator
from vendor_gpt.agents.contracts import PurchaseIntent
from vendor_gpt.agents.prompts.intent import INTENT_EXTRACTION_PROMPT
from vendor_gpt.domain.errors import ParseError

logger = logging.getLogger(__name__)


def extract_json_object(text: str) -> dict:
    """Parse the first balanced ``{...}`` object found in *text*.

    Models wrap JSON in prose or markdown fences, so the object is located
    by brace matching (string literals and escapes respected) rather than
    by parsing the whole response.

    Raises:
        ParseError: No balanced object, or the object is not valid JSON.
    """
    if not isinstance(text, str):
        raise ParseError("response is not text")

    start = text.find("{")
    if start == -1:
        raise ParseError("no JSON object in response")

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                candidate = text[start:index + 1]
                try:
                    return json.loads(candidate)
                except json.JSONDecodeError as exc:
                    raise ParseError(f"invalid JSON object: {exc}") from exc

    raise ParseError("unbalanced JSON object in response")


class IntentExtractor:
    """Turns a chat message into a ``PurchaseIntent``.

    Never raises: a failed or timed-out generation, a response without a
    JSON object, or JSON that does not parse all yield
    ``PurchaseIntent.general()`` so the chat turn falls back to open
    conversation.
    """

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def extract(self, text: str) -> PurchaseIntent:
        """Classify *text* and pull out product, quantity, budget and urgency."""
        if not text or not text.strip():
            return PurchaseIntent.general()

        prompt = INTENT_EXTRACTION_PROMPT.replace("{text}", text)
        try:
            result = await self.generator.generate(prompt)
        except Exception as exc:
            logger.warning("Intent extraction generation raised: %s", exc)
            return PurchaseIntent.general()

        if not result.ok:
            logger.warning("Intent extraction failed: %s", result.error)
            return PurchaseIntent.general()

        try:
            payload = extract_json_object(result.data)
        except ParseError as exc:
            logger.warning("Intent extraction parse failed: %s, raw text: %.200s", exc, result.data)
            return PurchaseIntent.general()

        if not isinstance(payload, dict):
            return PurchaseIntent.general()

        intent = PurchaseIntent.from_payload(payload)
        logger.info(
            "Extracted intent=%s product=%s quantity=%s budget=%s",
            intent.intent,
            intent.product_type,
            intent.quantity,
            intent.budget,
        )
        return intent
