"""Extraction prompt for the Intent Extractor."""

INTENT_EXTRACTION_PROMPT = """Extract product requirements from this message: "{text}"

Respond in JSON format:
{
  "product_type": "extracted product name",
  "quantity": "extracted quantity with unit",
  "budget": "extracted budget if mentioned",
  "urgency": "immediate/today/tomorrow/this_week",
  "intent": "buy/inquiry/price_check/availability/bid/general"
}

If information is missing, set to null.
If user mentions wanting to bid or make a request when product not found, set intent to "bid".
"""
