"""Typed dataclasses for agent I/O contracts."""

import re
from dataclasses import asdict, dataclass
from typing import Optional

from vendor_gpt.domain.enums import Intent, Urgency

_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_INTEGER = re.compile(r"\d+")

_NULL_STRINGS = {"", "null", "none", "n/a"}


def first_number(text: Optional[str]) -> Optional[float]:
    """Return the first number in *text* ("₹300 per kg" -> 300.0), or None."""
    if not text:
        return None
    match = _NUMBER.search(str(text))
    return float(match.group()) if match else None


def first_integer(text: Optional[str]) -> Optional[int]:
    """Return the first run of digits in *text* ("10kg" -> 10), or None."""
    if not text:
        return None
    match = _INTEGER.search(str(text))
    return int(match.group()) if match else None


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if value.lower() in _NULL_STRINGS:
        return None
    return value


@dataclass
class PurchaseIntent:
    """Output of the Intent Extractor. Unstated fields are None."""

    intent: str = Intent.GENERAL.value
    product_type: Optional[str] = None
    quantity: Optional[str] = None  # free text with unit, e.g. "10kg"
    budget: Optional[str] = None  # free text, e.g. "₹300"
    urgency: Optional[str] = None

    @classmethod
    def general(cls) -> "PurchaseIntent":
        """Safe default: fall back to open conversation."""
        return cls()

    @classmethod
    def from_payload(cls, payload: dict) -> "PurchaseIntent":
        """Build from the model's JSON, dropping values outside the vocabulary."""
        intent = (_clean(payload.get("intent")) or "").lower()
        if intent not in {i.value for i in Intent}:
            intent = Intent.GENERAL.value

        urgency = (_clean(payload.get("urgency")) or "").lower().replace(" ", "_")
        if urgency not in {u.value for u in Urgency}:
            urgency = None

        return cls(
            intent=intent,
            product_type=_clean(payload.get("product_type")),
            quantity=_clean(payload.get("quantity")),
            budget=_clean(payload.get("budget")),
            urgency=urgency,
        )

    @property
    def quantity_units(self) -> Optional[int]:
        return first_integer(self.quantity)

    @property
    def budget_amount(self) -> Optional[float]:
        return first_number(self.budget)

    def to_dict(self) -> dict:
        return asdict(self)
