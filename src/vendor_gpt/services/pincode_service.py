"""Pincode lookup against the India Post pincode API.

Used only to prefill the location form: a 6-digit pincode resolves to the
district (shown as city), the state and a one-line address. Results are
cached in memory (LRU) and fetched with async httpx.
"""

from __future__ import annotations

import logging
import re
from collections import OrderedDict
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

PINCODE_PATTERN = re.compile(r"^\d{6}$")

_MAX_CACHE_SIZE = 2_000


@dataclass(frozen=True)
class PincodeResult:
    pincode: str
    city: str
    state: str
    address: str


class PincodeLookup:
    """Async pincode resolver with an in-memory LRU cache."""

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._cache: OrderedDict[str, PincodeResult | None] = OrderedDict()

    def _cache_get(self, key: str) -> tuple[bool, PincodeResult | None]:
        """Return (hit, value). Moves item to end on hit (LRU)."""
        if key in self._cache:
            self._cache.move_to_end(key)
            return True, self._cache[key]
        return False, None

    def _cache_put(self, key: str, value: PincodeResult | None) -> None:
        self._cache[key] = value
        self._cache.move_to_end(key)
        if len(self._cache) > _MAX_CACHE_SIZE:
            self._cache.popitem(last=False)

    async def lookup(self, pincode: str) -> PincodeResult | None:
        """Resolve *pincode*; None for malformed codes, unknown codes or API failure."""
        pincode = (pincode or "").strip()
        if not PINCODE_PATTERN.match(pincode):
            return None

        hit, cached = self._cache_get(pincode)
        if hit:
            return cached

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.get(f"{self._base_url}/{pincode}")
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Pincode API HTTP error: %s", exc)
            return None
        except httpx.RequestError as exc:
            logger.warning("Pincode API request failed: %s", exc)
            return None

        result = self._parse_response(pincode, data)
        self._cache_put(pincode, result)
        return result

    def _parse_response(self, pincode: str, data) -> PincodeResult | None:
        """Pick the first post office from the India Post JSON."""
        if not isinstance(data, list) or not data:
            return None
        top = data[0] or {}
        if top.get("Status") != "Success":
            return None
        offices = top.get("PostOffice") or []
        if not offices:
            return None

        office = offices[0]
        district = office.get("District", "")
        state = office.get("State", "")
        name = office.get("Name", "")
        return PincodeResult(
            pincode=pincode,
            city=district,
            state=state,
            address=", ".join(part for part in (name, district, state) if part),
        )
