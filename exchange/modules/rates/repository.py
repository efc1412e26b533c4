"""Ports used by the rate service: the cache and the price source."""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol


class RateCache(Protocol):
    """Best-effort key/value cache. Implementations never raise on backend failure."""

    async def get(self, key: str) -> str | None:
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...


class RateSource(Protocol):
    async def fetch_rate(self, from_id: str, to_id: str) -> Decimal | None:
        """Return the quote, or ``None`` when the source has no such pair."""
        ...
