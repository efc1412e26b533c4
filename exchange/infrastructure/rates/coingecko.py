"""CoinGecko ``/simple/price`` client."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from exchange.modules.rates.exceptions import RateUnavailableError

logger = logging.getLogger(__name__)


class CoinGeckoRateSource:
    """Fetches spot quotes as ``{from_id: {to_id: rate}}``.

    The HTTP client is owned by the application container; this class never
    closes it.
    """

    def __init__(self, client: httpx.AsyncClient, api_url: str, api_key: str | None = None) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._api_key = api_key

    async def fetch_rate(self, from_id: str, to_id: str) -> Decimal | None:
        params: dict[str, Any] = {"ids": from_id, "vs_currencies": to_id}
        if self._api_key:
            params["x_cg_demo_api_key"] = self._api_key

        try:
            response = await self._client.get(f"{self._api_url}/simple/price", params=params)
            response.raise_for_status()
            # parse_float keeps quotes exact instead of round-tripping through float.
            payload = response.json(parse_float=Decimal)
        except httpx.HTTPError as exc:
            logger.error("Price source request failed for %s/%s: %s", from_id, to_id, exc)
            raise RateUnavailableError("Could not fetch current exchange rate") from exc
        except ValueError as exc:
            logger.error("Price source returned malformed JSON for %s/%s: %s", from_id, to_id, exc)
            raise RateUnavailableError("Could not fetch current exchange rate") from exc

        quotes = payload.get(from_id) if isinstance(payload, dict) else None
        if not isinstance(quotes, dict):
            return None
        value = quotes.get(to_id.lower())
        if value is None:
            return None
        try:
            return Decimal(str(value))
        except InvalidOperation:
            logger.warning("Price source returned non-numeric quote %r for %s/%s", value, from_id, to_id)
            return None
