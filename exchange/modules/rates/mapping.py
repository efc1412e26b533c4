"""Currency code to external price-source identifier mapping."""

from __future__ import annotations

from types import MappingProxyType

CURRENCY_EXTERNAL_IDS = MappingProxyType(
    {
        "BTC": "bitcoin",
        "ETH": "ethereum",
        "USDT": "tether",
        "USDC": "usd-coin",
        "BNB": "binancecoin",
        "XRP": "ripple",
        "ADA": "cardano",
        "SOL": "solana",
        "DOGE": "dogecoin",
        "DOT": "polkadot",
        "USD": "usd",
        "EUR": "eur",
    }
)


def currency_external_id(code: str) -> str:
    """Map a currency code to the price source identifier.

    Unmapped codes fall back to the lower-cased code.
    """
    return CURRENCY_EXTERNAL_IDS.get(code.upper(), code.lower())


def cache_key(from_currency: str, to_currency: str) -> str:
    return f"rate:{from_currency}:{to_currency}"


__all__ = ["CURRENCY_EXTERNAL_IDS", "cache_key", "currency_external_id"]
