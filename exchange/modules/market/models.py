"""Currency catalog models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Currency:
    symbol: str
    name: str
    decimal_places: int = 8
    is_active: bool = True


DEFAULT_CURRENCIES: tuple[Currency, ...] = (
    Currency("BTC", "Bitcoin"),
    Currency("ETH", "Ethereum"),
    Currency("USDT", "Tether", 6),
    Currency("USDC", "USD Coin", 6),
    Currency("BNB", "Binance Coin"),
    Currency("XRP", "Ripple", 6),
    Currency("ADA", "Cardano", 6),
    Currency("SOL", "Solana"),
    Currency("DOGE", "Dogecoin"),
    Currency("DOT", "Polkadot"),
    Currency("USD", "US Dollar", 2),
)
