"""Domain modules and their public exports."""

from . import accounts, market, rates, trading, wallets

__all__ = [
    "accounts",
    "market",
    "rates",
    "trading",
    "wallets",
]
