"""Wallet domain exports"""

from .exceptions import (
    UnsupportedCurrencyError,
    WalletAlreadyExistsError,
    WalletError,
    WalletNotFoundError,
)
from .models import STABLECOINS, Wallet

__all__ = [
    "STABLECOINS",
    "UnsupportedCurrencyError",
    "Wallet",
    "WalletAlreadyExistsError",
    "WalletError",
    "WalletNotFoundError",
]
