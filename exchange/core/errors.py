"""Closed error taxonomy shared by every module.

Each domain error carries an :class:`ErrorKind`. Callers and the HTTP layer
branch on ``error.kind``; message text is for humans only.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    WALLET_NOT_FOUND = "wallet_not_found"
    WALLET_ALREADY_EXISTS = "wallet_already_exists"
    UNSUPPORTED_CURRENCY = "unsupported_currency"
    RATE_UNAVAILABLE = "rate_unavailable"
    RATE_NOT_FOUND = "rate_not_found"
    TRADE_FAILED = "trade_failed"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    USER_ALREADY_EXISTS = "user_already_exists"
    USER_NOT_FOUND = "user_not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    INACTIVE_USER = "inactive_user"


# Internal faults; everything else is a user-facing outcome.
INTERNAL_KINDS = frozenset({ErrorKind.TRADE_FAILED})


class ExchangeError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.kind.value.replace("_", " "))

    @property
    def message(self) -> str:
        return str(self.args[0])

    @property
    def is_internal(self) -> bool:
        return self.kind in INTERNAL_KINDS


__all__ = ["ErrorKind", "ExchangeError", "INTERNAL_KINDS"]
