"""Wallet domain specific exceptions."""

from exchange.core.errors import ErrorKind, ExchangeError


class WalletError(ExchangeError):
    """Base class for wallet domain errors."""


class WalletNotFoundError(WalletError):
    """Raised when the user holds no wallet in the requested currency."""

    kind = ErrorKind.WALLET_NOT_FOUND


class WalletAlreadyExistsError(WalletError):
    """Raised when creating a second wallet for the same (user, currency)."""

    kind = ErrorKind.WALLET_ALREADY_EXISTS


class UnsupportedCurrencyError(WalletError):
    """Raised when a currency is missing from the active catalog."""

    kind = ErrorKind.UNSUPPORTED_CURRENCY
