"""Trading domain specific exceptions."""

from exchange.core.errors import ErrorKind, ExchangeError


class TradingError(ExchangeError):
    """Base class for trading domain errors."""


class InvalidAmountError(TradingError):
    kind = ErrorKind.INVALID_AMOUNT


class InsufficientFundsError(TradingError):
    """Raised when the source wallet is missing or cannot cover the amount."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class TradeFailedError(TradingError):
    """Any other failure during a trade. The original error is chained as ``__cause__``."""

    kind = ErrorKind.TRADE_FAILED


class TransactionNotFoundError(TradingError):
    kind = ErrorKind.TRANSACTION_NOT_FOUND
