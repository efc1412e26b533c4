"""Trading domain exports"""

from .exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    TradeFailedError,
    TradingError,
    TransactionNotFoundError,
)
from .models import TradeResult, TransactionRecord

__all__ = [
    "InsufficientFundsError",
    "InvalidAmountError",
    "TradeFailedError",
    "TradeResult",
    "TradingError",
    "TransactionNotFoundError",
    "TransactionRecord",
]
