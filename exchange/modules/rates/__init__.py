"""Exchange rate domain exports."""

from .exceptions import RateError, RateNotFoundError, RateUnavailableError
from .mapping import CURRENCY_EXTERNAL_IDS, cache_key, currency_external_id
from .models import ExchangeRate

__all__ = [
    "CURRENCY_EXTERNAL_IDS",
    "ExchangeRate",
    "RateError",
    "RateNotFoundError",
    "RateUnavailableError",
    "cache_key",
    "currency_external_id",
]
