"""Rate domain specific exceptions."""

from exchange.core.errors import ErrorKind, ExchangeError


class RateError(ExchangeError):
    """Base class for rate lookup errors."""


class RateUnavailableError(RateError):
    """No cached, fresh persisted or externally fetched rate could be produced."""

    kind = ErrorKind.RATE_UNAVAILABLE


class RateNotFoundError(RateError):
    """No persisted rate exists for the pair."""

    kind = ErrorKind.RATE_NOT_FOUND
