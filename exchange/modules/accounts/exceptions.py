"""Account domain specific exceptions."""

from exchange.core.errors import ErrorKind, ExchangeError


class AccountError(ExchangeError):
    """Base class for account domain errors."""


class UserAlreadyExistsError(AccountError):
    """Raised when an email address is already registered."""

    kind = ErrorKind.USER_ALREADY_EXISTS


class UserNotFoundError(AccountError):
    """Raised when the requested user cannot be found."""

    kind = ErrorKind.USER_NOT_FOUND


class InvalidCredentialsError(AccountError):
    """Raised for a wrong email/password pair or an unusable token."""

    kind = ErrorKind.INVALID_CREDENTIALS


class InactiveUserError(AccountError):
    """Raised when a deactivated user tries to sign in."""

    kind = ErrorKind.INACTIVE_USER
