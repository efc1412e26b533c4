"""Account domain exports.

Services live in :mod:`.service` and are imported from there, which keeps the
SQL repositories free to import these models without a cycle.
"""

from .exceptions import (
    AccountError,
    InactiveUserError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from .models import UNSET, AuthResult, User, UserCreateInput, UserUpdateInput

__all__ = [
    "AccountError",
    "AuthResult",
    "InactiveUserError",
    "InvalidCredentialsError",
    "UNSET",
    "User",
    "UserAlreadyExistsError",
    "UserCreateInput",
    "UserNotFoundError",
    "UserUpdateInput",
]
