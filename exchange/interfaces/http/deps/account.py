"""Account related dependency providers."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from exchange.core.container import ApplicationContainer
from exchange.modules.accounts import InvalidCredentialsError, User
from exchange.modules.accounts.service import AccountService

from .database import get_container, get_db_session

bearer_scheme = HTTPBearer(auto_error=False)


def get_account_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_container),
) -> AccountService:
    return AccountService.with_session(db, container.settings)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials is not None else None


def require_bearer_token(token: Optional[str] = Depends(get_bearer_token)) -> str:
    if not token:
        raise InvalidCredentialsError("Access token required")
    return token


async def get_current_user(
    token: str = Depends(require_bearer_token),
    service: AccountService = Depends(get_account_service),
) -> User:
    user, _ = await service.authenticate(token)
    return user


__all__ = [
    "bearer_scheme",
    "get_account_service",
    "get_bearer_token",
    "get_current_user",
    "require_bearer_token",
]
