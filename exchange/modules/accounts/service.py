"""Domain services for user accounts and login sessions."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from exchange.core.config import Settings
from exchange.core.crypto import hash_password, verify_password
from exchange.core.security import TokenError, create_access_token, decode_access_token
from exchange.core.timeutils import utcnow
from exchange.infrastructure.database.repositories.account_repository import SqlUserRepository
from exchange.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from exchange.modules.wallets.repository import WalletRepository
from exchange.modules.wallets.service import seed_default_wallets

from .exceptions import (
    InactiveUserError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from .models import UNSET, AuthResult, User, UserCreateInput, UserUpdateInput
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Encapsulates registration, login and profile use cases."""

    def __init__(self, repository: UserRepository, wallets: WalletRepository, settings: Settings) -> None:
        self._repository = repository
        self._wallets = wallets
        self._settings = settings

    @classmethod
    def with_session(cls, session: AsyncSession, settings: Settings) -> "AccountService":
        return cls(SqlUserRepository(session), SqlWalletRepository(session), settings)

    async def get_by_id(self, user_id: str) -> User | None:
        return await self._repository.get_by_id(user_id)

    async def get_by_email(self, email: str) -> User | None:
        return await self._repository.get_by_email(email.lower())

    async def get_profile(self, user_id: str) -> User:
        user = await self._repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    async def register(
        self,
        payload: UserCreateInput,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuthResult:
        email = payload.email.lower()
        if await self._repository.get_by_email(email) is not None:
            raise UserAlreadyExistsError("User with this email already exists")

        user = await self._repository.create_user(
            email=email,
            password_hash=hash_password(payload.password, self._settings.security.bcrypt_rounds),
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
        await seed_default_wallets(self._wallets, user.id, self._settings.trading.default_wallets)
        logger.info("Registered user %s with wallets %s", user.id, self._settings.trading.default_wallets)
        return await self._open_session(user, ip_address, user_agent)

    async def login(
        self,
        email: str,
        password: str,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuthResult:
        user = await self._repository.get_by_email(email.lower())
        if user is None:
            raise InvalidCredentialsError("Invalid email or password")
        if not user.is_active:
            raise InactiveUserError("Your account has been deactivated")
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid email or password")
        return await self._open_session(user, ip_address, user_agent)

    async def logout(self, token: str) -> None:
        await self._repository.expire_session(token, utcnow())

    async def authenticate(self, token: str) -> tuple[User, str]:
        """Resolve a bearer token to its user and live session id."""
        try:
            user_id = decode_access_token(token, self._settings)
        except TokenError as exc:
            raise InvalidCredentialsError(str(exc)) from exc
        user = await self._repository.get_by_id(user_id)
        if user is None:
            raise InvalidCredentialsError("User no longer exists")
        if not user.is_active:
            raise InactiveUserError("User account is disabled")
        session_id = await self._repository.find_active_session(user.id, token, utcnow())
        if session_id is None:
            raise InvalidCredentialsError("Session expired, please log in again")
        return user, session_id

    async def update_profile(self, user_id: str, payload: UserUpdateInput) -> User:
        current = await self.get_profile(user_id)

        email = None
        if payload.email is not UNSET and payload.email is not None:
            email = payload.email.lower()
            if email != current.email:
                existing = await self._repository.get_by_email(email)
                if existing is not None and existing.id != user_id:
                    raise UserAlreadyExistsError("Email is already in use")

        first_name = payload.first_name if payload.first_name is not UNSET else None
        last_name = payload.last_name if payload.last_name is not UNSET else None

        return await self._repository.update_user(
            user_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
        )

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        user = await self.get_profile(user_id)
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")
        password_hash = hash_password(new_password, self._settings.security.bcrypt_rounds)
        await self._repository.update_user(user_id, password_hash=password_hash)

    async def delete_account(self, user_id: str) -> None:
        if not await self._repository.delete_user(user_id):
            raise UserNotFoundError("User not found")
        logger.info("Deleted user %s", user_id)

    async def _open_session(self, user: User, ip_address: str | None, user_agent: str | None) -> AuthResult:
        lifetime = timedelta(minutes=self._settings.access_token_expire_minutes)
        token = create_access_token(user.id, self._settings, expires_delta=lifetime)
        session_id = await self._repository.create_session(
            user_id=user.id,
            token=token,
            ip_address=ip_address,
            user_agent=(user_agent or "")[:255] or None,
            expires_at=utcnow() + lifetime,
        )
        return AuthResult(user=user, token=token, session_id=session_id)
