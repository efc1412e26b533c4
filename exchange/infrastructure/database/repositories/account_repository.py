"""SQLAlchemy implementation of the user repository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from exchange.infrastructure.database.models import User as UserModel, UserSession as UserSessionModel
from exchange.modules.accounts.exceptions import UserNotFoundError
from exchange.modules.accounts.models import User
from exchange.modules.accounts.repository import UserRepository


class SqlUserRepository(UserRepository):
    """User repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str) -> User | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> User:
        model = UserModel(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role="user",
            is_active=True,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_user(
        self,
        user_id: str,
        *,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        password_hash: str | None = None,
    ) -> User:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            raise UserNotFoundError("User not found")

        if email is not None:
            model.email = email
        if first_name is not None:
            model.first_name = first_name
        if last_name is not None:
            model.last_name = last_name
        if password_hash is not None:
            model.password_hash = password_hash

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def delete_user(self, user_id: str) -> bool:
        stmt = delete(UserModel).where(UserModel.id == user_id).returning(UserModel.id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create_session(
        self,
        *,
        user_id: str,
        token: str,
        ip_address: str | None,
        user_agent: str | None,
        expires_at: datetime,
    ) -> str:
        model = UserSessionModel(
            user_id=user_id,
            token=token,
            ip_address=ip_address,
            user_agent=user_agent,
            expires_at=expires_at,
        )
        self._session.add(model)
        await self._session.flush()
        return model.id

    async def find_active_session(self, user_id: str, token: str, now: datetime) -> str | None:
        stmt = select(UserSessionModel.id).where(
            UserSessionModel.user_id == user_id,
            UserSessionModel.token == token,
            UserSessionModel.expires_at > now,
        )
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def expire_session(self, token: str, now: datetime) -> None:
        stmt = update(UserSessionModel).where(UserSessionModel.token == token).values(expires_at=now)
        await self._session.execute(stmt)

    @staticmethod
    def _to_domain(model: UserModel | None) -> User | None:
        if model is None:
            return None
        return User(
            id=str(model.id),
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            role=model.role or "user",
            is_active=bool(model.is_active),
            password_hash=model.password_hash,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
