"""Repository protocol for accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import User


class UserRepository(Protocol):
    """Abstract repository interface for user and session persistence."""

    async def get_by_id(self, user_id: str) -> User | None:
        ...

    async def get_by_email(self, email: str) -> User | None:
        ...

    async def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> User:
        ...

    async def update_user(
        self,
        user_id: str,
        *,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        password_hash: str | None = None,
    ) -> User:
        ...

    async def delete_user(self, user_id: str) -> bool:
        ...

    async def create_session(
        self,
        *,
        user_id: str,
        token: str,
        ip_address: str | None,
        user_agent: str | None,
        expires_at: datetime,
    ) -> str:
        ...

    async def find_active_session(self, user_id: str, token: str, now: datetime) -> str | None:
        ...

    async def expire_session(self, token: str, now: datetime) -> None:
        ...
