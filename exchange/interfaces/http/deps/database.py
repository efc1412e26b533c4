"""Container and database session providers."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from exchange.core.container import ApplicationContainer
from exchange.infrastructure.database.session import session_scope


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped unit of work: commit on success, roll back on error."""
    async for session in session_scope(get_container(request).session_factory):
        yield session


__all__ = ["get_container", "get_db_session"]
