"""Reusable FastAPI dependencies."""

from .account import get_account_service, get_bearer_token, get_current_user, require_bearer_token
from .database import get_container, get_db_session
from .services import get_market_service, get_rate_service, get_trading_service, get_wallet_service

__all__ = [
    "get_account_service",
    "get_bearer_token",
    "get_container",
    "get_current_user",
    "get_db_session",
    "get_market_service",
    "get_rate_service",
    "get_trading_service",
    "get_wallet_service",
    "require_bearer_token",
]
