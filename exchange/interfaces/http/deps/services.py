"""Providers for the container-owned domain services."""

from fastapi import Depends

from exchange.core.container import ApplicationContainer
from exchange.modules.market.service import MarketService
from exchange.modules.rates.service import RateService
from exchange.modules.trading.service import TradingService
from exchange.modules.wallets.service import WalletService

from .database import get_container


def get_rate_service(container: ApplicationContainer = Depends(get_container)) -> RateService:
    return container.rates


def get_wallet_service(container: ApplicationContainer = Depends(get_container)) -> WalletService:
    return container.wallets


def get_trading_service(container: ApplicationContainer = Depends(get_container)) -> TradingService:
    return container.trading


def get_market_service(container: ApplicationContainer = Depends(get_container)) -> MarketService:
    return container.market


__all__ = [
    "get_market_service",
    "get_rate_service",
    "get_trading_service",
    "get_wallet_service",
]
