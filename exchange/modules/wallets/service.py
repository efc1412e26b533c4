"""Wallet domain service"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from exchange.infrastructure.database.repositories.currency_repository import SqlCurrencyRepository
from exchange.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from exchange.modules.rates.service import RateService

from .exceptions import UnsupportedCurrencyError, WalletAlreadyExistsError, WalletNotFoundError
from .models import STABLECOINS, Wallet
from .repository import WalletRepository

logger = logging.getLogger(__name__)

USD = "USD"


async def seed_default_wallets(wallets: WalletRepository, user_id: str, currencies: Iterable[str]) -> list[Wallet]:
    """Create zero-balance wallets inside the caller's unit of work."""
    return [await wallets.create_wallet(user_id, currency) for currency in currencies]


class WalletService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], rates: RateService) -> None:
        self._session_factory = session_factory
        self._rates = rates

    async def get_wallets(self, user_id: str) -> list[Wallet]:
        async with self._session_factory() as session:
            return await SqlWalletRepository(session).list_wallets(user_id)

    async def get_wallet(self, user_id: str, currency: str) -> Wallet:
        async with self._session_factory() as session:
            wallet = await SqlWalletRepository(session).get_wallet(user_id, currency)
        if wallet is None:
            raise WalletNotFoundError(f"Wallet for {currency} not found")
        return wallet

    async def create_wallet(self, user_id: str, currency: str) -> Wallet:
        """Create an empty wallet and its audit entry in one transaction."""
        try:
            created = await self._insert_wallet(user_id, currency)
        except IntegrityError as exc:
            # Lost a race with a concurrent create for the same pair.
            raise WalletAlreadyExistsError(f"Wallet for {currency} already exists") from exc

        logger.info("Created %s wallet %s for user %s", currency, created.id, user_id)
        return await self.get_wallet(user_id, currency)

    async def _insert_wallet(self, user_id: str, currency: str) -> Wallet:
        async with self._session_factory.begin() as session:
            if await SqlCurrencyRepository(session).get_active(currency) is None:
                raise UnsupportedCurrencyError(f"Invalid or unsupported currency: {currency}")

            wallets = SqlWalletRepository(session)
            if await wallets.get_wallet(user_id, currency) is not None:
                raise WalletAlreadyExistsError(f"Wallet for {currency} already exists")

            created = await wallets.create_wallet(user_id, currency)
            await wallets.add_audit_log(
                user_id=user_id,
                action="create",
                entity_type="wallet",
                entity_id=created.id,
                new_values={"currency": currency},
            )
        return created

    async def get_total_balance_usd(self, user_id: str) -> Decimal:
        """Sum every wallet converted to USD.

        Stablecoins count at face value. Any other non-zero balance needs a
        live USD rate; if one cannot be produced the whole total fails with
        ``RateUnavailableError`` rather than returning an understated figure.
        """
        total = Decimal("0")
        for wallet in await self.get_wallets(user_id):
            if wallet.balance == 0:
                continue
            if wallet.currency in STABLECOINS:
                total += wallet.balance
                continue
            rate = await self._rates.get_rate(wallet.currency, USD)
            total += wallet.balance * rate
        return total
