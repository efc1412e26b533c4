"""Trade execution and transaction history."""

from __future__ import annotations

import logging
from decimal import ROUND_DOWN, Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from exchange.core.timeutils import utcnow
from exchange.infrastructure.database.repositories.transaction_repository import SqlTransactionRepository
from exchange.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from exchange.infrastructure.database.types import AMOUNT_QUANTUM, MONEY_CONTEXT
from exchange.modules.rates.service import RateService

from .exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    TradeFailedError,
    TransactionNotFoundError,
)
from .models import TradeResult, TransactionRecord

logger = logging.getLogger(__name__)

DEFAULT_FEE_RATE = Decimal("0.001")


class TradingService:
    """Converts a balance from one currency to another for a single user.

    A trade is one database transaction: lock the source wallet, price it,
    debit, credit (creating the destination wallet when needed) and record
    the ledger row. Any failure rolls all of it back.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        rates: RateService,
        *,
        fee_rate: Decimal = DEFAULT_FEE_RATE,
        lock_timeout_seconds: float | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._rates = rates
        self._fee_rate = fee_rate
        self._lock_timeout_seconds = lock_timeout_seconds

    async def execute_trade(
        self,
        user_id: str,
        from_currency: str,
        to_currency: str,
        from_amount: Decimal,
    ) -> TradeResult:
        if from_amount <= 0:
            raise InvalidAmountError("Amount must be greater than zero")

        try:
            result = await self._execute(user_id, from_currency, to_currency, from_amount)
        except (InvalidAmountError, InsufficientFundsError):
            raise
        except Exception as exc:
            logger.exception(
                "Trade %s -> %s for user %s failed",
                from_currency,
                to_currency,
                user_id,
            )
            raise TradeFailedError("Failed to execute trade") from exc

        logger.info(
            "Trade %s: %s %s -> %s %s (fee %s, rate %s) for user %s",
            result.transaction_id,
            result.from_amount,
            from_currency,
            result.to_amount,
            to_currency,
            result.fee,
            result.exchange_rate,
            user_id,
        )
        return result

    async def _execute(
        self,
        user_id: str,
        from_currency: str,
        to_currency: str,
        from_amount: Decimal,
    ) -> TradeResult:
        async with self._session_factory.begin() as session:
            await self._apply_lock_timeout(session)
            wallets = SqlWalletRepository(session)

            source = await wallets.lock_wallet(user_id, from_currency)
            if source is None or source.balance < from_amount:
                raise InsufficientFundsError(f"Insufficient {from_currency} balance")

            # A cache miss checks out a second pooled connection while this one
            # holds the source row lock, so a trade can need two connections at
            # once. Keep pool_size + max_overflow above twice the expected
            # number of concurrent trades.
            rate = await self._rates.get_rate(from_currency, to_currency)
            fee = self._fee(from_amount)
            net = MONEY_CONTEXT.subtract(from_amount, fee)
            # The product of two exact decimals can run past the stored scale;
            # only this amount is rounded, and always down.
            to_amount = MONEY_CONTEXT.multiply(net, rate).quantize(
                AMOUNT_QUANTUM, rounding=ROUND_DOWN, context=MONEY_CONTEXT
            )

            if await wallets.debit(user_id, from_currency, from_amount) is None:
                # SQLite has no row lock; another trade drained it since the read.
                raise InsufficientFundsError(f"Insufficient {from_currency} balance")
            await wallets.credit(user_id, to_currency, to_amount)

            timestamp = utcnow()
            transaction_id = await SqlTransactionRepository(session).add_transaction(
                user_id=user_id,
                from_currency=from_currency,
                to_currency=to_currency,
                from_amount=from_amount,
                to_amount=to_amount,
                fee=fee,
                exchange_rate=rate,
                created_at=timestamp,
            )

        return TradeResult(
            transaction_id=transaction_id,
            from_currency=from_currency,
            to_currency=to_currency,
            from_amount=from_amount,
            to_amount=to_amount,
            fee=fee,
            exchange_rate=rate,
            timestamp=timestamp,
        )

    def _fee(self, from_amount: Decimal) -> Decimal:
        fee = MONEY_CONTEXT.multiply(from_amount, self._fee_rate)
        return fee.quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN, context=MONEY_CONTEXT)

    async def _apply_lock_timeout(self, session: AsyncSession) -> None:
        if not self._lock_timeout_seconds:
            return
        if session.get_bind().dialect.name != "postgresql":
            return
        millis = int(self._lock_timeout_seconds * 1000)
        await session.execute(text(f"SET LOCAL lock_timeout = {millis}"))

    async def list_transactions(self, user_id: str, limit: int = 20, page: int = 1) -> list[TransactionRecord]:
        """Newest first."""
        limit = max(1, limit)
        offset = (max(1, page) - 1) * limit
        async with self._session_factory() as session:
            return await SqlTransactionRepository(session).list_for_user(user_id, limit=limit, offset=offset)

    async def get_transaction(self, user_id: str, transaction_id: str) -> TransactionRecord:
        async with self._session_factory() as session:
            record = await SqlTransactionRepository(session).get_for_user(user_id, transaction_id)
        if record is None:
            raise TransactionNotFoundError("Transaction not found")
        return record
