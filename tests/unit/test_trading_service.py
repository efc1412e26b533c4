"""Trade execution: arithmetic, atomicity and the overdraw guard."""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from exchange.core.config import Settings
from exchange.core.container import ApplicationContainer
from exchange.infrastructure.database.models import Wallet as WalletModel
from exchange.infrastructure.database.repositories.account_repository import SqlUserRepository
from exchange.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from exchange.infrastructure.database.session import init_db
from exchange.infrastructure.rates import CoinGeckoRateSource
from exchange.modules.rates import RateUnavailableError
from exchange.modules.trading import (
    InsufficientFundsError,
    InvalidAmountError,
    TradeFailedError,
    TransactionNotFoundError,
)


async def balance(container, user_id, currency):
    return (await container.wallets.get_wallet(user_id, currency)).balance


class TestExecuteTrade:
    @pytest.mark.asyncio
    async def test_fee_and_destination_amount(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1.5"))
        cache.put_rate("BTC", "ETH", "16.67")

        result = await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal("0.5"))

        assert result.fee == Decimal("0.0005")
        assert result.to_amount == Decimal("8.326665")
        assert result.exchange_rate == Decimal("16.67")
        assert result.from_amount == Decimal("0.5")
        assert await balance(container, user_id, "BTC") == Decimal("1.0")
        assert await balance(container, user_id, "ETH") == Decimal("8.326665")

    @pytest.mark.asyncio
    async def test_transaction_is_recorded(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1.5"))
        cache.put_rate("BTC", "ETH", "16.67")

        result = await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal("0.5"))
        record = await container.trading.get_transaction(user_id, result.transaction_id)

        assert record.transaction_type == "exchange"
        assert (record.from_currency, record.to_currency) == ("BTC", "ETH")
        assert record.from_amount == Decimal("0.5")
        assert record.to_amount == Decimal("8.326665")
        assert record.fee == Decimal("0.0005")
        assert record.exchange_rate == Decimal("16.67")

    @pytest.mark.asyncio
    async def test_whole_balance_can_be_traded(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))
        cache.put_rate("BTC", "USDT", "50000")

        result = await container.trading.execute_trade(user_id, "BTC", "USDT", Decimal("1"))

        assert await balance(container, user_id, "BTC") == Decimal("0")
        assert result.to_amount == Decimal("49950")

    @pytest.mark.asyncio
    async def test_missing_destination_wallet_is_created(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "USDT", Decimal("300"))
        cache.put_rate("USDT", "SOL", "0.01")

        result = await container.trading.execute_trade(user_id, "USDT", "SOL", Decimal("100"))

        assert result.to_amount == Decimal("0.999")
        assert await balance(container, user_id, "SOL") == Decimal("0.999")

    @pytest.mark.asyncio
    async def test_configured_fee_rate(self, container, cache, user_id, set_balance) -> None:
        from exchange.modules.trading.service import TradingService

        trading = TradingService(container.session_factory, container.rates, fee_rate=Decimal("0.01"))
        await set_balance(user_id, "BTC", Decimal("2"))
        cache.put_rate("BTC", "USDT", "100")

        result = await trading.execute_trade(user_id, "BTC", "USDT", Decimal("1"))

        assert result.fee == Decimal("0.01")
        assert result.to_amount == Decimal("99")

    @pytest.mark.asyncio
    async def test_fee_is_exact_for_small_amounts(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))
        cache.put_rate("BTC", "ETH", "16.67")

        result = await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal("0.00001234"))
        record = await container.trading.get_transaction(user_id, result.transaction_id)

        assert result.fee == Decimal("0.00000001234")
        assert result.to_amount == Decimal("0.0002055020922")
        assert (record.fee, record.to_amount) == (result.fee, result.to_amount)
        assert await balance(container, user_id, "BTC") == Decimal("0.99998766")
        assert await balance(container, user_id, "ETH") == Decimal("0.0002055020922")


class TestRejectedTrades:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
    async def test_non_positive_amount(self, container, user_id, set_balance, amount) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))

        with pytest.raises(InvalidAmountError):
            await container.trading.execute_trade(user_id, "BTC", "ETH", amount)

        assert await balance(container, user_id, "BTC") == Decimal("1")
        assert await container.trading.list_transactions(user_id) == []

    @pytest.mark.asyncio
    async def test_amount_above_balance(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))
        cache.put_rate("BTC", "ETH", "16.67")

        with pytest.raises(InsufficientFundsError):
            await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal("1.00000001"))

        assert await balance(container, user_id, "BTC") == Decimal("1")
        assert await balance(container, user_id, "ETH") == Decimal("0")
        assert await container.trading.list_transactions(user_id) == []

    @pytest.mark.asyncio
    async def test_missing_source_wallet(self, container, cache, user_id) -> None:
        cache.put_rate("DOGE", "BTC", "0.000002")

        with pytest.raises(InsufficientFundsError):
            await container.trading.execute_trade(user_id, "DOGE", "BTC", Decimal("10"))

    @pytest.mark.asyncio
    async def test_rate_failure_rolls_back(self, container, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))

        with pytest.raises(TradeFailedError) as excinfo:
            await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal("0.5"))

        assert isinstance(excinfo.value.__cause__, RateUnavailableError)
        assert await balance(container, user_id, "BTC") == Decimal("1")
        assert await balance(container, user_id, "ETH") == Decimal("0")
        assert await container.trading.list_transactions(user_id) == []

    @pytest.mark.asyncio
    async def test_failure_message_hides_the_cause(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))
        cache.put_rate("BTC", "ZZZ", "2")

        with pytest.raises(TradeFailedError) as excinfo:
            await container.trading.execute_trade(user_id, "BTC", "ZZZ", Decimal("0.5"))

        assert excinfo.value.message == "Failed to execute trade"
        assert isinstance(excinfo.value.__cause__, IntegrityError)
        assert await balance(container, user_id, "BTC") == Decimal("1")


class TestOverdraw:
    @pytest.mark.asyncio
    async def test_sequential_trades_cannot_overdraw(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))
        cache.put_rate("BTC", "ETH", "16")

        await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal("0.6"))
        with pytest.raises(InsufficientFundsError):
            await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal("0.6"))

        assert await balance(container, user_id, "BTC") == Decimal("0.4")

    @pytest.mark.asyncio
    async def test_concurrent_trades_never_go_negative(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))
        cache.put_rate("BTC", "ETH", "16")
        amount = Decimal("0.3")

        outcomes = await asyncio.gather(
            *(container.trading.execute_trade(user_id, "BTC", "ETH", amount) for _ in range(5)),
            return_exceptions=True,
        )

        succeeded = [o for o in outcomes if not isinstance(o, BaseException)]
        failed = [o for o in outcomes if isinstance(o, BaseException)]
        assert 1 <= len(succeeded) <= 3
        assert all(isinstance(err, (InsufficientFundsError, TradeFailedError)) for err in failed)

        remaining = await balance(container, user_id, "BTC")
        assert remaining >= 0
        assert remaining == Decimal("1") - amount * len(succeeded)
        assert len(await container.trading.list_transactions(user_id)) == len(succeeded)

    @pytest.mark.asyncio
    async def test_remaining_balance_can_be_traded_exactly(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("0.7"))
        cache.put_rate("BTC", "ETH", "16")

        await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal("0.4"))
        remaining = await balance(container, user_id, "BTC")
        await container.trading.execute_trade(user_id, "BTC", "ETH", remaining)

        assert remaining == Decimal("0.3")
        assert await balance(container, user_id, "BTC") == Decimal("0")


class TestHistory:
    @pytest.mark.asyncio
    async def test_newest_first_with_paging(self, container, cache, user_id, set_balance) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))
        cache.put_rate("BTC", "ETH", "16")
        ids = []
        for amount in ("0.1", "0.2", "0.3"):
            result = await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal(amount))
            ids.append(result.transaction_id)

        first = await container.trading.list_transactions(user_id, limit=2, page=1)
        second = await container.trading.list_transactions(user_id, limit=2, page=2)

        assert [r.id for r in first] == [ids[2], ids[1]]
        assert [r.id for r in second] == [ids[0]]

    @pytest.mark.asyncio
    async def test_other_users_transaction_is_not_found(
        self, container, cache, user_id, register_user, set_balance
    ) -> None:
        await set_balance(user_id, "BTC", Decimal("1"))
        cache.put_rate("BTC", "ETH", "16")
        result = await container.trading.execute_trade(user_id, "BTC", "ETH", Decimal("0.1"))
        other = await register_user("other@example.com")

        with pytest.raises(TransactionNotFoundError):
            await container.trading.get_transaction(other, result.transaction_id)

    @pytest.mark.asyncio
    async def test_unknown_transaction(self, container, user_id) -> None:
        with pytest.raises(TransactionNotFoundError):
            await container.trading.get_transaction(user_id, "does-not-exist")


class TestDestinationWallet:
    @pytest.mark.asyncio
    async def test_credit_on_an_existing_row_adds(self, container, user_id) -> None:
        for amount in ("1.5", "2.25"):
            async with container.session_factory.begin() as session:
                await SqlWalletRepository(session).credit(user_id, "DOT", Decimal(amount))

        assert await balance(container, user_id, "DOT") == Decimal("3.75")
        async with container.session_factory() as session:
            rows = await session.execute(
                select(func.count()).select_from(WalletModel).filter_by(user_id=user_id, currency="DOT")
            )
        assert rows.scalar_one() == 1


class TestConnectionPool:
    @pytest.mark.asyncio
    async def test_cache_miss_trade_fits_in_two_connections(
        self, cache, http_client, price_api, tmp_path
    ) -> None:
        small = Settings(
            environment="test",
            database={"url": f"sqlite+aiosqlite:///{tmp_path / 'pool.db'}", "pool_size": 1, "max_overflow": 1},
            redis={"enabled": False},
            security={"secret_key": "test-secret-key", "bcrypt_rounds": 4},
        )
        container = ApplicationContainer.build(
            small, cache=cache, source=CoinGeckoRateSource(http_client, "https://prices.test/api/v3")
        )
        try:
            await init_db(container.engine)
            await container.market.seed_currencies()
            async with container.session_factory.begin() as session:
                wallets = SqlWalletRepository(session)
                user = await SqlUserRepository(session).create_user(
                    email="pool@example.com", password_hash="x", first_name="Pool", last_name="User"
                )
                await wallets.credit(user.id, "BTC", Decimal("1"))
            price_api.quotes[("bitcoin", "ethereum")] = 16

            result = await container.trading.execute_trade(user.id, "BTC", "ETH", Decimal("0.5"))

            assert result.exchange_rate == Decimal("16")
            assert len(price_api.requests) == 1
        finally:
            await container.close()
