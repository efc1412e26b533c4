"""
Initialise a demo database.

Creates the tables, seeds the currency catalog and a demo user whose default
wallets are pre-funded so trades can be tried straight away.
"""
import asyncio
from decimal import Decimal

from exchange.core.config import get_settings
from exchange.core.container import ApplicationContainer
from exchange.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from exchange.infrastructure.database.session import init_db
from exchange.modules.accounts import UserCreateInput
from exchange.modules.accounts.service import AccountService

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "Demo123!"
DEMO_BALANCES = {
    "BTC": Decimal("1.5"),
    "ETH": Decimal("10"),
    "USDT": Decimal("10000"),
}


async def create_demo_user() -> None:
    settings = get_settings()
    container = ApplicationContainer.build(settings)
    try:
        await init_db(container.engine)
        seeded = await container.market.seed_currencies()
        print(f"Currency catalog: {seeded} entries")

        async with container.session_factory.begin() as db:
            service = AccountService.with_session(db, settings)
            if await service.get_by_email(DEMO_EMAIL) is not None:
                print("Demo user already exists, nothing to do")
                return

            result = await service.register(
                UserCreateInput(
                    email=DEMO_EMAIL,
                    password=DEMO_PASSWORD,
                    first_name="Demo",
                    last_name="User",
                )
            )
            wallets = SqlWalletRepository(db)
            for currency, amount in DEMO_BALANCES.items():
                await wallets.credit(result.user.id, currency, amount)

        print("=" * 50)
        print("Demo user created")
        print("=" * 50)
        print(f"Email:    {DEMO_EMAIL}")
        print(f"Password: {DEMO_PASSWORD}")
        for currency, amount in DEMO_BALANCES.items():
            print(f"{currency:>8}: {amount}")
        print("=" * 50)
    finally:
        await container.close()


if __name__ == "__main__":
    asyncio.run(create_demo_user())
