"""initial exchange schema and currency catalog

Revision ID: 3f9c1e2a7b40
Revises: 
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

from exchange.infrastructure.database.types import amount_type, rate_type


# revision identifiers, used by Alembic.
revision = "3f9c1e2a7b40"
down_revision = None
branch_labels = None
depends_on = None

CURRENCIES = [
    {"symbol": "BTC", "name": "Bitcoin", "decimal_places": 8, "is_active": True},
    {"symbol": "ETH", "name": "Ethereum", "decimal_places": 8, "is_active": True},
    {"symbol": "USDT", "name": "Tether", "decimal_places": 6, "is_active": True},
    {"symbol": "USDC", "name": "USD Coin", "decimal_places": 6, "is_active": True},
    {"symbol": "BNB", "name": "Binance Coin", "decimal_places": 8, "is_active": True},
    {"symbol": "XRP", "name": "Ripple", "decimal_places": 6, "is_active": True},
    {"symbol": "ADA", "name": "Cardano", "decimal_places": 6, "is_active": True},
    {"symbol": "SOL", "name": "Solana", "decimal_places": 8, "is_active": True},
    {"symbol": "DOGE", "name": "Dogecoin", "decimal_places": 8, "is_active": True},
    {"symbol": "DOT", "name": "Polkadot", "decimal_places": 8, "is_active": True},
    {"symbol": "USD", "name": "US Dollar", "decimal_places": 2, "is_active": True},
]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token", sa.Text(), nullable=False),
        sa.Column("ip_address", sa.String(length=45)),
        sa.Column("user_agent", sa.String(length=255)),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_sessions_user_id", "sessions", ["user_id"])

    currencies = op.create_table(
        "cryptocurrencies",
        sa.Column("symbol", sa.String(length=10), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("decimal_places", sa.Integer(), nullable=False, server_default="8"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        "wallets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("currency", sa.String(length=10), sa.ForeignKey("cryptocurrencies.symbol"), nullable=False),
        sa.Column("balance", amount_type(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("user_id", "currency", name="uq_wallets_user_currency"),
    )
    op.create_index("ix_wallets_user_id", "wallets", ["user_id"])

    op.create_table(
        "exchange_rates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("from_currency", sa.String(length=10), nullable=False),
        sa.Column("to_currency", sa.String(length=10), nullable=False),
        sa.Column("rate", rate_type(), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("from_currency", "to_currency", name="uq_exchange_rates_pair"),
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("transaction_type", sa.String(length=20), nullable=False, server_default="exchange"),
        sa.Column("from_currency", sa.String(length=10), nullable=False),
        sa.Column("to_currency", sa.String(length=10), nullable=False),
        sa.Column("from_amount", amount_type(), nullable=False),
        sa.Column("to_amount", amount_type(), nullable=False),
        sa.Column("fee", amount_type(), nullable=False),
        sa.Column("exchange_rate", rate_type(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_transactions_user_id", "transactions", ["user_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE")),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=36)),
        sa.Column("new_values", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])

    op.bulk_insert(currencies, CURRENCIES)


def downgrade() -> None:
    op.drop_index("ix_audit_logs_user_id", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_transactions_user_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("exchange_rates")
    op.drop_index("ix_wallets_user_id", table_name="wallets")
    op.drop_table("wallets")
    op.drop_table("cryptocurrencies")
    op.drop_index("ix_sessions_user_id", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
