"""Application configuration using pydantic settings with structured sections."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 4000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./exchange.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me-in-production", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)


class RedisSettings(BaseModel):
    url: str = "redis://localhost:6379/0"
    enabled: bool = True
    rate_ttl_seconds: int = 300


class RateSourceSettings(BaseModel):
    api_url: str = "https://api.coingecko.com/api/v3"
    api_key: Optional[str] = None
    timeout: float = 5.0
    freshness_seconds: int = 300


class TradingSettings(BaseModel):
    fee_rate: Decimal = Decimal("0.001")
    default_wallets: list[str] = Field(default_factory=lambda: ["BTC", "ETH", "USDT"])
    # Applied as SET LOCAL lock_timeout on PostgreSQL; other backends ignore it.
    lock_timeout_seconds: float = 5.0


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Crypto Exchange API"
    api_prefix: str = "/api"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://localhost"])

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    redis: RedisSettings = RedisSettings()
    rates: RateSourceSettings = RateSourceSettings()
    trading: TradingSettings = TradingSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def access_token_expire_minutes(self) -> int:
        return self.security.access_token_expire_minutes

    @property
    def rate_ttl_seconds(self) -> int:
        return self.redis.rate_ttl_seconds

    @property
    def fee_rate(self) -> Decimal:
        return self.trading.fee_rate


@lru_cache()
def get_settings() -> Settings:
    return Settings()
