"""Pydantic schemas used across the project."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CURRENCY_PATTERN = r"^[A-Za-z0-9]{3,10}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ApiInfo(BaseModel):
    name: str
    version: str
    status: str = "running"


class StatusResponse(BaseModel):
    status: str = "success"
    message: str


# Auth


class RegisterRequest(BaseModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileUpdateRequest(BaseModel):
    email: Optional[str] = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


# Wallets


class WalletCreateRequest(BaseModel):
    currency: str = Field(..., pattern=CURRENCY_PATTERN)

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()


class WalletResponse(BaseModel):
    id: str
    currency: str
    currency_name: Optional[str] = None
    balance: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WalletListResponse(BaseModel):
    wallets: list[WalletResponse]


class TotalBalanceResponse(BaseModel):
    total_usd: Decimal
    currency: str = "USD"


# Trading


class ExchangeRequest(BaseModel):
    from_currency: str = Field(..., pattern=CURRENCY_PATTERN)
    to_currency: str = Field(..., pattern=CURRENCY_PATTERN)
    amount: Decimal = Field(..., gt=0, max_digits=28, decimal_places=8)

    @field_validator("from_currency", "to_currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _distinct_currencies(self) -> "ExchangeRequest":
        if self.from_currency == self.to_currency:
            raise ValueError("from_currency and to_currency must differ")
        return self


class ExchangeResponse(BaseModel):
    transaction_id: str
    from_currency: str
    to_currency: str
    from_amount: Decimal
    to_amount: Decimal
    fee: Decimal
    exchange_rate: Decimal
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class RateResponse(BaseModel):
    from_currency: str
    to_currency: str
    rate: Decimal


class TransactionResponse(BaseModel):
    id: str
    transaction_type: str
    from_currency: str
    to_currency: str
    from_amount: Decimal
    to_amount: Decimal
    fee: Decimal
    exchange_rate: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionListResponse(BaseModel):
    transactions: list[TransactionResponse]
    page: int
    limit: int


# Market


class CurrencyResponse(BaseModel):
    symbol: str
    name: str
    decimal_places: int

    model_config = ConfigDict(from_attributes=True)


class CurrencyListResponse(BaseModel):
    currencies: list[CurrencyResponse]


class ExchangeRateResponse(BaseModel):
    from_currency: str
    to_currency: str
    rate: Decimal
    last_updated: datetime

    model_config = ConfigDict(from_attributes=True)


class ExchangeRateListResponse(BaseModel):
    rates: list[ExchangeRateResponse]
