"""Rates, trade execution and transaction history."""
from fastapi import APIRouter, Depends, Query

from exchange.interfaces.http.deps import get_current_user, get_rate_service, get_trading_service
from exchange.modules.accounts import User
from exchange.modules.rates.service import RateService
from exchange.modules.trading.service import TradingService
from exchange.schemas import (
    ExchangeRequest,
    ExchangeResponse,
    RateResponse,
    TransactionListResponse,
    TransactionResponse,
)

router = APIRouter()


@router.get("/rate/{from_currency}/{to_currency}", response_model=RateResponse, summary="Current rate")
async def get_rate(
    from_currency: str,
    to_currency: str,
    _: User = Depends(get_current_user),
    rates: RateService = Depends(get_rate_service),
) -> RateResponse:
    from_currency, to_currency = from_currency.upper(), to_currency.upper()
    rate = await rates.get_rate(from_currency, to_currency)
    return RateResponse(from_currency=from_currency, to_currency=to_currency, rate=rate)


@router.post("/exchange", response_model=ExchangeResponse, summary="Convert between two wallets")
async def execute_exchange(
    payload: ExchangeRequest,
    user: User = Depends(get_current_user),
    trading: TradingService = Depends(get_trading_service),
) -> ExchangeResponse:
    result = await trading.execute_trade(user.id, payload.from_currency, payload.to_currency, payload.amount)
    return ExchangeResponse.model_validate(result)


@router.get("/transactions", response_model=TransactionListResponse, summary="Trade history, newest first")
async def list_transactions(
    limit: int = Query(20, ge=1, le=100),
    page: int = Query(1, ge=1),
    user: User = Depends(get_current_user),
    trading: TradingService = Depends(get_trading_service),
) -> TransactionListResponse:
    records = await trading.list_transactions(user.id, limit=limit, page=page)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(record) for record in records],
        page=page,
        limit=limit,
    )


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse, summary="Trade detail")
async def get_transaction(
    transaction_id: str,
    user: User = Depends(get_current_user),
    trading: TradingService = Depends(get_trading_service),
) -> TransactionResponse:
    record = await trading.get_transaction(user.id, transaction_id)
    return TransactionResponse.model_validate(record)
