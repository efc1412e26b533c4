"""Public market data: currency catalog and stored rates."""
from fastapi import APIRouter, Depends

from exchange.interfaces.http.deps import get_market_service, get_rate_service
from exchange.modules.market.service import MarketService
from exchange.modules.rates.service import RateService
from exchange.schemas import (
    CurrencyListResponse,
    CurrencyResponse,
    ExchangeRateListResponse,
    ExchangeRateResponse,
)

router = APIRouter()


@router.get("/currencies", response_model=CurrencyListResponse, summary="Active currencies")
async def list_currencies(market: MarketService = Depends(get_market_service)) -> CurrencyListResponse:
    currencies = await market.list_currencies()
    return CurrencyListResponse(currencies=[CurrencyResponse.model_validate(item) for item in currencies])


@router.get("/exchange-rates", response_model=ExchangeRateListResponse, summary="Stored exchange rates")
async def list_exchange_rates(rates: RateService = Depends(get_rate_service)) -> ExchangeRateListResponse:
    stored = await rates.list_rates()
    return ExchangeRateListResponse(rates=[ExchangeRateResponse.model_validate(rate) for rate in stored])


@router.get(
    "/exchange-rates/{from_currency}/{to_currency}",
    response_model=ExchangeRateResponse,
    summary="Stored rate for one pair",
)
async def get_exchange_rate(
    from_currency: str,
    to_currency: str,
    rates: RateService = Depends(get_rate_service),
) -> ExchangeRateResponse:
    stored = await rates.get_stored_rate(from_currency.upper(), to_currency.upper())
    return ExchangeRateResponse.model_validate(stored)
