"""Wallet listing, creation and USD valuation."""
from fastapi import APIRouter, Depends, status

from exchange.interfaces.http.deps import get_current_user, get_wallet_service
from exchange.modules.accounts import User
from exchange.modules.wallets.service import WalletService
from exchange.schemas import TotalBalanceResponse, WalletCreateRequest, WalletListResponse, WalletResponse

router = APIRouter()


@router.get("", response_model=WalletListResponse, summary="All wallets of the current user")
async def list_wallets(
    user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
) -> WalletListResponse:
    wallets = await service.get_wallets(user.id)
    return WalletListResponse(wallets=[WalletResponse.model_validate(wallet) for wallet in wallets])


@router.post(
    "",
    response_model=WalletResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a zero-balance wallet",
)
async def create_wallet(
    payload: WalletCreateRequest,
    user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
) -> WalletResponse:
    wallet = await service.create_wallet(user.id, payload.currency)
    return WalletResponse.model_validate(wallet)


@router.get("/balance/total", response_model=TotalBalanceResponse, summary="Total balance in USD")
async def total_balance(
    user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
) -> TotalBalanceResponse:
    return TotalBalanceResponse(total_usd=await service.get_total_balance_usd(user.id))


@router.get("/{currency}", response_model=WalletResponse, summary="Wallet for one currency")
async def get_wallet(
    currency: str,
    user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
) -> WalletResponse:
    wallet = await service.get_wallet(user.id, currency.upper())
    return WalletResponse.model_validate(wallet)
