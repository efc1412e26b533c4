"""Registration, login and logout."""
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from exchange.interfaces.http.deps import get_account_service, get_bearer_token, get_db_session
from exchange.modules.accounts import UserCreateInput
from exchange.modules.accounts.service import AccountService
from exchange.schemas import AuthResponse, LoginRequest, RegisterRequest, StatusResponse, UserResponse

router = APIRouter()


def _client_info(request: Request) -> dict[str, Optional[str]]:
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account with default wallets",
)
async def register(
    payload: RegisterRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    result = await service.register(
        UserCreateInput(
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
        ),
        **_client_info(request),
    )
    await db.commit()
    return AuthResponse(access_token=result.token, user=UserResponse.model_validate(result.user))


@router.post("/login", response_model=AuthResponse, summary="Log in with email and password")
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    result = await service.login(payload.email, payload.password, **_client_info(request))
    await db.commit()
    return AuthResponse(access_token=result.token, user=UserResponse.model_validate(result.user))


@router.post("/logout", response_model=StatusResponse, summary="Expire the current session")
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
) -> StatusResponse:
    if token:
        await service.logout(token)
        await db.commit()
    return StatusResponse(message="Logged out successfully")
