"""Profile management for the authenticated user."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from exchange.interfaces.http.deps import get_account_service, get_current_user, get_db_session
from exchange.modules.accounts import User, UserUpdateInput
from exchange.modules.accounts.service import AccountService
from exchange.schemas import PasswordChangeRequest, ProfileUpdateRequest, StatusResponse, UserResponse

router = APIRouter()


@router.get("/profile", response_model=UserResponse, summary="Current user profile")
async def get_profile(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user)


@router.put("/profile", response_model=UserResponse, summary="Update name or email")
async def update_profile(
    payload: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
) -> UserResponse:
    changes = UserUpdateInput(**{name: getattr(payload, name) for name in payload.model_fields_set})
    updated = await service.update_profile(user.id, changes)
    await db.commit()
    return UserResponse.model_validate(updated)


@router.put("/password", response_model=StatusResponse, summary="Change password")
async def change_password(
    payload: PasswordChangeRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
) -> StatusResponse:
    await service.change_password(user.id, payload.current_password, payload.new_password)
    await db.commit()
    return StatusResponse(message="Password updated successfully")


@router.delete("", response_model=StatusResponse, summary="Delete the account and its wallets")
async def delete_account(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: AccountService = Depends(get_account_service),
) -> StatusResponse:
    await service.delete_account(user.id)
    await db.commit()
    return StatusResponse(message="Account deleted successfully")
