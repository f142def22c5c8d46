"""User account endpoints."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.dependencies import get_db
from hopeshare.schemas.common import MessageResponse
from hopeshare.schemas.user import (
    SignInRequest,
    UserCreate,
    UserResponse,
    UserSummaryResponse,
    UserUpdate,
)
from hopeshare.services import users

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(await users.create_user(db, body))


@router.post("/sign-in", response_model=UserResponse)
async def sign_in(
    body: SignInRequest,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(await users.sign_in(db, body.email, body.password))


@router.get("/by-email/{email}", response_model=UserResponse)
async def get_user_by_email(
    email: str,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(await users.get_user_by_email(db, email))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(await users.get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(await users.update_user(db, user_id, body))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await users.delete_user(db, user_id)
    return MessageResponse(message="User deleted")


@router.get("/{user_id}/summary", response_model=UserSummaryResponse)
async def get_user_summary(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> UserSummaryResponse:
    """Donation and campaign counters shown on the profile page."""
    user = await users.get_user_or_404(db, user_id)
    return UserSummaryResponse(
        user_id=user.id,
        total_donated=user.total_donated,
        total_campaigns_donated=user.total_campaigns_donated,
        total_campaigns_created=user.total_campaigns_created,
    )
