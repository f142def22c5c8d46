"""Withdrawal ("deposit") request endpoints.

POST  /campanha/deposito/request
GET   /campanha/deposito/user/{user_id}
PATCH /campanha/admin/depositos/status
GET   /campanha/admin/{user_id}/deposito/pending
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.dependencies import get_db, load_admin, parse_id, require_admin
from hopeshare.models.user import User
from hopeshare.schemas.deposit import (
    DepositCreateRequest,
    DepositResponse,
    DepositStatusUpdateRequest,
)
from hopeshare.services import deposits

router = APIRouter()


@router.post("/deposito/request", response_model=DepositResponse)
async def create_deposit_request(
    body: DepositCreateRequest,
    db: AsyncSession = Depends(get_db),
) -> DepositResponse:
    request = await deposits.create_request(
        db, body.user_id, body.campaign_id, body.request_message
    )
    return DepositResponse.model_validate(request)


@router.get("/deposito/user/{user_id}", response_model=list[DepositResponse])
async def list_my_deposit_requests(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[DepositResponse]:
    return [DepositResponse.model_validate(r) for r in await deposits.list_mine(db, user_id)]


@router.patch("/admin/depositos/status", response_model=DepositResponse)
async def update_deposit_status(
    body: DepositStatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
) -> DepositResponse:
    await load_admin(db, body.user_id)
    request_id = parse_id(body.request_id, "request_id", "Deposit request not found")
    request = await deposits.update_status(
        db, request_id, body.new_status, body.justification_admin
    )
    return DepositResponse.model_validate(request)


@router.get("/admin/{user_id}/deposito/pending", response_model=list[DepositResponse])
async def list_pending_deposit_requests(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[DepositResponse]:
    return [DepositResponse.model_validate(r) for r in await deposits.list_pending(db)]
