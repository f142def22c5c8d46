"""Payout (receipt) configuration endpoints."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.dependencies import get_db
from hopeshare.schemas.payout_config import PayoutConfigRequest, PayoutConfigResponse
from hopeshare.services import payout_configs

router = APIRouter()


@router.post("", response_model=PayoutConfigResponse)
async def save_payout_config(
    body: PayoutConfigRequest,
    db: AsyncSession = Depends(get_db),
) -> PayoutConfigResponse:
    config = await payout_configs.save_config(db, body)
    _, verified = await payout_configs.get_config(db, body.user_id)
    response = PayoutConfigResponse.model_validate(config)
    response.cnpj_verified = verified
    return response


@router.get("/{user_id}", response_model=PayoutConfigResponse)
async def get_payout_config(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> PayoutConfigResponse:
    config, verified = await payout_configs.get_config(db, user_id)
    response = PayoutConfigResponse.model_validate(config)
    response.cnpj_verified = verified
    return response
