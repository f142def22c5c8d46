"""Deposit (withdrawal) request schemas."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class DepositCreateRequest(BaseModel):
    user_id: uuid.UUID | None = None
    campaign_id: uuid.UUID | None = None
    request_message: str | None = None


class DepositStatusUpdateRequest(BaseModel):
    # Loose types: the caller is checked before anything else is parsed
    user_id: str | None = None
    request_id: str | None = None
    new_status: str | None = None
    justification_admin: str | None = None


class DepositResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    campaign_id: uuid.UUID
    campaign_title: str
    value_donated: Decimal
    request_message: str | None = None
    status: str
    justification_admin: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
