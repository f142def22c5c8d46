"""Payout (receipt) configuration schemas."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class PayoutConfigRequest(BaseModel):
    user_id: uuid.UUID
    receipt_type: Literal["PIX", "BANK"]
    pix_key: str | None = Field(None, max_length=255)
    pix_type: str | None = Field(None, max_length=20)
    bank_name: str | None = Field(None, max_length=255)
    agency: str | None = Field(None, max_length=20)
    account: str | None = Field(None, max_length=30)
    account_type: str | None = Field(None, max_length=20)
    cnpj: str | None = Field(None, max_length=18)


class PayoutConfigResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    receipt_type: str
    pix_key: str | None = None
    pix_type: str | None = None
    bank_name: str | None = None
    agency: str | None = None
    account: str | None = None
    account_type: str | None = None
    cnpj: str | None = None
    cnpj_verified: bool = False
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
