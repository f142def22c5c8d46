"""Donation request/response schemas."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class DonationCreateRequest(BaseModel):
    # Missing ids and non-positive amounts are reported as 400 by the service
    user_id: uuid.UUID | None = None
    campaign_id: uuid.UUID | None = None
    amount: Decimal | None = Field(None, decimal_places=2)


class DonationCreateResponse(BaseModel):
    donation_id: uuid.UUID
    preference_id: str
    init_point: str | None = None
    sandbox_init_point: str | None = None


class DonationResponse(BaseModel):
    id: uuid.UUID
    payment_id: str | None = None
    preference_id: str | None = None
    campaign_id: uuid.UUID
    user_id: uuid.UUID | None = None
    campaign_title: str
    amount: Decimal
    payment_method: str | None = None
    status: str
    status_detail: str | None = None
    refunded_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class RefundRequest(BaseModel):
    amount: Decimal | None = Field(None, gt=0, decimal_places=2)


class WebhookAck(BaseModel):
    success: bool
    error: str | None = None
