"""Campaign, comment and lifecycle request/response schemas."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from hopeshare.schemas.common import PageRequest


class CampaignAddress(BaseModel):
    street: str | None = Field(None, max_length=255)
    number: str | None = Field(None, max_length=20)
    complement: str | None = Field(None, max_length=255)
    neighborhood: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=255)
    state: str | None = Field(None, max_length=2)
    zipcode: str | None = Field(None, max_length=9)


class ImageUpload(BaseModel):
    name: str = Field("image", min_length=1, max_length=255)
    content: str = Field(..., min_length=1)  # base64 or data URL
    content_type: str | None = None


class CampaignCreate(BaseModel):
    user_id: uuid.UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    image: ImageUpload | None = None
    category: str = Field(..., min_length=1, max_length=100)
    request_emergency: bool = False
    value_required: Decimal = Field(..., gt=0, decimal_places=2)
    address: CampaignAddress | None = None


class CampaignUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    image: ImageUpload | None = None
    category: str | None = Field(None, min_length=1, max_length=100)
    request_emergency: bool | None = None
    value_required: Decimal | None = Field(None, gt=0, decimal_places=2)
    address: CampaignAddress | None = None


class CampaignSearchRequest(PageRequest):
    search: str | None = None
    category: str | None = None


class SuspendRequest(BaseModel):
    # Optional so a missing reason is reported as a 400, not a 422
    reason: str | None = None


class CampaignOwner(BaseModel):
    id: uuid.UUID
    username: str
    image: str | None = None

    model_config = {"from_attributes": True}


class CampaignResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    image: str | None = None
    category: str
    request_emergency: bool
    value_required: Decimal
    value_donated: Decimal
    status: str
    reason_suspension: str | None = None
    user_id: uuid.UUID
    owner: CampaignOwner | None = None
    have_address: bool
    address: CampaignAddress | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class CommentCreate(BaseModel):
    user_id: uuid.UUID | None = None
    comment: str | None = None


class CommentResponse(BaseModel):
    id: uuid.UUID
    campaign_id: uuid.UUID
    user_id: uuid.UUID
    username: str
    user_image: str | None = None
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class DonorResponse(BaseModel):
    user_id: uuid.UUID | None = None
    username: str | None = None
    user_image: str | None = None
    amount: Decimal
    donated_at: datetime

    model_config = {"from_attributes": True}
