"""User schemas. The password hash never leaves the service layer."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=6, max_length=128)
    type_user: Literal["INDIVIDUAL", "COMPANY"]
    cpf: str | None = Field(None, max_length=14)
    cnpj: str | None = Field(None, max_length=18)
    birthdate: date | None = None
    image: str | None = None


class UserUpdate(BaseModel):
    username: str | None = Field(None, min_length=1, max_length=255)
    password: str | None = Field(None, min_length=6, max_length=128)
    birthdate: date | None = None
    image: str | None = None


class SignInRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: uuid.UUID
    username: str
    email: str
    image: str | None = None
    type_user: str
    cpf: str | None = None
    cnpj: str | None = None
    birthdate: date | None = None
    is_admin: bool
    total_donated: Decimal
    total_campaigns_donated: int
    total_campaigns_created: int
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserSummaryResponse(BaseModel):
    user_id: uuid.UUID
    total_donated: Decimal
    total_campaigns_donated: int
    total_campaigns_created: int
