"""Identity validation schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class DocumentUpload(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)  # base64 or data URL
    content_type: str | None = None


class ValidationSubmitRequest(BaseModel):
    user_id: uuid.UUID
    cnpj: str | None = Field(None, max_length=18)
    company_name: str | None = Field(None, max_length=255)
    documents: list[DocumentUpload] = Field(..., min_length=1)


class ValidationReviewRequest(BaseModel):
    validation_id: str | None = None
    status: str | None = None
    observation: str | None = None


class DocumentResponse(BaseModel):
    name: str
    key: str
    url: str
    content_type: str


class ValidationResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    status: str
    cnpj: str | None = None
    company_name: str | None = None
    observation: str | None = None
    observation_read: bool
    documents: list[DocumentResponse]
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
