"""Financial report schemas."""

import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel


class ExportRequest(BaseModel):
    type: str | None = None
    format: Literal["pdf", "csv"] | None = None
    start_date: date | None = None
    end_date: date | None = None


class FinancialReportResponse(BaseModel):
    id: uuid.UUID
    campaign_id: uuid.UUID
    user_id: uuid.UUID
    type: str
    file_format: str
    file_name: str
    file_key: str
    file_url: str
    file_size: int
    created_at: datetime

    model_config = {"from_attributes": True}
