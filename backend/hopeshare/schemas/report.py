"""Abuse report schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class ReportCreate(BaseModel):
    campaign_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    reason: str | None = None
    description: str | None = None


class ReportStatusUpdate(BaseModel):
    status: str | None = None


class ReportResponse(BaseModel):
    id: uuid.UUID
    campaign_id: uuid.UUID
    user_id: uuid.UUID | None = None
    reason: str
    description: str
    status: str
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class CampaignReportGroup(BaseModel):
    campaign_id: uuid.UUID
    campaign_title: str
    campaign_status: str
    is_suspended: bool
    total_reports: int
    pending_reports: int
    analyzed_reports: int
    resolved_reports: int
    last_report_at: datetime | None = None
