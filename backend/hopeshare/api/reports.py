"""Abuse report endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.dependencies import get_db, parse_id, require_admin
from hopeshare.models.user import User
from hopeshare.schemas.report import (
    CampaignReportGroup,
    ReportCreate,
    ReportResponse,
    ReportStatusUpdate,
)
from hopeshare.services import reports

router = APIRouter()


@router.post("", response_model=ReportResponse, status_code=201)
async def create_report(
    body: ReportCreate,
    db: AsyncSession = Depends(get_db),
) -> ReportResponse:
    return ReportResponse.model_validate(await reports.create_report(db, body))


@router.get("/admin/{user_id}", response_model=list[ReportResponse])
async def list_reports(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[ReportResponse]:
    return [ReportResponse.model_validate(r) for r in await reports.list_reports(db)]


@router.get("/admin/{user_id}/grouped", response_model=list[CampaignReportGroup])
async def list_reports_grouped(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[CampaignReportGroup]:
    return await reports.list_reports_grouped(db)


@router.patch("/admin/{user_id}/{report_id}", response_model=ReportResponse)
async def update_report_status(
    report_id: str,
    body: ReportStatusUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ReportResponse:
    report_uuid = parse_id(report_id, "report_id", "Report not found")
    report = await reports.update_report_status(db, report_uuid, body.status)
    return ReportResponse.model_validate(report)
