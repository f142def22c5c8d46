"""Financial report endpoints: accounting statement, exports, stored files."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.dependencies import get_db
from hopeshare.schemas.common import MessageResponse
from hopeshare.schemas.financial_report import ExportRequest, FinancialReportResponse
from hopeshare.services import financial_reports

router = APIRouter()


@router.get("/campanha/{campanha_id}/accounting")
async def get_accounting_statement(
    campanha_id: uuid.UUID,
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await financial_reports.get_accounting(db, campanha_id, start_date, end_date)


@router.post(
    "/campanha/{campanha_id}/export",
    response_model=FinancialReportResponse,
    status_code=201,
)
async def export_report(
    campanha_id: uuid.UUID,
    body: ExportRequest,
    db: AsyncSession = Depends(get_db),
) -> FinancialReportResponse:
    report = await financial_reports.export_report(
        db, campanha_id, body.type, body.format, body.start_date, body.end_date
    )
    return FinancialReportResponse.model_validate(report)


@router.get("/user/{user_id}", response_model=list[FinancialReportResponse])
async def list_user_reports(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[FinancialReportResponse]:
    items = await financial_reports.list_by_user(db, user_id)
    return [FinancialReportResponse.model_validate(r) for r in items]


@router.delete("/{report_id}", response_model=MessageResponse)
async def delete_report(
    report_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await financial_reports.delete_report(db, report_id)
    return MessageResponse(message="Financial report deleted")
