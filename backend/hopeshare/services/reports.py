"""Abuse reports against campaigns and their moderation queue."""

import logging
import uuid

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import InvalidInputError, NotFoundError
from hopeshare.models.campaign import Campaign
from hopeshare.models.report import REPORT_STATUSES, Report
from hopeshare.schemas.report import CampaignReportGroup, ReportCreate
from hopeshare.services.campaign_lifecycle import get_campaign_or_404
from hopeshare.services.users import get_user_or_404

logger = logging.getLogger(__name__)


async def create_report(db: AsyncSession, data: ReportCreate) -> Report:
    if not (
        data.campaign_id
        and data.user_id
        and (data.reason or "").strip()
        and (data.description or "").strip()
    ):
        raise InvalidInputError("campaign_id, user_id, reason and description are required")

    campaign = await get_campaign_or_404(db, data.campaign_id)
    user = await get_user_or_404(db, data.user_id)

    report = Report(
        campaign_id=campaign.id,
        user_id=user.id,
        reason=data.reason.strip(),
        description=data.description.strip(),
        status="PENDING",
    )
    db.add(report)
    await db.flush()
    logger.info("Report %s filed against campaign %s", report.id, campaign.id)
    return report


async def list_reports(db: AsyncSession) -> list[Report]:
    result = await db.execute(select(Report).order_by(Report.created_at.desc()))
    return list(result.scalars().all())


def _count_status(status: str):
    return func.sum(case((Report.status == status, 1), else_=0))


async def list_reports_grouped(db: AsyncSession) -> list[CampaignReportGroup]:
    """One row per reported campaign, most reported first."""
    total = func.count(Report.id)
    stmt = (
        select(
            Campaign.id,
            Campaign.title,
            Campaign.status,
            total,
            _count_status("PENDING"),
            _count_status("ANALYZED"),
            _count_status("RESOLVED"),
            func.max(Report.created_at),
        )
        .join(Campaign, Campaign.id == Report.campaign_id)
        .group_by(Campaign.id, Campaign.title, Campaign.status)
        .order_by(total.desc())
    )
    rows = (await db.execute(stmt)).all()
    return [
        CampaignReportGroup(
            campaign_id=campaign_id,
            campaign_title=title,
            campaign_status=status,
            is_suspended=status == "SUSPENDED",
            total_reports=count,
            pending_reports=pending or 0,
            analyzed_reports=analyzed or 0,
            resolved_reports=resolved or 0,
            last_report_at=last,
        )
        for campaign_id, title, status, count, pending, analyzed, resolved, last in rows
    ]


async def update_report_status(
    db: AsyncSession, report_id: uuid.UUID, status: str | None
) -> Report:
    requested = (status or "").strip().upper()
    if requested not in REPORT_STATUSES:
        raise InvalidInputError(f"status must be one of: {', '.join(REPORT_STATUSES)}")

    report = await db.get(Report, report_id)
    if report is None:
        raise NotFoundError("Report not found")

    report.status = requested
    await db.flush()
    return report
