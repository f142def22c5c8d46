"""Financial summary and accounting statement of a campaign, plus exports.

Only approved donations count as revenue. Transfers are COMPLETED deposit
requests valued at the campaign total captured when they were requested.
Fees come from ``PLATFORM_FEE_RATE`` and ``GATEWAY_FEE_RATE``.
"""

import logging
import uuid
from collections import defaultdict
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.config import settings
from hopeshare.core.exceptions import InvalidInputError, NotFoundError
from hopeshare.db.base import utcnow
from hopeshare.models.campaign import Campaign
from hopeshare.models.deposit_request import DepositRequest
from hopeshare.models.donation import Donation
from hopeshare.models.financial_report import FINANCIAL_REPORT_TYPES, FinancialReport
from hopeshare.services import deposits as deposit_service
from hopeshare.services import donations as donation_service
from hopeshare.services import storage
from hopeshare.services.campaign_lifecycle import get_campaign_or_404
from hopeshare.services.report_renderer import flatten, render_csv, render_pdf

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
TOP_DONORS = 10

CONTENT_TYPES = {"pdf": "application/pdf", "csv": "text/csv"}
DEFAULT_FORMATS = {"FINANCIAL": "pdf", "ACCOUNTING": "csv"}


def _money(value: Decimal | int) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; they are stored as UTC."""
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def _in_period(moment: datetime, start: date | None, end: date | None) -> bool:
    day = as_utc(moment).date()
    return (start is None or day >= start) and (end is None or day <= end)


def _period(start: date | None, end: date | None) -> dict:
    return {
        "start": start.isoformat() if start else "campaign start",
        "end": end.isoformat() if end else "today",
    }


def _fees(revenue: Decimal) -> tuple[Decimal, Decimal]:
    return (
        _money(revenue * settings.PLATFORM_FEE_RATE),
        _money(revenue * settings.GATEWAY_FEE_RATE),
    )


def build_financial_summary(
    campaign: Campaign,
    donations: list[Donation],
    deposits: list[DepositRequest],
    start: date | None = None,
    end: date | None = None,
) -> dict:
    donations = [d for d in donations if _in_period(d.created_at, start, end)]
    approved = [d for d in donations if d.status == "approved"]

    total = _money(sum((d.amount for d in approved), Decimal("0")))
    average = _money(total / len(approved)) if approved else _money(0)
    platform_fee, gateway_fee = _fees(total)
    costs = platform_fee + gateway_fee

    by_status: dict[str, int] = defaultdict(int)
    for d in donations:
        by_status[d.status] += 1

    by_date: dict[date, dict] = {}
    donors: dict[str, dict] = {}
    for d in approved:
        day = as_utc(d.created_at).date()
        bucket = by_date.setdefault(day, {"date": day, "count": 0, "amount": Decimal("0")})
        bucket["count"] += 1
        bucket["amount"] += d.amount

        key = str(d.user_id) if d.user_id else "anonymous"
        donor = donors.setdefault(key, {"user_id": key, "total": Decimal("0"), "count": 0})
        donor["total"] += d.amount
        donor["count"] += 1

    completed = [r for r in deposits if r.status == "COMPLETED"]
    pending = [r for r in deposits if r.status == "PENDING"]
    transferred = _money(sum((r.value_donated for r in completed), Decimal("0")))
    available = total - transferred - costs
    latest = deposits[-1] if deposits else None

    goal = campaign.value_required
    return {
        "metadata": {
            "generated_at": utcnow(),
            "campaign_id": str(campaign.id),
            "campaign_title": campaign.title,
            "campaign_status": campaign.status,
            "period": _period(start, end),
            "owner": {
                "user_id": str(campaign.user_id),
                "username": campaign.owner.username if campaign.owner else None,
            },
        },
        "summary": {
            "total_raised": total,
            "net_total": total - costs,
            "fees": costs,
            "goal": goal,
            "percent_reached": _money(total / goal * 100) if goal else _money(0),
            "current_balance": campaign.value_donated,
        },
        "donations": {
            "total_donations": len(approved),
            "total_donations_all_status": len(donations),
            "average_donation": average,
            "by_status": dict(by_status),
            "by_date": [by_date[day] for day in sorted(by_date)],
            "top_donors": sorted(donors.values(), key=lambda x: x["total"], reverse=True)[
                :TOP_DONORS
            ],
        },
        "costs": {
            "platform_fee": {"rate": settings.PLATFORM_FEE_RATE, "amount": platform_fee},
            "gateway_fee": {"rate": settings.GATEWAY_FEE_RATE, "amount": gateway_fee},
            "total_costs": costs,
        },
        "transfers": {
            "has_deposit_request": bool(deposits),
            "deposit_status": latest.status if latest else None,
            "completed_transfers": len(completed),
            "total_transferred": transferred,
            "pending_transfers": len(pending),
            "pending_amount": _money(sum((r.value_donated for r in pending), Decimal("0"))),
            "campaign_finished": campaign.status == "FINISHED",
        },
        "balance": {
            "total_received": total,
            "total_transferred": transferred,
            "available_balance": available,
            "can_request_withdraw": available > 0 and not pending,
        },
    }


def build_accounting_statement(
    campaign: Campaign,
    donations: list[Donation],
    deposits: list[DepositRequest],
    start: date | None = None,
    end: date | None = None,
) -> dict:
    generated_at = utcnow()
    revenues = [
        {
            "date": as_utc(d.created_at).date(),
            "description": f"Donation received - payment {d.payment_id or d.id}",
            "category": "Revenue",
            "type": "CREDIT",
            "amount": d.amount,
            "payment_method": d.payment_method or "N/A",
        }
        for d in donations
        if d.status == "approved" and _in_period(d.created_at, start, end)
    ]

    period_deposits = [r for r in deposits if _in_period(r.created_at, start, end)]
    transfers = [
        {
            "date": as_utc(r.updated_at or r.created_at).date(),
            "description": f"Transfer to campaign owner - request {r.id}",
            "category": "Transfer",
            "type": "DEBIT",
            "amount": r.value_donated,
            "payment_method": "N/A",
        }
        for r in period_deposits
        if r.status == "COMPLETED"
    ]
    pending = [r for r in period_deposits if r.status == "PENDING"]

    total_revenue = _money(sum((r["amount"] for r in revenues), Decimal("0")))
    total_transfers = _money(sum((t["amount"] for t in transfers), Decimal("0")))
    platform_fee, gateway_fee = _fees(total_revenue)
    total_fees = platform_fee + gateway_fee
    fees = [
        {
            "date": generated_at.date(),
            "description": "Platform fee",
            "category": "Fee",
            "type": "DEBIT",
            "amount": platform_fee,
            "payment_method": "N/A",
        },
        {
            "date": generated_at.date(),
            "description": "Payment gateway fee (Mercado Pago)",
            "category": "Fee",
            "type": "DEBIT",
            "amount": gateway_fee,
            "payment_method": "N/A",
        },
    ]

    by_method: dict[str, dict] = {}
    for r in revenues:
        bucket = by_method.setdefault(r["payment_method"], {"count": 0, "amount": Decimal("0")})
        bucket["count"] += 1
        bucket["amount"] += r["amount"]

    entries = []
    running = Decimal("0")
    # sorted() is stable: revenues before transfers before fees on the same day
    for number, entry in enumerate(
        sorted(revenues + transfers + fees, key=lambda e: e["date"]), start=1
    ):
        running += entry["amount"] if entry["type"] == "CREDIT" else -entry["amount"]
        entries.append({"number": number, **entry, "running_balance": _money(running)})

    balance = total_revenue - total_transfers - total_fees
    if balance > 0:
        balance_status = "POSITIVE"
    elif balance < 0:
        balance_status = "NEGATIVE"
    else:
        balance_status = "ZERO"

    owner = campaign.owner
    return {
        "header": {
            "title": "Campaign accounting statement",
            "campaign_id": str(campaign.id),
            "campaign_title": campaign.title,
            "campaign_status": campaign.status,
            "owner": owner.username if owner else None,
            "owner_document": (owner.cpf or owner.cnpj) if owner else None,
            "period": _period(start, end),
            "generated_at": generated_at,
        },
        "revenues": {
            "count": len(revenues),
            "total": total_revenue,
            "average": _money(total_revenue / len(revenues)) if revenues else _money(0),
            "by_payment_method": by_method,
        },
        "transfers": {
            "count": len(transfers),
            "total": total_transfers,
            "pending_count": len(pending),
            "pending_amount": _money(sum((r.value_donated for r in pending), Decimal("0"))),
        },
        "fees": {
            "total": total_fees,
            "percent_of_revenue": (
                _money(total_fees / total_revenue * 100) if total_revenue else _money(0)
            ),
            "items": fees,
        },
        "balance": {
            "total_revenues": total_revenue,
            "total_transfers": total_transfers,
            "total_fees": total_fees,
            "available": balance,
            "status": balance_status,
        },
        "entries": entries,
    }


async def _campaign_ledger(
    db: AsyncSession, campaign_id: uuid.UUID
) -> tuple[Campaign, list[Donation], list[DepositRequest]]:
    campaign = await get_campaign_or_404(db, campaign_id)
    donations = await donation_service.list_by_campaign(db, campaign.id)
    deposits = await deposit_service.list_by_campaign(db, campaign.id)
    return campaign, donations, deposits


async def get_accounting(
    db: AsyncSession,
    campaign_id: uuid.UUID,
    start: date | None = None,
    end: date | None = None,
) -> dict:
    campaign, donations, deposits = await _campaign_ledger(db, campaign_id)
    return build_accounting_statement(campaign, donations, deposits, start, end)


async def export_report(
    db: AsyncSession,
    campaign_id: uuid.UUID,
    report_type: str | None,
    file_format: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> FinancialReport:
    requested = (report_type or "").strip().upper()
    if requested not in FINANCIAL_REPORT_TYPES:
        raise InvalidInputError("Invalid report type. Use FINANCIAL or ACCOUNTING")

    campaign, donations, deposits = await _campaign_ledger(db, campaign_id)
    file_format = file_format or DEFAULT_FORMATS[requested]

    if requested == "FINANCIAL":
        data = build_financial_summary(campaign, donations, deposits, start, end)
        title = f"Financial report - {campaign.title}"
        csv_rows = [{"field": k, "value": v} for k, v in flatten(data)]
    else:
        data = build_accounting_statement(campaign, donations, deposits, start, end)
        title = f"Accounting statement - {campaign.title}"
        csv_rows = data["entries"]

    content = render_pdf(title, data) if file_format == "pdf" else render_csv(csv_rows)

    stamp = utcnow().strftime("%Y%m%d%H%M%S")
    file_name = f"{requested.lower()}-report-{stamp}.{file_format}"
    key = storage.build_key(f"reports/{campaign.id}", file_name)
    stored = await storage.upload(key, content, CONTENT_TYPES[file_format])

    report = FinancialReport(
        campaign_id=campaign.id,
        user_id=campaign.user_id,
        type=requested,
        file_format=file_format,
        file_name=file_name,
        file_key=stored["key"],
        file_url=stored["url"],
        file_size=len(content),
    )
    db.add(report)
    try:
        await db.flush()
    except SQLAlchemyError:
        await storage.delete(stored["key"])
        raise

    logger.info("%s report %s exported for campaign %s", requested, report.id, campaign.id)
    return report


async def list_by_user(db: AsyncSession, user_id: uuid.UUID) -> list[FinancialReport]:
    result = await db.execute(
        select(FinancialReport)
        .where(FinancialReport.user_id == user_id)
        .order_by(FinancialReport.created_at.desc())
    )
    return list(result.scalars().all())


async def delete_report(db: AsyncSession, report_id: uuid.UUID) -> None:
    report = await db.get(FinancialReport, report_id)
    if report is None:
        raise NotFoundError("Financial report not found")

    await db.delete(report)
    await db.flush()
    storage.delete_after_commit(db, report.file_key)
