"""Withdrawal ("deposit") requests.

A request is only accepted from a user whose identity validation is
APPROVED and who has a payout configuration. Accepting it snapshots the
campaign total and finishes the campaign in the same transaction.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import (
    AccessDeniedError,
    BusinessRuleError,
    InvalidInputError,
    NotFoundError,
)
from hopeshare.models.deposit_request import DepositRequest
from hopeshare.models.identity_validation import IdentityValidation
from hopeshare.models.payout_config import PayoutConfig
from hopeshare.services.campaign_lifecycle import apply_transition, get_campaign_or_404

logger = logging.getLogger(__name__)

NOT_VALIDATED = (
    "User not authorized to request deposits. Check your document validation status."
)
NO_PAYOUT_CONFIG = "User has no payout configuration. Configure one before requesting a deposit."

DEPOSIT_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "PENDING": ("COMPLETED", "REJECTED"),
    "COMPLETED": (),
    "REJECTED": (),
}


async def create_request(
    db: AsyncSession,
    user_id: uuid.UUID | None,
    campaign_id: uuid.UUID | None,
    request_message: str | None = None,
) -> DepositRequest:
    if user_id is None or campaign_id is None:
        raise InvalidInputError("user_id and campaign_id are required")

    campaign = await get_campaign_or_404(db, campaign_id)

    validation = await db.scalar(
        select(IdentityValidation).where(IdentityValidation.user_id == user_id)
    )
    if validation is None or validation.status != "APPROVED":
        raise AccessDeniedError(NOT_VALIDATED)

    config = await db.scalar(select(PayoutConfig).where(PayoutConfig.user_id == user_id))
    if config is None:
        raise AccessDeniedError(NO_PAYOUT_CONFIG)

    request = DepositRequest(
        user_id=user_id,
        campaign_id=campaign.id,
        campaign_title=campaign.title,
        value_donated=campaign.value_donated,
        request_message=request_message,
        status="PENDING",
    )
    db.add(request)
    apply_transition(campaign, "FINISHED")
    await db.flush()

    logger.info(
        "Deposit request %s opened for campaign %s (%s)",
        request.id,
        campaign.id,
        request.value_donated,
    )
    return request


async def update_status(
    db: AsyncSession,
    request_id: uuid.UUID,
    new_status: str | None,
    justification: str | None,
) -> DepositRequest:
    """Complete or reject a pending request. The caller is checked by the route."""
    requested = (new_status or "").strip().upper()
    if requested not in ("COMPLETED", "REJECTED"):
        raise InvalidInputError("new_status must be COMPLETED or REJECTED")

    justification = (justification or "").strip() or None
    if requested == "REJECTED" and justification is None:
        raise InvalidInputError("A justification is required to reject a deposit request")

    request = await db.get(DepositRequest, request_id)
    if request is None:
        raise NotFoundError("Deposit request not found")

    if requested not in DEPOSIT_TRANSITIONS.get(request.status, ()):
        raise BusinessRuleError(
            f"Cannot transition deposit request from '{request.status}' to '{requested}'"
        )

    request.status = requested
    request.justification_admin = justification
    await db.flush()
    logger.info("Deposit request %s marked %s", request.id, requested)
    return request


async def list_mine(db: AsyncSession, user_id: uuid.UUID) -> list[DepositRequest]:
    result = await db.execute(
        select(DepositRequest)
        .where(DepositRequest.user_id == user_id)
        .order_by(DepositRequest.created_at.desc())
    )
    return list(result.scalars().all())


async def list_pending(db: AsyncSession) -> list[DepositRequest]:
    result = await db.execute(
        select(DepositRequest)
        .where(DepositRequest.status == "PENDING")
        .order_by(DepositRequest.created_at)
    )
    return list(result.scalars().all())


async def list_by_campaign(db: AsyncSession, campaign_id: uuid.UUID) -> list[DepositRequest]:
    result = await db.execute(
        select(DepositRequest)
        .where(DepositRequest.campaign_id == campaign_id)
        .order_by(DepositRequest.created_at)
    )
    return list(result.scalars().all())
