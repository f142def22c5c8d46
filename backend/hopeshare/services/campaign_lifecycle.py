"""Campaign status transitions: admin status changes, suspension, deletion.

Status only ever changes through ``apply_transition`` so the allowed moves
live in one table.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import BusinessRuleError, InvalidInputError, NotFoundError
from hopeshare.models.campaign import CAMPAIGN_STATUSES, Campaign
from hopeshare.services import storage

logger = logging.getLogger(__name__)

CAMPAIGN_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "ACTIVE": ("ACTIVE", "SUSPENDED", "FINISHED"),
    "SUSPENDED": ("SUSPENDED", "ACTIVE", "FINISHED"),
    "FINISHED": ("FINISHED", "SUSPENDED"),
}


async def get_campaign_or_404(db: AsyncSession, campaign_id: uuid.UUID) -> Campaign:
    campaign = await db.get(Campaign, campaign_id)
    if campaign is None:
        raise NotFoundError("Campaign not found")
    return campaign


def apply_transition(campaign: Campaign, new_status: str, reason: str | None = None) -> None:
    """Move ``campaign`` to ``new_status`` or raise BusinessRuleError."""
    current = campaign.status
    if new_status not in CAMPAIGN_TRANSITIONS.get(current, ()):
        raise BusinessRuleError(f"Cannot transition campaign from '{current}' to '{new_status}'")

    campaign.status = new_status
    if new_status == "SUSPENDED":
        campaign.reason_suspension = reason if reason is not None else campaign.reason_suspension
    else:
        campaign.reason_suspension = None

    if current != new_status:
        logger.info("Campaign %s moved from %s to %s", campaign.id, current, new_status)


async def set_status(db: AsyncSession, campaign_id: uuid.UUID, new_status: str) -> Campaign:
    """Admin override of the campaign status. The caller is checked by the route."""
    campaign = await get_campaign_or_404(db, campaign_id)

    requested = new_status.strip().upper()
    if requested not in CAMPAIGN_STATUSES:
        raise InvalidInputError(
            f"Invalid status '{new_status}'. Use one of: {', '.join(CAMPAIGN_STATUSES)}"
        )

    apply_transition(campaign, requested)
    await db.flush()
    return campaign


async def suspend(db: AsyncSession, campaign_id: uuid.UUID, reason: str) -> Campaign:
    campaign = await get_campaign_or_404(db, campaign_id)
    apply_transition(campaign, "SUSPENDED", reason=reason.strip())
    await db.flush()
    return campaign


async def reactivate(db: AsyncSession, campaign_id: uuid.UUID) -> Campaign:
    campaign = await get_campaign_or_404(db, campaign_id)
    apply_transition(campaign, "ACTIVE")
    await db.flush()
    return campaign


async def delete_campaign(db: AsyncSession, campaign_id: uuid.UUID) -> None:
    """Delete a campaign that never received money, with its comments and donors."""
    campaign = await get_campaign_or_404(db, campaign_id)
    await remove_campaign(db, campaign)


async def remove_campaign(db: AsyncSession, campaign: Campaign) -> None:
    if campaign.value_donated > 0:
        raise BusinessRuleError("Campaign has donations and cannot be deleted")

    await db.delete(campaign)
    await db.flush()
    if campaign.image_key:
        storage.delete_after_commit(db, campaign.image_key)
    storage.delete_prefix_after_commit(db, f"reports/{campaign.id}/")
    logger.info("Campaign %s deleted", campaign.id)
