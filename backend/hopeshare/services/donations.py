"""Donation intents, gateway payment events and refunds.

A campaign is credited exactly once per payment: the webhook may deliver
the same payment many times, but ``record_approved_payment`` only runs for a
donation whose ``credited_at`` is still unset.
"""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import BusinessRuleError, InvalidInputError, NotFoundError
from hopeshare.db.base import utcnow
from hopeshare.models.campaign import Campaign, CampaignDonor
from hopeshare.models.donation import Donation
from hopeshare.models.user import User
from hopeshare.services.campaign_lifecycle import get_campaign_or_404
from hopeshare.services.payment_gateway import MercadoPagoClient, PaymentInfo, Preference
from hopeshare.services.users import get_user_or_404

logger = logging.getLogger(__name__)


def _parse_uuid(value: object) -> uuid.UUID | None:
    if value is None or value == "":
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


async def create_donation(
    db: AsyncSession,
    gateway: MercadoPagoClient,
    user_id: uuid.UUID | None,
    campaign_id: uuid.UUID | None,
    amount: Decimal | None,
) -> tuple[Donation, Preference]:
    """Store a pending donation and open a checkout preference for it."""
    if user_id is None or campaign_id is None or amount is None:
        raise InvalidInputError("user_id, campaign_id and amount are required")
    if amount <= 0:
        raise InvalidInputError("amount must be greater than zero")

    campaign = await get_campaign_or_404(db, campaign_id)
    user = await get_user_or_404(db, user_id)
    if campaign.status != "ACTIVE":
        raise BusinessRuleError("Campaign is not accepting donations")

    donation = Donation(
        campaign_id=campaign.id,
        user_id=user.id,
        campaign_title=campaign.title,
        amount=amount,
        status="pending",
    )
    db.add(donation)
    await db.flush()

    preference = await gateway.create_preference(
        items=[{"title": f"Donation - {campaign.title}", "quantity": 1, "unit_price": amount}],
        payer={"email": user.email, "name": user.username},
        metadata={
            "user_id": str(user.id),
            "campaign_id": str(campaign.id),
            "donation_id": str(donation.id),
        },
        external_reference=str(campaign.id),
    )
    donation.preference_id = preference.id
    await db.flush()

    logger.info(
        "Donation %s of %s opened for campaign %s (preference %s)",
        donation.id,
        amount,
        campaign.id,
        preference.id,
    )
    return donation, preference


async def _find_donation(db: AsyncSession, payment: PaymentInfo) -> Donation | None:
    donation = await db.scalar(select(Donation).where(Donation.payment_id == payment.payment_id))
    if donation is not None:
        return donation

    donation_id = _parse_uuid(payment.metadata.get("donation_id"))
    if donation_id is None:
        return None
    return await db.get(Donation, donation_id)


async def record_payment_event(
    db: AsyncSession, gateway: MercadoPagoClient, payment_id: str
) -> Donation | None:
    """Apply the gateway's current view of ``payment_id``.

    Returns ``None`` when the payment references no known campaign.
    """
    payment = await gateway.get_payment(payment_id)
    donation = await _find_donation(db, payment)

    if donation is None:
        campaign_id = _parse_uuid(payment.external_reference) or _parse_uuid(
            payment.metadata.get("campaign_id")
        )
        campaign = await db.get(Campaign, campaign_id) if campaign_id else None
        if campaign is None:
            logger.warning(
                "Payment %s references unknown campaign %r, ignoring",
                payment.payment_id,
                payment.external_reference,
            )
            return None

        donor_id = _parse_uuid(payment.metadata.get("user_id"))
        if donor_id is not None and await db.get(User, donor_id) is None:
            donor_id = None

        donation = Donation(
            payment_id=payment.payment_id,
            campaign_id=campaign.id,
            user_id=donor_id,
            campaign_title=campaign.title,
            amount=payment.amount,
            payment_method=payment.payment_method,
            status=payment.status,
            status_detail=payment.status_detail,
        )
        db.add(donation)
    else:
        donation.payment_id = donation.payment_id or payment.payment_id
        # Mercado Pago keeps a partially refunded payment approved
        if donation.refunded_at is None or payment.status != "approved":
            donation.status = payment.status
        donation.status_detail = payment.status_detail
        donation.payment_method = payment.payment_method or donation.payment_method
        if payment.amount > 0 and donation.credited_at is None:
            donation.amount = payment.amount

    await db.flush()
    logger.info("Payment %s is %s (donation %s)", payment.payment_id, payment.status, donation.id)

    if payment.status == "approved" and donation.credited_at is None:
        await record_approved_payment(db, donation)
    return donation


async def record_approved_payment(db: AsyncSession, donation: Donation) -> None:
    """Credit the campaign and the donor for one approved payment."""
    donation.credited_at = utcnow()
    await db.execute(
        update(Campaign)
        .where(Campaign.id == donation.campaign_id)
        .values(value_donated=Campaign.value_donated + donation.amount)
    )

    donor = await db.get(User, donation.user_id) if donation.user_id else None
    if donor is not None:
        previous = await db.scalar(
            select(func.count())
            .select_from(CampaignDonor)
            .where(
                CampaignDonor.campaign_id == donation.campaign_id,
                CampaignDonor.user_id == donor.id,
            )
        )
        values = {"total_donated": User.total_donated + donation.amount}
        if not previous:
            values["total_campaigns_donated"] = User.total_campaigns_donated + 1
        await db.execute(update(User).where(User.id == donor.id).values(**values))

    db.add(
        CampaignDonor(
            campaign_id=donation.campaign_id,
            user_id=donor.id if donor else None,
            username=donor.username if donor else None,
            user_image=donor.image if donor else None,
            amount=donation.amount,
        )
    )
    await db.flush()
    logger.info("Campaign %s credited %s", donation.campaign_id, donation.amount)


async def refund(
    db: AsyncSession,
    gateway: MercadoPagoClient,
    payment_id: str,
    amount: Decimal | None = None,
) -> Donation:
    donation = await db.scalar(select(Donation).where(Donation.payment_id == payment_id))
    if donation is None:
        raise NotFoundError("Donation not found")
    if donation.status != "approved":
        raise BusinessRuleError("Only approved donations can be refunded")
    if amount is not None and amount > donation.amount:
        raise InvalidInputError("Refund amount exceeds the donated amount")

    result = await gateway.refund(payment_id, amount)
    refunded = result.amount or amount or donation.amount

    await db.execute(
        update(Campaign)
        .where(Campaign.id == donation.campaign_id)
        .values(
            value_donated=case(
                (Campaign.value_donated > refunded, Campaign.value_donated - refunded),
                else_=Decimal("0"),
            )
        )
        .execution_options(synchronize_session="fetch")
    )

    donation.status = "refunded"
    donation.refunded_at = utcnow()
    await db.flush()
    logger.info("Payment %s refunded %s", payment_id, refunded)
    return donation


async def list_by_user(db: AsyncSession, user_id: uuid.UUID) -> list[Donation]:
    result = await db.execute(
        select(Donation).where(Donation.user_id == user_id).order_by(Donation.created_at.desc())
    )
    return list(result.scalars().all())


async def list_by_campaign(db: AsyncSession, campaign_id: uuid.UUID) -> list[Donation]:
    result = await db.execute(
        select(Donation)
        .where(Donation.campaign_id == campaign_id)
        .order_by(Donation.created_at.desc())
    )
    return list(result.scalars().all())
