"""Where a user's withdrawals are paid: one PIX key or bank account per user."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import InvalidInputError, NotFoundError
from hopeshare.models.identity_validation import IdentityValidation
from hopeshare.models.payout_config import PayoutConfig
from hopeshare.schemas.payout_config import PayoutConfigRequest
from hopeshare.services.users import get_user_or_404

REQUIRED_FIELDS = {
    "PIX": ("pix_key",),
    "BANK": ("bank_name", "agency", "account"),
}


async def save_config(db: AsyncSession, data: PayoutConfigRequest) -> PayoutConfig:
    await get_user_or_404(db, data.user_id)

    missing = [f for f in REQUIRED_FIELDS[data.receipt_type] if not getattr(data, f)]
    if missing:
        raise InvalidInputError(
            f"{', '.join(missing)} required for receipt type {data.receipt_type}"
        )

    config = await db.scalar(select(PayoutConfig).where(PayoutConfig.user_id == data.user_id))
    if config is None:
        config = PayoutConfig(user_id=data.user_id)
        db.add(config)

    for name, value in data.model_dump(exclude={"user_id"}).items():
        setattr(config, name, value)
    await db.flush()
    return config


async def get_config(db: AsyncSession, user_id: uuid.UUID) -> tuple[PayoutConfig, bool]:
    """Return the config and whether the user's identity is APPROVED."""
    config = await db.scalar(select(PayoutConfig).where(PayoutConfig.user_id == user_id))
    if config is None:
        raise NotFoundError("Payout configuration not found")

    status = await db.scalar(
        select(IdentityValidation.status).where(IdentityValidation.user_id == user_id)
    )
    return config, status == "APPROVED"
