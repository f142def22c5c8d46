import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hopeshare.db.base import TimestampedBase


class Donation(TimestampedBase):
    __tablename__ = "donations"

    payment_id: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    preference_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    campaign_title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # Mercado Pago payment state, lower case
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    status_detail: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Set once, when the campaign is credited; never cleared
    credited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    refunded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
