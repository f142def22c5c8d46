import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hopeshare.db.base import TimestampedBase


class DepositRequest(TimestampedBase):
    """Withdrawal of a campaign's raised funds to its owner."""

    __tablename__ = "deposit_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'COMPLETED', 'REJECTED')",
            name="ck_deposit_requests_status",
        ),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Snapshot of the campaign at request time
    campaign_title: Mapped[str] = mapped_column(String(255), nullable=False)
    value_donated: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    request_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    justification_admin: Mapped[str | None] = mapped_column(Text, nullable=True)
