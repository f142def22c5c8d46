import uuid

from sqlalchemy import CheckConstraint, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hopeshare.db.base import TimestampedBase

REPORT_STATUSES = ("PENDING", "ANALYZED", "RESOLVED")


class Report(TimestampedBase):
    """A user's abuse report against a campaign."""

    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'ANALYZED', 'RESOLVED')",
            name="ck_reports_status",
        ),
    )

    campaign_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
