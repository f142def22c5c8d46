import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hopeshare.db.base import TimestampedBase

FINANCIAL_REPORT_TYPES = ("FINANCIAL", "ACCOUNTING")


class FinancialReport(TimestampedBase):
    """A rendered report file kept in object storage."""

    __tablename__ = "financial_reports"
    __table_args__ = (
        CheckConstraint(
            "type IN ('FINANCIAL', 'ACCOUNTING')",
            name="ck_financial_reports_type",
        ),
    )

    campaign_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    file_format: Mapped[str] = mapped_column(String(10), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_key: Mapped[str] = mapped_column(Text, nullable=False)
    file_url: Mapped[str] = mapped_column(Text, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
