import uuid

from sqlalchemy import CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from hopeshare.db.base import TimestampedBase

RECEIPT_TYPES = ("PIX", "BANK")


class PayoutConfig(TimestampedBase):
    """Where a user's withdrawals are paid to: a PIX key or a bank account."""

    __tablename__ = "payout_configs"
    __table_args__ = (
        CheckConstraint("receipt_type IN ('PIX', 'BANK')", name="ck_payout_configs_receipt_type"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    receipt_type: Mapped[str] = mapped_column(String(10), nullable=False)
    pix_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pix_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    bank_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    agency: Mapped[str | None] = mapped_column(String(20), nullable=True)
    account: Mapped[str | None] = mapped_column(String(30), nullable=True)
    account_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    cnpj: Mapped[str | None] = mapped_column(String(18), nullable=True)
