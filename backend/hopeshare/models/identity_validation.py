import uuid

from sqlalchemy import JSON, Boolean, CheckConstraint, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hopeshare.db.base import TimestampedBase

VALIDATION_STATUSES = ("PENDING", "APPROVED", "REJECTED")


class IdentityValidation(TimestampedBase):
    __tablename__ = "identity_validations"
    __table_args__ = (
        CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')",
            name="ck_identity_validations_status",
        ),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    cnpj: Mapped[str | None] = mapped_column(String(18), nullable=True)
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    observation: Mapped[str | None] = mapped_column(Text, nullable=True)
    observation_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # [{"name", "key", "url", "content_type"}]
    documents: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
