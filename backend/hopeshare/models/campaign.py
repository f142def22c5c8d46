import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hopeshare.db.base import TimestampedBase, utcnow

CAMPAIGN_STATUSES = ("ACTIVE", "FINISHED", "SUSPENDED")


class Campaign(TimestampedBase):
    __tablename__ = "campaigns"
    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'FINISHED', 'SUSPENDED')",
            name="ck_campaigns_status",
        ),
        CheckConstraint("value_donated >= 0", name="ck_campaigns_value_donated"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_key: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    request_emergency: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    value_required: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    value_donated: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")
    reason_suspension: Mapped[str | None] = mapped_column(Text, nullable=True)

    have_address: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    address_street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address_complement: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_neighborhood: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    address_zipcode: Mapped[str | None] = mapped_column(String(9), nullable=True)

    owner: Mapped["User"] = relationship(lazy="joined")  # noqa: F821
    comments: Mapped[list["CampaignComment"]] = relationship(
        back_populates="campaign",
        cascade="all, delete-orphan",
        order_by="CampaignComment.created_at",
    )
    donors: Mapped[list["CampaignDonor"]] = relationship(
        back_populates="campaign",
        cascade="all, delete-orphan",
        order_by="CampaignDonor.donated_at",
    )


class CampaignComment(TimestampedBase):
    __tablename__ = "campaign_comments"

    campaign_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    user_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    campaign: Mapped[Campaign] = relationship(back_populates="comments")


class CampaignDonor(TimestampedBase):
    """One entry per approved payment credited to the campaign."""

    __tablename__ = "campaign_donors"

    campaign_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    donated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    campaign: Mapped[Campaign] = relationship(back_populates="donors")
