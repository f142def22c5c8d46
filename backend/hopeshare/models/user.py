from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Date, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hopeshare.db.base import TimestampedBase


class User(TimestampedBase):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("type_user IN ('INDIVIDUAL', 'COMPANY')", name="ck_users_type_user"),
    )

    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    type_user: Mapped[str] = mapped_column(String(20), nullable=False)
    cpf: Mapped[str | None] = mapped_column(String(14), unique=True, nullable=True)
    cnpj: Mapped[str | None] = mapped_column(String(18), unique=True, nullable=True)
    birthdate: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    total_donated: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    total_campaigns_donated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_campaigns_created: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
