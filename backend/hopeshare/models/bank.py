from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from hopeshare.db.base import Base


class Bank(Base):
    __tablename__ = "banks"

    code: Mapped[str] = mapped_column(String(10), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
