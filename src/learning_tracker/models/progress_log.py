"""Per-user daily activity counter model."""

import datetime as dt

from sqlalchemy import Date, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ProgressLog(Base):
    """One row per user per calendar day, counting trackable actions."""

    __tablename__ = "progress_logs"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_progress_logs_user_date"),
    )

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<ProgressLog(user_id='{self.user_id}', date='{self.date}', value={self.value})>"
