"""Registered family user model."""

from datetime import datetime
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from fund_tracker.models.database import Base


class User(Base):
    __tablename__ = "app_user"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    pin: Mapped[str] = mapped_column(String(10))  # plaintext, family-only app
    created_at: Mapped[str] = mapped_column(
        String(30), default=lambda: datetime.now().isoformat()
    )
