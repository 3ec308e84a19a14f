"""Key-value entry model backing the local store."""

from datetime import datetime
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column
from fund_tracker.models.database import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_entry"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text)  # JSON document
    updated_at: Mapped[str] = mapped_column(
        String(30),
        default=lambda: datetime.now().isoformat(),
        onupdate=lambda: datetime.now().isoformat(),
    )
