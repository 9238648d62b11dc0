"""
WordLoop – SQLAlchemy ORM Models
=================================
Defines the key-value settings table that holds the interval, the
auto-change flag and the daily-loop snapshot.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


# ---------------------------------------------------------------------------
# Setting – one JSON-encoded value per key
# ---------------------------------------------------------------------------
class Setting(Base):
    __tablename__ = "settings"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)          # JSON document
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Setting key={self.key!r} value={self.value[:40]!r}>"
