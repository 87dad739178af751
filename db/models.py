"""
db.models - SQLAlchemy ORM declarations.

Tables
------
print_jobs  - one row per label print attempt, successful or not.
              Customer data itself lives in the membership system;
              only what went to the printer is kept here.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class PrintJob(Base):
    __tablename__ = "print_jobs"

    STATUS_PRINTED = "printed"
    STATUS_FAILED = "failed"

    id           = Column(Integer, primary_key=True, autoincrement=True)
    reference_id = Column(String(64), nullable=False, index=True)
    label_size   = Column(String(20), nullable=False, default="")
    printer      = Column(String(200), nullable=False, default="")
    status       = Column(String(20), nullable=False, index=True)
    error        = Column(Text, default="")
    created_at   = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "reference_id": self.reference_id,
            "label_size": self.label_size or "",
            "printer": self.printer or "",
            "status": self.status,
            "error": self.error or "",
            "created_at": self.created_at.isoformat() if self.created_at else "",
        }
