"""
Daily page model: the day bucket that groups tasks by calendar date.

Pages are created lazily the first time a date is referenced and are never
updated or deleted by the application. The unique constraint on `date` is what
keeps concurrent first access from producing duplicate pages.
"""

from sqlalchemy import Column, Date, UniqueConstraint
from sqlalchemy.orm import relationship

from app.models.base import SCHEMA_NAME, Base, TimestampMixin, UUIDMixin


class DailyPage(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "daily_pages"
    __table_args__ = (
        UniqueConstraint("date", name="uq_daily_pages_date"),
        {"schema": SCHEMA_NAME},
    )

    date = Column(Date, nullable=False, comment="Calendar date of the page")

    tasks = relationship(
        "Task",
        back_populates="page",
        doc="Tasks filed under this date",
    )

    def __repr__(self):
        return f"<DailyPage(id={self.id}, date={self.date})>"
