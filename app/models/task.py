"""
Task model for a user's to-do item filed under one daily page.

Architecture:
    User → Task ← DailyPage

Lifecycle:
    1. Created by its owner under today's page
    2. Title, description and completion flag edited by the owner
    3. Deleted by the owner
    Rollover creates fresh copies of incomplete tasks; it never modifies them.

Key Features:
    - Immutable owner and page references
    - `completed_at` kept in step with `is_completed`
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.models.base import SCHEMA_NAME, Base, TimestampMixin, UUIDMixin, qualified


class Task(Base, UUIDMixin, TimestampMixin):
    """A to-do item owned by one user and filed under one date."""

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_id", "user_id"),
        Index("ix_tasks_daily_page_id", "daily_page_id"),
        Index("ix_tasks_page_completed", "daily_page_id", "is_completed"),
        {"schema": SCHEMA_NAME},
    )

    daily_page_id = Column(
        Uuid(as_uuid=True),
        ForeignKey(qualified("daily_pages.id"), ondelete="CASCADE"),
        nullable=False,
        comment="Daily page (calendar date) the task is filed under",
    )

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey(qualified("users.id"), ondelete="CASCADE"),
        nullable=False,
        comment="User who owns the task",
    )

    title = Column(String(255), nullable=False, comment="Short task title")

    description = Column(Text, nullable=True, comment="Optional longer description")

    is_completed = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default="false",
        comment="Whether the task is done",
    )

    completed_at = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="Set when the task was marked done, null otherwise",
    )

    user = relationship("User", back_populates="tasks", doc="Owner of the task")

    page = relationship("DailyPage", back_populates="tasks")

    def __repr__(self):
        return (
            f"<Task(id={self.id}, title='{self.title[:50]}', "
            f"is_completed={self.is_completed})>"
        )
