"""
User model for authentication and task ownership.

Architecture:
    User → AccessToken (bearer sessions)
    User → Task ← DailyPage

Key Features:
    - Secure bcrypt password hashing
    - Unique username and unique email
    - Multiple concurrent bearer tokens per user
    - Automatic timestamp tracking
"""

from sqlalchemy import Column, Index, String
from sqlalchemy.orm import relationship

from app.models.base import SCHEMA_NAME, Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """
    User account for authentication and task ownership.

    Users log in with their email address; the username is the public handle
    shown next to tasks.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_username", "username", unique=True),
        Index("ix_users_email", "email", unique=True),
        {"schema": SCHEMA_NAME},
    )

    username = Column(
        String(50),
        nullable=False,
        comment="Unique username for user identification",
    )

    email = Column(
        String(255),
        nullable=False,
        comment="Unique email address used for login",
    )

    hashed_password = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password for secure authentication",
    )

    tasks = relationship(
        "Task",
        back_populates="user",
        cascade="all, delete-orphan",
        doc="Tasks created by this user",
    )

    access_tokens = relationship(
        "AccessToken",
        back_populates="user",
        cascade="all, delete-orphan",
        doc="Bearer tokens issued to this user",
    )

    def to_dict(self) -> dict:
        d = super().to_dict()
        d.pop("hashed_password", None)
        return d

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
