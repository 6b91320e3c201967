"""
Access token model backing revocable bearer tokens.

Every issued token is a signed JWT whose `jti` claim is the primary key of a
row here. A token authenticates only while its row exists, so logout simply
deletes the row.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import relationship

from app.models.base import SCHEMA_NAME, Base, TimestampMixin, UUIDMixin, qualified


class AccessToken(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "access_tokens"
    __table_args__ = (
        Index("ix_access_tokens_user_id", "user_id"),
        {"schema": SCHEMA_NAME},
    )

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey(qualified("users.id"), ondelete="CASCADE"),
        nullable=False,
        comment="User the token was issued to",
    )

    name = Column(
        String(100),
        nullable=False,
        default="auth_token",
        comment="Label of the token",
    )

    last_used_at = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="Last time the token authenticated a request",
    )

    user = relationship("User", back_populates="access_tokens")

    def __repr__(self):
        return f"<AccessToken(id={self.id}, user_id={self.user_id})>"
