"""
Base configurations and mixins for database models.

This module provides the foundation for all database models in the Daily Tasks
application: the declarative base with dict serialization, timestamp and UUID
primary key mixins, and a helper for schema-qualified foreign keys.
"""

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import Column, DateTime, Uuid, inspect
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.functions import now as db_now

from app.config import SCHEMA_NAME


def utcnow() -> datetime:
    return datetime.now(UTC)


class CustomBase:
    """
    Custom base class for SQLAlchemy models with enhanced serialization.

    `to_dict` converts UUID values to strings and dates/datetimes to ISO 8601.
    """

    def to_dict(self) -> dict:
        d = {}
        if not self:
            return d
        for column in inspect(self).mapper.column_attrs:
            value = getattr(self, column.key)
            if isinstance(value, uuid.UUID):
                d[column.key] = str(value)
            elif isinstance(value, datetime | date):
                d[column.key] = value.isoformat()
            else:
                d[column.key] = value
        return d


# Create the base class for all models
Base = declarative_base(cls=CustomBase)


class TimestampMixin:
    """
    Mixin class that adds automatic timestamp management to models.

    Values are assigned in Python with microsecond precision so that rows
    created within the same second still order by creation time; the server
    default covers rows inserted outside the ORM.
    """

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the record was created",
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the record was last updated",
    )


class UUIDMixin:
    """Mixin class that adds a UUID4 primary key to models."""

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Primary key using UUID4 format",
    )


def qualified(target: str) -> str:
    """Prefix a `table.column` foreign key target with the schema, if any."""
    return f"{SCHEMA_NAME}.{target}" if SCHEMA_NAME else target


__all__ = ["Base", "TimestampMixin", "UUIDMixin", "SCHEMA_NAME", "qualified", "utcnow"]
