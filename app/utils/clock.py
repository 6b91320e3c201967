"""
Calendar clock used to resolve "now", "today" and "yesterday".

All date logic goes through a Clock instance so that the current day can be
pinned in tests. Dates are resolved in the configured application timezone.
"""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from app.config import settings


class Clock:
    """Wall clock bound to a timezone."""

    def __init__(self, timezone: str | None = None):
        self.tz = ZoneInfo(timezone or settings.timezone)

    def now(self) -> datetime:
        """Current instant as an aware UTC datetime."""
        return datetime.now(UTC)

    def today(self) -> date:
        return self.now().astimezone(self.tz).date()

    def yesterday(self) -> date:
        return self.today() - timedelta(days=1)

    def tomorrow(self) -> date:
        return self.today() + timedelta(days=1)

    def parse_date(self, value: str | None) -> date:
        """
        Resolve a user-supplied date: an ISO date (YYYY-MM-DD) or one of the
        words "today", "yesterday" and "tomorrow". An empty value means today.

        Raises ValueError for anything else.
        """
        if not value or not value.strip():
            return self.today()

        relative = {
            "today": self.today,
            "yesterday": self.yesterday,
            "tomorrow": self.tomorrow,
        }.get(value.strip().lower())
        if relative is not None:
            return relative()

        return date.fromisoformat(value.strip())


class FixedClock(Clock):
    """Clock frozen at a given instant."""

    def __init__(self, instant: datetime, timezone: str | None = None):
        super().__init__(timezone)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, **kwargs) -> None:
        """Move the frozen instant forward by a timedelta built from kwargs."""
        self.instant = self.instant + timedelta(**kwargs)


_default_clock = Clock()


def get_clock() -> Clock:
    """FastAPI dependency returning the process-wide clock."""
    return _default_clock
