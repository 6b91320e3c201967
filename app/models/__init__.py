"""
Database models for the Daily Tasks service.

Architecture: User → Task ← DailyPage, with AccessToken rows backing bearer tokens.
"""

from app.models.access_token import AccessToken
from app.models.daily_page import DailyPage
from app.models.task import Task
from app.models.user import User

__all__ = [
    "User",
    "AccessToken",
    "DailyPage",
    "Task",
]
