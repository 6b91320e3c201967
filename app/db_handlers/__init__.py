from app.db_handlers.access_token import AccessTokenDBHandler
from app.db_handlers.base import BaseDBHandler, check_local_db
from app.db_handlers.daily_page import DailyPageDBHandler
from app.db_handlers.task import TaskDBHandler
from app.db_handlers.user import UserDBHandler

__all__ = [
    "BaseDBHandler",
    "check_local_db",
    "AccessTokenDBHandler",
    "DailyPageDBHandler",
    "TaskDBHandler",
    "UserDBHandler",
]
