from app.dependencies.auth import AuthContext, get_auth_context, get_current_user
from app.dependencies.tasks import get_task_or_404, is_task_owner, require_owned_task

__all__ = [
    "AuthContext",
    "get_auth_context",
    "get_current_user",
    "get_task_or_404",
    "is_task_owner",
    "require_owned_task",
]
