"""
Authentication dependencies for FastAPI route protection.
"""

import uuid
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_app_db
from app.db_handlers import AccessTokenDBHandler
from app.exceptions import Unauthenticated
from app.models import AccessToken, User
from app.utils.auth import extract_token_claims

# HTTP Bearer token extraction; missing headers are reported as 401 below
security = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """The authenticated user together with the token used for this request."""

    user: User
    token: AccessToken


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_app_db),
) -> AuthContext:
    """
    Resolve the bearer token to its live token row and owning user.

    A token is rejected when its signature or expiry is invalid, or when it
    has been revoked (its row deleted at logout).
    """
    if credentials is None:
        raise Unauthenticated()

    claims = extract_token_claims(credentials.credentials)
    if claims is None:
        raise Unauthenticated("Could not validate credentials")

    try:
        user_id = uuid.UUID(claims[0])
        token_id = uuid.UUID(claims[1])
    except ValueError as e:
        raise Unauthenticated("Could not validate credentials") from e

    token_handler = AccessTokenDBHandler()
    token = await token_handler.get_active_token(token_id, user_id, db=db)
    if token is None or token.user is None:
        raise Unauthenticated()

    return AuthContext(user=token.user, token=token)


async def get_current_user(
    auth: AuthContext = Depends(get_auth_context),
) -> User:
    """
    Dependency to get the current authenticated user from the bearer token.
    """
    return auth.user
