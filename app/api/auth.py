# Authentication API routes for user registration, login, logout and profile

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.db_handlers import AccessTokenDBHandler, UserDBHandler
from app.dependencies.auth import AuthContext, get_auth_context, get_current_user
from app.exceptions import InvalidCredentials, ValidationError
from app.models import User
from app.schemas import AuthResponse, MessageResponse, UserInfo, UserLogin, UserRegister
from app.utils.auth import get_password_hash, verify_password
from app.utils.logger import setup_logger

logger = setup_logger("api.auth")

router = APIRouter(prefix=f"{settings.api_prefix}/auth", tags=["Authentication"])


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
async def register_user(
    user_data: UserRegister,
    user_db_handler: UserDBHandler = Depends(),
    token_db_handler: AccessTokenDBHandler = Depends(),
):
    """Register a new user and return a bearer token for it."""
    conflicts = await user_db_handler.find_conflicts(
        user_data.username, user_data.email
    )
    if "username" in conflicts:
        raise ValidationError("The username has already been taken.")
    if "email" in conflicts:
        raise ValidationError("The email has already been taken.")

    # Password is hashed using bcrypt before storage
    try:
        user = await user_db_handler.create(
            {
                "username": user_data.username,
                "email": user_data.email,
                "hashed_password": get_password_hash(user_data.password),
            }
        )
    except IntegrityError as e:
        # Lost a race with a concurrent registration
        raise ValidationError("The username or email has already been taken.") from e

    token = await token_db_handler.issue_token(user.id)
    logger.info(f"Registered user {user.username} (ID: {user.id})")

    return AuthResponse(user=UserInfo.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login_user(
    user_data: UserLogin,
    user_db_handler: UserDBHandler = Depends(),
    token_db_handler: AccessTokenDBHandler = Depends(),
):
    """Authenticate by email and password and issue a new bearer token."""
    user = await user_db_handler.get_user_by_email(user_data.email)

    if not user or not verify_password(user_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {user_data.email}")
        raise InvalidCredentials()

    token = await token_db_handler.issue_token(user.id)
    logger.info(f"User {user.username} logged in")

    return AuthResponse(user=UserInfo.model_validate(user), token=token)


@router.get("/me", response_model=UserInfo)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
):
    """Retrieve current authenticated user's profile information."""
    return UserInfo.model_validate(current_user)


@router.post("/logout", response_model=MessageResponse)
async def logout_user(
    auth: AuthContext = Depends(get_auth_context),
    token_db_handler: AccessTokenDBHandler = Depends(),
):
    """Revoke the token used for this request. Other sessions stay logged in."""
    await token_db_handler.revoke(auth.token.id)
    logger.info(f"User {auth.user.username} logged out")
    return MessageResponse(message="Logged out")
