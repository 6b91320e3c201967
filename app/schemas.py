import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.utils.logger import setup_logger

logger = setup_logger("schemas")


# --- Authentication ---


class UserRegister(BaseModel):
    username: str = Field(
        ..., min_length=3, max_length=50, description="Username for the new account"
    )
    email: EmailStr = Field(..., description="Email address used to log in")
    password: str = Field(
        ..., min_length=6, max_length=100, description="Password for the new account"
    )


class UserLogin(BaseModel):
    email: EmailStr = Field(..., description="Email address for login")
    password: str = Field(..., description="Password for login")


class UserInfo(BaseModel):
    id: uuid.UUID = Field(..., description="User unique identifier")
    username: str = Field(..., description="Username")
    email: str = Field(..., description="Email address")
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    user: UserInfo
    token: str = Field(..., description="Bearer token for the Authorization header")


class MessageResponse(BaseModel):
    message: str = Field(..., description="Response message")


# --- Tasks ---


class TaskOwner(BaseModel):
    id: uuid.UUID
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        # Trimmed before the length checks, so a blank title fails min_length
        return v.strip() if isinstance(v, str) else v


class UpdateTaskRequest(BaseModel):
    """Partial update: only the fields present in the request body are applied."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    is_completed: bool | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: str | None) -> str:
        # An explicit null would erase a required column
        if v is None:
            raise ValueError("title must not be null")
        return v

    @field_validator("is_completed")
    @classmethod
    def completion_not_null(cls, v: bool | None) -> bool:
        if v is None:
            raise ValueError("is_completed must be a boolean")
        return v


class TaskResponse(BaseModel):
    id: uuid.UUID
    daily_page_id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str | None = None
    is_completed: bool
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    user: TaskOwner | None = None

    model_config = ConfigDict(from_attributes=True)


class DailyTasksResponse(BaseModel):
    date: date
    tasks: list[TaskResponse]


class RolloverResponse(BaseModel):
    moved: int = Field(..., description="Number of tasks copied into today")
