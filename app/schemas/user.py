"""
User and authentication schema definitions for the Event Platform API.
"""

import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator

from app.models.user import UserRole

USERNAME_RE = re.compile(r"[A-Za-z0-9_]+")
PASSWORD_MIN_LENGTH = 6
# bcrypt only accepts this many bytes
PASSWORD_MAX_BYTES = 72


def check_password(password: str) -> str:
    """
    Enforce the password length bounds.

    Raises:
        ValueError: If the password is too short or too long to hash
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return password


class UserCreate(BaseModel):
    """Sign-up request body."""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """
        Usernames are letters, digits and underscores only.

        Raises:
            ValueError: If the username contains any other character
        """
        if not USERNAME_RE.fullmatch(v):
            raise ValueError("Username may only contain letters, digits and underscores")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "jane_doe",
                "email": "jane@example.com",
                "password": "s3cret!"
            }
        }
    )


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )


class UserData(BaseModel):
    user: UserResponse


class LoginResponse(BaseModel):
    user: UserResponse
    token: str


class UserStats(BaseModel):
    """Profile counters; the admin-only ones are omitted for regular users."""
    participations: int
    evaluations: int
    events_created: Optional[int] = None
    total_users: Optional[int] = None
    total_events: Optional[int] = None


class ProfileResponse(BaseModel):
    user: UserResponse
    stats: UserStats
