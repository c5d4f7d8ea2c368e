"""
Identity services: password hashing, access tokens and account operations.

Tokens are stateless HS256 JWTs carrying the user id, username and role.
Each verified token becomes an :class:`AuthContext` that is passed
explicitly into the services that need to know who is acting.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import bcrypt
import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.crud import evaluation as evaluation_crud
from app.crud import event as event_crud
from app.crud import participation as participation_crud
from app.crud import user as user_crud
from app.exceptions import Conflict, NotFound, Unauthenticated
from app.logging_config import get_logger
from app.models.user import User, UserRole

logger = get_logger("services.auth")

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class AuthContext:
    """The verified identity of the caller."""
    user_id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @classmethod
    def for_user(cls, user: User) -> "AuthContext":
        return cls(user_id=user.id, username=user.username, role=user.role)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed access token for a user.

    Args:
        user: The authenticated user
        expires_delta: Token lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "role": user.role,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> AuthContext:
    """
    Verify a token and extract the caller's identity.

    Raises:
        Unauthenticated: If the token is expired, tampered with or malformed
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token has expired")
    except jwt.InvalidTokenError:
        raise Unauthenticated("Invalid token")

    try:
        return AuthContext(
            user_id=int(payload["sub"]),
            username=payload["username"],
            role=payload["role"],
        )
    except (KeyError, TypeError, ValueError):
        raise Unauthenticated("Invalid token")


class AuthService:
    """Account registration, login and profile."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register_user(self, username: str, email: str, password: str) -> User:
        """
        Create a regular user account.

        Raises:
            Conflict: If the username or email is already taken
        """
        try:
            if await user_crud.get_user_by_username(self.db, username):
                raise Conflict("Username is already taken")
            if await user_crud.get_user_by_email(self.db, email):
                raise Conflict("Email is already registered")
            try:
                user = await user_crud.create_user(
                    self.db, username, email, hash_password(password), UserRole.USER
                )
            except IntegrityError:
                raise Conflict("Username or email is already taken")
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    async def authenticate(self, email: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and issue a token.

        Returns:
            The user and a fresh access token

        Raises:
            Unauthenticated: On unknown email or wrong password, with the
                same message for both
        """
        user = await user_crud.get_user_by_email(self.db, email)
        if user is None or not verify_password(password, user.password):
            logger.info(f"Failed login attempt for {email}")
            raise Unauthenticated(INVALID_CREDENTIALS)

        logger.info(f"User {user.id} logged in")
        return user, create_access_token(user)

    async def get_profile(self, user_id: int) -> Dict[str, Any]:
        """
        Get a user together with their activity counters.

        Administrators also get platform-wide totals.
        """
        user = await user_crud.get_user(self.db, user_id)
        if user is None:
            raise NotFound("User not found")

        stats = {
            "participations": await participation_crud.count_active_for_user(self.db, user_id),
            "evaluations": await evaluation_crud.count_for_user(self.db, user_id),
        }
        if user.is_admin:
            stats["events_created"] = await event_crud.count_events(self.db, created_by=user_id)
            stats["total_users"] = await user_crud.count_users(self.db)
            stats["total_events"] = await event_crud.count_events(self.db)
        return {"user": user, "stats": stats}
