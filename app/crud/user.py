"""User data access. The calling service owns the transaction."""

from typing import Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, UserRole


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalars().first()


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def create_user(
    db: AsyncSession,
    username: str,
    email: str,
    password_hash: str,
    role: UserRole = UserRole.USER,
) -> User:
    """
    Stage a new user.

    Args:
        db: Database session
        username: Unique username
        email: Unique email address
        password_hash: bcrypt hash of the password
        role: Role to grant

    Returns:
        The flushed user (ID assigned)
    """
    user = User(username=username, email=email.lower(), password=password_hash, role=role.value)
    db.add(user)
    await db.flush()
    return user


async def count_users(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(User.id)))
    return int(result.scalar() or 0)
