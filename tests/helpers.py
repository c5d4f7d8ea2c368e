"""Row builders shared by the service and API tests."""

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Event, EventStatus, User, UserRole
from app.services.auth import create_access_token, hash_password
from app.utils import utcnow

TEST_PASSWORD = "secret1"
# Hashed once, bcrypt is deliberately slow
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


def build_user(username: str, role: UserRole = UserRole.USER) -> User:
    return User(
        username=username,
        email=f"{username}@example.com",
        password=TEST_PASSWORD_HASH,
        role=role.value,
    )


def build_event(creator: User, max_capacity: int = 10, status: EventStatus = EventStatus.OPEN,
                current_participants: int = 0, days_ahead: int = 7, **fields) -> Event:
    values = {
        "title": "Python Meetup",
        "description": "Talks and pizza",
        "location": "Community Hall",
        "event_date": utcnow() + timedelta(days=days_ahead),
    }
    values.update(fields)
    return Event(
        created_by=creator.id,
        max_capacity=max_capacity,
        current_participants=current_participants,
        status=status.value,
        average_rating=0.0,
        total_ratings=0,
        **values,
    )


async def add_user(db: AsyncSession, username: str, role: UserRole = UserRole.USER) -> User:
    user = build_user(username, role)
    db.add(user)
    await db.commit()
    return user


async def add_event(db: AsyncSession, creator: User, **kwargs) -> Event:
    event = build_event(creator, **kwargs)
    db.add(event)
    await db.commit()
    return event


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}
