"""Participation data access. The calling service owns the transaction."""

from typing import List, Optional
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.participation import Participation, ParticipationStatus
from app.utils import utcnow


async def get_participation(db: AsyncSession, user_id: int, event_id: int) -> Optional[Participation]:
    """
    Get the participation row of a (user, event) pair, whatever its status.

    Args:
        db: Database session
        user_id: ID of the user
        event_id: ID of the event

    Returns:
        Participation or None if the user never registered
    """
    result = await db.execute(
        select(Participation)
        .where(Participation.user_id == user_id, Participation.event_id == event_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_active_participation(db: AsyncSession, user_id: int, event_id: int) -> Optional[Participation]:
    participation = await get_participation(db, user_id, event_id)
    if participation is None or participation.status != ParticipationStatus.REGISTERED.value:
        return None
    return participation


async def create_participation(db: AsyncSession, user_id: int, event_id: int) -> Participation:
    participation = Participation(
        user_id=user_id,
        event_id=event_id,
        status=ParticipationStatus.REGISTERED.value,
        registration_date=utcnow(),
    )
    db.add(participation)
    await db.flush()
    return participation


async def _transition(db: AsyncSession, participation_id: int, from_status: str, to_status: str, **values) -> bool:
    stmt = (
        update(Participation)
        .where(Participation.id == participation_id, Participation.status == from_status)
        .values(status=to_status, **values)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount == 1


async def reactivate_participation(db: AsyncSession, participation_id: int) -> bool:
    """
    Turn a cancelled participation back into a registration.

    Returns:
        False if the row was not cancelled any more (lost a race)
    """
    return await _transition(
        db,
        participation_id,
        ParticipationStatus.CANCELLED.value,
        ParticipationStatus.REGISTERED.value,
        registration_date=utcnow(),
    )


async def cancel_participation(db: AsyncSession, participation_id: int) -> bool:
    """
    Cancel an active participation.

    Returns:
        False if the row was not registered any more (lost a race)
    """
    return await _transition(
        db,
        participation_id,
        ParticipationStatus.REGISTERED.value,
        ParticipationStatus.CANCELLED.value,
    )


async def get_participations(
    db: AsyncSession,
    user_id: Optional[int] = None,
    event_id: Optional[int] = None,
) -> List[Participation]:
    """
    List participations, most recent registration first.

    Args:
        db: Database session
        user_id: Optional user filter
        event_id: Optional event filter

    Returns:
        List of participations with their user and event loaded
    """
    query = select(Participation)
    if user_id is not None:
        query = query.where(Participation.user_id == user_id)
    if event_id is not None:
        query = query.where(Participation.event_id == event_id)
    query = query.order_by(Participation.registration_date.desc(), Participation.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_active_participants(db: AsyncSession, event_id: int) -> List[Participation]:
    """Registered participations of an event, earliest registration first."""
    result = await db.execute(
        select(Participation)
        .where(
            Participation.event_id == event_id,
            Participation.status == ParticipationStatus.REGISTERED.value,
        )
        .order_by(Participation.registration_date.asc(), Participation.id.asc())
    )
    return list(result.scalars().all())


async def count_active_for_user(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Participation.id)).where(
            Participation.user_id == user_id,
            Participation.status == ParticipationStatus.REGISTERED.value,
        )
    )
    return int(result.scalar() or 0)
