"""
Event data access.

Functions here only read or stage changes; the calling service owns the
transaction and commits or rolls back the whole unit of work.
"""

from typing import List, Optional
from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.event import Event, EventStatus
from app.models.participation import Participation
from app.services.status import CAPACITY_STATUSES, capacity_status_expression
from app.logging_config import get_logger

logger = get_logger("crud.event")


async def get_event(db: AsyncSession, event_id: int, for_update: bool = False) -> Optional[Event]:
    """
    Get a specific event by ID.

    Args:
        db: Database session
        event_id: ID of the event to retrieve
        for_update: Lock the event row until the transaction ends

    Returns:
        Event or None if not found
    """
    query = (
        select(Event)
        .where(Event.id == event_id)
        .execution_options(populate_existing=True)
    )
    if for_update:
        query = query.with_for_update(of=Event)
    result = await db.execute(query)
    return result.scalars().first()


def _apply_filters(query, status: Optional[str], search: Optional[str]):
    if status:
        query = query.where(Event.status == status)
    if search:
        search_term = f"%{search}%"
        query = query.where(
            or_(
                Event.title.ilike(search_term),
                Event.description.ilike(search_term),
                Event.location.ilike(search_term),
            )
        )
    return query


async def get_events(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Event]:
    """
    Get a page of events ordered by date, soonest first.

    Args:
        db: Database session
        skip: Number of records to skip
        limit: Maximum number of records to return
        status: Optional status filter
        search: Optional text matched against title, description and location

    Returns:
        List of events
    """
    query = _apply_filters(select(Event), status, search)
    query = query.order_by(Event.event_date.asc(), Event.id.asc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def count_events(
    db: AsyncSession,
    status: Optional[str] = None,
    search: Optional[str] = None,
    created_by: Optional[int] = None,
) -> int:
    query = _apply_filters(select(func.count(Event.id)), status, search)
    if created_by is not None:
        query = query.where(Event.created_by == created_by)
    result = await db.execute(query)
    return int(result.scalar() or 0)


async def create_event(db: AsyncSession, creator_id: int, **fields) -> Event:
    """
    Stage a new event.

    Args:
        db: Database session
        creator_id: ID of the creating administrator
        **fields: Validated event columns

    Returns:
        The flushed event (ID assigned)
    """
    db_event = Event(
        created_by=creator_id,
        current_participants=0,
        status=EventStatus.OPEN.value,
        average_rating=0.0,
        total_ratings=0,
        **fields,
    )
    db.add(db_event)
    await db.flush()
    return db_event


async def claim_seat(db: AsyncSession, event_id: int) -> bool:
    """
    Take one seat if the event still has one.

    The capacity check and the increment happen in one guarded ``UPDATE``;
    the status flips to ``full`` in the same statement when the last seat
    goes.

    Returns:
        True if a seat was taken, False if the guard rejected the update
    """
    stmt = (
        update(Event)
        .where(Event.id == event_id)
        .where(Event.current_participants < Event.max_capacity)
        .where(Event.status.in_(CAPACITY_STATUSES))
        .values(
            current_participants=Event.current_participants + 1,
            status=capacity_status_expression(+1),
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount == 1


async def release_seat(db: AsyncSession, event_id: int) -> bool:
    """
    Give one seat back, reopening a full event.

    Sticky statuses are left untouched by the status expression.

    Returns:
        True if a seat was released
    """
    stmt = (
        update(Event)
        .where(Event.id == event_id)
        .where(Event.current_participants > 0)
        .values(
            current_participants=Event.current_participants - 1,
            status=capacity_status_expression(-1),
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount == 1


async def set_rating_aggregate(db: AsyncSession, event_id: int, average: float, total: int) -> None:
    stmt = (
        update(Event)
        .where(Event.id == event_id)
        .values(average_rating=average, total_ratings=total)
        .execution_options(synchronize_session=False)
    )
    await db.execute(stmt)


async def count_participations(db: AsyncSession, event_id: int) -> int:
    """Count participation rows of any status referencing the event."""
    result = await db.execute(
        select(func.count(Participation.id)).where(Participation.event_id == event_id)
    )
    return int(result.scalar() or 0)


async def delete_event(db: AsyncSession, event_id: int) -> bool:
    """
    Delete an event.

    Args:
        db: Database session
        event_id: ID of the event to delete

    Returns:
        True if the event was deleted, False otherwise
    """
    result = await db.execute(
        delete(Event).where(Event.id == event_id).execution_options(synchronize_session=False)
    )
    if result.rowcount > 0:
        return True

    logger.warning(f"Attempted to delete non-existent event: {event_id}")
    return False

