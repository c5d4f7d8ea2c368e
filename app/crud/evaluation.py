"""Evaluation data access. The calling service owns the transaction."""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import select, delete, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.evaluation import Evaluation

STAR_COLUMNS = {
    5: "five_stars",
    4: "four_stars",
    3: "three_stars",
    2: "two_stars",
    1: "one_star",
}


async def get_evaluation(db: AsyncSession, evaluation_id: int) -> Optional[Evaluation]:
    result = await db.execute(
        select(Evaluation)
        .where(Evaluation.id == evaluation_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_user_evaluation(db: AsyncSession, user_id: int, event_id: int) -> Optional[Evaluation]:
    result = await db.execute(
        select(Evaluation)
        .where(Evaluation.user_id == user_id, Evaluation.event_id == event_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def create_evaluation(
    db: AsyncSession, user_id: int, event_id: int, rating: int, comment: Optional[str]
) -> Evaluation:
    evaluation = Evaluation(user_id=user_id, event_id=event_id, rating=rating, comment=comment)
    db.add(evaluation)
    await db.flush()
    return evaluation


async def delete_evaluation(db: AsyncSession, evaluation_id: int) -> bool:
    result = await db.execute(
        delete(Evaluation)
        .where(Evaluation.id == evaluation_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def get_evaluations(
    db: AsyncSession,
    event_id: Optional[int] = None,
    user_id: Optional[int] = None,
) -> List[Evaluation]:
    """
    List evaluations, newest first.

    Args:
        db: Database session
        event_id: Optional event filter
        user_id: Optional author filter

    Returns:
        List of evaluations with author and event loaded
    """
    query = select(Evaluation)
    if event_id is not None:
        query = query.where(Evaluation.event_id == event_id)
    if user_id is not None:
        query = query.where(Evaluation.user_id == user_id)
    query = query.order_by(Evaluation.created_at.desc(), Evaluation.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def compute_rating_aggregate(db: AsyncSession, event_id: int) -> Tuple[float, int]:
    """
    Recompute an event's rating aggregate from its evaluations.

    Returns:
        (average rounded to 2 decimals, count); (0.0, 0) without evaluations
    """
    result = await db.execute(
        select(func.avg(Evaluation.rating), func.count(Evaluation.id))
        .where(Evaluation.event_id == event_id)
    )
    average, total = result.one()
    if not total:
        return 0.0, 0
    return round(float(average), 2), int(total)


async def get_rating_stats(db: AsyncSession, event_id: int) -> Dict[str, Any]:
    """Count, average, extremes and per-star distribution of an event's ratings."""
    columns = [
        func.count(Evaluation.id).label("total_evaluations"),
        func.avg(Evaluation.rating).label("average_rating"),
        func.min(Evaluation.rating).label("min_rating"),
        func.max(Evaluation.rating).label("max_rating"),
    ]
    columns += [
        func.coalesce(func.sum(case((Evaluation.rating == stars, 1), else_=0)), 0).label(name)
        for stars, name in STAR_COLUMNS.items()
    ]
    result = await db.execute(select(*columns).where(Evaluation.event_id == event_id))
    row = result.one()._asdict()

    row["total_evaluations"] = int(row["total_evaluations"] or 0)
    row["average_rating"] = round(float(row["average_rating"]), 2) if row["total_evaluations"] else 0.0
    for name in STAR_COLUMNS.values():
        row[name] = int(row[name] or 0)
    return row


async def count_for_user(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(select(func.count(Evaluation.id)).where(Evaluation.user_id == user_id))
    return int(result.scalar() or 0)
