from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import evaluation as evaluation_crud
from app.crud import event as event_crud
from app.crud import participation as participation_crud
from app.exceptions import (
    DuplicateEvaluation,
    EventPlatformError,
    Forbidden,
    InvalidRating,
    NotEligible,
    NotFound,
    ValidationError,
)
from app.logging_config import get_logger
from app.models.evaluation import Evaluation
from app.schemas.evaluation import RatingStats, RatingSummary
from app.services.auth import AuthContext

logger = get_logger("services.ratings")

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating: Any) -> int:
    """
    Check that a rating is an integer star count.

    Raises:
        InvalidRating: If the rating is not an integer between 1 and 5
    """
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating()
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRating()
    return rating


class RatingAggregator:
    """
    Evaluations and the rating aggregate stored on each event.

    The aggregate is never adjusted incrementally: every change recomputes
    ``AVG``/``COUNT`` over the event's evaluations inside the same
    transaction, with the event row locked.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_evaluation(
        self, user_id: int, event_id: int, rating: int, comment: Optional[str] = None
    ) -> Evaluation:
        """
        Rate an event the user is registered for.

        Args:
            user_id: ID of the rating user
            event_id: ID of the event
            rating: Stars, 1 to 5
            comment: Optional, already sanitized comment

        Returns:
            The stored evaluation; its event carries the new aggregate

        Raises:
            InvalidRating: If the rating is out of range
            NotFound: If the event does not exist
            NotEligible: If the user holds no active registration
            DuplicateEvaluation: If the user already rated the event
        """
        validate_rating(rating)
        try:
            event = await event_crud.get_event(self.db, event_id, for_update=True)
            if event is None:
                raise NotFound("Event not found")
            if await participation_crud.get_active_participation(self.db, user_id, event_id) is None:
                raise NotEligible()
            if await evaluation_crud.get_user_evaluation(self.db, user_id, event_id) is not None:
                raise DuplicateEvaluation()

            try:
                evaluation = await evaluation_crud.create_evaluation(
                    self.db, user_id, event_id, rating, comment or None
                )
            except IntegrityError:
                raise DuplicateEvaluation()
            await self._recompute(event_id)
            await self.db.commit()
        except EventPlatformError as e:
            await self.db.rollback()
            logger.info(f"Evaluation by user {user_id} for event {event_id} rejected: {e.message}")
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"User {user_id} rated event {event_id} with {rating} stars")
        return await evaluation_crud.get_evaluation(self.db, evaluation.id)

    async def update_evaluation(
        self, evaluation_id: int, actor: AuthContext, changes: Dict[str, Any]
    ) -> Evaluation:
        """
        Change the rating and/or comment of an evaluation.

        Only the author or an administrator may update. The aggregate is
        recomputed when the rating actually changes.

        Raises:
            NotFound: If the evaluation does not exist
            Forbidden: If the actor is neither the author nor an admin
            InvalidRating: If a new rating is out of range
            ValidationError: If no change is supplied
        """
        changes = {key: value for key, value in changes.items() if value is not None}
        try:
            evaluation = await self._get_owned(evaluation_id, actor)
            if "rating" in changes:
                validate_rating(changes["rating"])
            if not changes:
                raise ValidationError("No changes supplied")

            await event_crud.get_event(self.db, evaluation.event_id, for_update=True)
            rating_changed = "rating" in changes and changes["rating"] != evaluation.rating
            if "rating" in changes:
                evaluation.rating = changes["rating"]
            if "comment" in changes:
                evaluation.comment = changes["comment"] or None
            await self.db.flush()

            if rating_changed:
                await self._recompute(evaluation.event_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Evaluation {evaluation_id} updated by user {actor.user_id}")
        return await evaluation_crud.get_evaluation(self.db, evaluation_id)

    async def delete_evaluation(self, evaluation_id: int, actor: AuthContext) -> RatingSummary:
        """
        Remove an evaluation and recompute its event's aggregate.

        Returns:
            The event's aggregate after the removal
        """
        try:
            evaluation = await self._get_owned(evaluation_id, actor)
            event_id = evaluation.event_id

            await event_crud.get_event(self.db, event_id, for_update=True)
            await evaluation_crud.delete_evaluation(self.db, evaluation_id)
            average, total = await self._recompute(event_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Evaluation {evaluation_id} of event {event_id} deleted by user {actor.user_id}")
        return RatingSummary(average_rating=average, total_ratings=total)

    async def rating_stats(self, event_id: int) -> RatingStats:
        stats = await evaluation_crud.get_rating_stats(self.db, event_id)
        return RatingStats(**stats)

    async def _get_owned(self, evaluation_id: int, actor: AuthContext) -> Evaluation:
        evaluation = await evaluation_crud.get_evaluation(self.db, evaluation_id)
        if evaluation is None:
            raise NotFound("Evaluation not found")
        if evaluation.user_id != actor.user_id and not actor.is_admin:
            raise Forbidden("You can only modify your own evaluations")
        return evaluation

    async def _recompute(self, event_id: int):
        average, total = await evaluation_crud.compute_rating_aggregate(self.db, event_id)
        await event_crud.set_rating_aggregate(self.db, event_id, average, total)
        return average, total
