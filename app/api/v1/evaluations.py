from typing import Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_query_service, get_rating_aggregator
from app.schemas.common import ApiResponse
from app.schemas.evaluation import (
    EvaluationCreate,
    EvaluationData,
    EvaluationListResponse,
    EvaluationUpdate,
    RatingSummary,
)
from app.services.auth import AuthContext
from app.services.queries import EventQueryService
from app.services.ratings import RatingAggregator

router = APIRouter()


def _summary(evaluation) -> RatingSummary:
    return RatingSummary(
        average_rating=evaluation.event.average_rating,
        total_ratings=evaluation.event.total_ratings,
    )


@router.get("", response_model=ApiResponse[EvaluationListResponse])
async def read_evaluations(
    event_id: Optional[int] = None,
    user_id: Optional[int] = None,
    queries: EventQueryService = Depends(get_query_service),
):
    """
    List evaluations newest first; filtering by event adds rating statistics.
    """
    result = await queries.list_evaluations(event_id=event_id, user_id=user_id)
    return {"success": True, "data": result}


@router.post("", response_model=ApiResponse[EvaluationData], status_code=201)
async def create_evaluation(
    body: EvaluationCreate,
    user: AuthContext = Depends(get_current_user),
    ratings: RatingAggregator = Depends(get_rating_aggregator),
):
    """
    Rate an event the caller is registered for.
    """
    evaluation = await ratings.add_evaluation(user.user_id, body.event_id, body.rating, body.comment)
    return {
        "success": True,
        "data": {"evaluation": evaluation, "event_stats": _summary(evaluation)},
        "message": "Evaluation submitted",
    }


@router.put("/{evaluation_id}", response_model=ApiResponse[EvaluationData])
async def update_evaluation(
    evaluation_id: int,
    body: EvaluationUpdate,
    user: AuthContext = Depends(get_current_user),
    ratings: RatingAggregator = Depends(get_rating_aggregator),
):
    """
    Update an evaluation. Author or administrator only.
    """
    evaluation = await ratings.update_evaluation(
        evaluation_id, user, body.model_dump(exclude_unset=True)
    )
    return {
        "success": True,
        "data": {"evaluation": evaluation, "event_stats": _summary(evaluation)},
        "message": "Evaluation updated",
    }


@router.delete("/{evaluation_id}", response_model=ApiResponse[RatingSummary])
async def delete_evaluation(
    evaluation_id: int,
    user: AuthContext = Depends(get_current_user),
    ratings: RatingAggregator = Depends(get_rating_aggregator),
):
    """
    Delete an evaluation. Author or administrator only.
    """
    summary = await ratings.delete_evaluation(evaluation_id, user)
    return {"success": True, "data": summary, "message": "Evaluation deleted"}
