"""
Evaluation schema definitions for the Event Platform API.

Ratings are range-checked by the rating service rather than here, so an
out-of-range rating surfaces as the same ``InvalidRating`` error whether it
comes from the API or from a direct service call.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.utils import sanitize_text


class EvaluationCreate(BaseModel):
    """Evaluation request body."""
    event_id: int = Field(..., ge=1)
    rating: int
    comment: Optional[str] = None

    @field_validator("comment")
    @classmethod
    def clean_comment(cls, v: Optional[str]) -> str:
        return sanitize_text(v)


class EvaluationUpdate(BaseModel):
    """Partial evaluation update; at least one field must be given."""
    rating: Optional[int] = None
    comment: Optional[str] = None

    @field_validator("comment")
    @classmethod
    def clean_comment(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_text(v) if v is not None else v


class EvaluationResponse(BaseModel):
    id: int
    user_id: int
    username: Optional[str] = None
    event_id: int
    event_title: Optional[str] = None
    event_date: Optional[datetime] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )


class RatingSummary(BaseModel):
    """The aggregate stored on the event."""
    average_rating: float
    total_ratings: int


class RatingStats(BaseModel):
    """Rating distribution of one event."""
    total_evaluations: int = 0
    average_rating: float = 0.0
    min_rating: Optional[int] = None
    max_rating: Optional[int] = None
    five_stars: int = 0
    four_stars: int = 0
    three_stars: int = 0
    two_stars: int = 0
    one_star: int = 0


class EvaluationData(BaseModel):
    evaluation: EvaluationResponse
    event_stats: Optional[RatingSummary] = None


class EvaluationListResponse(BaseModel):
    evaluations: List[EvaluationResponse]
    stats: Optional[RatingStats] = None
