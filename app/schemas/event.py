"""
Event schema definitions for the Event Platform API.

Input schemas sanitize free text and enforce the creation rules (title
length, future date, capacity range). Response schemas read straight from
the ORM objects, including the derived fields ``available_spots``,
``is_full``, ``status_label`` and ``creator_name``.
"""

from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import List, Optional
from datetime import datetime

from app.models.event import EventStatus
from app.utils import sanitize_text, to_naive_utc, utcnow
from .common import Pagination
from .evaluation import EvaluationResponse
from .participation import ParticipantResponse, ParticipationResponse

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
MIN_CAPACITY = 1
MAX_CAPACITY = 10000
DEFAULT_CAPACITY = 50


def _clean_title(value: str) -> str:
    title = sanitize_text(value)
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise ValueError(
            f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters"
        )
    return title


def _clean_location(value: str) -> str:
    location = sanitize_text(value)
    if not location:
        raise ValueError("Location is required")
    return location


# =====================================================================
# Input schemas
# =====================================================================

class EventCreate(BaseModel):
    """Schema for creating an event."""
    title: str
    description: Optional[str] = None
    event_date: datetime
    location: str
    max_capacity: int = Field(
        default=DEFAULT_CAPACITY,
        ge=MIN_CAPACITY,
        le=MAX_CAPACITY,
        description="Seats offered, between 1 and 10000",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("location")
    @classmethod
    def validate_location(cls, v: str) -> str:
        return _clean_location(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> str:
        return sanitize_text(v)

    @field_validator("event_date")
    @classmethod
    def validate_event_date(cls, v: datetime) -> datetime:
        """
        Normalize to naive UTC and require a date strictly in the future.

        Args:
            v: The requested event date

        Returns:
            The normalized date

        Raises:
            ValueError: If the date is not in the future
        """
        v = to_naive_utc(v)
        if v <= utcnow():
            raise ValueError("Event date must be in the future")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Python Meetup",
                "description": "Monthly talks and pizza",
                "event_date": "2030-03-28T18:30:00Z",
                "location": "Community Hall, Lyon",
                "max_capacity": 80
            }
        }
    )


class EventUpdate(BaseModel):
    """
    Schema for updating an event.

    All fields are optional; only the fields supplied are changed.
    ``status`` may be set by an administrator to any lifecycle value.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    max_capacity: Optional[int] = Field(default=None, ge=MIN_CAPACITY, le=MAX_CAPACITY)
    status: Optional[EventStatus] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _clean_title(v) if v is not None else v

    @field_validator("location")
    @classmethod
    def validate_location(cls, v: Optional[str]) -> Optional[str]:
        return _clean_location(v) if v is not None else v

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_text(v) if v is not None else v

    @field_validator("event_date")
    @classmethod
    def normalize_event_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v is not None else v


# =====================================================================
# Response schemas
# =====================================================================

class EventResponse(BaseModel):
    """Event as returned by the API, with derived capacity fields."""
    id: int
    title: str
    description: Optional[str] = None
    event_date: datetime
    location: str
    max_capacity: int
    current_participants: int
    available_spots: int
    is_full: bool
    status: EventStatus
    status_label: str
    average_rating: float
    total_ratings: int
    created_by: int
    creator_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )


class EventData(BaseModel):
    event: EventResponse


class EventListResponse(BaseModel):
    """Page of events with pagination metadata."""
    events: List[EventResponse]
    pagination: Pagination


class EventDetail(BaseModel):
    """
    Event detail view.

    Active participants are ordered by registration time, evaluations newest
    first. ``user_participation`` and ``user_evaluation`` are filled in for
    authenticated viewers only.
    """
    event: EventResponse
    participants: List[ParticipantResponse] = []
    evaluations: List[EvaluationResponse] = []
    user_participation: Optional[ParticipationResponse] = None
    user_evaluation: Optional[EvaluationResponse] = None
