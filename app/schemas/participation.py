"""
Participation schema definitions for the Event Platform API.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from app.models.participation import ParticipationStatus


class ParticipationCreate(BaseModel):
    """Registration request body."""
    event_id: int = Field(..., ge=1)


class ParticipationResponse(BaseModel):
    """A user's registration for an event, with event context."""
    id: int
    user_id: int
    username: Optional[str] = None
    event_id: int
    event_title: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    event_status: Optional[str] = None
    registration_date: datetime
    status: ParticipationStatus

    model_config = ConfigDict(
        from_attributes=True
    )


class ParticipantResponse(BaseModel):
    """Entry of an event's participant list; ``id`` is the user's id."""
    id: int
    username: str
    registration_date: datetime
    status: ParticipationStatus


class ParticipationData(BaseModel):
    participation: ParticipationResponse


class ParticipationListResponse(BaseModel):
    participations: List[ParticipationResponse]
