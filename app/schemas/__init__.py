"""
Schema definitions for the Event Platform API.

Import request and response models from here so every router and service
shares one definition.
"""

from .common import ApiResponse, ErrorResponse, Pagination
from .event import (
    EventCreate, EventUpdate, EventResponse, EventData, EventListResponse, EventDetail,
)
from .participation import (
    ParticipationCreate, ParticipationResponse, ParticipantResponse,
    ParticipationData, ParticipationListResponse,
)
from .evaluation import (
    EvaluationCreate, EvaluationUpdate, EvaluationResponse, RatingSummary, RatingStats,
    EvaluationData, EvaluationListResponse,
)
from .user import (
    UserCreate, LoginRequest, UserResponse, UserData, LoginResponse, UserStats, ProfileResponse,
)

# Indicate which schemas are publicly available
__all__ = [
    # Envelope
    'ApiResponse', 'ErrorResponse', 'Pagination',
    # Event schemas
    'EventCreate', 'EventUpdate', 'EventResponse', 'EventData', 'EventListResponse', 'EventDetail',
    # Participation schemas
    'ParticipationCreate', 'ParticipationResponse', 'ParticipantResponse',
    'ParticipationData', 'ParticipationListResponse',
    # Evaluation schemas
    'EvaluationCreate', 'EvaluationUpdate', 'EvaluationResponse', 'RatingSummary', 'RatingStats',
    'EvaluationData', 'EvaluationListResponse',
    # User schemas
    'UserCreate', 'LoginRequest', 'UserResponse', 'UserData', 'LoginResponse', 'UserStats',
    'ProfileResponse',
]
