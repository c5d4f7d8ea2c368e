from .base import Base
from .user import User, UserRole
from .event import Event, EventStatus
from .participation import Participation, ParticipationStatus
from .evaluation import Evaluation

__all__ = [
    "Base",
    "User", "UserRole",
    "Event", "EventStatus",
    "Participation", "ParticipationStatus",
    "Evaluation",
]
