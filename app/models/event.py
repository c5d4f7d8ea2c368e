import enum

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from app.utils import utcnow
from .base import Base


class EventStatus(str, enum.Enum):
    OPEN = "open"
    FULL = "full"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("max_capacity >= 1", name="ck_events_max_capacity_positive"),
        CheckConstraint("current_participants >= 0", name="ck_events_participants_non_negative"),
        CheckConstraint("current_participants <= max_capacity", name="ck_events_participants_within_capacity"),
        CheckConstraint("average_rating >= 0 AND average_rating <= 5", name="ck_events_average_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text)
    event_date = Column(DateTime, nullable=False, index=True)
    location = Column(String(255), nullable=False)

    # Capacity and lifecycle
    max_capacity = Column(Integer, nullable=False, default=50)
    current_participants = Column(Integer, nullable=False, default=0)
    status = Column(String(16), nullable=False, default=EventStatus.OPEN.value, index=True)

    # Rating aggregate, recomputed from evaluations
    average_rating = Column(Float, nullable=False, default=0.0)
    total_ratings = Column(Integer, nullable=False, default=0)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, onupdate=utcnow, nullable=True)

    creator = relationship("User", lazy="joined", innerjoin=True)

    @property
    def available_spots(self) -> int:
        return max(self.max_capacity - self.current_participants, 0)

    @property
    def is_full(self) -> bool:
        return self.current_participants >= self.max_capacity

    @property
    def creator_name(self):
        return self.creator.username if self.creator else None

    @property
    def status_label(self) -> str:
        # Imported lazily, status imports the model for its SQL expressions
        from app.services.status import status_label
        return status_label(self.status)

    def __repr__(self):
        return f"<Event {self.id}: {self.title}>"
