import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.utils import utcnow
from .base import Base


class ParticipationStatus(str, enum.Enum):
    REGISTERED = "registered"
    CANCELLED = "cancelled"


class Participation(Base):
    __tablename__ = "participations"
    __table_args__ = (
        # One row per pair; re-registering reactivates it
        UniqueConstraint("user_id", "event_id", name="uq_participations_user_event"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    status = Column(String(16), nullable=False, default=ParticipationStatus.REGISTERED.value)
    registration_date = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", lazy="joined", innerjoin=True)
    event = relationship("Event", lazy="joined", innerjoin=True)

    @property
    def username(self):
        return self.user.username if self.user else None

    @property
    def event_title(self):
        return self.event.title if self.event else None

    @property
    def event_date(self):
        return self.event.event_date if self.event else None

    @property
    def location(self):
        return self.event.location if self.event else None

    @property
    def event_status(self):
        return self.event.status if self.event else None

    def __repr__(self):
        return f"<Participation {self.id}: user={self.user_id} event={self.event_id} {self.status}>"
