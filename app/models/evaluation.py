from sqlalchemy import Column, Integer, DateTime, Text, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from app.utils import utcnow
from .base import Base


class Evaluation(Base):
    __tablename__ = "evaluations"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_evaluations_user_event"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_evaluations_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, onupdate=utcnow, nullable=True)

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

    def __repr__(self):
        return f"<Evaluation {self.id}: user={self.user_id} event={self.event_id} rating={self.rating}>"
