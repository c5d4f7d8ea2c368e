"""Read-side views of events, participations and evaluations."""

import math
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.crud import evaluation as evaluation_crud
from app.crud import event as event_crud
from app.crud import participation as participation_crud
from app.exceptions import NotFound, ValidationError
from app.models.event import EventStatus
from app.models.participation import Participation
from app.services.auth import AuthContext

VALID_STATUSES = {status.value for status in EventStatus}


def participant_entry(participation: Participation) -> Dict[str, Any]:
    return {
        "id": participation.user_id,
        "username": participation.username,
        "registration_date": participation.registration_date,
        "status": participation.status,
    }


class EventQueryService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    async def list_events(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Get a page of events, soonest first.

        Args:
            status: Optional lifecycle status filter
            search: Optional case-insensitive text over title, description
                and location
            page: 1-based page number
            limit: Page size, capped at MAX_PAGE_SIZE

        Returns:
            ``{"events": [...], "pagination": {total, page, limit, total_pages}}``
        """
        if status and status not in VALID_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        page = max(page or 1, 1)
        limit = min(max(limit or self.settings.DEFAULT_PAGE_SIZE, 1), self.settings.MAX_PAGE_SIZE)
        search = search.strip() if search else None

        total = await event_crud.count_events(self.db, status=status, search=search)
        events = await event_crud.get_events(
            self.db, skip=(page - 1) * limit, limit=limit, status=status, search=search
        )
        return {
            "events": events,
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "total_pages": math.ceil(total / limit) if total else 0,
            },
        }

    async def get_event_detail(self, event_id: int, viewer: Optional[AuthContext] = None) -> Dict[str, Any]:
        """
        Get an event with its active participants and its evaluations.

        When a viewer is given, their own participation (any status) and
        evaluation for the event are included.
        """
        event = await event_crud.get_event(self.db, event_id)
        if event is None:
            raise NotFound("Event not found")

        participants = await participation_crud.get_active_participants(self.db, event_id)
        detail = {
            "event": event,
            "participants": [participant_entry(p) for p in participants],
            "evaluations": await evaluation_crud.get_evaluations(self.db, event_id=event_id),
            "user_participation": None,
            "user_evaluation": None,
        }
        if viewer is not None:
            detail["user_participation"] = await participation_crud.get_participation(
                self.db, viewer.user_id, event_id
            )
            detail["user_evaluation"] = await evaluation_crud.get_user_evaluation(
                self.db, viewer.user_id, event_id
            )
        return detail

    async def list_participations(
        self,
        viewer: AuthContext,
        user_id: Optional[int] = None,
        event_id: Optional[int] = None,
    ) -> List[Participation]:
        """Participations of a user (the viewer by default), newest first."""
        if user_id is None:
            user_id = viewer.user_id
        return await participation_crud.get_participations(self.db, user_id=user_id, event_id=event_id)

    async def list_evaluations(
        self,
        event_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Evaluations newest first, with the rating distribution when filtered by event."""
        evaluations = await evaluation_crud.get_evaluations(self.db, event_id=event_id, user_id=user_id)
        stats = None
        if event_id is not None:
            stats = await evaluation_crud.get_rating_stats(self.db, event_id)
        return {"evaluations": evaluations, "stats": stats}
