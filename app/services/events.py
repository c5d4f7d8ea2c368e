from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import event as event_crud
from app.exceptions import DeleteBlocked, Forbidden, NotFound, ValidationError
from app.logging_config import get_logger
from app.models.event import Event
from app.schemas.event import EventCreate
from app.services.auth import AuthContext
from app.services.status import derive_status

logger = get_logger("services.events")

UPDATABLE_FIELDS = ("title", "description", "event_date", "location", "max_capacity", "status")


class EventService:
    """Administrative event management: create, update and delete."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_event(self, data: EventCreate, actor: AuthContext) -> Event:
        """
        Create an event owned by the acting administrator.

        Args:
            data: Validated event fields
            actor: The caller

        Returns:
            The new event

        Raises:
            Forbidden: If the actor is not an administrator
        """
        self._require_admin(actor)
        try:
            event = await event_crud.create_event(self.db, actor.user_id, **data.model_dump())
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Event {event.id} created by user {actor.user_id}")
        return await event_crud.get_event(self.db, event.id)

    async def update_event(self, event_id: int, changes: Dict[str, Any], actor: AuthContext) -> Event:
        """
        Apply a partial update to an event.

        The capacity may not drop below the seats already taken. After the
        update the capacity rule is applied again, so an open or full event
        always reflects its seat count; cancelled and completed are kept.

        Raises:
            Forbidden: If the actor is not the administrator who created it
            NotFound: If the event does not exist
            ValidationError: On an empty update or a capacity below the
                current participant count
        """
        self._require_admin(actor)
        changes = {
            key: value for key, value in changes.items()
            if key in UPDATABLE_FIELDS and value is not None
        }
        try:
            event = await event_crud.get_event(self.db, event_id, for_update=True)
            if event is None:
                raise NotFound("Event not found")
            self._require_creator(event, actor)
            if not changes:
                raise ValidationError("No fields to update")

            max_capacity = changes.get("max_capacity", event.max_capacity)
            if max_capacity < event.current_participants:
                raise ValidationError(
                    f"Capacity cannot be lower than the current number of participants "
                    f"({event.current_participants})"
                )
            requested_status = changes.pop("status", event.status)

            for field, value in changes.items():
                setattr(event, field, value)
            event.status = derive_status(max_capacity, event.current_participants, requested_status).value
            await self.db.flush()
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Event {event_id} updated by user {actor.user_id}: {sorted(changes)}")
        return await event_crud.get_event(self.db, event_id)

    async def delete_event(self, event_id: int, actor: AuthContext) -> None:
        """
        Delete an event nobody ever registered for.

        Raises:
            DeleteBlocked: If any participation, active or cancelled,
                references the event
        """
        self._require_admin(actor)
        try:
            event = await event_crud.get_event(self.db, event_id, for_update=True)
            if event is None:
                raise NotFound("Event not found")
            self._require_creator(event, actor)
            if await event_crud.count_participations(self.db, event_id) > 0:
                raise DeleteBlocked()

            await event_crud.delete_event(self.db, event_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Event {event_id} deleted by user {actor.user_id}")

    @staticmethod
    def _require_admin(actor: AuthContext) -> None:
        if not actor.is_admin:
            raise Forbidden("Administrator access required")

    @staticmethod
    def _require_creator(event: Event, actor: AuthContext) -> None:
        if event.created_by != actor.user_id:
            raise Forbidden("You can only manage events you created")
