from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import event as event_crud
from app.crud import participation as participation_crud
from app.exceptions import (
    AlreadyRegistered,
    EventFull,
    EventPlatformError,
    InvalidState,
    NotFound,
)
from app.logging_config import get_logger
from app.models.participation import Participation, ParticipationStatus
from app.services.status import accepts_registrations, status_label

logger = get_logger("services.registration")


class RegistrationEngine:
    """
    Seat allocation for events.

    Every call is one transaction on the session it was built with: the
    event row is locked, the seat counter moves through a guarded update and
    the participation row changes in the same unit of work. Any failure
    rolls the whole unit back.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, user_id: int, event_id: int) -> Participation:
        """
        Register a user for an event.

        Args:
            user_id: ID of the registering user
            event_id: ID of the event

        Returns:
            The active participation, with its event loaded

        Raises:
            NotFound: If the event does not exist
            InvalidState: If the event is cancelled or completed
            EventFull: If no seat is left
            AlreadyRegistered: If the user already holds a seat
        """
        try:
            event = await event_crud.get_event(self.db, event_id, for_update=True)
            if event is None:
                raise NotFound("Event not found")
            if not accepts_registrations(event.status):
                raise InvalidState(f"Event is {status_label(event.status).lower()}")
            if event.current_participants >= event.max_capacity:
                raise EventFull()

            existing = await participation_crud.get_participation(self.db, user_id, event_id)
            if existing is not None and existing.status == ParticipationStatus.REGISTERED.value:
                raise AlreadyRegistered()

            if not await event_crud.claim_seat(self.db, event_id):
                await self._raise_lost_seat(event_id)

            if existing is not None:
                if not await participation_crud.reactivate_participation(self.db, existing.id):
                    raise AlreadyRegistered()
            else:
                try:
                    await participation_crud.create_participation(self.db, user_id, event_id)
                except IntegrityError:
                    raise AlreadyRegistered()

            await self.db.commit()
        except EventPlatformError as e:
            await self.db.rollback()
            logger.info(f"Registration of user {user_id} for event {event_id} rejected: {e.message}")
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"User {user_id} registered for event {event_id}")
        return await participation_crud.get_participation(self.db, user_id, event_id)

    async def cancel(self, user_id: int, event_id: int) -> Participation:
        """
        Cancel a user's registration and give the seat back.

        A full event reopens; cancelled and completed events keep their
        status. Evaluations already submitted are kept.

        Raises:
            NotFound: If the user holds no active registration for the event
        """
        try:
            event = await event_crud.get_event(self.db, event_id, for_update=True)
            participation = None
            if event is not None:
                participation = await participation_crud.get_active_participation(
                    self.db, user_id, event_id
                )
            if participation is None:
                raise NotFound("No active registration found for this event")

            if not await participation_crud.cancel_participation(self.db, participation.id):
                raise NotFound("No active registration found for this event")
            if not await event_crud.release_seat(self.db, event_id):
                logger.warning(f"Seat counter of event {event_id} was already at zero")

            await self.db.commit()
        except EventPlatformError as e:
            await self.db.rollback()
            logger.info(f"Cancellation of user {user_id} for event {event_id} rejected: {e.message}")
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"User {user_id} cancelled registration for event {event_id}")
        return await participation_crud.get_participation(self.db, user_id, event_id)

    async def _raise_lost_seat(self, event_id: int) -> None:
        # The guarded update matched nothing: someone took the last seat or
        # the event left the open/full states since it was read.
        event = await event_crud.get_event(self.db, event_id)
        if event is not None and not accepts_registrations(event.status):
            raise InvalidState(f"Event is {status_label(event.status).lower()}")
        raise EventFull()
