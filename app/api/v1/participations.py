from typing import Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_query_service, get_registration_engine
from app.schemas.common import ApiResponse
from app.schemas.participation import (
    ParticipationCreate,
    ParticipationData,
    ParticipationListResponse,
)
from app.services.auth import AuthContext
from app.services.queries import EventQueryService
from app.services.registration import RegistrationEngine

router = APIRouter()


@router.get("", response_model=ApiResponse[ParticipationListResponse])
async def read_participations(
    user_id: Optional[int] = None,
    event_id: Optional[int] = None,
    viewer: AuthContext = Depends(get_current_user),
    queries: EventQueryService = Depends(get_query_service),
):
    """
    List participations, the caller's own unless ``user_id`` is given.
    """
    participations = await queries.list_participations(viewer, user_id=user_id, event_id=event_id)
    return {"success": True, "data": {"participations": participations}}


@router.post("", response_model=ApiResponse[ParticipationData], status_code=201)
async def register_for_event(
    body: ParticipationCreate,
    user: AuthContext = Depends(get_current_user),
    engine: RegistrationEngine = Depends(get_registration_engine),
):
    """
    Register the caller for an event.
    """
    participation = await engine.register(user.user_id, body.event_id)
    return {
        "success": True,
        "data": {"participation": participation},
        "message": "Successfully registered for the event",
    }


@router.delete("/{event_id}", response_model=ApiResponse[ParticipationData])
async def cancel_registration(
    event_id: int,
    user: AuthContext = Depends(get_current_user),
    engine: RegistrationEngine = Depends(get_registration_engine),
):
    """
    Cancel the caller's registration for an event.
    """
    participation = await engine.cancel(user.user_id, event_id)
    return {
        "success": True,
        "data": {"participation": participation},
        "message": "Registration cancelled",
    }
