from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import (
    get_event_service,
    get_optional_user,
    get_query_service,
    require_admin,
)
from app.exceptions import EventPlatformError
from app.schemas.common import ApiResponse
from app.schemas.event import EventCreate, EventData, EventDetail, EventListResponse, EventUpdate
from app.services.auth import AuthContext
from app.services.events import EventService
from app.services.queries import EventQueryService
from app.logging_config import get_logger

router = APIRouter()
logger = get_logger("api.events")


@router.get("", response_model=ApiResponse[EventListResponse])
async def read_events(
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    queries: EventQueryService = Depends(get_query_service),
):
    """
    Retrieve events with optional filtering, soonest first.
    """
    try:
        result = await queries.list_events(status=status, search=search, page=page, limit=limit)
        return {"success": True, "data": result}
    except EventPlatformError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving events: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("", response_model=ApiResponse[EventData], status_code=201)
async def create_new_event(
    event: EventCreate,
    actor: AuthContext = Depends(require_admin),
    service: EventService = Depends(get_event_service),
):
    """
    Create a new event. Administrators only.
    """
    created = await service.create_event(event, actor)
    return {"success": True, "data": {"event": created}, "message": "Event created successfully"}


@router.get("/{event_id}", response_model=ApiResponse[EventDetail])
async def read_event(
    event_id: int,
    viewer: Optional[AuthContext] = Depends(get_optional_user),
    queries: EventQueryService = Depends(get_query_service),
):
    """
    Get an event with its participants and evaluations.
    """
    try:
        detail = await queries.get_event_detail(event_id, viewer)
        return {"success": True, "data": detail}
    except EventPlatformError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving event {event_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{event_id}", response_model=ApiResponse[EventData])
async def update_event_details(
    event_id: int,
    event: EventUpdate,
    actor: AuthContext = Depends(require_admin),
    service: EventService = Depends(get_event_service),
):
    """
    Update an event. Only the administrator who created it may do so.
    """
    updated = await service.update_event(event_id, event.model_dump(exclude_unset=True), actor)
    return {"success": True, "data": {"event": updated}, "message": "Event updated successfully"}


@router.delete("/{event_id}", response_model=ApiResponse[None])
async def delete_existing_event(
    event_id: int,
    actor: AuthContext = Depends(require_admin),
    service: EventService = Depends(get_event_service),
):
    """
    Delete an event nobody registered for.
    """
    await service.delete_event(event_id, actor)
    return {"success": True, "message": "Event deleted successfully"}
