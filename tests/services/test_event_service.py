from datetime import timedelta

import pytest
from pydantic import ValidationError as SchemaValidationError

from app.crud.event import get_event
from app.exceptions import DeleteBlocked, Forbidden, NotFound, ValidationError
from app.models import EventStatus, UserRole
from app.schemas.event import EventCreate
from app.services.auth import AuthContext
from app.services.events import EventService
from app.services.registration import RegistrationEngine
from app.utils import utcnow
from tests.helpers import add_event, add_user


def event_payload(**overrides):
    payload = {
        "title": "  Python <b>Meetup</b>  ",
        "description": "Talks & pizza",
        "event_date": utcnow() + timedelta(days=30),
        "location": "Community Hall",
    }
    payload.update(overrides)
    return payload


def test_create_schema_sanitizes_and_defaults():
    data = EventCreate(**event_payload())

    assert data.title == "Python Meetup"
    assert data.description == "Talks &amp; pizza"
    assert data.max_capacity == 50


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "ab"},
        {"title": "x" * 201},
        {"location": "   "},
        {"event_date": utcnow() - timedelta(minutes=1)},
        {"max_capacity": 0},
        {"max_capacity": 10001},
    ],
)
def test_create_schema_rejects(overrides):
    with pytest.raises(SchemaValidationError):
        EventCreate(**event_payload(**overrides))


@pytest.mark.asyncio
async def test_create_event(session, admin_ctx):
    event = await EventService(session).create_event(EventCreate(**event_payload(max_capacity=25)), admin_ctx)

    assert event.id is not None
    assert event.created_by == admin_ctx.user_id
    assert event.creator_name == "admin"
    assert event.status == EventStatus.OPEN.value
    assert event.current_participants == 0
    assert event.available_spots == 25


@pytest.mark.asyncio
async def test_create_event_requires_admin(session, member_ctx):
    with pytest.raises(Forbidden):
        await EventService(session).create_event(EventCreate(**event_payload()), member_ctx)


@pytest.mark.asyncio
async def test_update_fields(db, session, admin, admin_ctx):
    event = await add_event(db, admin)

    updated = await EventService(session).update_event(
        event.id, {"title": "Renamed", "location": "Main Hall"}, admin_ctx
    )

    assert updated.title == "Renamed"
    assert updated.location == "Main Hall"
    assert updated.updated_at is not None


@pytest.mark.asyncio
async def test_capacity_cannot_drop_below_participants(db, session, admin, admin_ctx):
    event = await add_event(db, admin, max_capacity=5)
    for i in range(3):
        user = await add_user(db, f"user{i}")
        await RegistrationEngine(db).register(user.id, event.id)

    with pytest.raises(ValidationError):
        await EventService(session).update_event(event.id, {"max_capacity": 2}, admin_ctx)

    updated = await EventService(session).update_event(event.id, {"max_capacity": 3}, admin_ctx)
    assert updated.max_capacity == 3
    assert updated.status == EventStatus.FULL.value

    updated = await EventService(session).update_event(event.id, {"max_capacity": 10}, admin_ctx)
    assert updated.status == EventStatus.OPEN.value


@pytest.mark.asyncio
async def test_admin_status_override_is_sticky(db, session, admin, admin_ctx, member):
    event = await add_event(db, admin, max_capacity=2)

    updated = await EventService(session).update_event(
        event.id, {"status": EventStatus.CANCELLED}, admin_ctx
    )
    assert updated.status == EventStatus.CANCELLED.value

    updated = await EventService(session).update_event(event.id, {"max_capacity": 1}, admin_ctx)
    assert updated.status == EventStatus.CANCELLED.value

    updated = await EventService(session).update_event(event.id, {"status": "open"}, admin_ctx)
    assert updated.status == EventStatus.OPEN.value


@pytest.mark.asyncio
async def test_requested_full_status_follows_capacity(db, session, admin, admin_ctx):
    event = await add_event(db, admin, max_capacity=5)

    updated = await EventService(session).update_event(event.id, {"status": "full"}, admin_ctx)

    assert updated.status == EventStatus.OPEN.value


@pytest.mark.asyncio
async def test_update_rules(db, session, admin, admin_ctx):
    event = await add_event(db, admin)
    other_admin = await add_user(db, "other_admin", UserRole.ADMIN)
    member = await add_user(db, "someone")
    service = EventService(session)

    with pytest.raises(ValidationError):
        await service.update_event(event.id, {}, admin_ctx)
    with pytest.raises(NotFound):
        await service.update_event(999, {"title": "Nope"}, admin_ctx)
    with pytest.raises(Forbidden):
        await service.update_event(event.id, {"title": "Mine now"}, AuthContext.for_user(other_admin))
    with pytest.raises(Forbidden):
        await service.update_event(event.id, {"title": "Mine now"}, AuthContext.for_user(member))


@pytest.mark.asyncio
async def test_delete_event(db, session, admin, admin_ctx):
    event = await add_event(db, admin)
    event_id = event.id

    await EventService(session).delete_event(event_id, admin_ctx)

    assert await get_event(db, event_id) is None


@pytest.mark.asyncio
async def test_delete_blocked_by_participations(db, session, admin, admin_ctx, member):
    event = await add_event(db, admin)
    engine = RegistrationEngine(db)
    await engine.register(member.id, event.id)
    await engine.cancel(member.id, event.id)

    # Cancelled participations still block the delete
    with pytest.raises(DeleteBlocked):
        await EventService(session).delete_event(event.id, admin_ctx)

    assert await get_event(db, event.id) is not None


@pytest.mark.asyncio
async def test_delete_rules(db, session, admin, member_ctx):
    event = await add_event(db, admin)

    with pytest.raises(Forbidden):
        await EventService(session).delete_event(event.id, member_ctx)
