import pytest

from app.exceptions import NotFound, ValidationError
from app.models import EventStatus
from app.services.auth import AuthContext
from app.services.queries import EventQueryService
from app.services.ratings import RatingAggregator
from app.services.registration import RegistrationEngine
from tests.helpers import add_event, add_user


@pytest.mark.asyncio
async def test_list_events_orders_by_date_and_paginates(db, session, admin):
    for days in (30, 10, 20):
        await add_event(db, admin, days_ahead=days, title=f"In {days} days")

    result = await EventQueryService(session).list_events(page=1, limit=2)

    assert [e.title for e in result["events"]] == ["In 10 days", "In 20 days"]
    assert result["pagination"] == {"total": 3, "page": 1, "limit": 2, "total_pages": 2}

    result = await EventQueryService(session).list_events(page=2, limit=2)
    assert [e.title for e in result["events"]] == ["In 30 days"]


@pytest.mark.asyncio
async def test_list_events_filters(db, session, admin):
    await add_event(db, admin, title="Django Night", location="Paris")
    await add_event(db, admin, title="Rust Evening", description="Systems talk about django ports")
    await add_event(db, admin, title="Go Day", status=EventStatus.CANCELLED)

    service = EventQueryService(session)

    result = await service.list_events(search="DJANGO")
    assert {e.title for e in result["events"]} == {"Django Night", "Rust Evening"}

    result = await service.list_events(search="paris")
    assert [e.title for e in result["events"]] == ["Django Night"]

    result = await service.list_events(status="cancelled")
    assert [e.title for e in result["events"]] == ["Go Day"]
    assert result["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_list_events_limits(db, session, admin):
    service = EventQueryService(session)

    result = await service.list_events(limit=1000)
    assert result["pagination"]["limit"] == 100
    assert result["pagination"]["total_pages"] == 0

    result = await service.list_events()
    assert result["pagination"]["limit"] == 20

    with pytest.raises(ValidationError):
        await service.list_events(status="postponed")


@pytest.mark.asyncio
async def test_event_detail(db, session, admin):
    event = await add_event(db, admin)
    first = await add_user(db, "first")
    second = await add_user(db, "second")
    leaver = await add_user(db, "leaver")
    engine = RegistrationEngine(db)
    for user in (first, leaver, second):
        await engine.register(user.id, event.id)
    await engine.cancel(leaver.id, event.id)

    ratings = RatingAggregator(db)
    await ratings.add_evaluation(first.id, event.id, 5, "Great")
    await ratings.add_evaluation(second.id, event.id, 3)

    detail = await EventQueryService(session).get_event_detail(event.id)

    assert detail["event"].id == event.id
    assert [p["username"] for p in detail["participants"]] == ["first", "second"]
    assert detail["participants"][0]["id"] == first.id
    assert [e.username for e in detail["evaluations"]] == ["second", "first"]
    assert detail["user_participation"] is None
    assert detail["user_evaluation"] is None


@pytest.mark.asyncio
async def test_event_detail_for_viewer(db, session, admin, member):
    event = await add_event(db, admin)
    await RegistrationEngine(db).register(member.id, event.id)
    await RatingAggregator(db).add_evaluation(member.id, event.id, 4)

    detail = await EventQueryService(session).get_event_detail(event.id, AuthContext.for_user(member))

    assert detail["user_participation"].user_id == member.id
    assert detail["user_evaluation"].rating == 4


@pytest.mark.asyncio
async def test_event_detail_unknown_event(session):
    with pytest.raises(NotFound):
        await EventQueryService(session).get_event_detail(999)


@pytest.mark.asyncio
async def test_list_participations_defaults_to_viewer(db, session, admin, member):
    first = await add_event(db, admin, title="First")
    second = await add_event(db, admin, title="Second")
    other = await add_user(db, "other")
    engine = RegistrationEngine(db)
    await engine.register(member.id, first.id)
    await engine.register(member.id, second.id)
    await engine.register(other.id, first.id)

    service = EventQueryService(session)
    mine = await service.list_participations(AuthContext.for_user(member))
    assert {p.event_title for p in mine} == {"First", "Second"}
    assert all(p.user_id == member.id for p in mine)

    theirs = await service.list_participations(AuthContext.for_user(member), user_id=other.id)
    assert [p.username for p in theirs] == ["other"]

    filtered = await service.list_participations(AuthContext.for_user(member), event_id=second.id)
    assert [p.event_title for p in filtered] == ["Second"]


@pytest.mark.asyncio
async def test_list_evaluations_with_stats(db, session, admin, member):
    event = await add_event(db, admin)
    await RegistrationEngine(db).register(member.id, event.id)
    await RatingAggregator(db).add_evaluation(member.id, event.id, 4)

    service = EventQueryService(session)
    result = await service.list_evaluations(event_id=event.id)
    assert len(result["evaluations"]) == 1
    assert result["stats"]["total_evaluations"] == 1
    assert result["stats"]["four_stars"] == 1

    result = await service.list_evaluations(user_id=member.id)
    assert result["stats"] is None
    assert result["evaluations"][0].event_title == event.title
