from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from app.models import UserRole
from tests.helpers import auth_headers, build_event, build_user


def future_date(days: int = 14) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def event_body(**overrides):
    body = {
        "title": "Python Meetup",
        "description": "Monthly talks",
        "event_date": future_date(),
        "location": "Community Hall",
        "max_capacity": 2,
    }
    body.update(overrides)
    return body


def test_read_events_empty(client: TestClient):
    response = client.get("/api/v1/events")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["events"] == []
    assert data["data"]["pagination"]["total"] == 0


def test_create_and_read_event(client: TestClient, admin_headers):
    response = client.post("/api/v1/events", json=event_body(), headers=admin_headers)

    assert response.status_code == 201
    event = response.json()["data"]["event"]
    assert event["title"] == "Python Meetup"
    assert event["status"] == "open"
    assert event["status_label"] == "Open"
    assert event["available_spots"] == 2
    assert event["is_full"] is False
    assert event["creator_name"] == "admin"

    response = client.get(f"/api/v1/events/{event['id']}")
    assert response.status_code == 200
    detail = response.json()["data"]
    assert detail["event"]["id"] == event["id"]
    assert detail["participants"] == []
    assert detail["evaluations"] == []
    assert detail["user_participation"] is None


def test_create_event_validation(client: TestClient, admin_headers):
    response = client.post(
        "/api/v1/events",
        json=event_body(event_date=(datetime.now(timezone.utc) - timedelta(days=1)).isoformat()),
        headers=admin_headers,
    )

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert "future" in data["error"]

    response = client.post("/api/v1/events", json=event_body(max_capacity=0), headers=admin_headers)
    assert response.status_code == 400


def test_create_event_requires_admin(client: TestClient, seed):
    member = seed(build_user("member"))

    response = client.post("/api/v1/events", json=event_body())
    assert response.status_code == 401

    response = client.post("/api/v1/events", json=event_body(), headers=auth_headers(member))
    assert response.status_code == 403
    assert response.json()["success"] is False


def test_update_event(client: TestClient, seed, api_admin, admin_headers):
    event = seed(build_event(api_admin, max_capacity=5))

    response = client.put(
        f"/api/v1/events/{event.id}",
        json={"title": "Renamed", "status": "cancelled"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    updated = response.json()["data"]["event"]
    assert updated["title"] == "Renamed"
    assert updated["status"] == "cancelled"

    response = client.put(f"/api/v1/events/{event.id}", json={}, headers=admin_headers)
    assert response.status_code == 400


def test_only_creator_updates_event(client: TestClient, seed, api_admin):
    event = seed(build_event(api_admin))
    other_admin = seed(build_user("other_admin", UserRole.ADMIN))

    response = client.put(
        f"/api/v1/events/{event.id}", json={"title": "Hijacked"}, headers=auth_headers(other_admin)
    )

    assert response.status_code == 403


def test_delete_event(client: TestClient, seed, api_admin, admin_headers):
    event = seed(build_event(api_admin))

    response = client.delete(f"/api/v1/events/{event.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = client.get(f"/api/v1/events/{event.id}")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Event not found"}


def test_delete_event_with_participants(client: TestClient, seed, api_admin, admin_headers):
    event = seed(build_event(api_admin))
    member = seed(build_user("member"))
    client.post("/api/v1/participations", json={"event_id": event.id}, headers=auth_headers(member))

    response = client.delete(f"/api/v1/events/{event.id}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_list_events_query(client: TestClient, seed, api_admin):
    seed(
        build_event(api_admin, title="Django Night", days_ahead=3),
        build_event(api_admin, title="Flask Evening", days_ahead=1),
    )

    response = client.get("/api/v1/events", params={"search": "night"})
    assert [e["title"] for e in response.json()["data"]["events"]] == ["Django Night"]

    response = client.get("/api/v1/events", params={"limit": 1, "page": 1})
    data = response.json()["data"]
    assert [e["title"] for e in data["events"]] == ["Flask Evening"]
    assert data["pagination"]["total_pages"] == 2

    response = client.get("/api/v1/events", params={"status": "bogus"})
    assert response.status_code == 400


def test_unknown_route_and_method(client: TestClient):
    response = client.get("/api/v1/nothing-here")
    assert response.status_code == 404
    assert response.json()["success"] is False

    response = client.patch("/api/v1/events")
    assert response.status_code == 405
