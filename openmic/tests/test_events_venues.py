"""
Test venue and event endpoints.
"""
from datetime import date, timedelta

from fastapi.testclient import TestClient


def event_body(venue_id: int, **overrides) -> dict:
    body = {
        "title": "Friday Showcase",
        "venueId": venue_id,
        "date": (date.today() + timedelta(days=3)).isoformat(),
        "startTime": "20:00",
        "endTime": "23:00",
        "maxPerformers": 8,
        "performanceLength": 7,
        "eventType": "showcase",
        "signupOpens": "2020-01-01T00:00:00Z",
        "signupDeadline": "2099-01-01T00:00:00Z",
    }
    body.update(overrides)
    return body


class TestVenueEndpoints:
    """Test venue CRUD."""

    def test_create_venue(self, client: TestClient, auth_headers, host):
        response = client.post(
            "/api/venues",
            json={
                "name": "Corner Cafe",
                "address": "22 Elm St",
                "capacity": 40,
                "amenities": ["piano", "PA"],
            },
            headers=auth_headers(host),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["owner_id"] == host.id
        assert data["owner_name"] == "Hannah Host"
        assert data["amenities"] == ["piano", "PA"]

    def test_list_and_get_venues(self, client: TestClient, venue, host):
        assert [v["id"] for v in client.get("/api/venues").json()] == [venue.id]
        assert client.get(f"/api/venues/owner/{host.id}").json()[0]["name"] == "The Basement"
        assert client.get(f"/api/venues/{venue.id}").json()["address"] == "1 Main St"
        assert client.get("/api/venues/999").status_code == 404

    def test_update_venue_owner_only(self, client: TestClient, auth_headers, venue, host, performer):
        response = client.put(
            f"/api/venues/{venue.id}", json={"capacity": 60}, headers=auth_headers(performer)
        )
        assert response.status_code == 403

        response = client.put(
            f"/api/venues/{venue.id}", json={"capacity": 60}, headers=auth_headers(host)
        )
        assert response.status_code == 200
        assert response.json()["capacity"] == 60
        assert response.json()["name"] == "The Basement"

    def test_delete_venue_with_events(self, client: TestClient, auth_headers, venue, event, host):
        response = client.delete(f"/api/venues/{venue.id}", headers=auth_headers(host))

        assert response.status_code == 400
        assert response.json()["message"] == "Venue still has events"

    def test_delete_venue(self, client: TestClient, auth_headers, venue, host):
        response = client.delete(f"/api/venues/{venue.id}", headers=auth_headers(host))

        assert response.status_code == 200
        assert client.get(f"/api/venues/{venue.id}").status_code == 404


class TestEventEndpoints:
    """Test event CRUD, listing filters and reminders."""

    def test_create_event(self, client: TestClient, auth_headers, venue, host):
        response = client.post(
            "/api/events", json=event_body(venue.id), headers=auth_headers(host)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["host_id"] == host.id
        assert data["host_name"] == "Hannah Host"
        assert data["venue_name"] == "The Basement"
        assert data["venue_address"] == "1 Main St"
        assert data["signup_list_mode"] == "signup_order"
        assert data["event_status"] == "scheduled"
        assert data["current_signups"] == 0

    def test_create_event_window_backwards(self, client: TestClient, auth_headers, venue, host):
        response = client.post(
            "/api/events",
            json=event_body(
                venue.id,
                signupOpens="2030-01-02T00:00:00Z",
                signupDeadline="2030-01-01T00:00:00Z",
            ),
            headers=auth_headers(host),
        )

        assert response.status_code == 400

    def test_create_event_unknown_venue(self, client: TestClient, auth_headers, host):
        response = client.post("/api/events", json=event_body(999), headers=auth_headers(host))

        assert response.status_code == 404
        assert response.json()["message"] == "Venue not found"

    def test_create_event_requires_login(self, client: TestClient, venue):
        assert client.post("/api/events", json=event_body(venue.id)).status_code == 401

    def test_list_events_filters(self, client: TestClient, make_event, venue):
        soon = make_event(title="Soon")
        make_event(title="Later", on_date=soon.date + timedelta(days=7))

        everything = client.get("/api/events").json()
        assert [e["title"] for e in everything] == ["Soon", "Later"]

        on_date = client.get("/api/events", params={"date": soon.date.isoformat()}).json()
        assert [e["title"] for e in on_date] == ["Soon"]

        assert client.get("/api/events", params={"eventType": "workshop"}).json() == []
        assert len(client.get("/api/events", params={"venueId": venue.id}).json()) == 2

    def test_events_by_host(self, client: TestClient, event, host, performer):
        assert [e["id"] for e in client.get(f"/api/events/host/{host.id}").json()] == [event.id]
        assert client.get(f"/api/events/host/{performer.id}").json() == []

    def test_get_event_counts_confirmed(self, client: TestClient, auth_headers, event, performer):
        client.post(
            "/api/signups",
            json={"eventId": event.id, "performanceName": "Set", "performanceType": "music"},
            headers=auth_headers(performer),
        )

        response = client.get(f"/api/events/{event.id}")

        assert response.status_code == 200
        assert response.json()["current_signups"] == 1
        assert client.get("/api/events/999").status_code == 404

    def test_update_event(self, client: TestClient, auth_headers, event, host, performer):
        response = client.put(
            f"/api/events/{event.id}",
            json={"eventStatus": "live"},
            headers=auth_headers(performer),
        )
        assert response.status_code == 403

        response = client.put(
            f"/api/events/{event.id}",
            json={"eventStatus": "live", "maxPerformers": 12, "description": None},
            headers=auth_headers(host),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["event_status"] == "live"
        assert data["max_performers"] == 12
        assert data["title"] == "Tuesday Open Mic"

    def test_update_deadline_before_stored_opens(
        self, client: TestClient, auth_headers, event, host
    ):
        response = client.put(
            f"/api/events/{event.id}",
            json={"signupDeadline": "2020-01-01T00:00:00Z"},
            headers=auth_headers(host),
        )

        assert response.status_code == 400
        assert response.json() == {
            "message": "signupOpens must be before signupDeadline",
            "code": "VALIDATION_ERROR",
        }
        stored = client.get(f"/api/events/{event.id}").json()
        assert not stored["signup_deadline"].startswith("2020")

    def test_delete_event(self, client: TestClient, auth_headers, event, host, performer):
        client.post(
            "/api/signups",
            json={"eventId": event.id, "performanceName": "Set", "performanceType": "music"},
            headers=auth_headers(performer),
        )

        response = client.delete(f"/api/events/{event.id}", headers=auth_headers(host))

        assert response.status_code == 200
        assert client.get(f"/api/events/{event.id}").status_code == 404
        assert client.get("/api/signups/my-signups", headers=auth_headers(performer)).json() == []

    def test_send_reminders(self, client: TestClient, auth_headers, event, host, performer, queued):
        created = client.post(
            "/api/signups",
            json={"eventId": event.id, "performanceName": "Set", "performanceType": "music"},
            headers=auth_headers(performer),
        ).json()
        client.post(
            f"/api/signups/event/{event.id}/add-performer",
            json={"performerName": "Walk-in", "performanceName": "Set", "performanceType": "other"},
            headers=auth_headers(host),
        )

        response = client.post(f"/api/events/{event.id}/reminders", headers=auth_headers(host))

        assert response.status_code == 200
        assert response.json() == {"event_id": event.id, "queued": 1}
        assert queued == [("event_reminder", (created["id"],))]

    def test_send_reminders_host_only(self, client: TestClient, auth_headers, event, performer):
        response = client.post(
            f"/api/events/{event.id}/reminders", headers=auth_headers(performer)
        )

        assert response.status_code == 403
