import pytest

from eventhub.models.event_model import Event
from eventhub.models.registration_model import Registration
from eventhub.security import decrypt_qr_token
from conftest import future


def _count(db, event_id, **filters):
    db.expire_all()
    query = db.query(Registration).filter(Registration.event_id == event_id)
    for key, value in filters.items():
        query = query.filter(getattr(Registration, key) == value)
    return query.count()


def _registered_count(db, event_id):
    db.expire_all()
    return db.query(Event).filter(Event.id == event_id).one().registered_count


def test_register_issues_qr_credentials(client, db, make_event, student):
    student_id, headers = student
    event_id = make_event()

    resp = client.post(f"/api/events/{event_id}/register", headers=headers)
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["status"] == "registered"
    assert data["attendance_marked"] is False
    assert data["qr_code_data"].startswith("data:image/png;base64,")

    registration = db.query(Registration).filter(Registration.id == data["id"]).one()
    assert len(registration.qr_secret) == 64
    assert decrypt_qr_token(registration.qr_token) == {"registrationId": data["id"], "userId": student_id}
    assert _registered_count(db, event_id) == 1


def test_duplicate_registration_conflicts(client, db, make_event, student):
    _, headers = student
    event_id = make_event()

    assert client.post(f"/api/events/{event_id}/register", headers=headers).status_code == 201
    resp = client.post(f"/api/events/{event_id}/register", headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error"] == "ALREADY_REGISTERED"

    assert _count(db, event_id, status="registered") == 1
    assert _registered_count(db, event_id) == 1


def test_register_for_missing_event(client, student):
    _, headers = student
    resp = client.post("/api/events/12345/register", headers=headers)
    assert resp.status_code == 404


def test_register_requires_token(client, make_event):
    event_id = make_event()
    assert client.post(f"/api/events/{event_id}/register").status_code == 401


def test_registration_window_is_enforced(client, make_event, student):
    _, headers = student
    event_id = make_event(registration_open_date=future(days=2), event_date=future(days=5))
    resp = client.post(f"/api/events/{event_id}/register", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "REGISTRATION_CLOSED"


@pytest.mark.parametrize("capacity", [1, 3])
def test_capacity_limit_and_cancellation_frees_one_seat(client, db, make_event, make_user, capacity):
    event_id = make_event(max_capacity=capacity)
    registrations = []
    for _ in range(capacity):
        _, headers = make_user("student")
        resp = client.post(f"/api/events/{event_id}/register", headers=headers)
        assert resp.status_code == 201
        registrations.append((resp.json()["data"]["id"], headers))

    _, late_headers = make_user("student")
    resp = client.post(f"/api/events/{event_id}/register", headers=late_headers)
    assert resp.status_code == 409
    assert resp.json()["error"] == "EVENT_FULL"

    reg_id, headers = registrations[0]
    assert client.post(f"/api/students/registrations/{reg_id}/cancel", headers=headers).status_code == 200

    assert client.post(f"/api/events/{event_id}/register", headers=late_headers).status_code == 201
    _, later_headers = make_user("student")
    resp = client.post(f"/api/events/{event_id}/register", headers=later_headers)
    assert resp.json()["error"] == "EVENT_FULL"
    assert _registered_count(db, event_id) == capacity


def test_cancel_decrements_once_and_keeps_row(client, db, make_event, student):
    _, headers = student
    event_id = make_event()
    reg_id = client.post(f"/api/events/{event_id}/register", headers=headers).json()["data"]["id"]

    resp = client.post(f"/api/students/registrations/{reg_id}/cancel", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "cancelled"
    assert resp.json()["data"]["cancelled_at"] is not None
    assert _registered_count(db, event_id) == 0

    resp = client.post(f"/api/students/registrations/{reg_id}/cancel", headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error"] == "NOT_CANCELLABLE"
    assert _registered_count(db, event_id) == 0
    assert _count(db, event_id, status="cancelled") == 1


def test_cancel_never_drops_count_below_zero(client, db, make_event, student):
    _, headers = student
    event_id = make_event()
    reg_id = client.post(f"/api/events/{event_id}/register", headers=headers).json()["data"]["id"]

    db.query(Event).filter(Event.id == event_id).update({"registered_count": 0})
    db.commit()

    assert client.post(f"/api/students/registrations/{reg_id}/cancel", headers=headers).status_code == 200
    assert _registered_count(db, event_id) == 0


def test_re_register_after_cancel(client, db, make_event, student):
    _, headers = student
    event_id = make_event()
    reg_id = client.post(f"/api/events/{event_id}/register", headers=headers).json()["data"]["id"]
    client.post(f"/api/students/registrations/{reg_id}/cancel", headers=headers)

    resp = client.post(f"/api/events/{event_id}/register", headers=headers)
    assert resp.status_code == 201
    assert resp.json()["data"]["id"] != reg_id
    assert _count(db, event_id) == 2
    assert _count(db, event_id, status="registered") == 1


def test_only_owner_can_cancel(client, make_event, student, make_user):
    _, headers = student
    _, other_headers = make_user("student")
    event_id = make_event()
    reg_id = client.post(f"/api/events/{event_id}/register", headers=headers).json()["data"]["id"]

    resp = client.post(f"/api/students/registrations/{reg_id}/cancel", headers=other_headers)
    assert resp.status_code == 403


def test_student_registration_listing_excludes_cancelled(client, make_event, student):
    _, headers = student
    kept = make_event(title="Kept")
    dropped = make_event(title="Dropped")
    client.post(f"/api/events/{kept}/register", headers=headers)
    reg_id = client.post(f"/api/events/{dropped}/register", headers=headers).json()["data"]["id"]
    client.post(f"/api/students/registrations/{reg_id}/cancel", headers=headers)

    data = client.get("/api/students/registrations", headers=headers).json()["data"]
    assert [r["event"]["title"] for r in data] == ["Kept"]

    data = client.get("/api/students/registrations", params={"eventId": dropped}, headers=headers).json()["data"]
    assert data == []


def test_confirm_without_smtp_reports_not_sent(client, make_event, student, monkeypatch):
    monkeypatch.setattr("eventhub.controller.qr_code_sender.eventhub_email", None)
    _, headers = student
    event_id = make_event()
    reg_id = client.post(f"/api/events/{event_id}/register", headers=headers).json()["data"]["id"]

    resp = client.post(f"/api/events/{event_id}/register/confirm", json={"registration_id": reg_id}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"registration_id": reg_id, "sent": False}


def test_concurrent_duplicate_hits_unique_index(client, db, make_event, student, monkeypatch):
    _, headers = student
    event_id = make_event(max_capacity=5)
    assert client.post(f"/api/events/{event_id}/register", headers=headers).status_code == 201

    # both requests pass the lookup before either has inserted its row
    monkeypatch.setattr("eventhub.controller.registration_controller._active_registration", lambda *args: None)
    resp = client.post(f"/api/events/{event_id}/register", headers=headers)

    assert resp.status_code == 409
    assert resp.json()["error"] == "ALREADY_REGISTERED"
    assert _registered_count(db, event_id) == 1
    assert _count(db, event_id) == 1


def test_cancelled_registration_gets_no_ticket(client, make_event, student, monkeypatch):
    monkeypatch.setattr("eventhub.controller.qr_code_sender.eventhub_email", None)
    _, headers = student
    event_id = make_event()
    reg_id = client.post(f"/api/events/{event_id}/register", headers=headers).json()["data"]["id"]
    assert client.post(f"/api/students/registrations/{reg_id}/cancel", headers=headers).status_code == 200

    resp = client.post(f"/api/events/{event_id}/register/confirm", json={"registration_id": reg_id}, headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error"] == "REGISTRATION_CANCELLED"
