import json
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from eventhub.main import create_app
from eventhub.models.registration_model import Registration
from eventhub.models.user_model import User
from eventhub.security import generate_token, hash_password


@pytest.fixture
def app():
    return create_app("sqlite://")


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app):
    session = app.state.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="student", email=None, full_name=None):
        counter["n"] += 1
        user = User(
            email=email or f"{role}{counter['n']}@college.edu",
            full_name=full_name or f"{role.title()} {counter['n']}",
            password_hash=hash_password("secret123"),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        headers = {"Authorization": f"Bearer {generate_token(user.id, user.email, user.role)}"}
        return user.id, headers

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def chairperson(make_user):
    return make_user("chairperson")


@pytest.fixture
def student(make_user):
    return make_user("student")


@pytest.fixture
def club(client, admin, chairperson):
    _, admin_headers = admin
    chair_id, _ = chairperson
    resp = client.post("/api/clubs", json={"name": "Robotics Club", "description": "Robots"}, headers=admin_headers)
    assert resp.status_code == 201
    club_id = resp.json()["data"]["id"]
    resp = client.post(
        f"/api/clubs/{club_id}/members",
        json={"user_id": chair_id, "role": "chairperson"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    return club_id


def future(days=7):
    return (datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(days=days)).replace(microsecond=0).isoformat()


@pytest.fixture
def make_event(client, club, chairperson):
    _, chair_headers = chairperson

    def _make(**overrides):
        body = {
            "club_id": club,
            "title": "Intro to ROS",
            "description": "Hands-on workshop",
            "event_type": "workshop",
            "venue_address": "Lab 3",
            "event_date": future(),
        }
        body.update(overrides)
        resp = client.post("/api/events", json=body, headers=chair_headers)
        assert resp.status_code == 201, resp.json()
        return resp.json()["data"]["id"]

    return _make


def qr_text_for(db, registration_id):
    """The JSON text a scanner would read off the registration's QR image."""
    db.expire_all()
    registration = db.query(Registration).filter(Registration.id == registration_id).one()
    return json.dumps({
        "registrationId": registration.id,
        "eventId": registration.event_id,
        "token": registration.qr_secret,
        "timestamp": 1700000000000,
    })
