from eventhub.models.audit_model import AuditLog


def test_signup_returns_token_and_user(client):
    resp = client.post("/api/auth/signup", json={
        "email": "New.Student@College.edu",
        "password": "secret123",
        "full_name": "New Student",
        "roll_number": "CS-101",
    })
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "new.student@college.edu"
    assert data["user"]["role"] == "student"


def test_signup_rejects_duplicate_email(client):
    body = {"email": "dup@college.edu", "password": "secret123", "full_name": "Dup"}
    assert client.post("/api/auth/signup", json=body).status_code == 201
    resp = client.post("/api/auth/signup", json=body)
    assert resp.status_code == 400
    assert resp.json()["error"] == "EMAIL_TAKEN"


def test_signup_validates_input(client):
    resp = client.post("/api/auth/signup", json={"email": "x@college.edu", "password": "123", "full_name": "X"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "VALIDATION_ERROR"

    resp = client.post("/api/auth/signup", json={
        "email": "boss@college.edu", "password": "secret123", "full_name": "Boss", "role": "admin",
    })
    assert resp.status_code == 400


def test_login_and_me(client, db):
    client.post("/api/auth/signup", json={"email": "me@college.edu", "password": "secret123", "full_name": "Me"})

    resp = client.post("/api/auth/login", json={"email": "me@college.edu", "password": "secret123"})
    assert resp.status_code == 200
    token = resp.json()["data"]["token"]

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == "me@college.edu"
    assert resp.json()["data"]["club_memberships"] == []

    actions = {a.action for a in db.query(AuditLog).all()}
    assert {"USER_SIGNUP", "USER_LOGIN"} <= actions


def test_login_rejects_bad_credentials(client, student):
    resp = client.post("/api/auth/login", json={"email": "student1@college.edu", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "UNAUTHORIZED"

    resp = client.post("/api/auth/login", json={"email": "ghost@college.edu", "password": "secret123"})
    assert resp.status_code == 401


def test_authenticated_routes_need_valid_token(client):
    assert client.get("/api/auth/me").status_code == 401
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid or expired token"


def test_profile_update(client, student):
    _, headers = student
    resp = client.put("/api/users/profile", json={"branch": "ECE", "year": 3}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["branch"] == "ECE"
    assert client.get("/api/users/profile", headers=headers).json()["data"]["year"] == 3


def test_admin_manages_roles(client, admin, student):
    _, admin_headers = admin
    student_id, student_headers = student

    assert client.get("/api/users", headers=student_headers).status_code == 403

    resp = client.put(f"/api/users/{student_id}/role", json={"role": "chairperson"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["role"] == "chairperson"

    users = client.get("/api/users", params={"role": "chairperson"}, headers=admin_headers).json()["data"]
    assert [u["id"] for u in users] == [student_id]
