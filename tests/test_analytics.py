from eventhub.controller.analytics_controller import percentage, summarize_attendance


def test_percentages_from_counts():
    summary = summarize_attendance({
        "total_registrations": 10,
        "attendance_present": 6,
        "attendance_absent": 2,
    })
    assert summary["attendance_percentage"] == 60.00
    assert summary["no_show_percentage"] == 20.00


def test_percentage_guards_division_by_zero():
    assert percentage(0, 0) == 0.0
    summary = summarize_attendance({"total_registrations": 0, "attendance_present": 0, "attendance_absent": 0})
    assert summary["attendance_percentage"] == 0.0
    assert summary["no_show_percentage"] == 0.0
    assert summary["avg_rating"] is None


def test_percentage_rounds_to_two_places():
    assert percentage(1, 3) == 33.33
    assert percentage(2, 3) == 66.67


def test_event_analytics_endpoint(client, make_event, make_user, chairperson):
    _, chair_headers = chairperson
    event_id = make_event()

    reg_ids = []
    for _ in range(5):
        _, headers = make_user("student")
        reg_ids.append(client.post(f"/api/events/{event_id}/register", headers=headers).json()["data"]["id"])

    marks = {reg_ids[0]: "present", reg_ids[1]: "present", reg_ids[2]: "absent", reg_ids[3]: "late"}
    for reg_id, status in marks.items():
        resp = client.post(
            "/api/chairperson/attendance/manual",
            json={"registration_id": reg_id, "event_id": event_id, "status": status},
            headers=chair_headers,
        )
        assert resp.status_code == 200

    resp = client.get(f"/api/chairperson/analytics/{event_id}", headers=chair_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total_registrations"] == 5
    assert data["attendance_present"] == 2
    assert data["attendance_absent"] == 1
    assert data["attendance_late"] == 1
    assert data["attendance_pending"] == 1
    assert data["attendance_percentage"] == 40.0
    assert data["no_show_percentage"] == 20.0


def test_analytics_excludes_cancelled_and_requires_owner(client, make_event, student, make_user, chairperson):
    _, chair_headers = chairperson
    _, student_headers = student
    event_id = make_event()
    reg_id = client.post(f"/api/events/{event_id}/register", headers=student_headers).json()["data"]["id"]
    client.post(f"/api/students/registrations/{reg_id}/cancel", headers=student_headers)

    data = client.get(f"/api/chairperson/analytics/{event_id}", headers=chair_headers).json()["data"]
    assert data["total_registrations"] == 0
    assert data["attendance_percentage"] == 0.0

    _, stranger_headers = make_user("chairperson")
    assert client.get(f"/api/chairperson/analytics/{event_id}", headers=stranger_headers).status_code == 403
    assert client.get(f"/api/chairperson/analytics/{event_id}", headers=student_headers).status_code == 403


def test_club_analytics(client, club, make_event, student, chairperson, admin):
    _, chair_headers = chairperson
    _, admin_headers = admin
    _, student_headers = student
    for title in ("One", "Two"):
        event_id = make_event(title=title)
        client.post(f"/api/events/{event_id}/register", headers=student_headers)

    data = client.get(f"/api/chairperson/analytics/clubs/{club}", headers=chair_headers).json()["data"]
    assert data["total_events"] == 2
    assert data["total_registrations"] == 2
    assert data["attendance_pending"] == 2

    assert client.get(f"/api/chairperson/analytics/clubs/{club}", headers=admin_headers).status_code == 200
