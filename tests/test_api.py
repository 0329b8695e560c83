from __future__ import annotations

from conftest import ADMIN_EMAIL, new_id

ADMIN = {"X-Admin-Email": ADMIN_EMAIL}


def _room(client, number="101", capacity=2):
    resp = client.post(
        "/api/rooms", json={"number": number, "block": "A", "floor": "1", "capacity": capacity}, headers=ADMIN
    )
    assert resp.status_code == 201
    return resp.get_json()["room"]["id"]


def _allottee(client, email):
    resp = client.post("/api/allotees/register", json={"name": "S", "email": email, "adminEmail": ADMIN_EMAIL})
    assert resp.status_code == 201
    return resp.get_json()["allotee"]["id"]


def test_health_without_database(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json()["database"] == "not configured"


def test_admin_routes_reject_unknown_admin(client):
    resp = client.post("/api/rooms", json={"number": "1", "block": "A", "floor": "1"})
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Unauthorized. Admin not found."}

    resp = client.post(
        "/api/allotees/register", json={"email": "x@hostel.test", "adminEmail": "intruder@hostel.test"}
    )
    assert resp.status_code == 403


def test_allot_flow(client):
    room_id = _room(client, capacity=2)
    a = _allottee(client, "a@hostel.test")
    b = _allottee(client, "b@hostel.test")
    c = _allottee(client, "c@hostel.test")

    resp = client.put(f"/api/rooms/{room_id}/allot", json={"alloteeId": a}, headers=ADMIN)
    assert resp.status_code == 200
    assert resp.get_json()["room"]["occupancy"] == 1
    assert client.put(f"/api/rooms/{room_id}/allot", json={"alloteeId": b}, headers=ADMIN).status_code == 200

    resp = client.put(f"/api/rooms/{room_id}/allot", json={"alloteeId": c}, headers=ADMIN)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Room is already at full capacity"

    allottee = client.get(f"/api/allotees/{a}").get_json()
    assert (allottee["room"], allottee["hostel"]) == ("101", "Block A")
    assert [x["id"] for x in client.get("/api/allotees/unallocated").get_json()] == [c]

    resp = client.delete(f"/api/rooms/{room_id}/allot", json={"alloteeId": a}, headers=ADMIN)
    assert resp.status_code == 200
    assert [x["id"] for x in resp.get_json()["room"]["allotees"]] == [b]


def test_allot_requires_allottee_id(client):
    room_id = _room(client)

    resp = client.put(f"/api/rooms/{room_id}/allot", json={}, headers=ADMIN)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Allotee ID is required"


def test_not_found_and_bad_ids(client):
    assert client.get(f"/api/rooms/{new_id()}").status_code == 404
    assert client.get("/api/allotees/not-an-id").status_code == 400
    assert client.get("/api/no-such-route").status_code == 404


def test_attendance_batch_and_stats(client):
    a = _allottee(client, "a@hostel.test")
    _allottee(client, "b@hostel.test")

    resp = client.post(
        "/api/attendance",
        json={
            "date": "2025-03-14",
            "adminEmail": ADMIN_EMAIL,
            "records": [{"alloteeId": a, "status": "present"}, {"alloteeId": "bad", "status": "present"}],
        },
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["message"] == "Attendance processed"
    assert body["results"][0]["success"] is True
    assert body["results"][0]["attendance"]["status"] == "present"
    assert body["results"][1] == {"alloteeId": "bad", "success": False, "error": "Invalid allotee ID"}

    stats = client.get("/api/attendance/stats?date=2025-03-14").get_json()
    assert stats == {"total": 2, "present": 1, "absent": 0, "notMarked": 1, "attendanceRate": 50}

    daily = client.get("/api/attendance?date=2025-03-14").get_json()
    marked = {row["allotee"]["id"]: row["attendance"] for row in daily["attendanceRecords"]}
    assert marked[a]["status"] == "present"
    assert sum(1 for v in marked.values() if v is None) == 1


def test_attendance_requires_admin_and_array(client):
    resp = client.post("/api/attendance", json={"records": "nope", "adminEmail": ADMIN_EMAIL})
    assert resp.status_code == 400

    resp = client.post("/api/attendance", json={"records": []})
    assert resp.status_code == 403


def test_complaint_patch(client):
    student = _allottee(client, "a@hostel.test")
    resp = client.post(
        "/api/complaints",
        json={
            "title": "Fan broken",
            "description": "Ceiling fan does not spin",
            "category": "Electrical",
            "studentId": student,
            "roomNumber": "101",
            "hostelBlock": "A",
        },
    )
    assert resp.status_code == 201
    complaint = resp.get_json()
    assert complaint["status"] == "Open"
    assert complaint["student"] == {"name": "S", "email": "a@hostel.test"}
    url = f"/api/complaints/{complaint['id']}"

    assert client.patch(url, json={"status": "In Progress"}).status_code == 403
    resp = client.patch(url, json={"status": "Resolved"}, headers=ADMIN)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Resolution is required"

    resp = client.patch(url, json={"status": "Resolved", "resolution": "Replaced capacitor"}, headers=ADMIN)
    assert resp.status_code == 200
    assert resp.get_json()["resolution"] == "Replaced capacitor"

    assert client.delete(url, headers=ADMIN).status_code == 200
    assert client.get(url).status_code == 404


def test_attendance_rejects_non_string_date(client):
    resp = client.post("/api/attendance", json={"records": [], "adminEmail": ADMIN_EMAIL, "date": 20250314})

    assert resp.status_code == 400
    assert resp.get_json()["error"].startswith("Invalid date")


def test_register_checks_email_before_admin(client):
    resp = client.post("/api/allotees/register", json={"name": "S", "adminEmail": "intruder@hostel.test"})

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Email is required"}
