from typing import Dict

import pytest
from httpx import AsyncClient
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.models import AttendanceRecord, Student
from academy.db.seed_demo import seed_demo


async def _setup_class(client: AsyncClient) -> Dict[str, str]:
    """One class from 2026-01-15 to 2026-02-05 with Alex and Sarah enrolled."""
    resp = await client.post(
        "/api/v1/classes",
        json={
            "name": "Elementary Robotics",
            "description": "Block coding and robots",
            "start_date": "2026-01-15",
            "end_date": "2026-02-05",
            "max_capacity": 12,
        },
    )
    assert resp.status_code == 201
    class_id = resp.json()["id"]

    ids = {"class": class_id}
    for key, code, name, email in (
        ("alex", "GM001", "Alex Johnson", "alex@example.com"),
        ("sarah", "GM002", "Sarah Williams", "sarah@example.com"),
    ):
        resp = await client.post(
            "/api/v1/students",
            json={"student_code": code, "full_name": name, "email": email, "phone": "555-0101"},
        )
        assert resp.status_code == 201
        ids[key] = resp.json()["id"]
        resp = await client.post("/api/v1/enrollments", json={"student_id": ids[key], "class_id": class_id})
        assert resp.status_code == 201
    return ids


async def _mark(client: AsyncClient, ids: Dict[str, str], student: str, day: str, status: str) -> None:
    resp = await client.put(
        "/api/v1/attendance",
        json={"student_id": ids[student], "class_id": ids["class"], "date": day, "status": status},
    )
    assert resp.status_code in (200, 204)


@pytest.mark.asyncio
async def test_student_crud_and_search(auth_client: AsyncClient) -> None:
    resp = await auth_client.post("/api/v1/students", json={"full_name": "Michael Chen", "email": "michael@example.com"})
    assert resp.status_code == 201
    student = resp.json()
    assert student["status"] == "Active"
    assert student["student_code"].startswith("TMP-")

    resp = await auth_client.patch(f"/api/v1/students/{student['id']}", json={"phone": "555-0103"})
    assert resp.status_code == 200
    assert resp.json()["phone"] == "555-0103"
    assert resp.json()["full_name"] == "Michael Chen"

    resp = await auth_client.get("/api/v1/students", params={"search": "chen"})
    assert [s["id"] for s in resp.json()] == [student["id"]]
    resp = await auth_client.get("/api/v1/students", params={"search": "nobody"})
    assert resp.json() == []

    resp = await auth_client.post(f"/api/v1/students/{student['id']}/archive")
    assert resp.status_code == 200
    assert resp.json()["status"] == "Archived"
    resp = await auth_client.get("/api/v1/students", params={"status": "Active"})
    assert resp.json() == []


@pytest.mark.asyncio
async def test_unknown_student_is_404(auth_client: AsyncClient) -> None:
    resp = await auth_client.get("/api/v1/students/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_class_rejects_inverted_dates(auth_client: AsyncClient) -> None:
    resp = await auth_client.post(
        "/api/v1/classes",
        json={"name": "Backwards", "start_date": "2026-02-05", "end_date": "2026-01-15"},
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_class_sessions(auth_client: AsyncClient) -> None:
    ids = await _setup_class(auth_client)
    resp = await auth_client.get(f"/api/v1/classes/{ids['class']}/sessions")
    assert resp.status_code == 200
    assert resp.json()["dates"] == ["2026-01-15", "2026-01-22", "2026-01-29", "2026-02-05"]

    resp = await auth_client.patch(f"/api/v1/classes/{ids['class']}", json={"end_date": "2026-01-01"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_enrollment_rules(auth_client: AsyncClient) -> None:
    ids = await _setup_class(auth_client)

    resp = await auth_client.post("/api/v1/enrollments", json={"student_id": ids["alex"], "class_id": ids["class"]})
    assert resp.status_code == 409

    resp = await auth_client.post(
        "/api/v1/enrollments",
        json={"student_id": "00000000-0000-0000-0000-000000000000", "class_id": ids["class"]},
    )
    assert resp.status_code == 404

    resp = await auth_client.get("/api/v1/enrollments", params={"class_id": ids["class"]})
    assert [e["student_id"] for e in resp.json()] == [ids["alex"], ids["sarah"]]


@pytest.mark.asyncio
async def test_full_class_rejects_enrollment(auth_client: AsyncClient) -> None:
    resp = await auth_client.post(
        "/api/v1/classes",
        json={"name": "Tiny", "start_date": "2026-01-15", "end_date": "2026-02-05", "max_capacity": 1},
    )
    class_id = resp.json()["id"]
    student_ids = []
    for name in ("First Student", "Second Student"):
        resp = await auth_client.post("/api/v1/students", json={"full_name": name})
        student_ids.append(resp.json()["id"])

    resp = await auth_client.post("/api/v1/enrollments", json={"student_id": student_ids[0], "class_id": class_id})
    assert resp.status_code == 201
    resp = await auth_client.post("/api/v1/enrollments", json={"student_id": student_ids[1], "class_id": class_id})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_attendance_upsert_keeps_one_record(auth_client: AsyncClient, db_session: AsyncSession) -> None:
    ids = await _setup_class(auth_client)

    await _mark(auth_client, ids, "alex", "2026-01-15", "P")
    resp = await auth_client.put(
        "/api/v1/attendance",
        json={
            "student_id": ids["alex"],
            "class_id": ids["class"],
            "date": "2026-01-15",
            "status": "A",
            "notes": "sick",
        },
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "A"
    assert resp.json()["notes"] == "sick"

    rows = (await db_session.execute(select(AttendanceRecord))).scalars().all()
    assert len(rows) == 1

    await _mark(auth_client, ids, "alex", "2026-01-15", "")
    resp = await auth_client.get("/api/v1/attendance", params={"class_id": ids["class"]})
    assert resp.json() == []


@pytest.mark.asyncio
async def test_grid_cycle_returns_to_unset(auth_client: AsyncClient) -> None:
    ids = await _setup_class(auth_client)
    url = f"/api/v1/attendance/grid/{ids['class']}/advance"
    body = {"student_id": ids["sarah"], "date": "2026-01-22"}

    statuses = []
    for _ in range(5):
        resp = await auth_client.post(url, json=body)
        assert resp.status_code == 200
        statuses.append(resp.json()["status"])
    assert statuses == ["P", "A", "L", "E", ""]

    resp = await auth_client.get("/api/v1/attendance", params={"class_id": ids["class"]})
    assert resp.json() == []


@pytest.mark.asyncio
async def test_grid_advance_rejects_unenrolled_student(auth_client: AsyncClient) -> None:
    ids = await _setup_class(auth_client)
    resp = await auth_client.post("/api/v1/students", json={"full_name": "Emma Davis"})
    emma = resp.json()["id"]

    resp = await auth_client.post(
        f"/api/v1/attendance/grid/{ids['class']}/advance",
        json={"student_id": emma, "date": "2026-01-22"},
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_grid_with_makeup_dates(auth_client: AsyncClient) -> None:
    ids = await _setup_class(auth_client)
    await _mark(auth_client, ids, "sarah", "2026-01-24", "P")

    resp = await auth_client.get(
        f"/api/v1/attendance/grid/{ids['class']}",
        params=[("makeup_dates", "2026-01-24"), ("makeup_dates", "2026-01-24"), ("makeup_dates", "2026-01-15")],
    )
    assert resp.status_code == 200
    grid = resp.json()
    assert grid["class_name"] == "Elementary Robotics"
    assert grid["dates"] == ["2026-01-15", "2026-01-22", "2026-01-24", "2026-01-29", "2026-02-05"]
    assert grid["makeup_dates"] == ["2026-01-24"]
    assert [r["student_name"] for r in grid["rows"]] == ["Alex Johnson", "Sarah Williams"]
    assert grid["rows"][1]["statuses"] == ["", "", "P", "", ""]


@pytest.mark.asyncio
async def test_grid_unknown_class(auth_client: AsyncClient) -> None:
    resp = await auth_client.get("/api/v1/attendance/grid/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_makeup_suggestions_and_email(auth_client: AsyncClient) -> None:
    ids = await _setup_class(auth_client)
    await _mark(auth_client, ids, "alex", "2026-01-15", "A")
    await _mark(auth_client, ids, "sarah", "2026-01-15", "A")
    await _mark(auth_client, ids, "sarah", "2026-01-22", "A")
    await _mark(auth_client, ids, "alex", "2026-01-22", "P")

    resp = await auth_client.get("/api/v1/makeup/suggestions")
    assert resp.status_code == 200
    suggestions = resp.json()
    assert [(s["student"]["full_name"], s["total_absences"]) for s in suggestions] == [
        ("Sarah Williams", 2),
        ("Alex Johnson", 1),
    ]
    assert suggestions[0]["class"]["name"] == "Elementary Robotics"
    assert suggestions[0]["absent_dates"] == ["2026-01-15", "2026-01-22"]

    resp = await auth_client.post(
        "/api/v1/makeup/email",
        json={
            "selections": [{"student_id": ids["alex"], "class_id": ids["class"]}],
            "mode": "custom",
            "custom_times": [{"date": "", "time": ""}],
        },
    )
    assert resp.status_code == 200
    email = resp.json()
    assert email["subject"] == "Makeup Class Opportunity - GearMinds Academy"
    assert email["recipients"] == ["alex@example.com"]
    assert email["time_slots"] == []
    assert "• Alex Johnson - Elementary Robotics (1 missed session)" in email["body"]
    assert "Please contact us to schedule a makeup session." in email["body"]

    resp = await auth_client.post(
        "/api/v1/makeup/email",
        json={
            "selections": [
                {"student_id": ids["sarah"], "class_id": ids["class"]},
                {"student_id": ids["alex"], "class_id": ids["class"]},
            ],
            "mode": "computed",
            "reference_date": "2026-01-12",
        },
    )
    email = resp.json()
    assert [s["date"] for s in email["time_slots"]] == ["2026-01-17", "2026-01-24", "2026-01-31"]
    assert "• Sarah Williams - Elementary Robotics (2 missed sessions)" in email["body"]
    assert "• Saturday, January 17, 2026 - 10:00 AM - 12:00 PM" in email["body"]


@pytest.mark.asyncio
async def test_makeup_email_rejects_student_without_absences(auth_client: AsyncClient) -> None:
    ids = await _setup_class(auth_client)
    resp = await auth_client.post(
        "/api/v1/makeup/email",
        json={"selections": [{"student_id": ids["alex"], "class_id": ids["class"]}]},
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_time_slots_endpoint(auth_client: AsyncClient) -> None:
    resp = await auth_client.get("/api/v1/makeup/time-slots", params={"reference_date": "2026-10-19"})
    assert resp.status_code == 200
    assert resp.json()["formatted"][0] == "• Saturday, October 24, 2026 - 10:00 AM - 12:00 PM"


@pytest.mark.asyncio
async def test_reports(auth_client: AsyncClient) -> None:
    ids = await _setup_class(auth_client)
    await _mark(auth_client, ids, "alex", "2026-01-15", "P")
    await _mark(auth_client, ids, "alex", "2026-01-22", "L")
    await _mark(auth_client, ids, "sarah", "2026-01-15", "A")
    await _mark(auth_client, ids, "sarah", "2026-01-22", "E")

    resp = await auth_client.get("/api/v1/reports/dashboard")
    assert resp.json() == {
        "active_students": 2,
        "active_classes": 1,
        "enrollments": 2,
        "attendance_records": 4,
        "students_needing_makeup": 1,
    }

    resp = await auth_client.get("/api/v1/reports/classes")
    report = resp.json()[0]
    assert report["class_id"] == ids["class"]
    assert report["sessions"] == 4
    assert (report["present"], report["absent"], report["late"], report["excused"]) == (1, 1, 1, 1)
    assert report["attendance_rate"] == 50.0


@pytest.mark.asyncio
async def test_csv_import(auth_client: AsyncClient) -> None:
    content = (
        b"Student ID,Full Name,Email,Phone\n"
        b"GM010,John Doe,john@example.com,555-0100\n"
        b",,x@example.com,\n"
        b"GM9,Bob,not-an-email,555\n"
    )
    resp = await auth_client.post(
        "/api/v1/students/import",
        files={"file": ("students.csv", content, "text/csv")},
    )
    assert resp.status_code == 201
    data = resp.json()
    assert [s["full_name"] for s in data["created"]] == ["John Doe", "Bob"]
    assert data["created"][1]["email"] is None
    assert [r["row"] for r in data["skipped"]] == [3]
    assert [(w["row"], w["field"]) for w in data["warnings"]] == [(4, "email")]


@pytest.mark.asyncio
async def test_import_template_download(auth_client: AsyncClient) -> None:
    resp = await auth_client.get("/api/v1/students/import/template")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/vnd.openxmlformats")


@pytest.mark.asyncio
async def test_seed_demo_runs_once(db_session: AsyncSession) -> None:
    assert await seed_demo(db_session) is True
    assert await seed_demo(db_session) is False
    students = (await db_session.execute(select(Student))).scalars().all()
    assert len(students) == 4


@pytest.mark.asyncio
async def test_search_wildcards_match_literally(auth_client: AsyncClient) -> None:
    for name in ("Ann_Lee", "Annxlee Smith", "Full 100% Marks"):
        resp = await auth_client.post("/api/v1/students", json={"full_name": name})
        assert resp.status_code == 201

    resp = await auth_client.get("/api/v1/students", params={"search": "n_l"})
    assert [s["full_name"] for s in resp.json()] == ["Ann_Lee"]
    resp = await auth_client.get("/api/v1/students", params={"search": "%"})
    assert [s["full_name"] for s in resp.json()] == ["Full 100% Marks"]


@pytest.mark.asyncio
async def test_storage_failure_is_503_and_session_recovers(
    auth_client: AsyncClient, db_session: AsyncSession
) -> None:
    ids = await _setup_class(auth_client)
    await db_session.execute(text("DROP TABLE attendance"))
    await db_session.commit()

    resp = await auth_client.post(
        f"/api/v1/attendance/grid/{ids['class']}/advance",
        json={"student_id": ids["alex"], "date": "2026-01-15"},
    )
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Storage is unavailable, please try again"

    resp = await auth_client.get("/api/v1/makeup/suggestions")
    assert resp.status_code == 503

    resp = await auth_client.get("/api/v1/students")
    assert resp.status_code == 200
    assert len(resp.json()) == 2
