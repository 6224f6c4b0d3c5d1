from __future__ import annotations

from datetime import date

import pytest

from src.student_affairs.student_affairs.academic.follow_up import InMemoryAcknowledgmentStore
from src.student_affairs.student_affairs.academic.model import AcademicAbsence
from src.student_affairs.student_affairs.container import build_services
from src.student_affairs.student_affairs.core.enums import LeaveType, Role
from src.student_affairs.student_affairs.core.period import PeriodScope
from src.student_affairs.student_affairs.dormitory.model import DormitoryPermission
from src.student_affairs.student_affairs.entities.model import ClassRoom, Dormitory, Student
from src.student_affairs.student_affairs.main import create_app
from tests.fakes import (
    FakeAcademicRepo,
    FakeDormitoryRepo,
    FakeNamedRepo,
    FakeProfileRepo,
    FakeStudentRepo,
    course_repo,
    profile,
)


@pytest.fixture()
def repos():
    return {
        "students": FakeStudentRepo(
            [Student(1, "Aisha", class_id=10, dormitory_id=20), Student(2, "Bilal", class_id=10, dormitory_id=20)]
        ),
        "classes": FakeNamedRepo("classes", ClassRoom, [ClassRoom(10, "7A")]),
        "dormitories": FakeNamedRepo("dormitories", Dormitory, [Dormitory(20, "Umar")]),
        "courses": course_repo("Math", "Physics"),
        "profiles": FakeProfileRepo([profile(1, "root", Role.SUPER_ADMIN), profile(2, "ana", Role.ACADEMIC_ADMIN)]),
        "academic": FakeAcademicRepo(absences=[AcademicAbsence(1, 1, date(2025, 1, 10), 1)]),
        "dormitory": FakeDormitoryRepo(
            permissions=[
                DormitoryPermission(1, 1, date(2025, 3, 5), LeaveType.OVERNIGHT_LEAVE, 1, None, "2024-2025", 2)
            ]
        ),
    }


@pytest.fixture()
def client(monkeypatch, repos):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_services(
        **repos,
        follow_up_store=InMemoryAcknowledgmentStore(),
        default_period=PeriodScope("2024-2025", 2),
        fetch_workers=2,
    )
    app = create_app(container)
    return app.test_client()


def login(client, role: Role, profile_id: int = 1):
    with client.session_transaction() as sess:
        sess["role"] = role.value
        sess["profile_id"] = profile_id


def test_requires_session_role(client):
    assert client.get("/api/academic/records").status_code == 401


def test_role_scoping(client):
    login(client, Role.DORMITORY_ADMIN)
    resp = client.get("/api/academic/records")
    assert resp.status_code == 403
    assert resp.get_json()["success"] is False


def test_academic_records_and_class_recap(client):
    login(client, Role.ACADEMIC_ADMIN, 2)

    records = client.get("/api/academic/records?class_id=10").get_json()
    assert records["count"] == 1
    assert records["data"][0]["course_name"] == "Math"

    recap = client.get("/api/academic/classes/10/recap").get_json()["data"]
    assert recap == [{"no": 1, "student_name": "Aisha", "absent": 1, "permission": 0, "sick": 0, "total": 1, "unique_days": 1}]


def test_csv_export(client):
    login(client, Role.ACADEMIC_ADMIN, 2)
    resp = client.get("/api/academic/records.csv")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attachment" in resp.headers["Content-Disposition"]


def test_follow_up_confirm_flow(client):
    login(client, Role.ACADEMIC_ADMIN, 2)

    assert client.get("/api/academic/follow-up").get_json()["count"] == 1
    assert client.post("/api/academic/follow-up/1/confirm").status_code == 200
    assert client.get("/api/academic/follow-up").get_json()["count"] == 0


def test_validation_error_maps_to_400(client):
    login(client, Role.ACADEMIC_ADMIN, 2)
    resp = client.post("/api/academic/absences", json={"student_id": 1, "date": "2025-01-11", "course_ids": []})
    assert resp.status_code == 400


def test_overnight_rule_maps_to_400_and_next_month_succeeds(client):
    login(client, Role.DORMITORY_ADMIN)

    rejected = client.post("/api/dormitory/leaves/overnight", json={"student_id": 1, "date": "2025-03-20"})
    assert rejected.status_code == 400
    assert "overnight" in rejected.get_json()["message"]

    accepted = client.post("/api/dormitory/leaves/overnight", json={"student_id": 1, "date": "2025-04-01"})
    assert accepted.status_code == 201


def test_session_period_drives_dormitory_reads(client):
    login(client, Role.DORMITORY_ADMIN)
    assert client.get("/api/dormitory/leaves").get_json()["count"] == 1

    assert client.post("/session/period", json={"academic_year": "2025-2026", "semester": 1}).status_code == 200
    assert client.get("/api/dormitory/leaves").get_json()["count"] == 0

    assert client.post("/session/period", json={"academic_year": "2025", "semester": 3}).status_code == 400


def test_fetch_failure_maps_to_503(client, repos):
    login(client, Role.ACADEMIC_ADMIN, 2)
    repos["academic"].fail = True

    resp = client.get("/api/academic/classes/10/recap")

    assert resp.status_code == 503
    assert resp.get_json()["failed"] == ["permissions"]


def test_admin_entities_and_profiles(client):
    login(client, Role.SUPER_ADMIN, 1)

    assert client.post("/api/admin/courses", json={"text": "Biology\n\nChemistry"}).get_json()["data"] == {"inserted": 2}
    names = [c["name"] for c in client.get("/api/admin/courses").get_json()["data"]]
    assert names == ["Biology", "Chemistry", "Math", "Physics"]

    assert client.put("/api/admin/profiles/1/role", json={"role": "academic_admin"}).status_code == 400
    assert client.put("/api/admin/profiles/2/role", json={"role": "dormitory_admin"}).status_code == 200
    assert client.delete("/api/admin/classes/99").status_code == 404


def test_dashboard_counters(client):
    login(client, Role.SUPER_ADMIN, 1)
    resp = client.get("/api/admin/dashboard/counters?today=2025-03-05")
    assert resp.get_json()["data"]["dormitory_permissions"] == 1


@pytest.mark.parametrize(
    "path, body",
    [
        ("/api/dormitory/leaves/group", {"student_ids": "12", "date": "2025-03-06"}),
        ("/api/dormitory/absences/prayer", {"student_ids": "12", "date": "2025-03-06", "prayer": "subuh"}),
        ("/api/dormitory/absences/ceremony", {"student_ids": ["1", "x"], "date": "2025-03-06"}),
        ("/api/dormitory/leaves/group", {"student_ids": [1], "date": 20250306}),
    ],
)
def test_malformed_student_selection_is_rejected_before_any_write(client, repos, path, body):
    login(client, Role.DORMITORY_ADMIN)

    resp = client.post(path, json=body)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert repos["dormitory"].insert_calls == 0


@pytest.mark.parametrize(
    "body",
    [
        {"student_id": "abc", "date": "2025-01-11", "type": "sick"},
        {"student_id": 1, "date": "2025-01-11", "type": "sick", "reason": 5},
    ],
)
def test_malformed_academic_permission_maps_to_400(client, body):
    login(client, Role.ACADEMIC_ADMIN, 2)
    assert client.post("/api/academic/permissions", json=body).status_code == 400


def test_non_text_names_map_to_400(client):
    login(client, Role.SUPER_ADMIN, 1)
    assert client.put("/api/admin/classes/10", json={"name": 5}).status_code == 400
    assert client.post("/api/admin/courses", json={"text": ["Biology"]}).status_code == 400


def test_dashboard_windows_are_bounded(client):
    login(client, Role.SUPER_ADMIN, 1)
    assert client.get("/api/admin/dashboard/chart?days=10000000").status_code == 400
    assert client.get("/api/admin/dashboard/activity?hours=10000000").status_code == 400
    assert client.get("/api/admin/dashboard/chart?today=2025-03-05&days=366").status_code == 200
