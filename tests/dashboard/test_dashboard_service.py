from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.student_affairs.student_affairs.academic.model import AcademicAbsence, AcademicPermission
from src.student_affairs.student_affairs.core.enums import (
    AcademicPermissionType,
    AcademicStatus,
    LeaveType,
    Prayer,
    Role,
)
from src.student_affairs.student_affairs.core.period import PeriodScope
from src.student_affairs.student_affairs.dashboard.service import DashboardService, month_summary, weekly_chart
from src.student_affairs.student_affairs.dormitory.model import DormitoryPermission, PrayerAbsence
from src.student_affairs.student_affairs.entities.model import ClassRoom, Dormitory, Student
from src.student_affairs.student_affairs.recap.loader import DatasetLoader
from src.student_affairs.student_affairs.recap.service import RecapService
from tests.fakes import (
    FakeAcademicRepo,
    FakeDormitoryRepo,
    FakeNamedRepo,
    FakeProfileRepo,
    FakeStudentRepo,
    course_repo,
    profile,
)

TODAY = date(2025, 3, 10)
NOW = datetime(2025, 3, 10, 12, 0, 0)
PERIOD = PeriodScope("2024-2025", 2)


@pytest.fixture()
def dashboard():
    students = FakeStudentRepo([Student(1, "Aisha", class_id=10, dormitory_id=20)])
    academic = FakeAcademicRepo(
        permissions=[
            AcademicPermission(1, 1, TODAY, AcademicPermissionType.SICK, None, None, None, NOW - timedelta(hours=2)),
        ],
        absences=[
            AcademicAbsence(2, 1, TODAY, 1, None, None, NOW - timedelta(hours=1)),
            AcademicAbsence(3, 404, TODAY, 1, None, None, NOW - timedelta(minutes=5)),
            AcademicAbsence(4, 1, date(2025, 3, 1), 1, None, None, NOW - timedelta(days=9)),
        ],
    )
    dormitory = FakeDormitoryRepo(
        permissions=[
            DormitoryPermission(5, 1, date(2025, 3, 9), LeaveType.GENERAL_LEAVE, 1, None, "2024-2025", 2, NOW - timedelta(hours=30)),
        ],
        prayer=[PrayerAbsence(6, 1, TODAY, Prayer.ASHAR, created_at=NOW - timedelta(minutes=30))],
    )
    classes = FakeNamedRepo("classes", ClassRoom, [ClassRoom(10, "7A")])
    dormitories = FakeNamedRepo("dormitories", Dormitory, [Dormitory(20, "Umar")])
    courses = course_repo("Math")
    loader = DatasetLoader(max_workers=4)
    recap = RecapService(
        loader=loader,
        students=students,
        classes=classes,
        dormitories=dormitories,
        courses=courses,
        academic=academic,
        dormitory=dormitory,
    )
    return DashboardService(
        loader=loader,
        students=students,
        courses=courses,
        profiles=FakeProfileRepo([profile(9, "dina", Role.DORMITORY_ADMIN, NOW - timedelta(hours=3))]),
        academic=academic,
        dormitory=dormitory,
        recap=recap,
    ), recap


def test_today_counters(dashboard):
    service, _ = dashboard
    assert service.today_counters(TODAY) == {
        "academic_permissions": 1,
        "academic_absences": 2,
        "dormitory_permissions": 0,
        "dormitory_absences": 1,
    }


def test_recent_activity_is_newest_first_and_skips_unknown_students(dashboard):
    service, _ = dashboard

    items = service.recent_activity(NOW)

    assert [i.kind for i in items] == ["prayer_absence", "academic_absence", "academic_permission", "profile"]
    assert items[1].description == "New academic absence for Aisha in Math"
    assert items[0].time_ago == "30 minutes ago"


def test_activity_chart_has_two_series(dashboard):
    service, _ = dashboard

    buckets = service.activity_chart(TODAY, PERIOD)

    assert len(buckets) == 14
    assert sum(buckets.series["academic"]) == 3
    assert buckets.series["academic"][-1] == 2
    assert sum(buckets.series["dormitory"]) == 2


def test_weekly_chart_and_month_summary(dashboard):
    _, recap = dashboard
    records = recap.load_academic().records
    statuses = (AcademicStatus.ABSENT, AcademicStatus.PERMISSION, AcademicStatus.SICK)

    weekly = weekly_chart(records, TODAY, statuses)
    assert weekly.series["absent"][-1] == 1
    assert sum(weekly.series["absent"]) == 1

    assert month_summary(records, TODAY, statuses) == {"absent": 2, "permission": 0, "sick": 1}
