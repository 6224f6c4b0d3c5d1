from __future__ import annotations

from datetime import date, datetime

from src.student_affairs.student_affairs.academic.model import AcademicAbsence, AcademicPermission
from src.student_affairs.student_affairs.core.enums import (
    AbsenceStatus,
    AcademicPermissionType,
    AcademicStatus,
    EventKind,
    LeaveType,
    Prayer,
)
from src.student_affairs.student_affairs.dormitory.model import CeremonyAbsence, DormitoryPermission, PrayerAbsence
from src.student_affairs.student_affairs.entities.model import ClassRoom, Course, Dormitory, Student
from src.student_affairs.student_affairs.recap import engine
from src.student_affairs.student_affairs.recap.join import (
    LookupTables,
    join_academic,
    join_dormitory_absences,
    join_dormitory_permissions,
    merge_records,
)

STUDENTS = [
    Student(1, "Aisha", class_id=10, dormitory_id=20),
    Student(2, "Bilal", class_id=99, dormitory_id=None),
]


def academic_lookups():
    return LookupTables.build(STUDENTS, [ClassRoom(10, "7A")], [Course(5, "Math")])


def test_join_academic_builds_tagged_records():
    permissions = [AcademicPermission(1, 1, date(2025, 1, 12), AcademicPermissionType.SICK, "flu")]
    absences = [AcademicAbsence(1, 1, date(2025, 1, 10), 5), AcademicAbsence(2, 1, date(2025, 1, 11), None)]

    records = join_academic(permissions, absences, academic_lookups())

    assert [(r.kind, r.source_id) for r in records] == [
        (EventKind.ACADEMIC_PERMISSION, 1),
        (EventKind.ACADEMIC_ABSENCE, 2),
        (EventKind.ACADEMIC_ABSENCE, 1),
    ]
    sick = records[0]
    assert sick.status == AcademicStatus.SICK
    assert sick.extra["reason"] == "flu"
    assert sick.group_name == "7A"
    assert records[2].extra["course_name"] == "Math"
    assert records[1].extra["course_name"] is None


def test_missing_student_is_dropped_and_missing_group_shows_na():
    absences = [
        AcademicAbsence(1, 404, date(2025, 1, 10), 5),
        AcademicAbsence(2, 2, date(2025, 1, 10), 5),
    ]

    records = join_academic([], absences, academic_lookups())

    assert [r.student_id for r in records] == [2]
    assert records[0].group_id == 99
    assert records[0].group_name == "N/A"


def test_join_normalizes_timestamps_so_one_day_counts_once():
    absences = [
        AcademicAbsence(1, 1, datetime(2025, 1, 10, 7, 30), 5),
        AcademicAbsence(2, 1, datetime(2025, 1, 10, 23, 59), None),
    ]

    records = join_academic([], absences, academic_lookups())

    assert {r.date for r in records} == {date(2025, 1, 10)}
    assert engine.aggregate_by_student(records, 1).unique_days == 1

def test_deleted_student_never_reaches_aggregates():
    absences = [AcademicAbsence(1, 404, date(2025, 1, 10), 5), AcademicAbsence(2, 1, date(2025, 1, 10), 5)]
    records = join_academic([], absences, academic_lookups())

    assert engine.aggregate_by_student(records, 404).total == 0
    group = engine.aggregate_by_group(records, 10)
    assert sum(a.total for a in group.values()) == 1


def test_dormitory_joins_use_dormitory_as_group():
    lookups = LookupTables.build(STUDENTS, [Dormitory(20, "Umar")])
    leaves = [DormitoryPermission(7, 1, date(2025, 3, 5), LeaveType.OVERNIGHT_LEAVE, 2, "family")]
    prayer = [PrayerAbsence(3, 1, date(2025, 3, 6), Prayer.SUBUH, AbsenceStatus.EXCUSED)]
    ceremony = [CeremonyAbsence(4, 2, date(2025, 3, 6)), CeremonyAbsence(5, 1, date(2025, 3, 4))]

    leave_records = join_dormitory_permissions(leaves, lookups)
    absence_records = join_dormitory_absences(prayer, ceremony, lookups)

    assert leave_records[0].status == LeaveType.OVERNIGHT_LEAVE
    assert leave_records[0].group_name == "Umar"
    assert leave_records[0].extra == {"number_of_days": 2, "reason": "family"}

    assert [(r.kind, r.student_name) for r in absence_records] == [
        (EventKind.PRAYER_ABSENCE, "Aisha"),
        (EventKind.CEREMONY_ABSENCE, "Bilal"),
        (EventKind.CEREMONY_ABSENCE, "Aisha"),
    ]
    assert absence_records[0].extra["prayer"] == Prayer.SUBUH
    assert absence_records[1].group_name == "N/A"

    merged = merge_records(leave_records, absence_records)
    assert [r.date for r in merged] == sorted((r.date for r in merged), reverse=True)
    assert merged[0].to_dict()["prayer"] == "subuh"
