"""Entity join layer: raw event rows -> ``DenormalizedRecord`` streams.

A row whose student does not resolve is dropped. A student whose group
(class or dormitory) was deleted keeps the stale id and shows ``"N/A"``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from ..academic.model import AcademicAbsence, AcademicPermission
from ..common.datetime_utils import to_calendar_date
from ..core.constants import UNKNOWN_GROUP_LABEL
from ..core.enums import AcademicPermissionType, AcademicStatus, EventKind
from ..dormitory.model import CeremonyAbsence, DormitoryPermission, PrayerAbsence
from ..entities.model import Student
from .engine import display_order
from .model import DenormalizedRecord

_PERMISSION_STATUS = {
    AcademicPermissionType.SICK: AcademicStatus.SICK,
    AcademicPermissionType.PERMISSION: AcademicStatus.PERMISSION,
}


@dataclass(frozen=True)
class LookupTables:
    students: Dict[int, Student]
    groups: Dict[int, str]
    courses: Dict[int, str]

    @classmethod
    def build(cls, students: Iterable[Student], groups: Iterable = (), courses: Iterable = ()) -> "LookupTables":
        """``groups`` are classes or dormitories depending on the domain."""
        return cls(
            students={s.id: s for s in students},
            groups={g.id: g.name for g in groups},
            courses={c.id: c.name for c in courses},
        )

    def group_name(self, group_id: Optional[int]) -> str:
        if group_id is None:
            return UNKNOWN_GROUP_LABEL
        return self.groups.get(group_id, UNKNOWN_GROUP_LABEL)


def _record(lookups: LookupTables, student: Student, group_id: Optional[int], **fields) -> DenormalizedRecord:
    return DenormalizedRecord(
        student_id=student.id,
        student_name=student.name,
        group_id=group_id,
        group_name=lookups.group_name(group_id),
        **fields,
    )


def join_academic(
    permissions: Sequence[AcademicPermission],
    absences: Sequence[AcademicAbsence],
    lookups: LookupTables,
) -> List[DenormalizedRecord]:
    """Permissions, sick notes and absences as one timeline grouped by class."""
    records = []
    for p in permissions:
        student = lookups.students.get(p.student_id)
        if student is None:
            continue
        records.append(
            _record(
                lookups,
                student,
                student.class_id,
                kind=EventKind.ACADEMIC_PERMISSION,
                source_id=p.id,
                date=to_calendar_date(p.date),
                status=_PERMISSION_STATUS[p.type],
                extra={"reason": p.reason},
            )
        )

    for a in absences:
        student = lookups.students.get(a.student_id)
        if student is None:
            continue
        course = lookups.courses.get(a.course_id) if a.course_id is not None else None
        records.append(
            _record(
                lookups,
                student,
                student.class_id,
                kind=EventKind.ACADEMIC_ABSENCE,
                source_id=a.id,
                date=to_calendar_date(a.date),
                status=AcademicStatus.ABSENT,
                extra={"course_id": a.course_id, "course_name": course},
            )
        )
    return display_order(records)


def join_dormitory_permissions(
    permissions: Sequence[DormitoryPermission], lookups: LookupTables
) -> List[DenormalizedRecord]:
    records = []
    for p in permissions:
        student = lookups.students.get(p.student_id)
        if student is None:
            continue
        records.append(
            _record(
                lookups,
                student,
                student.dormitory_id,
                kind=EventKind.DORMITORY_PERMISSION,
                source_id=p.id,
                date=to_calendar_date(p.date),
                status=p.type,
                extra={"number_of_days": p.number_of_days, "reason": p.reason},
            )
        )
    return display_order(records)


def join_dormitory_absences(
    prayer_rows: Sequence[PrayerAbsence],
    ceremony_rows: Sequence[CeremonyAbsence],
    lookups: LookupTables,
) -> List[DenormalizedRecord]:
    records = []
    for a in prayer_rows:
        student = lookups.students.get(a.student_id)
        if student is None:
            continue
        records.append(
            _record(
                lookups,
                student,
                student.dormitory_id,
                kind=EventKind.PRAYER_ABSENCE,
                source_id=a.id,
                date=to_calendar_date(a.date),
                status=a.status,
                extra={"prayer": a.prayer},
            )
        )

    for a in ceremony_rows:
        student = lookups.students.get(a.student_id)
        if student is None:
            continue
        records.append(
            _record(
                lookups,
                student,
                student.dormitory_id,
                kind=EventKind.CEREMONY_ABSENCE,
                source_id=a.id,
                date=to_calendar_date(a.date),
                status=a.status,
                extra={},
            )
        )
    return display_order(records)


def merge_records(*streams: Iterable[DenormalizedRecord]) -> List[DenormalizedRecord]:
    """Concatenate record streams into one display-ordered timeline."""
    return display_order(r for stream in streams for r in stream)
