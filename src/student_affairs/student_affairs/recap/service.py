from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..academic.repository import AcademicRepository
from ..core.enums import AbsenceStatus, AcademicStatus, EventKind, LeaveType
from ..core.exceptions import NotFoundError, ValidationError
from ..core.period import PeriodScope
from ..dormitory.repository import DormitoryRepository
from ..entities.repository import NamedEntityRepository, StudentRepository
from . import engine
from .join import LookupTables, join_academic, join_dormitory_absences, join_dormitory_permissions
from .loader import AcademicDataset, DatasetLoader, DormitoryDataset
from .model import DenormalizedRecord, StudentAggregate

logger = logging.getLogger(__name__)

ACADEMIC_STATUSES = (AcademicStatus.ABSENT, AcademicStatus.PERMISSION, AcademicStatus.SICK)
LEAVE_TYPES = tuple(LeaveType)
ABSENCE_STATUSES = tuple(AbsenceStatus)
ABSENCE_KINDS = {"prayer": EventKind.PRAYER_ABSENCE, "ceremony": EventKind.CEREMONY_ABSENCE}


class RecapService:
    """Read side: fetch everything, join, then aggregate.

    Nothing is cached between calls; every request recomputes from a fresh
    fetch so a mutation is visible on the next read.
    """

    def __init__(
        self,
        *,
        loader: DatasetLoader,
        students: StudentRepository,
        classes: NamedEntityRepository,
        dormitories: NamedEntityRepository,
        courses: NamedEntityRepository,
        academic: AcademicRepository,
        dormitory: DormitoryRepository,
    ):
        self._loader = loader
        self._students = students
        self._classes = classes
        self._dormitories = dormitories
        self._courses = courses
        self._academic = academic
        self._dormitory = dormitory

    # ---- loading ----

    def load_academic(self, period: Optional[PeriodScope] = None) -> AcademicDataset:
        data = self._loader.load(
            students=self._students.list_with_class,
            classes=self._classes.list_all,
            courses=self._courses.list_all,
            permissions=lambda: self._academic.list_permissions(period=period),
            absences=lambda: self._academic.list_absences(period=period),
        )
        lookups = LookupTables.build(data["students"], data["classes"], data["courses"])
        return AcademicDataset(
            records=join_academic(data["permissions"], data["absences"], lookups),
            **data,
        )

    def load_dormitory(self, period: PeriodScope) -> DormitoryDataset:
        data = self._loader.load(
            students=self._students.list_with_dormitory,
            dormitories=self._dormitories.list_all,
            permissions=lambda: self._dormitory.list_permissions(period=period),
            prayer_absences=lambda: self._dormitory.list_prayer_absences(period=period),
            ceremony_absences=lambda: self._dormitory.list_ceremony_absences(period=period),
        )
        lookups = LookupTables.build(data["students"], data["dormitories"])
        return DormitoryDataset(
            leave_records=join_dormitory_permissions(data["permissions"], lookups),
            absence_records=join_dormitory_absences(data["prayer_absences"], data["ceremony_absences"], lookups),
            **data,
        )

    # ---- academic ----

    def academic_records(
        self,
        period: Optional[PeriodScope] = None,
        *,
        class_id: Optional[int] = None,
        student_query: str = "",
        start: Optional[date] = None,
        end: Optional[date] = None,
        statuses: Optional[Iterable] = None,
    ) -> List[DenormalizedRecord]:
        dataset = self.load_academic(period)
        return engine.filter_records(
            dataset.records,
            group_id=class_id,
            student_query=student_query,
            start=start,
            end=end,
            statuses=statuses,
        )

    def class_recap(self, class_id: int, period: Optional[PeriodScope] = None) -> List[StudentAggregate]:
        dataset = self.load_academic(period)
        if not any(c.id == class_id for c in dataset.classes):
            raise NotFoundError("Class not found")
        return list(engine.aggregate_by_group(dataset.records, class_id, ACADEMIC_STATUSES).values())

    def academic_student_recap(self, student_id: int, period: Optional[PeriodScope] = None) -> Dict:
        dataset = self.load_academic(period)
        student = next((s for s in dataset.students if s.id == student_id), None)
        if student is None:
            raise NotFoundError("Student not found")

        records = engine.records_for_student(dataset.records, student_id)
        aggregate = engine.aggregate_by_student(records, student_id, ACADEMIC_STATUSES)
        aggregate.student_name = student.name
        return {
            "student": student,
            "aggregate": aggregate,
            "details": {
                s.value: engine.filter_records(records, statuses=[s]) for s in ACADEMIC_STATUSES
            },
            "first_absences": engine.top_n_per_subdimension(
                records, student_id, key="course_name", status=AcademicStatus.ABSENT
            ),
        }

    # ---- dormitory ----

    def leave_recap(
        self,
        period: PeriodScope,
        leave_type: Optional[LeaveType] = None,
        *,
        dormitory_id: Optional[int] = None,
        student_query: str = "",
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[DenormalizedRecord]:
        dataset = self.load_dormitory(period)
        return engine.filter_records(
            dataset.leave_records,
            group_id=dormitory_id,
            student_query=student_query,
            start=start,
            end=end,
            statuses=[leave_type] if leave_type is not None else None,
        )

    def absence_recap(
        self,
        period: PeriodScope,
        kind: str,
        *,
        dormitory_id: Optional[int] = None,
        student_query: str = "",
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[DenormalizedRecord]:
        """Prayer or ceremony absences (``kind`` is ``"prayer"`` or ``"ceremony"``)."""
        event_kind = ABSENCE_KINDS.get(kind)
        if event_kind is None:
            raise ValidationError("Absence recap type must be 'prayer' or 'ceremony'")

        dataset = self.load_dormitory(period)
        records = [r for r in dataset.absence_records if r.kind == event_kind]
        return engine.filter_records(
            records,
            group_id=dormitory_id,
            student_query=student_query,
            start=start,
            end=end,
        )

    def dormitory_recap(self, dormitory_id: int, period: PeriodScope) -> List[StudentAggregate]:
        dataset = self.load_dormitory(period)
        if not any(d.id == dormitory_id for d in dataset.dormitories):
            raise NotFoundError("Dormitory not found")
        return list(engine.aggregate_by_group(dataset.leave_records, dormitory_id, LEAVE_TYPES).values())

    def dormitory_student_recap(self, student_id: int, period: PeriodScope) -> Dict:
        dataset = self.load_dormitory(period)
        student = next((s for s in dataset.students if s.id == student_id), None)
        if student is None:
            raise NotFoundError("Student not found")

        leaves = engine.records_for_student(dataset.leave_records, student_id)
        absences = engine.records_for_student(dataset.absence_records, student_id)
        leave_aggregate = engine.aggregate_by_student(leaves, student_id, LEAVE_TYPES)
        leave_aggregate.student_name = student.name
        return {
            "student": student,
            "leaves": leave_aggregate,
            "absences": engine.summarize_statuses(absences, ABSENCE_STATUSES),
            "leave_records": leaves,
            "absence_records": absences,
        }
