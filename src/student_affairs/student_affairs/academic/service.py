from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import optional_text, require_date, require_id, require_ids, require_selection
from ..core.enums import AcademicPermissionType, EventKind
from ..core.exceptions import NotFoundError, ValidationError
from ..core.period import PeriodScope
from ..entities.repository import NamedEntityRepository, StudentRepository
from .repository import AcademicRepository

logger = logging.getLogger(__name__)


class AcademicService:
    """Use case: academic admin records and removes permissions/absences.

    Every method validates its input before touching the backend, so a
    rejected submission never leaves a partial write behind.
    """

    def __init__(self, academic: AcademicRepository, students: StudentRepository, courses: NamedEntityRepository):
        self._academic = academic
        self._students = students
        self._courses = courses

    def _require_student(self, student_id) -> int:
        student_id = require_id(student_id, "a student")
        student = self._students.get_by_id(student_id)
        if not student:
            raise ValidationError("Selected student does not exist")
        if student.class_id is None:
            raise ValidationError("Selected student is not assigned to a class")
        return student_id

    def record_permission(
        self,
        *,
        student_id,
        day,
        permission_type,
        reason: Optional[str],
        period: PeriodScope,
    ) -> int:
        day = require_date(day)
        try:
            ptype = AcademicPermissionType(require_selection(permission_type, "a permission type"))
        except ValueError:
            raise ValidationError("Permission type must be 'sick' or 'permission'")
        student_id = self._require_student(student_id)

        new_id = self._academic.insert_permission(
            student_id=student_id,
            date=day,
            type=ptype,
            reason=optional_text(reason, "Reason"),
            period=period,
        )
        logger.info("Recorded academic %s for student=%s on %s", ptype.value, student_id, day)
        return new_id

    def record_absences(self, *, student_id, day, course_ids: Sequence, period: PeriodScope) -> int:
        """Full-day style absence: one row per selected course."""
        day = require_date(day)
        student_id = self._require_student(student_id)
        course_ids = require_ids(course_ids, "course")

        known = {c.id for c in self._courses.list_all()}
        missing = [c for c in course_ids if c not in known]
        if missing:
            raise ValidationError(f"Unknown course id(s): {', '.join(str(c) for c in missing)}")

        count = self._academic.insert_absences(student_id=student_id, date=day, course_ids=course_ids, period=period)
        logger.info("Recorded %s academic absences for student=%s on %s", count, student_id, day)
        return count

    def delete_event(self, kind: EventKind, source_id: int) -> None:
        if kind == EventKind.ACADEMIC_PERMISSION:
            deleted = self._academic.delete_permission(int(source_id))
        elif kind == EventKind.ACADEMIC_ABSENCE:
            deleted = self._academic.delete_absence(int(source_id))
        else:
            raise ValidationError(f"Not an academic record kind: {kind.value}")

        if not deleted:
            raise NotFoundError("Record not found")
        logger.info("Deleted %s id=%s", kind.value, source_id)

    def count_between(self, start: date, end: date) -> dict:
        return {
            "permissions": self._academic.count_permissions(start=start, end=end),
            "absences": self._academic.count_absences(start=start, end=end),
        }
