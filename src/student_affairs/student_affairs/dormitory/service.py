from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds
from ..common.validators import (
    optional_text,
    require_date,
    require_id,
    require_ids,
    require_positive_int,
    require_selection,
)
from ..core.enums import AbsenceStatus, EventKind, LeaveType, Prayer
from ..core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from ..core.period import PeriodScope
from ..entities.repository import StudentRepository
from .repository import DormitoryRepository

logger = logging.getLogger(__name__)

_SINGLE_LEAVE_TYPES = (LeaveType.GENERAL_LEAVE, LeaveType.SICK_LEAVE)


def _enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(require_selection(value, field_name))
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"Invalid {field_name}: {value!r} (expected one of {allowed})")


class DormitoryService:
    """Use case: dormitory admin records leave, prayer and ceremony absences.

    Rules:
    - every student must exist and live in a dormitory
    - a student gets at most one overnight leave per calendar month
    - validation runs before any insert, batches are all-or-nothing
    """

    def __init__(self, dormitory: DormitoryRepository, students: StudentRepository):
        self._dormitory = dormitory
        self._students = students

    def _require_resident(self, student_id) -> int:
        student_id = require_id(student_id, "a student")
        student = self._students.get_by_id(student_id)
        if not student:
            raise ValidationError("Selected student does not exist")
        if student.dormitory_id is None:
            raise ValidationError("Selected student does not live in a dormitory")
        return student_id

    def _require_residents(self, student_ids: Sequence) -> list[int]:
        return [self._require_resident(s) for s in require_ids(student_ids, "student")]

    def record_leave(
        self,
        *,
        student_id,
        day,
        leave_type,
        number_of_days=1,
        reason: Optional[str] = None,
        period: PeriodScope,
    ) -> int:
        """General or sick leave for one student."""
        ltype = _enum(LeaveType, leave_type, "leave type")
        if ltype not in _SINGLE_LEAVE_TYPES:
            raise ValidationError("Use the group or overnight form for this leave type")
        day = require_date(day)
        days = require_positive_int(number_of_days, "Number of days")
        reason = optional_text(reason, "Reason")
        student_id = self._require_resident(student_id)

        count = self._dormitory.insert_permissions(
            [{"student_id": student_id, "date": day, "type": ltype, "number_of_days": days, "reason": reason}],
            period=period,
        )
        logger.info("Recorded %s for student=%s on %s", ltype.value, student_id, day)
        return count

    def record_group_leave(
        self,
        *,
        student_ids: Sequence,
        day,
        number_of_days=1,
        reason: Optional[str] = None,
        period: PeriodScope,
    ) -> int:
        day = require_date(day)
        days = require_positive_int(number_of_days, "Number of days")
        reason = optional_text(reason, "Reason")
        ids = self._require_residents(student_ids)

        rows = [
            {"student_id": s, "date": day, "type": LeaveType.GROUP_LEAVE, "number_of_days": days, "reason": reason}
            for s in ids
        ]
        count = self._dormitory.insert_permissions(rows, period=period)
        logger.info("Recorded group leave for %s students on %s", count, day)
        return count

    def record_overnight_leave(
        self,
        *,
        student_id,
        day,
        number_of_days=1,
        reason: Optional[str] = None,
        period: PeriodScope,
    ) -> int:
        day = require_date(day)
        days = require_positive_int(number_of_days, "Number of days")
        reason = optional_text(reason, "Reason")
        student_id = self._require_resident(student_id)

        first, last = month_bounds(day)
        existing = self._dormitory.count_permissions(
            start=first, end=last, student_id=student_id, type=LeaveType.OVERNIGHT_LEAVE
        )
        if existing > 0:
            raise BusinessRuleError("This student already has an overnight leave this month")

        count = self._dormitory.insert_permissions(
            [
                {
                    "student_id": student_id,
                    "date": day,
                    "type": LeaveType.OVERNIGHT_LEAVE,
                    "number_of_days": days,
                    "reason": reason,
                }
            ],
            period=period,
        )
        logger.info("Recorded overnight leave for student=%s on %s", student_id, day)
        return count

    def record_prayer_absences(self, *, student_ids: Sequence, day, prayer, status=AbsenceStatus.UNEXCUSED, period: PeriodScope) -> int:
        day = require_date(day)
        slot = _enum(Prayer, prayer, "prayer")
        status = _enum(AbsenceStatus, status, "status")
        ids = self._require_residents(student_ids)

        count = self._dormitory.insert_prayer_absences(
            student_ids=ids, date=day, prayer=slot, status=status, period=period
        )
        logger.info("Recorded %s %s absences on %s", count, slot.value, day)
        return count

    def record_ceremony_absences(self, *, student_ids: Sequence, day, status=AbsenceStatus.UNEXCUSED, period: PeriodScope) -> int:
        day = require_date(day)
        status = _enum(AbsenceStatus, status, "status")
        ids = self._require_residents(student_ids)

        count = self._dormitory.insert_ceremony_absences(student_ids=ids, date=day, status=status, period=period)
        logger.info("Recorded %s ceremony absences on %s", count, day)
        return count

    def delete_permission(self, permission_id: int) -> None:
        if not self._dormitory.delete_permission(int(permission_id)):
            raise NotFoundError("Record not found")
        logger.info("Deleted %s id=%s", EventKind.DORMITORY_PERMISSION.value, permission_id)

    def delete_absence(self, kind: EventKind, absence_id: int) -> None:
        if kind == EventKind.PRAYER_ABSENCE:
            deleted = self._dormitory.delete_prayer_absence(int(absence_id))
        elif kind == EventKind.CEREMONY_ABSENCE:
            deleted = self._dormitory.delete_ceremony_absence(int(absence_id))
        else:
            raise ValidationError(f"Not a dormitory absence kind: {kind.value}")

        if not deleted:
            raise NotFoundError("Record not found")
        logger.info("Deleted %s id=%s", kind.value, absence_id)
