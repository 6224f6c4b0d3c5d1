from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AcademicPermissionType
from ..core.period import PeriodScope
from .model import AcademicAbsence, AcademicPermission


class AcademicRepository(Protocol):
    def list_permissions(
        self,
        *,
        period: Optional[PeriodScope] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        student_id: Optional[int] = None,
        type: Optional[AcademicPermissionType] = None,
    ) -> Sequence[AcademicPermission]:
        raise NotImplementedError

    def list_absences(
        self,
        *,
        period: Optional[PeriodScope] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        student_id: Optional[int] = None,
        course_id: Optional[int] = None,
    ) -> Sequence[AcademicAbsence]:
        raise NotImplementedError

    def list_permissions_created_since(self, moment: datetime) -> Sequence[AcademicPermission]:
        raise NotImplementedError

    def list_absences_created_since(self, moment: datetime) -> Sequence[AcademicAbsence]:
        raise NotImplementedError

    def count_permissions(self, *, start: date, end: date) -> int:
        raise NotImplementedError

    def count_absences(self, *, start: date, end: date) -> int:
        raise NotImplementedError

    def insert_permission(
        self,
        *,
        student_id: int,
        date: date,
        type: AcademicPermissionType,
        reason: Optional[str],
        period: PeriodScope,
    ) -> int:
        raise NotImplementedError

    def insert_absences(self, *, student_id: int, date: date, course_ids: Sequence[int], period: PeriodScope) -> int:
        raise NotImplementedError

    def delete_permission(self, permission_id: int) -> bool:
        raise NotImplementedError

    def delete_absence(self, absence_id: int) -> bool:
        raise NotImplementedError
