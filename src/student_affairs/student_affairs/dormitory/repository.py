from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AbsenceStatus, LeaveType, Prayer
from ..core.period import PeriodScope
from .model import CeremonyAbsence, DormitoryPermission, PrayerAbsence


class DormitoryRepository(Protocol):
    """Dormitory leave and absence tables, always read within an academic period."""

    def list_permissions(
        self,
        *,
        period: PeriodScope,
        type: Optional[LeaveType] = None,
        student_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[DormitoryPermission]:
        raise NotImplementedError

    def count_permissions(
        self,
        *,
        start: date,
        end: date,
        student_id: Optional[int] = None,
        type: Optional[LeaveType] = None,
    ) -> int:
        raise NotImplementedError

    def list_prayer_absences(
        self,
        *,
        period: PeriodScope,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[PrayerAbsence]:
        raise NotImplementedError

    def list_ceremony_absences(
        self,
        *,
        period: PeriodScope,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[CeremonyAbsence]:
        raise NotImplementedError

    def count_absences(self, *, start: date, end: date) -> int:
        """Prayer + ceremony absences dated within [start, end]."""

        raise NotImplementedError

    def list_permissions_created_since(self, moment: datetime) -> Sequence[DormitoryPermission]:
        raise NotImplementedError

    def list_prayer_absences_created_since(self, moment: datetime) -> Sequence[PrayerAbsence]:
        raise NotImplementedError

    def list_ceremony_absences_created_since(self, moment: datetime) -> Sequence[CeremonyAbsence]:
        raise NotImplementedError

    def insert_permissions(self, rows: Sequence[dict], *, period: PeriodScope) -> int:
        raise NotImplementedError

    def insert_prayer_absences(
        self,
        *,
        student_ids: Sequence[int],
        date: date,
        prayer: Prayer,
        status: AbsenceStatus,
        period: PeriodScope,
    ) -> int:
        raise NotImplementedError

    def insert_ceremony_absences(
        self,
        *,
        student_ids: Sequence[int],
        date: date,
        status: AbsenceStatus,
        period: PeriodScope,
    ) -> int:
        raise NotImplementedError

    def delete_permission(self, permission_id: int) -> bool:
        raise NotImplementedError

    def delete_prayer_absence(self, absence_id: int) -> bool:
        raise NotImplementedError

    def delete_ceremony_absence(self, absence_id: int) -> bool:
        raise NotImplementedError
