from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceStatus, LeaveType, Prayer


@dataclass(frozen=True)
class DormitoryPermission:
    """Row of ``dormitory_permissions`` (a leave of some type)."""

    id: int
    student_id: int
    date: date
    type: LeaveType
    number_of_days: int = 1
    reason: Optional[str] = None
    academic_year: Optional[str] = None
    semester: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PrayerAbsence:
    id: int
    student_id: int
    date: date
    prayer: Prayer
    status: AbsenceStatus = AbsenceStatus.UNEXCUSED
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CeremonyAbsence:
    id: int
    student_id: int
    date: date
    status: AbsenceStatus = AbsenceStatus.UNEXCUSED
    created_at: Optional[datetime] = None
