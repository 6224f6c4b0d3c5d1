from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AcademicPermissionType


@dataclass(frozen=True)
class AcademicPermission:
    """Row of ``academic_permissions`` (sick or permission)."""

    id: int
    student_id: int
    date: date
    type: AcademicPermissionType
    reason: Optional[str] = None
    academic_year: Optional[str] = None
    semester: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AcademicAbsence:
    """Row of ``academic_absences``: one absent course on one day."""

    id: int
    student_id: int
    date: date
    course_id: Optional[int] = None
    academic_year: Optional[str] = None
    semester: Optional[int] = None
    created_at: Optional[datetime] = None
