from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles stored in the ``profiles`` table."""

    SUPER_ADMIN = "super_admin"
    ACADEMIC_ADMIN = "academic_admin"
    DORMITORY_ADMIN = "dormitory_admin"


class AcademicPermissionType(str, Enum):
    """Raw ``type`` column of ``academic_permissions``."""

    SICK = "sick"
    PERMISSION = "permission"


class AcademicStatus(str, Enum):
    """Status of an academic event once permissions and absences are merged."""

    PERMISSION = "permission"
    SICK = "sick"
    ABSENT = "absent"


class LeaveType(str, Enum):
    """Kinds of dormitory permission (leave)."""

    SICK_LEAVE = "sick_leave"
    GROUP_LEAVE = "group_leave"
    GENERAL_LEAVE = "general_leave"
    OVERNIGHT_LEAVE = "overnight_leave"


class AbsenceStatus(str, Enum):
    """Status of a dormitory prayer/ceremony absence (alpha/izin/sakit)."""

    UNEXCUSED = "unexcused"
    EXCUSED = "excused"
    SICK = "sick"


class Prayer(str, Enum):
    SUBUH = "subuh"
    DZUHUR = "dzuhur"
    ASHAR = "ashar"
    MAGHRIB = "maghrib"
    ISYA = "isya"


class EventKind(str, Enum):
    """Discriminant telling which source table a record came from."""

    ACADEMIC_PERMISSION = "academic_permission"
    ACADEMIC_ABSENCE = "academic_absence"
    DORMITORY_PERMISSION = "dormitory_permission"
    PRAYER_ABSENCE = "prayer_absence"
    CEREMONY_ABSENCE = "ceremony_absence"


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
