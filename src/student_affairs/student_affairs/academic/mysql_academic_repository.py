from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import to_calendar_date
from ..core.enums import AcademicPermissionType
from ..core.period import PeriodScope
from ..database.query import MySQLTableGateway, TableQuery
from .model import AcademicAbsence, AcademicPermission
from .repository import AcademicRepository

PERMISSIONS = "academic_permissions"
ABSENCES = "academic_absences"


class MySQLAcademicRepository(AcademicRepository):
    def __init__(self, gateway: MySQLTableGateway):
        self._gateway = gateway

    @staticmethod
    def _permission(r: dict) -> AcademicPermission:
        return AcademicPermission(
            id=int(r["id"]),
            student_id=int(r["student_id"]),
            date=to_calendar_date(r["date"]),
            type=AcademicPermissionType(r["type"]),
            reason=r.get("reason"),
            academic_year=r.get("academic_year"),
            semester=int(r["semester"]) if r.get("semester") is not None else None,
            created_at=r.get("created_at"),
        )

    @staticmethod
    def _absence(r: dict) -> AcademicAbsence:
        return AcademicAbsence(
            id=int(r["id"]),
            student_id=int(r["student_id"]),
            date=to_calendar_date(r["date"]),
            course_id=int(r["course_id"]) if r.get("course_id") is not None else None,
            academic_year=r.get("academic_year"),
            semester=int(r["semester"]) if r.get("semester") is not None else None,
            created_at=r.get("created_at"),
        )

    def list_permissions(
        self,
        *,
        period: Optional[PeriodScope] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        student_id: Optional[int] = None,
        type: Optional[AcademicPermissionType] = None,
    ) -> Sequence[AcademicPermission]:
        query = TableQuery(PERMISSIONS).in_period(period).date_between("date", start, end)
        if student_id is not None:
            query.eq("student_id", int(student_id))
        if type is not None:
            query.eq("type", type.value)
        return [self._permission(r) for r in self._gateway.fetch(query.order_by("date", desc=True))]

    def list_absences(
        self,
        *,
        period: Optional[PeriodScope] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        student_id: Optional[int] = None,
        course_id: Optional[int] = None,
    ) -> Sequence[AcademicAbsence]:
        query = TableQuery(ABSENCES).in_period(period).date_between("date", start, end)
        if student_id is not None:
            query.eq("student_id", int(student_id))
        if course_id is not None:
            query.eq("course_id", int(course_id))
        return [self._absence(r) for r in self._gateway.fetch(query.order_by("date", desc=True))]

    def list_permissions_created_since(self, moment: datetime) -> Sequence[AcademicPermission]:
        return [self._permission(r) for r in self._gateway.fetch(TableQuery(PERMISSIONS).created_since(moment))]

    def list_absences_created_since(self, moment: datetime) -> Sequence[AcademicAbsence]:
        return [self._absence(r) for r in self._gateway.fetch(TableQuery(ABSENCES).created_since(moment))]

    def count_permissions(self, *, start: date, end: date) -> int:
        return self._gateway.count(TableQuery(PERMISSIONS).date_between("date", start, end))

    def count_absences(self, *, start: date, end: date) -> int:
        return self._gateway.count(TableQuery(ABSENCES).date_between("date", start, end))

    def insert_permission(
        self,
        *,
        student_id: int,
        date: date,
        type: AcademicPermissionType,
        reason: Optional[str],
        period: PeriodScope,
    ) -> int:
        return self._gateway.insert_one(
            PERMISSIONS,
            {"student_id": int(student_id), "date": date, "type": type.value, "reason": reason, **period.as_row()},
        )

    def insert_absences(self, *, student_id: int, date: date, course_ids: Sequence[int], period: PeriodScope) -> int:
        rows = [
            {"student_id": int(student_id), "date": date, "course_id": int(course_id), **period.as_row()}
            for course_id in course_ids
        ]
        return self._gateway.insert_many(ABSENCES, rows)

    def delete_permission(self, permission_id: int) -> bool:
        return self._gateway.delete_by_id(PERMISSIONS, permission_id)

    def delete_absence(self, absence_id: int) -> bool:
        return self._gateway.delete_by_id(ABSENCES, absence_id)
