from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import to_calendar_date
from ..core.enums import AbsenceStatus, LeaveType, Prayer
from ..core.period import PeriodScope
from ..database.query import MySQLTableGateway, TableQuery
from .model import CeremonyAbsence, DormitoryPermission, PrayerAbsence
from .repository import DormitoryRepository

PERMISSIONS = "dormitory_permissions"
PRAYER_ABSENCES = "dormitory_prayer_absences"
CEREMONY_ABSENCES = "dormitory_ceremony_absences"


class MySQLDormitoryRepository(DormitoryRepository):
    def __init__(self, gateway: MySQLTableGateway):
        self._gateway = gateway

    @staticmethod
    def _permission(r: dict) -> DormitoryPermission:
        return DormitoryPermission(
            id=int(r["id"]),
            student_id=int(r["student_id"]),
            date=to_calendar_date(r["date"]),
            type=LeaveType(r["type"]),
            number_of_days=int(r.get("number_of_days") or 1),
            reason=r.get("reason"),
            academic_year=r.get("academic_year"),
            semester=int(r["semester"]) if r.get("semester") is not None else None,
            created_at=r.get("created_at"),
        )

    @staticmethod
    def _prayer(r: dict) -> PrayerAbsence:
        return PrayerAbsence(
            id=int(r["id"]),
            student_id=int(r["student_id"]),
            date=to_calendar_date(r["date"]),
            prayer=Prayer(r["prayer"]),
            status=AbsenceStatus(r.get("status") or AbsenceStatus.UNEXCUSED.value),
            created_at=r.get("created_at"),
        )

    @staticmethod
    def _ceremony(r: dict) -> CeremonyAbsence:
        return CeremonyAbsence(
            id=int(r["id"]),
            student_id=int(r["student_id"]),
            date=to_calendar_date(r["date"]),
            status=AbsenceStatus(r.get("status") or AbsenceStatus.UNEXCUSED.value),
            created_at=r.get("created_at"),
        )

    def list_permissions(
        self,
        *,
        period: PeriodScope,
        type: Optional[LeaveType] = None,
        student_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[DormitoryPermission]:
        query = TableQuery(PERMISSIONS).in_period(period).date_between("date", start, end)
        if type is not None:
            query.eq("type", type.value)
        if student_id is not None:
            query.eq("student_id", int(student_id))
        return [self._permission(r) for r in self._gateway.fetch(query.order_by("date", desc=True))]

    def count_permissions(
        self,
        *,
        start: date,
        end: date,
        student_id: Optional[int] = None,
        type: Optional[LeaveType] = None,
    ) -> int:
        query = TableQuery(PERMISSIONS).date_between("date", start, end)
        if student_id is not None:
            query.eq("student_id", int(student_id))
        if type is not None:
            query.eq("type", type.value)
        return self._gateway.count(query)

    def list_prayer_absences(
        self,
        *,
        period: PeriodScope,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[PrayerAbsence]:
        query = TableQuery(PRAYER_ABSENCES).in_period(period).date_between("date", start, end)
        return [self._prayer(r) for r in self._gateway.fetch(query.order_by("date", desc=True))]

    def list_ceremony_absences(
        self,
        *,
        period: PeriodScope,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[CeremonyAbsence]:
        query = TableQuery(CEREMONY_ABSENCES).in_period(period).date_between("date", start, end)
        return [self._ceremony(r) for r in self._gateway.fetch(query.order_by("date", desc=True))]

    def count_absences(self, *, start: date, end: date) -> int:
        prayer = self._gateway.count(TableQuery(PRAYER_ABSENCES).date_between("date", start, end))
        ceremony = self._gateway.count(TableQuery(CEREMONY_ABSENCES).date_between("date", start, end))
        return prayer + ceremony

    def list_permissions_created_since(self, moment: datetime) -> Sequence[DormitoryPermission]:
        return [self._permission(r) for r in self._gateway.fetch(TableQuery(PERMISSIONS).created_since(moment))]

    def list_prayer_absences_created_since(self, moment: datetime) -> Sequence[PrayerAbsence]:
        return [self._prayer(r) for r in self._gateway.fetch(TableQuery(PRAYER_ABSENCES).created_since(moment))]

    def list_ceremony_absences_created_since(self, moment: datetime) -> Sequence[CeremonyAbsence]:
        return [self._ceremony(r) for r in self._gateway.fetch(TableQuery(CEREMONY_ABSENCES).created_since(moment))]

    def insert_permissions(self, rows: Sequence[dict], *, period: PeriodScope) -> int:
        payload = [
            {
                "student_id": int(r["student_id"]),
                "date": r["date"],
                "type": LeaveType(r["type"]).value,
                "number_of_days": int(r["number_of_days"]),
                "reason": r.get("reason"),
                **period.as_row(),
            }
            for r in rows
        ]
        return self._gateway.insert_many(PERMISSIONS, payload)

    def insert_prayer_absences(
        self,
        *,
        student_ids: Sequence[int],
        date: date,
        prayer: Prayer,
        status: AbsenceStatus,
        period: PeriodScope,
    ) -> int:
        rows = [
            {"student_id": int(s), "date": date, "prayer": prayer.value, "status": status.value, **period.as_row()}
            for s in student_ids
        ]
        return self._gateway.insert_many(PRAYER_ABSENCES, rows)

    def insert_ceremony_absences(
        self,
        *,
        student_ids: Sequence[int],
        date: date,
        status: AbsenceStatus,
        period: PeriodScope,
    ) -> int:
        rows = [{"student_id": int(s), "date": date, "status": status.value, **period.as_row()} for s in student_ids]
        return self._gateway.insert_many(CEREMONY_ABSENCES, rows)

    def delete_permission(self, permission_id: int) -> bool:
        return self._gateway.delete_by_id(PERMISSIONS, permission_id)

    def delete_prayer_absence(self, absence_id: int) -> bool:
        return self._gateway.delete_by_id(PRAYER_ABSENCES, absence_id)

    def delete_ceremony_absence(self, absence_id: int) -> bool:
        return self._gateway.delete_by_id(CEREMONY_ABSENCES, absence_id)
