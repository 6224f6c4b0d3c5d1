from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from ..academic.repository import AcademicRepository
from ..common.datetime_utils import month_bounds
from ..core.constants import ACTIVITY_WINDOW_DAYS, RECENT_ACTIVITY_HOURS, WEEKLY_WINDOW_DAYS
from ..core.enums import EventKind, Granularity
from ..core.period import PeriodScope
from ..dormitory.repository import DormitoryRepository
from ..entities.repository import NamedEntityRepository, ProfileRepository, StudentRepository
from ..recap import engine
from ..recap.export import format_time_ago
from ..recap.loader import DatasetLoader
from ..recap.model import DateBuckets, DenormalizedRecord
from ..recap.service import RecapService

logger = logging.getLogger(__name__)

ACADEMIC_KINDS = (EventKind.ACADEMIC_PERMISSION, EventKind.ACADEMIC_ABSENCE)


@dataclass(frozen=True)
class ActivityItem:
    kind: str
    source_id: int
    timestamp: datetime
    description: str
    time_ago: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "source_id": self.source_id,
            "timestamp": self.timestamp.isoformat(),
            "description": self.description,
            "time_ago": self.time_ago,
        }


def weekly_chart(records: Iterable[DenormalizedRecord], today: date, statuses: Sequence) -> DateBuckets:
    """Per-status daily counts over the last 7 days."""
    return engine.bucket_by_date(
        records,
        WEEKLY_WINDOW_DAYS,
        Granularity.DAY,
        today=today,
        categories=list(statuses),
        category_of=lambda r: r.status,
    )


def month_summary(records: Iterable[DenormalizedRecord], today: date, statuses: Sequence) -> Dict[str, int]:
    first, last = month_bounds(today)
    return engine.summarize_statuses(engine.filter_records(records, start=first, end=last), statuses)


class DashboardService:
    """Home-page figures: today's counters, the 24h activity feed and the 14-day chart."""

    def __init__(
        self,
        *,
        loader: DatasetLoader,
        students: StudentRepository,
        courses: NamedEntityRepository,
        profiles: ProfileRepository,
        academic: AcademicRepository,
        dormitory: DormitoryRepository,
        recap: RecapService,
    ):
        self._loader = loader
        self._students = students
        self._courses = courses
        self._profiles = profiles
        self._academic = academic
        self._dormitory = dormitory
        self._recap = recap

    def today_counters(self, today: date) -> Dict[str, int]:
        data = self._loader.load(
            academic_permissions=lambda: self._academic.count_permissions(start=today, end=today),
            academic_absences=lambda: self._academic.count_absences(start=today, end=today),
            dormitory_permissions=lambda: self._dormitory.count_permissions(start=today, end=today),
            dormitory_absences=lambda: self._dormitory.count_absences(start=today, end=today),
        )
        return {name: int(value or 0) for name, value in data.items()}

    def recent_activity(self, now: datetime, hours: int = RECENT_ACTIVITY_HOURS) -> List[ActivityItem]:
        """Rows created in the last ``hours`` across every event table plus new profiles.

        Rows whose student (or, for academic absences, course) no longer
        resolves are left out.
        """
        since = now - timedelta(hours=hours)
        data = self._loader.load(
            students=self._students.list_all,
            courses=self._courses.list_all,
            academic_permissions=lambda: self._academic.list_permissions_created_since(since),
            academic_absences=lambda: self._academic.list_absences_created_since(since),
            dormitory_permissions=lambda: self._dormitory.list_permissions_created_since(since),
            prayer_absences=lambda: self._dormitory.list_prayer_absences_created_since(since),
            ceremony_absences=lambda: self._dormitory.list_ceremony_absences_created_since(since),
            profiles=lambda: self._profiles.list_created_since(since),
        )
        names = {s.id: s.name for s in data["students"]}
        courses = {c.id: c.name for c in data["courses"]}

        entries = []

        def add(kind: str, row, description: Optional[str]) -> None:
            if not description or row.created_at is None:
                return
            entries.append((kind, row.id, row.created_at, description))

        for p in data["academic_permissions"]:
            student = names.get(p.student_id)
            add(EventKind.ACADEMIC_PERMISSION.value, p, student and f"New academic {p.type.value} for {student}")
        for a in data["academic_absences"]:
            student = names.get(a.student_id)
            course = courses.get(a.course_id)
            add(EventKind.ACADEMIC_ABSENCE.value, a, student and course and f"New academic absence for {student} in {course}")
        for p in data["dormitory_permissions"]:
            student = names.get(p.student_id)
            add(EventKind.DORMITORY_PERMISSION.value, p, student and f"New dormitory {p.type.value} for {student}")
        for a in data["prayer_absences"]:
            student = names.get(a.student_id)
            add(EventKind.PRAYER_ABSENCE.value, a, student and f"Missed {a.prayer.value} prayer: {student}")
        for a in data["ceremony_absences"]:
            student = names.get(a.student_id)
            add(EventKind.CEREMONY_ABSENCE.value, a, student and f"Missed ceremony: {student}")
        for p in data["profiles"]:
            add("profile", p, f"New user {p.username} with role {p.role.value}")

        entries.sort(key=lambda e: e[2], reverse=True)
        return [
            ActivityItem(kind=kind, source_id=source_id, timestamp=ts, description=text, time_ago=format_time_ago(ts, now))
            for kind, source_id, ts, text in entries
        ]

    def activity_chart(self, today: date, period: PeriodScope, window_days: int = ACTIVITY_WINDOW_DAYS) -> DateBuckets:
        """Academic vs dormitory events per day over the window."""
        academic = self._recap.load_academic(period)
        dormitory = self._recap.load_dormitory(period)
        records = academic.records + dormitory.leave_records + dormitory.absence_records
        return engine.bucket_by_date(
            records,
            window_days,
            Granularity.DAY,
            today=today,
            categories=["academic", "dormitory"],
            category_of=lambda r: "academic" if r.kind in ACADEMIC_KINDS else "dormitory",
        )
