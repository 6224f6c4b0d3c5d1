from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ..core.enums import AbsenceStatus, AcademicStatus, EventKind, LeaveType

Status = Union[AcademicStatus, LeaveType, AbsenceStatus]


def status_key(status) -> str:
    """Plain string used as the counts key for any status enum (or raw string)."""
    return status.value if isinstance(status, Enum) else str(status)


@dataclass(frozen=True)
class DenormalizedRecord:
    """One event row resolved against its student, group and course.

    ``kind`` + ``source_id`` identify the backend row the record came from;
    ``group_*`` is the class for academic records and the dormitory for
    dormitory records.
    """

    kind: EventKind
    source_id: int
    student_id: int
    student_name: str
    group_id: Optional[int]
    group_name: str
    date: date
    status: Status
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "source_id": self.source_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "group_id": self.group_id,
            "group_name": self.group_name,
            "date": self.date.isoformat(),
            "status": status_key(self.status),
            **{k: (v.value if isinstance(v, Enum) else v) for k, v in self.extra.items()},
        }


@dataclass
class StudentAggregate:
    student_id: int
    student_name: str
    counts: Dict[str, int] = field(default_factory=dict)
    unique_days: int = 0
    total: int = 0

    def count(self, status) -> int:
        return self.counts.get(status_key(status), 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            **self.counts,
            "total": self.total,
            "unique_days": self.unique_days,
        }


@dataclass
class DateBuckets:
    """Calendar buckets for a chart: ``series[category][i]`` counts bucket ``i``."""

    labels: List[str]
    starts: List[date]
    series: Dict[str, List[int]]

    def __len__(self) -> int:
        return len(self.labels)
