from __future__ import annotations

import re
from dataclasses import dataclass

from .exceptions import ValidationError

_YEAR_RE = re.compile(r"^(\d{4})-(\d{4})$")


@dataclass(frozen=True)
class PeriodScope:
    """Academic period (year + semester) passed explicitly into every dormitory query."""

    academic_year: str
    semester: int

    @classmethod
    def parse(cls, academic_year: str, semester) -> "PeriodScope":
        year = (academic_year or "").strip()
        m = _YEAR_RE.match(year)
        if not m or int(m.group(2)) != int(m.group(1)) + 1:
            raise ValidationError("Academic year must look like 2025-2026")
        try:
            sem = int(semester)
        except (TypeError, ValueError):
            raise ValidationError("Semester must be 1 or 2")
        if sem not in (1, 2):
            raise ValidationError("Semester must be 1 or 2")
        return cls(academic_year=year, semester=sem)

    def as_row(self) -> dict:
        return {"academic_year": self.academic_year, "semester": self.semester}
