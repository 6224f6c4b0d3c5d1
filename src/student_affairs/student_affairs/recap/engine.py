"""Recap/aggregation engine.

Pure functions over ``DenormalizedRecord`` sequences: no I/O, no shared state,
same input gives the same output. Empty input yields zero-valued results;
only contract violations by the caller (wrong id type, ``n < 1``,
``window_days < 1``) raise ``TypeError``.
"""
from __future__ import annotations

import calendar
from collections import OrderedDict
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..common.datetime_utils import iter_days, to_calendar_date, window_start
from ..core.constants import DEFAULT_TOP_N, UNSPECIFIED_LABEL
from ..core.enums import EventKind, Granularity
from .model import DateBuckets, DenormalizedRecord, StudentAggregate, status_key

TOTAL_SERIES = "total"


def _require_id(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


def _require_count(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise TypeError(f"{name} must be a positive int, got {value!r}")
    return value


def display_order(records: Iterable[DenormalizedRecord]) -> List[DenormalizedRecord]:
    """Date descending, ties by student name ascending."""
    by_name = sorted(records, key=lambda r: (r.student_name.casefold(), r.source_id))
    return sorted(by_name, key=lambda r: r.date, reverse=True)


def _aggregate(student_id: int, student_name: str, records: Sequence[DenormalizedRecord], statuses) -> StudentAggregate:
    counts: Dict[str, int] = {status_key(s): 0 for s in statuses}
    days = set()
    for r in records:
        key = status_key(r.status)
        counts[key] = counts.get(key, 0) + 1
        days.add(r.date)
    return StudentAggregate(
        student_id=student_id,
        student_name=student_name,
        counts=counts,
        unique_days=len(days),
        total=len(records),
    )


def aggregate_by_student(records: Iterable[DenormalizedRecord], student_id: int, statuses: Sequence = ()) -> StudentAggregate:
    """Counts per status, distinct dates and total for one student.

    ``statuses`` pre-seeds the counts with zeros so every column is present.
    """
    _require_id(student_id, "student_id")
    mine = [r for r in records if r.student_id == student_id]
    name = mine[0].student_name if mine else ""
    return _aggregate(student_id, name, mine, statuses)


def aggregate_by_group(
    records: Iterable[DenormalizedRecord], group_id: int, statuses: Sequence = ()
) -> "OrderedDict[int, StudentAggregate]":
    """Per-student aggregates for every student with records in the group.

    Ordered by student name ascending (ties by id).
    """
    _require_id(group_id, "group_id")
    per_student: Dict[int, List[DenormalizedRecord]] = {}
    for r in records:
        if r.group_id == group_id:
            per_student.setdefault(r.student_id, []).append(r)

    order = sorted(per_student, key=lambda sid: (per_student[sid][0].student_name.casefold(), sid))
    result: "OrderedDict[int, StudentAggregate]" = OrderedDict()
    for sid in order:
        rows = per_student[sid]
        result[sid] = _aggregate(sid, rows[0].student_name, rows, statuses)
    return result


def top_n_per_subdimension(
    records: Iterable[DenormalizedRecord],
    student_id: int,
    key: str = "course_name",
    n: int = DEFAULT_TOP_N,
    status=None,
) -> Dict[str, List[date]]:
    """The ``n`` earliest dates per sub-dimension value (first/second/third absence per course)."""
    _require_id(student_id, "student_id")
    _require_count(n, "n")
    wanted = status_key(status) if status is not None else None

    groups: Dict[str, List[date]] = {}
    for r in records:
        if r.student_id != student_id:
            continue
        if wanted is not None and status_key(r.status) != wanted:
            continue
        value = r.extra.get(key) or UNSPECIFIED_LABEL
        groups.setdefault(str(value), []).append(r.date)

    return {value: sorted(dates)[:n] for value, dates in sorted(groups.items())}


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _next_month(day: date) -> date:
    days = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1) + timedelta(days=days)


def _bucket_starts(first: date, today: date, granularity: Granularity) -> List[date]:
    if granularity == Granularity.DAY:
        return list(iter_days(first, today))
    if granularity == Granularity.WEEK:
        starts = []
        current = first
        while current <= today:
            starts.append(current)
            current += timedelta(days=7)
        return starts
    if granularity == Granularity.MONTH:
        starts = []
        current = _month_start(first)
        while current <= today:
            starts.append(current)
            current = _next_month(current)
        return starts
    raise TypeError(f"Unsupported granularity: {granularity!r}")


def _label(start: date, today: date, granularity: Granularity) -> str:
    if granularity == Granularity.DAY:
        return start.isoformat()
    if granularity == Granularity.WEEK:
        end = min(start + timedelta(days=6), today)
        return f"{start.isoformat()}..{end.isoformat()}"
    return start.strftime("%Y-%m")


def bucket_by_date(
    records: Iterable[DenormalizedRecord],
    window_days: int,
    granularity: Granularity = Granularity.DAY,
    *,
    today: date,
    categories: Optional[Sequence[str]] = None,
    category_of: Optional[Callable[[DenormalizedRecord], str]] = None,
) -> DateBuckets:
    """Zero-seeded buckets covering ``[today - window_days + 1, today]``.

    Without ``category_of`` every record lands in a single ``"total"`` series.
    Records dated outside the window, or whose category is not in
    ``categories``, are ignored.
    """
    _require_count(window_days, "window_days")
    if categories and category_of is None:
        raise TypeError("categories requires category_of")
    granularity = Granularity(granularity)
    today = to_calendar_date(today)
    first = window_start(today, window_days)

    starts = _bucket_starts(first, today, granularity)
    labels = [_label(s, today, granularity) for s in starts]
    names = [status_key(c) for c in categories] if categories else [TOTAL_SERIES]
    series = {name: [0] * len(starts) for name in names}

    for r in records:
        day = to_calendar_date(r.date)
        if day < first or day > today:
            continue
        if granularity == Granularity.DAY:
            index = (day - first).days
        elif granularity == Granularity.WEEK:
            index = (day - first).days // 7
        else:
            index = starts.index(_month_start(day))

        name = status_key(category_of(r)) if category_of else TOTAL_SERIES
        if name not in series:
            if categories:
                continue
            series[name] = [0] * len(starts)
        series[name][index] += 1

    return DateBuckets(labels=labels, starts=starts, series=series)


def follow_up_list(records: Iterable[DenormalizedRecord], excluded_ids: Iterable[int]) -> List[DenormalizedRecord]:
    """Academic absences not yet acknowledged, newest first."""
    excluded = {int(i) for i in excluded_ids}
    pending = [r for r in records if r.kind == EventKind.ACADEMIC_ABSENCE and r.source_id not in excluded]
    return display_order(pending)


def filter_records(
    records: Iterable[DenormalizedRecord],
    *,
    group_id: Optional[int] = None,
    student_id: Optional[int] = None,
    student_query: str = "",
    start: Optional[date] = None,
    end: Optional[date] = None,
    statuses: Optional[Iterable] = None,
) -> List[DenormalizedRecord]:
    """List-view filters; date bounds are inclusive, name search ignores case."""
    if group_id is not None:
        _require_id(group_id, "group_id")
    if student_id is not None:
        _require_id(student_id, "student_id")
    query = (student_query or "").strip().casefold()
    wanted = {status_key(s) for s in statuses} if statuses else None

    result = []
    for r in records:
        if group_id is not None and r.group_id != group_id:
            continue
        if student_id is not None and r.student_id != student_id:
            continue
        if query and query not in r.student_name.casefold():
            continue
        if start is not None and r.date < start:
            continue
        if end is not None and r.date > end:
            continue
        if wanted is not None and status_key(r.status) not in wanted:
            continue
        result.append(r)
    return result


def summarize_statuses(records: Iterable[DenormalizedRecord], statuses: Sequence) -> Dict[str, int]:
    counts = {status_key(s): 0 for s in statuses}
    for r in records:
        key = status_key(r.status)
        counts[key] = counts.get(key, 0) + 1
    return counts


def records_for_student(records: Iterable[DenormalizedRecord], student_id: int) -> List[DenormalizedRecord]:
    _require_id(student_id, "student_id")
    return display_order(r for r in records if r.student_id == student_id)
