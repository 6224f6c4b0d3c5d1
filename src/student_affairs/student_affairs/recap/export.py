"""Presentation adapters.

These only reshape what the engine already computed (chart series, table
rows, file bytes); they never recount.
"""
from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .model import DateBuckets, DenormalizedRecord, StudentAggregate, status_key

RECORD_COLUMNS = [
    "date",
    "student_name",
    "group_name",
    "status",
    "course_name",
    "number_of_days",
    "prayer",
    "reason",
]


def chart_dataset(buckets: DateBuckets, labels: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Labels + one dataset per series, the shape chart widgets consume."""
    labels = labels or {}
    return {
        "labels": list(buckets.labels),
        "datasets": [{"label": labels.get(name, name), "data": list(data)} for name, data in buckets.series.items()],
    }


def group_recap_table(aggregates: Iterable[StudentAggregate], statuses: Sequence) -> List[Dict[str, Any]]:
    """Printable per-student rows with a running ``no`` column."""
    rows = []
    for index, agg in enumerate(aggregates, start=1):
        row: Dict[str, Any] = {"no": index, "student_name": agg.student_name}
        for s in statuses:
            row[status_key(s)] = agg.count(s)
        row["total"] = agg.total
        row["unique_days"] = agg.unique_days
        rows.append(row)
    return rows


def records_table(records: Iterable[DenormalizedRecord]) -> List[Dict[str, Any]]:
    rows = []
    for r in records:
        flat = r.to_dict()
        rows.append({col: flat.get(col) for col in RECORD_COLUMNS})
    return rows


def write_csv(rows: Iterable[Mapping[str, Any]], fieldnames: Sequence[str]) -> bytes:
    """CSV bytes with a UTF-8 BOM so spreadsheet apps detect the encoding."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({k: ("" if v is None else v) for k, v in row.items()})
    return out.getvalue().encode("utf-8-sig")


def write_xlsx(rows: Iterable[Mapping[str, Any]], columns: Sequence[str], sheet_name: str = "Recap") -> bytes:
    df = pd.DataFrame(list(rows), columns=list(columns))

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name[:31])
    return output.getvalue()


def format_time_ago(ts: datetime, now: datetime) -> str:
    seconds = int((now - ts).total_seconds())
    if seconds < 60:
        return "just now"

    for unit_seconds, unit in ((31536000, "year"), (2592000, "month"), (86400, "day"), (3600, "hour"), (60, "minute")):
        amount = seconds // unit_seconds
        if seconds / unit_seconds > 1:
            return f"{amount} {unit}{'s' if amount != 1 else ''} ago"
    return f"{seconds} seconds ago"
