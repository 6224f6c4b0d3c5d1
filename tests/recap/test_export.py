from __future__ import annotations

import io
from datetime import date, datetime, timedelta

import pandas as pd

from src.student_affairs.student_affairs.core.enums import AcademicStatus, EventKind
from src.student_affairs.student_affairs.recap.export import (
    RECORD_COLUMNS,
    chart_dataset,
    format_time_ago,
    group_recap_table,
    records_table,
    write_csv,
    write_xlsx,
)
from src.student_affairs.student_affairs.recap.model import DateBuckets, DenormalizedRecord, StudentAggregate

RECORD = DenormalizedRecord(
    kind=EventKind.ACADEMIC_ABSENCE,
    source_id=3,
    student_id=1,
    student_name="Aisha",
    group_id=10,
    group_name="7A",
    date=date(2025, 1, 10),
    status=AcademicStatus.ABSENT,
    extra={"course_name": "Math"},
)


def test_chart_dataset_shape():
    buckets = DateBuckets(labels=["d1", "d2"], starts=[date(2025, 1, 1), date(2025, 1, 2)], series={"academic": [1, 0]})
    assert chart_dataset(buckets, {"academic": "Academic"}) == {
        "labels": ["d1", "d2"],
        "datasets": [{"label": "Academic", "data": [1, 0]}],
    }


def test_group_recap_table_numbers_rows_without_recounting():
    aggregates = [
        StudentAggregate(1, "Aisha", {"absent": 2, "permission": 1}, unique_days=2, total=3),
        StudentAggregate(2, "Bilal", {"sick": 1}, unique_days=1, total=1),
    ]

    rows = group_recap_table(aggregates, [AcademicStatus.ABSENT, AcademicStatus.SICK])

    assert rows[0] == {"no": 1, "student_name": "Aisha", "absent": 2, "sick": 0, "total": 3, "unique_days": 2}
    assert rows[1]["no"] == 2


def test_csv_has_bom_and_blank_for_missing_values():
    body = write_csv(records_table([RECORD]), RECORD_COLUMNS)

    assert body.startswith(b"\xef\xbb\xbf")
    lines = body.decode("utf-8-sig").splitlines()
    assert lines[0] == ",".join(RECORD_COLUMNS)
    assert lines[1] == "2025-01-10,Aisha,7A,absent,Math,,,"


def test_xlsx_round_trips_through_pandas():
    body = write_xlsx(records_table([RECORD]), RECORD_COLUMNS, sheet_name="Academic recap")

    df = pd.read_excel(io.BytesIO(body), sheet_name="Academic recap")
    assert list(df.columns) == RECORD_COLUMNS
    assert df.loc[0, "student_name"] == "Aisha"


def test_format_time_ago():
    now = datetime(2025, 3, 10, 12, 0, 0)
    assert format_time_ago(now - timedelta(seconds=30), now) == "just now"
    assert format_time_ago(now - timedelta(minutes=5), now) == "5 minutes ago"
    assert format_time_ago(now - timedelta(hours=3), now) == "3 hours ago"
    assert format_time_ago(now - timedelta(days=2), now) == "2 days ago"
