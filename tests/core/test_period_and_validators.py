from __future__ import annotations

from datetime import date, datetime

import pytest

from src.student_affairs.student_affairs.common.datetime_utils import parse_iso_date, to_calendar_date
from src.student_affairs.student_affairs.common.validators import (
    optional_text,
    parse_name_lines,
    require_date,
    require_id,
    require_ids,
    require_non_empty,
    require_positive_int,
)
from src.student_affairs.student_affairs.core.exceptions import ValidationError
from src.student_affairs.student_affairs.core.period import PeriodScope
from src.student_affairs.student_affairs.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use


def test_period_parse():
    assert PeriodScope.parse(" 2024-2025 ", "2") == PeriodScope("2024-2025", 2)


@pytest.mark.parametrize("year, semester", [("2024-2026", 1), ("2024", 1), ("2024-2025", 3), ("2024-2025", "x")])
def test_period_parse_rejects_bad_values(year, semester):
    with pytest.raises(ValidationError):
        PeriodScope.parse(year, semester)


def test_validators():
    assert parse_name_lines(" A \n\nB\n", "names") == ["A", "B"]
    assert require_ids([3, None, "3", "", 1], "course") == [3, 1]
    assert require_positive_int("4", "days") == 4
    with pytest.raises(ValidationError):
        require_positive_int(0, "days")


def test_sql_splitting_respects_quotes_and_comments():
    sql = _strip_create_db_and_use(
        "CREATE DATABASE x;\nUSE x;\n-- comment; here\nINSERT INTO t VALUES ('a;b');\nSELECT 1"
    )
    assert list(_iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]


@pytest.mark.parametrize("value", ["12", 12, {"id": 1}, None])
def test_require_ids_rejects_anything_but_a_list(value):
    with pytest.raises(ValidationError):
        require_ids(value, "student")


@pytest.mark.parametrize("value", ["abc", True, [1], "", None])
def test_require_id_rejects_non_numeric(value):
    with pytest.raises(ValidationError):
        require_id(value, "a student")


def test_text_fields_must_be_strings():
    with pytest.raises(ValidationError):
        require_non_empty(5, "Name")
    with pytest.raises(ValidationError):
        parse_name_lines(["A"], "classes")
    with pytest.raises(ValidationError):
        optional_text(7, "Reason")
    assert optional_text("  ", "Reason") is None
    assert require_positive_int("366", "days", maximum=366) == 366
    with pytest.raises(ValidationError):
        require_positive_int(367, "days", maximum=366)


def test_time_of_day_is_dropped_before_date_comparison():
    assert to_calendar_date(datetime(2025, 3, 14, 23, 59)) == date(2025, 3, 14)
    assert to_calendar_date("2025-03-14T23:59") == date(2025, 3, 14)
    assert parse_iso_date("2025-03-14 00:30:00") == date(2025, 3, 14)
    assert require_date("2025-03-14T08:15:00") == date(2025, 3, 14)


@pytest.mark.parametrize("value", [20250314, "14/03/2025", ""])
def test_require_date_rejects_bad_values(value):
    with pytest.raises(ValidationError):
        require_date(value)
