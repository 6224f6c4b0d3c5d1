from __future__ import annotations

from datetime import date
from typing import List, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import to_calendar_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_selection(value, field_name: str):
    """A form selection (student, date, course...) must be chosen before submit."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Please select {field_name}")
    return value.strip() if isinstance(value, str) else value


def optional_text(value, field_name: str) -> Optional[str]:
    """Free-text field: trimmed, blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value.strip() or None


def require_id(value, field_name: str) -> int:
    value = require_selection(value, field_name)
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}: {value!r}")


def require_ids(values, field_name: str) -> List[int]:
    """Multi-select of ids: a JSON list, blanks dropped, first occurrence kept."""
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"Please select at least one {field_name}")
    items = [require_id(v, f"a {field_name}") for v in values if v not in (None, "")]
    if not items:
        raise ValidationError(f"Please select at least one {field_name}")
    return list(dict.fromkeys(items))


def require_date(value, field_name: str = "a date") -> date:
    value = require_selection(value, field_name)
    try:
        return to_calendar_date(value)
    except TypeError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def require_positive_int(value, field_name: str, maximum: Optional[int] = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if number < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field_name} must be at most {maximum}")
    return number


def parse_name_lines(text: Optional[str], item_label: str) -> List[str]:
    """Split a newline-delimited batch into trimmed, non-blank names."""
    if text is not None and not isinstance(text, str):
        raise ValidationError(f"Please enter {item_label} as text, one per line")
    if not text or not text.strip():
        raise ValidationError(f"Please enter {item_label} to add")
    names = [line.strip() for line in text.splitlines()]
    names = [n for n in names if n]
    if not names:
        raise ValidationError(f"Please enter valid {item_label} to add")
    return names
