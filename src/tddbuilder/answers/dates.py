"""Strict ISO-8601 date checks for ``date`` questions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime

MIN_YEAR = 1900
MAX_YEAR = 2100

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,6})?(Z|[+-]\d{2}:\d{2})?$"
)


@dataclass(frozen=True)
class DateCheck:
    """Result of checking one date string."""

    is_valid: bool
    error: str | None = None
    parsed: date | datetime | None = None


def check_iso_date(text: str) -> DateCheck:
    """Validate ``YYYY-MM-DD`` or a full ISO-8601 datetime with optional offset."""
    if not isinstance(text, str) or not text.strip():
        return DateCheck(False, "Date must be a non-empty string")
    text = text.strip()

    m = _DATE_RE.match(text)
    is_date_only = len(text) == 10
    if m is None or not (is_date_only or _DATETIME_RE.match(text)):
        return DateCheck(False, "Date must use ISO-8601 format (YYYY-MM-DD)")

    year = int(m.group(1))
    if year < MIN_YEAR or year > MAX_YEAR:
        return DateCheck(False, f"Year must be between {MIN_YEAR} and {MAX_YEAR}")

    try:
        if is_date_only:
            parsed: date | datetime = date.fromisoformat(text)
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return DateCheck(False, "Date is not a real calendar date")
    return DateCheck(True, parsed=parsed)


def is_iso_date(text: str) -> bool:
    return check_iso_date(text).is_valid
