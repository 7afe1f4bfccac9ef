from __future__ import annotations

import datetime as dt
import math
from typing import Any, Optional

from loancalc_core.domain.errors import InvalidFieldError
from loancalc_core.domain.models import EntryKind, Frequency


def parse_date(raw: str, field: str = "date") -> dt.date:
    txt = (raw or "").strip()
    if not txt:
        raise InvalidFieldError(field, "required")
    try:
        return dt.date.fromisoformat(txt)
    except ValueError:
        raise InvalidFieldError(field, f"expected YYYY-MM-DD, got {txt!r}") from None


def parse_amount(raw: str, field: str = "amount") -> float:
    """
    Parse a money amount; rounds to cents.
    Rejects blanks, negatives and anything that is not a finite number.
    """
    txt = (raw or "").strip().replace(",", "").lstrip("$")
    if not txt:
        raise InvalidFieldError(field, "required")
    try:
        val = float(txt)
    except ValueError:
        raise InvalidFieldError(field, f"not a number: {raw!r}") from None
    return validate_amount(val, field)


def validate_amount(value: float, field: str = "amount") -> float:
    if not math.isfinite(value):
        raise InvalidFieldError(field, "must be a finite number")
    if value < 0:
        raise InvalidFieldError(field, "must not be negative")
    return round(value, 2)


def validate_entry_date(value: dt.date, today: dt.date, field: str = "date") -> dt.date:
    if value > today:
        raise InvalidFieldError(field, "must not be in the future")
    return value


def validate_rate(value: Any, field: str = "annual_rate") -> float:
    """Annual rate as a fraction from a config value; must be a finite number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidFieldError(field, f"must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidFieldError(field, "must be a finite number")
    return float(value)


def parse_rate(raw: str, field: str = "rate") -> float:
    """
    Parse an annual rate given in percent ("11" or "11%") into a fraction (0.11).
    Zero and negative rates are accepted.
    """
    txt = (raw or "").strip().replace("%", "")
    if not txt:
        raise InvalidFieldError(field, "required")
    try:
        val = float(txt)
    except ValueError:
        raise InvalidFieldError(field, f"not a number: {raw!r}") from None
    if not math.isfinite(val):
        raise InvalidFieldError(field, "must be a finite number")
    return val / 100.0


def parse_frequency(raw: str, field: str = "frequency") -> Frequency:
    txt = (raw or "").strip().lower()
    try:
        return Frequency(txt)
    except ValueError:
        choices = ", ".join(f.value for f in Frequency)
        raise InvalidFieldError(field, f"expected one of {choices}") from None


def parse_kind(raw: str, field: str = "kind") -> EntryKind:
    txt = (raw or "").strip().lower()
    try:
        return EntryKind(txt)
    except ValueError:
        raise InvalidFieldError(field, "expected borrowed or paid") from None


def clean_description(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    txt = str(raw).strip()
    return txt or None
