"""
app/validators/coercion.py

Scalar coercion for numeric and date fields at the ingestion boundary.

Exports deliver numbers either natively typed or as text such as
``"12.5%"``, ``"$1,204.00"`` or ``" 8 "``.  Both forms are coerced here,
once, so no downstream component ever strips strings itself.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

from app.errors import CoercionError

DATE_FORMATS: tuple[str, ...] = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%d %b %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def coerce_number(value: Any, *, field: str | None = None) -> float | None:
    """
    Convert a native or textual numeric value to ``float``.

    Text is stripped of surrounding whitespace, a trailing ``%``, a
    leading ``$`` (after an optional minus sign) and ``,`` thousands
    separators before conversion.

    Returns
    -------
    float | None
        ``None`` when *value* is missing or blank.

    Raises
    ------
    CoercionError
        When *value* is a boolean, not finite, or text that is not a number.
    """

    if is_blank(value):
        return None

    if isinstance(value, bool):
        raise CoercionError(
            f"Boolean value is not a valid number for {field or 'field'}.",
            field=field,
            value=value,
        )

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if text.endswith("%"):
            text = text[:-1].rstrip()
        negative = text.startswith("-")
        if negative:
            text = text[1:].lstrip()
        if text.startswith("$"):
            text = text[1:].lstrip()
        text = text.replace(",", "")
        try:
            number = float(text)
        except ValueError as exc:
            raise CoercionError(
                f"Value {value!r} is not a valid number for {field or 'field'}.",
                field=field,
                value=value,
            ) from exc
        if negative:
            number = -number

    if not math.isfinite(number):
        raise CoercionError(
            f"Value {value!r} is not a finite number for {field or 'field'}.",
            field=field,
            value=value,
        )
    return number


def parse_date(value: Any) -> date | None:
    """
    Parse a calendar date from ISO text or one of :data:`DATE_FORMATS`.

    Any time-of-day component is discarded.  Returns ``None`` for blank
    input.

    Raises
    ------
    ValueError
        When the text matches no accepted format.
    """

    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(normalized).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Invalid date format: {raw!r}")
