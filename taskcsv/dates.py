"""
Date cell normalization.

A due-date cell is either resolved to a calendar date or kept as opaque
text. ``normalize_date`` is total: bad input is data, never an error.

Recognized shapes, tried in this order:
- ``d/m/yyyy``
- ``d/m/yy`` (two-digit year resolved against a reference day)
- ``yyyy-m-d`` (strict ISO first, then a checked manual decomposition)
- spreadsheet serial numbers (days since 1899-12-30, optional day fraction)
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Annotated, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from . import rules

_DMY4_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_DMY2_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2})$")
_YMD_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_SERIAL_RE = re.compile(r"^\d+(?:\.\d+)?$")

_SECONDS_PER_DAY = 86_400


class ConcreteDate(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["concrete"] = "concrete"
    value: date


class PlaceholderDate(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["placeholder"] = "placeholder"
    text: str


DateValue = Annotated[Union[ConcreteDate, PlaceholderDate], Field(discriminator="kind")]


def resolve_two_digit_year(two_digit: int, today: date) -> int:
    """Pick the year closest to ``today`` (50-year window either side)."""
    range_end = today.year + 50
    range_end_century = (range_end // 100) * 100
    is_previous_century = two_digit >= range_end % 100
    return two_digit + range_end_century - (100 if is_previous_century else 0)


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_iso(text: str, match: re.Match) -> Optional[date]:
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    year, month, day = (int(part) for part in match.groups())
    rebuilt = _safe_date(year, month, day)
    if rebuilt is None:
        return None
    # no silent month/day rollover
    if (rebuilt.year, rebuilt.month, rebuilt.day) != (year, month, day):
        return None
    return rebuilt


def serial_to_datetime(serial: float) -> datetime:
    """Convert a spreadsheet serial number to a datetime, rounded to the second."""
    days = int(serial)
    seconds = round((serial - days) * _SECONDS_PER_DAY)
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return rules.SPREADSHEET_EPOCH + timedelta(days=days, hours=hours, minutes=minutes, seconds=secs)


def _parse_serial(text: str) -> Optional[date]:
    try:
        return serial_to_datetime(float(text)).date()
    except (OverflowError, ValueError):
        return None


def is_sentinel(text: str, sentinels: Iterable[str] = rules.DATE_SENTINELS) -> bool:
    upper = text.strip().upper()
    return any(upper == s.strip().upper() for s in sentinels)


def normalize_date(
    text: str,
    *,
    today: Optional[date] = None,
    sentinels: Iterable[str] = rules.DATE_SENTINELS,
) -> ConcreteDate | PlaceholderDate:
    if not isinstance(text, str):
        text = "" if text is None else str(text)

    stripped = text.strip()
    if is_sentinel(stripped, sentinels):
        return PlaceholderDate(text=text)

    parsed: Optional[date] = None

    match = _DMY4_RE.match(stripped)
    if match:
        day, month, year = (int(part) for part in match.groups())
        parsed = _safe_date(year, month, day)

    if parsed is None:
        match = _DMY2_RE.match(stripped)
        if match:
            day, month, yy = (int(part) for part in match.groups())
            year = resolve_two_digit_year(yy, today or date.today())
            parsed = _safe_date(year, month, day)

    if parsed is None:
        match = _YMD_RE.match(stripped)
        if match:
            parsed = _parse_iso(stripped, match)

    if parsed is None and _SERIAL_RE.match(stripped):
        parsed = _parse_serial(stripped)

    if parsed is None:
        return PlaceholderDate(text=text)
    return ConcreteDate(value=parsed)


def render_date(value: ConcreteDate | PlaceholderDate) -> str:
    if isinstance(value, ConcreteDate):
        d = value.value
        return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"
    return value.text


def coerce_date(
    value: object,
    *,
    not_specified: str = rules.NOT_SPECIFIED,
    today: Optional[date] = None,
    sentinels: Iterable[str] = rules.DATE_SENTINELS,
) -> ConcreteDate | PlaceholderDate:
    """Turn a manually entered value into a DateValue."""
    if isinstance(value, (ConcreteDate, PlaceholderDate)):
        return value
    if isinstance(value, datetime):
        return ConcreteDate(value=value.date())
    if isinstance(value, date):
        return ConcreteDate(value=value)
    if value is None or (isinstance(value, str) and not value.strip()):
        return PlaceholderDate(text=not_specified)
    return normalize_date(str(value), today=today, sentinels=sentinels)
