# date_criteria/date_utils.py
from __future__ import annotations

import calendar
import logging
import re
from datetime import date as _date, datetime as _datetime, timedelta
from typing import Any, Optional

from ged4py.date import DateValue

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_MONTH_ABBR_TO_NUM = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}


def end_of_month(d: _date) -> _date:
    """Last calendar day of the month containing d."""
    return _date(d.year, d.month, calendar.monthrange(d.year, d.month)[1])


def day_of_year(d: _date) -> int:
    """1-based day of the year (1 January is 1)."""
    return d.timetuple().tm_yday


def day_number(d: _date) -> int:
    """Days elapsed since 0001-01-01 in the proleptic Gregorian calendar (0001-01-01 is 0)."""
    return d.toordinal() - 1


def shift_days(d: _date, days: int) -> _date:
    """Return d moved by a signed number of days."""
    return d + timedelta(days=days)


def parse_iso_date(text: str) -> Optional[_date]:
    """
    Parse an exact ``YYYY-MM-DD`` literal.

    Returns None if text does not have the literal's shape. A literal with the
    right shape but an impossible day (``2022-02-30``) raises ValueError.
    """
    text = text.strip()
    if not ISO_DATE_RE.match(text):
        return None
    return _date.fromisoformat(text)


def _is_gregorian_date_like(x: Any) -> bool:
    """
    Check if object has Gregorian date-like attributes.

    Uses duck-typing to detect ged4py.calendar.GregorianDate-like objects
    by checking for year attribute and either month or day.
    """
    return hasattr(x, "year") and (hasattr(x, "month") or hasattr(x, "day"))


def _gregorian_like_to_pydate(g: Any) -> Optional[_date]:
    """
    Convert ged4py GregorianDate-like object to datetime.date.

    Requires year, month, and day to be present. Month can be either
    a string abbreviation (e.g., 'JUL') or an integer (1-12).

    Returns:
        datetime.date if all three parts are present, None for partial dates.
    """
    y = getattr(g, "year", None)
    m = getattr(g, "month", None)
    d = getattr(g, "day", None)
    if y is None or m is None or d is None:
        return None
    if isinstance(m, str):
        mnum = _MONTH_ABBR_TO_NUM.get(m.upper()[:3])
    else:
        mnum = int(m)
    if not mnum:
        return None
    return _date(int(y), mnum, int(d))


def _parse_gedcom_date(text: str) -> Optional[_date]:
    """Parse a GEDCOM-style day/month/year string such as '25 DEC 2022'."""
    value = DateValue.parse(text)
    kind = getattr(value, "kind", None)
    if kind is None or kind.name != "SIMPLE":
        return None
    return _gregorian_like_to_pydate(value.date)


def to_date(value: Any) -> _date:
    """
    Coerce a query value to a datetime.date.

    Accepts:
    - datetime.date
    - datetime.datetime (time of day is dropped)
    - ISO 'YYYY-MM-DD' strings
    - GEDCOM-style strings with full day precision ('25 DEC 2022')
    - ged4py GregorianDate-like objects with year, month and day

    Args:
        value: Date in any supported format

    Returns:
        datetime.date

    Raises:
        ValueError: If a string or date-like object has no full day precision.
        TypeError: If the value type is not supported.
    """
    # datetime is a subclass of date, check it first
    if isinstance(value, _datetime):
        return value.date()
    if isinstance(value, _date):
        return value

    if isinstance(value, str):
        iso = parse_iso_date(value)
        if iso is not None:
            return iso
        parsed = _parse_gedcom_date(value)
        if parsed is None:
            raise ValueError(f"Cannot interpret '{value}' as a calendar date")
        logger.debug(f"Parsed GEDCOM-style date '{value}' as {parsed.isoformat()}")
        return parsed

    if _is_gregorian_date_like(value):
        parsed = _gregorian_like_to_pydate(value)
        if parsed is None:
            raise ValueError(f"Date '{value}' does not have day precision")
        return parsed

    raise TypeError(f"Unsupported date type: {type(value)}")
