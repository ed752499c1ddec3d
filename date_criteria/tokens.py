"""
tokens.py - Named operands of the rule language.

Tokens and day-of-week names are looked up through explicit lowercase tables,
so parsing is case-insensitive and never depends on enum member names.
"""

from datetime import date as _date
from enum import Enum
from typing import Dict, Optional


class Token(Enum):
    """A named, date-dependent quantity usable as a bare operand."""
    DATE = "date"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"
    DAY_OF_WEEK = "dayofweek"
    DAY_NUMBER = "daynumber"
    DAY_OF_YEAR = "dayofyear"
    EASTER = "easter"
    END_OF_MONTH = "endofmonth"


class ValueCategory(Enum):
    """Comparability class that both sides of a comparison must share."""
    DATE = "Date"
    DAY_OF_WEEK = "DayOfWeek"
    INTEGER = "Integer"

    def __str__(self) -> str:
        return self.value


class DayOfWeek(Enum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def from_date(cls, d: _date) -> "DayOfWeek":
        """Day of week of a date (isoweekday 7 is Sunday)."""
        return cls(d.isoweekday() % 7)

    def __str__(self) -> str:
        return self.name.capitalize()


TOKEN_NAMES: Dict[str, Token] = {
    "date": Token.DATE,
    "day": Token.DAY,
    "month": Token.MONTH,
    "year": Token.YEAR,
    "dayofweek": Token.DAY_OF_WEEK,
    "daynumber": Token.DAY_NUMBER,
    "dayofyear": Token.DAY_OF_YEAR,
    "easter": Token.EASTER,
    "endofmonth": Token.END_OF_MONTH,
}

DAY_OF_WEEK_NAMES: Dict[str, DayOfWeek] = {
    "sunday": DayOfWeek.SUNDAY,
    "monday": DayOfWeek.MONDAY,
    "tuesday": DayOfWeek.TUESDAY,
    "wednesday": DayOfWeek.WEDNESDAY,
    "thursday": DayOfWeek.THURSDAY,
    "friday": DayOfWeek.FRIDAY,
    "saturday": DayOfWeek.SATURDAY,
}

TOKEN_CATEGORY: Dict[Token, ValueCategory] = {
    Token.DATE: ValueCategory.DATE,
    Token.DAY: ValueCategory.INTEGER,
    Token.MONTH: ValueCategory.INTEGER,
    Token.YEAR: ValueCategory.INTEGER,
    Token.DAY_OF_WEEK: ValueCategory.DAY_OF_WEEK,
    Token.DAY_NUMBER: ValueCategory.INTEGER,
    Token.DAY_OF_YEAR: ValueCategory.INTEGER,
    Token.EASTER: ValueCategory.DATE,
    Token.END_OF_MONTH: ValueCategory.DATE,
}


def lookup_token(text: str) -> Optional[Token]:
    """Return the Token named by text (case-insensitive), or None."""
    return TOKEN_NAMES.get(text.strip().lower())


def lookup_day_of_week(text: str) -> Optional[DayOfWeek]:
    """Return the DayOfWeek named by text (case-insensitive), or None."""
    return DAY_OF_WEEK_NAMES.get(text.strip().lower())
