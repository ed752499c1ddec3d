"""date_criteria package: Declarative text rules for matching calendar dates.

Rules such as ``date == EndOfMonth - 3`` or ``dayofweek != wednesday`` are
compiled into predicates over dates and combined:
    - Constraint: one comparison, ``operand op operand``
    - Rule: constraints joined by ';' (AND), optionally negated and named
    - Criteria: rules combined by OR, optionally negated, with a per-date cache

Example:
    >>> from date_criteria import Criteria
    >>> holidays = Criteria(rules=["month == 12; day == 25", "Date == Easter + 1"])
    >>> holidays.contains("2022-04-18")
    True
"""

from date_criteria.comparators import ArithmeticOp, ComparisonOp
from date_criteria.config import CriteriaConfig, load_calendars
from date_criteria.constraint import Constraint, compile_constraint
from date_criteria.criteria import Criteria
from date_criteria.easter import easter_sunday
from date_criteria.exceptions import (
    ArithmeticTypeError,
    CategoryMismatchError,
    CompileError,
    DateCriteriaError,
    GrammarError,
    LookupRangeError,
    UnsupportedOperatorError,
)
from date_criteria.operand import Operand, ResolvedValue, resolve_operand
from date_criteria.rule import Rule, compile_rule
from date_criteria.tokens import DayOfWeek, Token, ValueCategory

__all__ = [
    "ArithmeticOp",
    "ArithmeticTypeError",
    "CategoryMismatchError",
    "ComparisonOp",
    "CompileError",
    "Constraint",
    "Criteria",
    "CriteriaConfig",
    "DateCriteriaError",
    "DayOfWeek",
    "GrammarError",
    "LookupRangeError",
    "Operand",
    "ResolvedValue",
    "Rule",
    "Token",
    "UnsupportedOperatorError",
    "ValueCategory",
    "compile_constraint",
    "compile_rule",
    "easter_sunday",
    "load_calendars",
    "resolve_operand",
]
