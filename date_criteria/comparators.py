"""
comparators.py - Comparator registry for the rule language.

Operators are closed enums. comparator_for() and arithmetic_for() dispatch over
every (category, operator) pair explicitly; a pair with no definition raises
UnsupportedOperatorError at compile time instead of failing on lookup later.
"""

from __future__ import annotations

import operator
from datetime import date as _date
from enum import Enum
from typing import Any, Callable

from .date_utils import shift_days
from .exceptions import ArithmeticTypeError, UnsupportedOperatorError
from .tokens import ValueCategory

Comparator = Callable[[Any, Any], bool]
Arithmetic = Callable[[Any, int], Any]


class ComparisonOp(str, Enum):
    """Comparison operators accepted between two operands."""
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    def __str__(self) -> str:
        return self.value

    @property
    def is_ordering(self) -> bool:
        return self not in (ComparisonOp.EQ, ComparisonOp.NE)


class ArithmeticOp(str, Enum):
    """Binary arithmetic operators recognised inside an operand."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    POWER = "**"

    def __str__(self) -> str:
        return self.value


def _equality(op: ComparisonOp) -> Comparator:
    if op is ComparisonOp.EQ:
        return operator.eq
    if op is ComparisonOp.NE:
        return operator.ne
    raise ValueError(f"Not an equality operator: {op}")


def _ordering(op: ComparisonOp) -> Comparator:
    if op is ComparisonOp.LT:
        return operator.lt
    if op is ComparisonOp.LE:
        return operator.le
    if op is ComparisonOp.GT:
        return operator.gt
    if op is ComparisonOp.GE:
        return operator.ge
    return _equality(op)


def comparator_for(category: ValueCategory, op: ComparisonOp) -> Comparator:
    """
    Return the predicate implementing op for two values of category.

    Date and Integer values support all six comparisons; DayOfWeek values
    only support equality.

    Raises:
        UnsupportedOperatorError: If op is an ordering operator on DayOfWeek.
    """
    if category is ValueCategory.DATE or category is ValueCategory.INTEGER:
        return _ordering(op)
    if category is ValueCategory.DAY_OF_WEEK:
        if op.is_ordering:
            raise UnsupportedOperatorError(
                f"Operator '{op}' is not supported for {category} operands; use '==' or '!='."
            )
        return _equality(op)
    raise ValueError(f"Unknown value category: {category}")


def _add_days(d: _date, n: int) -> _date:
    return shift_days(d, n)


def _subtract_days(d: _date, n: int) -> _date:
    return shift_days(d, -n)


def arithmetic_for(category: ValueCategory, op: ArithmeticOp, rhs: int) -> Arithmetic:
    """
    Return the function applying ``value op rhs`` for a value of category.

    Dates move by whole days and only accept '+' and '-'. Integers accept every
    operator; '/' is floor division.

    Raises:
        ArithmeticTypeError: For day-of-week operands, or division/modulo by zero.
        UnsupportedOperatorError: For '*', '/', '%', '**' on dates.
    """
    if category is ValueCategory.DAY_OF_WEEK:
        raise ArithmeticTypeError("Cannot do arithmetic on a day of week.")

    if op in (ArithmeticOp.DIVIDE, ArithmeticOp.MODULO) and rhs == 0:
        raise ArithmeticTypeError(f"Right-hand side of '{op}' must not be zero.")

    if category is ValueCategory.DATE:
        if op is ArithmeticOp.ADD:
            return _add_days
        if op is ArithmeticOp.SUBTRACT:
            return _subtract_days
        raise UnsupportedOperatorError(
            f"Operator '{op}' is not supported for {category} operands; use '+' or '-' with a number of days."
        )

    if category is ValueCategory.INTEGER:
        if op is ArithmeticOp.ADD:
            return operator.add
        if op is ArithmeticOp.SUBTRACT:
            return operator.sub
        if op is ArithmeticOp.MULTIPLY:
            return operator.mul
        if op is ArithmeticOp.DIVIDE:
            return operator.floordiv
        if op is ArithmeticOp.MODULO:
            return operator.mod
        if op is ArithmeticOp.POWER:
            return operator.pow

    raise ValueError(f"Unknown value category: {category}")
