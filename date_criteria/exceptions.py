"""
exceptions.py - Error taxonomy for date_criteria.

Compile-time errors are raised synchronously while rule text is compiled and
derive from CompileError (itself a ValueError). LookupRangeError can only be
detected when a rule is evaluated against a concrete date, so it surfaces from
Criteria.contains() rather than from Criteria.add_rule().
"""

from typing import Optional


class DateCriteriaError(Exception):
    """Base class for every error raised by date_criteria."""


class CompileError(DateCriteriaError, ValueError):
    """
    Rule text could not be compiled.

    Attributes:
        clause: The clause (``lhs op rhs``) being compiled, if known.
        operand: The operand text that failed, if the failure is operand-specific.
    """

    def __init__(self, message: str, clause: Optional[str] = None, operand: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.clause = clause
        self.operand = operand


class GrammarError(CompileError):
    """Clause or operand does not match the rule grammar."""


class CategoryMismatchError(CompileError):
    """Left and right operands resolve to different value categories."""


class UnsupportedOperatorError(CompileError):
    """Operator is not defined for the operand category (e.g. ``<`` on a day of week)."""


class ArithmeticTypeError(CompileError):
    """Arithmetic operand has the wrong type (non-integer offset, day-of-week arithmetic)."""


class LookupRangeError(DateCriteriaError, LookupError):
    """
    A table lookup was requested outside the range the table covers.

    Attributes:
        year: The year that was looked up.
    """

    def __init__(self, message: str, year: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.year = year
