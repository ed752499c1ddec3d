"""
operand.py - Operand resolution for the rule language.

Turns one side of a comparison into a typed Operand: a value category plus a
function computing the operand's value for a queried date.

Parse order (first match wins):
    1. ``YYYY-MM-DD`` date literal           -> constant Date
    2. integer literal                        -> constant Integer
    3. split on a single arithmetic operator  -> 1 or 3 terms, anything else fails
    4. one term: token or day-of-week name
    5. three terms: ``(date literal | token) op integer``
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date as _date
from typing import Any, Callable, Dict, List, Optional

from rapidfuzz import fuzz, process

from .comparators import ArithmeticOp, arithmetic_for
from .date_utils import day_number, day_of_year, end_of_month, parse_iso_date
from .easter import easter_sunday
from .exceptions import ArithmeticTypeError, CompileError, GrammarError
from .tokens import (
    DAY_OF_WEEK_NAMES,
    TOKEN_CATEGORY,
    TOKEN_NAMES,
    DayOfWeek,
    Token,
    ValueCategory,
    lookup_day_of_week,
    lookup_token,
)

logger = logging.getLogger(__name__)

INT_RE = re.compile(r"^[+-]?\d+$")
# An operator character next to another operator character is not an operator
# on its own ('**' is matched whole before '*').
ARITHMETIC_RE = re.compile(r"(?<![+\-*%/])(\*\*|[+\-*%/])(?![+\-*%/])")
_LEADING_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?=\s|[+\-*%/]|$)")

SUGGESTION_THRESHOLD = 75
_KNOWN_NAMES = list(TOKEN_NAMES) + list(DAY_OF_WEEK_NAMES)

ValueFunction = Callable[[_date], Any]


@dataclass(frozen=True)
class ResolvedValue:
    """
    The value of an operand for one date: exactly one of Date, Integer or DayOfWeek,
    tagged with its category.
    """
    category: ValueCategory
    value: Any

    def as_date(self) -> _date:
        if self.category is not ValueCategory.DATE:
            raise TypeError(f"{self.category} value is not a Date")
        return self.value

    def as_int(self) -> int:
        if self.category is not ValueCategory.INTEGER:
            raise TypeError(f"{self.category} value is not an Integer")
        return self.value

    def as_day_of_week(self) -> DayOfWeek:
        if self.category is not ValueCategory.DAY_OF_WEEK:
            raise TypeError(f"{self.category} value is not a DayOfWeek")
        return self.value


@dataclass(frozen=True)
class Operand:
    """
    A compiled operand.

    Attributes:
        text: Operand text as written (trimmed).
        category: Value category the operand produces.
        compute: Function returning the raw value for a queried date.
    """
    text: str
    category: ValueCategory
    compute: ValueFunction = field(compare=False, repr=False)

    def __call__(self, d: _date) -> Any:
        return self.compute(d)

    def resolve(self, d: _date) -> ResolvedValue:
        return ResolvedValue(self.category, self.compute(d))


def _year_easter(d: _date) -> _date:
    return easter_sunday(d.year)


_TOKEN_VALUES: Dict[Token, ValueFunction] = {
    Token.DATE: lambda d: d,
    Token.DAY: lambda d: d.day,
    Token.MONTH: lambda d: d.month,
    Token.YEAR: lambda d: d.year,
    Token.DAY_OF_WEEK: DayOfWeek.from_date,
    Token.DAY_NUMBER: day_number,
    Token.DAY_OF_YEAR: day_of_year,
    Token.EASTER: _year_easter,
    Token.END_OF_MONTH: end_of_month,
}


def _constant(value: Any) -> ValueFunction:
    return lambda d: value


def suggest_name(term: str, threshold: int = SUGGESTION_THRESHOLD) -> Optional[str]:
    """
    Find the token or day-of-week name closest to a misspelt term.

    Returns:
        Optional[str]: The best matching name, or None if nothing scores above threshold.
    """
    if not term:
        return None
    match = process.extractOne(term.lower(), _KNOWN_NAMES, scorer=fuzz.ratio)
    if match is None:
        return None
    name, score, _ = match
    return name if score >= threshold else None


def _unknown_term(term: str, operand: str) -> GrammarError:
    message = f"Unrecognised operand '{term}' in '{operand}'."
    suggestion = suggest_name(term)
    if suggestion:
        message += f" Did you mean '{suggestion}'?"
    return GrammarError(message, operand=operand)


def _date_literal(text: str) -> Optional[_date]:
    try:
        return parse_iso_date(text)
    except ValueError:
        raise GrammarError(f"Invalid date literal '{text}'.", operand=text) from None


def _is_day_of_week(term: str) -> bool:
    return lookup_day_of_week(term) is not None or lookup_token(term) is Token.DAY_OF_WEEK


def split_arithmetic(text: str) -> List[str]:
    """
    Split an operand on arithmetic operators, keeping the operators.

    A leading date literal is kept whole, so ``2022-12-19 + 3`` gives three terms.

    Returns:
        List[str]: Stripped terms; operands alternate with operators.
    """
    head = ""
    rest = text
    m = _LEADING_DATE_RE.match(text)
    if m:
        head = m.group(1)
        rest = text[m.end():]
    parts = ARITHMETIC_RE.split(rest)
    parts[0] = head + parts[0]
    return [p.strip() for p in parts]


def resolve_operand(text: str) -> Operand:
    """
    Compile one side of a comparison.

    Args:
        text: Operand text, e.g. ``Easter + 1``, ``2022-12-25``, ``friday``.

    Returns:
        Operand: Category and value function for the operand.

    Raises:
        GrammarError: Operand matches no literal, token or day-name form.
        ArithmeticTypeError: Arithmetic with a non-integer offset or on a day of week.
        UnsupportedOperatorError: Arithmetic operator not defined for the operand category.
    """
    trimmed = text.strip()
    if not trimmed:
        raise GrammarError("Empty operand.", operand=text)

    literal = _date_literal(trimmed)
    if literal is not None:
        return Operand(trimmed, ValueCategory.DATE, _constant(literal))

    if INT_RE.match(trimmed):
        value = int(trimmed)
        return Operand(trimmed, ValueCategory.INTEGER, _constant(value))

    terms = split_arithmetic(trimmed)
    if len(terms) == 1:
        return _resolve_term(trimmed)
    if len(terms) == 3 and all(terms):
        return _resolve_arithmetic(trimmed, terms[0], terms[1], terms[2])
    raise GrammarError(
        f"Invalid expression in comparison: '{trimmed}'. Expected a single value or 'value op number'.",
        operand=trimmed,
    )


def _resolve_term(term: str) -> Operand:
    token = lookup_token(term)
    if token is not None:
        return Operand(term, TOKEN_CATEGORY[token], _TOKEN_VALUES[token])

    day = lookup_day_of_week(term)
    if day is not None:
        return Operand(term, ValueCategory.DAY_OF_WEEK, _constant(day))

    raise _unknown_term(term, term)


def _resolve_arithmetic(text: str, lhs: str, op_text: str, rhs: str) -> Operand:
    op = ArithmeticOp(op_text)

    if _is_day_of_week(lhs) or _is_day_of_week(rhs):
        raise ArithmeticTypeError(f"Cannot do arithmetic on a day of week in '{text}'.", operand=text)
    if not INT_RE.match(rhs):
        raise ArithmeticTypeError(
            f"Right-hand side of arithmetic operation ('{rhs}') must be a whole number in '{text}'.",
            operand=text,
        )
    offset = int(rhs)

    try:
        literal = _date_literal(lhs)
        if literal is not None:
            apply = arithmetic_for(ValueCategory.DATE, op, offset)
            try:
                shifted = apply(literal, offset)
            except OverflowError:
                raise GrammarError(f"Date arithmetic out of range in '{text}'.", operand=text) from None
            return Operand(text, ValueCategory.DATE, _constant(shifted))

        token = lookup_token(lhs)
        if token is None:
            if INT_RE.match(lhs):
                raise GrammarError(
                    f"Left-hand side of arithmetic operation ('{lhs}') must be a date literal or token in '{text}'.",
                    operand=text,
                )
            raise _unknown_term(lhs, text)

        category = TOKEN_CATEGORY[token]
        apply = arithmetic_for(category, op, offset)
    except CompileError as e:
        if e.operand is None:
            raise type(e)(f"{e.message} (in '{text}')", operand=text) from e
        raise

    base = _TOKEN_VALUES[token]
    logger.debug(f"Resolved arithmetic operand '{text}' as {token.value} {op.value} {offset}")
    return Operand(
        text,
        category,
        lambda d: apply(base(d), offset),
    )
