"""
constraint.py - Single compiled comparisons.

A Constraint is one ``operand op operand`` clause compiled into a predicate over
a date. Constraints compare and hash by their canonical text (trimmed lhs, operator,
trimmed rhs), case-folded, so ``Date==Easter`` and ``date == easter`` are the
same constraint.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date as _date
from typing import Any, Callable, List

from .comparators import ComparisonOp, comparator_for
from .exceptions import CategoryMismatchError, CompileError, GrammarError
from .operand import ResolvedValue, resolve_operand
from .tokens import ValueCategory

logger = logging.getLogger(__name__)

# '!=', '<', '<=', '>', '>=', '=='; never part of a longer run of comparison characters
COMPARISON_RE = re.compile(r"(?<![<>=!])(!=|[<>]=?|==)(?![<>=])")
CLAUSE_SEPARATOR = ";"

Predicate = Callable[[_date], bool]


@dataclass(frozen=True)
class Constraint:
    """
    A compiled comparison.

    Attributes:
        text: Canonical text, trimmed lhs + operator + trimmed rhs.
        predicate: Pure function of a date returning whether the comparison holds.
        key: Case-folded canonical text; the only field used for equality and hashing.
    """
    text: str = field(compare=False)
    predicate: Predicate = field(compare=False, repr=False)
    key: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", self.text.casefold())

    def evaluate(self, d: _date) -> bool:
        return self.predicate(d)

    def __str__(self) -> str:
        return self.text


def _accessor_for(category: ValueCategory) -> Callable[[ResolvedValue], Any]:
    if category is ValueCategory.DATE:
        return ResolvedValue.as_date
    if category is ValueCategory.DAY_OF_WEEK:
        return ResolvedValue.as_day_of_week
    if category is ValueCategory.INTEGER:
        return ResolvedValue.as_int
    raise ValueError(f"Unknown value category: {category}")


def split_clauses(text: str) -> List[str]:
    """Split rule text on ';', trimming clauses and dropping empty ones."""
    return [clause.strip() for clause in text.split(CLAUSE_SEPARATOR) if clause.strip()]


def compile_constraint(clause: str) -> Constraint:
    """
    Compile one ``lhs op rhs`` clause.

    Args:
        clause: Clause text, e.g. ``date == EndOfMonth - 3``.

    Returns:
        Constraint: The compiled comparison.

    Raises:
        GrammarError: The clause does not contain exactly one comparison operator,
            or an operand cannot be parsed.
        CategoryMismatchError: The operands resolve to different value categories.
        UnsupportedOperatorError: The operator is not defined for the operand category.
        ArithmeticTypeError: An operand uses arithmetic incorrectly.
    """
    parts = COMPARISON_RE.split(clause)
    if len(parts) != 3:
        raise GrammarError(
            f"Invalid rule definition in '{clause.strip()}': expected exactly one comparison operator.",
            clause=clause,
        )
    lhs_text, op_text, rhs_text = (p.strip() for p in parts)
    op = ComparisonOp(op_text)

    try:
        left = resolve_operand(lhs_text)
        right = resolve_operand(rhs_text)
    except CompileError as e:
        e.clause = clause
        raise

    if left.category is not right.category:
        raise CategoryMismatchError(
            f"Incompatible operands in rule - \"{lhs_text}\" ({left.category}) is not comparable "
            f"with \"{rhs_text}\" ({right.category}).",
            clause=clause,
        )

    try:
        compare = comparator_for(left.category, op)
    except CompileError as e:
        e.clause = clause
        raise

    unwrap = _accessor_for(left.category)

    def predicate(d: _date) -> bool:
        return compare(unwrap(left.resolve(d)), unwrap(right.resolve(d)))

    text = f"{left.text}{op.value}{right.text}"
    logger.debug(f"Compiled constraint '{clause.strip()}' as '{text}' ({left.category})")
    return Constraint(text, predicate)


def compile_constraints(text: str) -> List[Constraint]:
    """Compile every ';'-separated clause of text."""
    return [compile_constraint(clause) for clause in split_clauses(text)]
