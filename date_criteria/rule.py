"""
rule.py - AND-groups of constraints.

A Rule matches a date when every one of its constraints holds, XOR its negate
flag. Constraints are evaluated in clause order, so a guard such as
``year <= 2099`` written before ``Date == Easter`` short-circuits the Easter
lookup. Rules are immutable; duplicate constraints collapse because constraints
compare by case-folded canonical text, and rule identity ignores clause order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date as _date
from typing import FrozenSet, Tuple

from .constraint import CLAUSE_SEPARATOR, Constraint, compile_constraints

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """
    An AND-combination of constraints, optionally negated and named.

    Attributes:
        constraints: Compiled constraints in clause order, duplicates removed;
            an empty rule matches every date.
        negate: Invert the AND result.
        name: Optional label, e.g. 'Easter Monday'.
        constraint_set: The constraints as a set; used with negate and name for
            equality and hashing.
    """
    constraints: Tuple[Constraint, ...] = field(default=(), compare=False)
    negate: bool = False
    name: str = ""
    constraint_set: FrozenSet[Constraint] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        ordered = tuple(dict.fromkeys(self.constraints))
        object.__setattr__(self, "constraints", ordered)
        object.__setattr__(self, "constraint_set", frozenset(ordered))

    def matches(self, d: _date) -> bool:
        """Return whether all constraints hold for d, XOR negate."""
        return all(c.evaluate(d) for c in self.constraints) ^ self.negate

    @property
    def text(self) -> str:
        """Rule text, constraints in clause order joined by ';'."""
        return CLAUSE_SEPARATOR.join(c.text for c in self.constraints)

    def __str__(self) -> str:
        prefix = "not " if self.negate else ""
        label = f"{self.name}: " if self.name else ""
        return f"{label}{prefix}[{self.text}]"


def compile_rule(text: str, negate: bool = False, name: str = "") -> Rule:
    """
    Compile ';'-separated rule text into a Rule.

    Args:
        text: Rule text, e.g. ``dayofweek != wednesday; dayofweek == friday``.
        negate: Negate the rule.
        name: Optional rule name.

    Returns:
        Rule: The compiled rule.

    Raises:
        CompileError: If any clause fails to compile.
    """
    constraints = compile_constraints(text)
    rule = Rule(tuple(constraints), negate=negate, name=name or "")
    logger.debug(f"Compiled rule '{name}' with {len(rule.constraints)} constraint(s): {rule.text}")
    return rule
