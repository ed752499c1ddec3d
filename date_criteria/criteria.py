"""
criteria.py - OR-groups of rules with a per-date result cache.

A Criteria contains a date when any of its rules matches, XOR its negate flag.
Results are memoised per date. Structural changes (adding rules, toggling
negate, refreshing) take an exclusive lock; cache hits never lock.

Example:
    >>> from datetime import date
    >>> from date_criteria import Criteria
    >>> weekends = Criteria(rules=["DayOfWeek == Saturday", "DayOfWeek == Sunday"])
    >>> weekends.contains(date(2022, 12, 17))
    True
"""

from __future__ import annotations

import logging
import threading
from datetime import date as _date, timedelta
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple, Union

from .date_utils import to_date
from .exceptions import LookupRangeError
from .rule import Rule, compile_rule

logger = logging.getLogger(__name__)

RuleSource = Union[str, Rule, Mapping[str, Any]]


def read_flag(source: Mapping[str, Any], key: str, default: bool = False) -> bool:
    """
    Read a boolean setting from a rule or config mapping.

    Raises:
        TypeError: If the value is present but not a bool (e.g. the string "false").
    """
    value = source.get(key, default)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise TypeError(f"'{key}' must be true or false, got {value!r}")
    return value


class Criteria:
    """
    An OR-combination of rules, optionally negated, with a per-date cache.

    Attributes:
        auto_refresh (bool): Recompute cached dates after every rule addition. Turn off
            while bulk-loading rules and call refresh_cache() once at the end.
    """

    def __init__(self, negate: bool = False, auto_refresh: bool = True, rules: Iterable[RuleSource] = ()) -> None:
        """
        Initialize a Criteria.

        Args:
            negate: Negate the OR of all rules.
            auto_refresh: Recompute cached results whenever rules are added.
            rules: Optional initial rules (see add_rules for accepted forms).
        """
        self.auto_refresh: bool = auto_refresh
        self._negate: bool = negate
        # Ordered set of rules; replaced wholesale under the lock so readers see a consistent tuple.
        self._rules: Tuple[Rule, ...] = ()
        self._cache: Dict[_date, bool] = {}
        self._generation: int = 0
        self._lock = threading.RLock()
        if rules:
            self.add_rules(rules)

    @property
    def negate(self) -> bool:
        return self._negate

    @negate.setter
    def negate(self, value: bool) -> None:
        """Set the negate flag, flipping every cached result in place."""
        self.set_negate(value)

    def set_negate(self, value: bool) -> None:
        """
        Set the negate flag.

        Cached results are flipped rather than recomputed, which is only correct
        when the cache is not stale (see add_rule with auto_refresh disabled).
        """
        value = bool(value)
        with self._lock:
            if value == self._negate:
                return
            self._negate = value
            for d in list(self._cache):
                self._cache[d] = not self._cache[d]
            self._generation += 1
            logger.debug(f"Criteria negate set to {value}; flipped {len(self._cache)} cached result(s)")

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    @property
    def cached_dates(self) -> List[_date]:
        return sorted(self._cache)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    def __repr__(self) -> str:
        return f"Criteria(negate={self._negate}, rules={len(self._rules)}, cached={len(self._cache)})"

    @staticmethod
    def _compile(source: RuleSource, negate: bool = False, name: str = "") -> Rule:
        if isinstance(source, str):
            return compile_rule(source, negate=negate, name=name)
        if negate or name:
            raise TypeError(f"negate and name only apply to rule text, not {type(source).__name__}")
        if isinstance(source, Rule):
            return source
        if isinstance(source, Mapping):
            text = source.get("rule", source.get("text"))
            if not isinstance(text, str):
                raise TypeError(f"Rule mapping needs a 'rule' string, got {dict(source)!r}")
            return compile_rule(text, negate=read_flag(source, "negate"), name=str(source.get("name", "") or ""))
        raise TypeError(f"Unsupported rule type: {type(source)}")

    def add_rule(self, rule: RuleSource, negate: bool = False, name: str = "") -> Rule:
        """
        Compile and add one rule.

        Args:
            rule: Rule text, a compiled Rule, or a mapping with 'rule', 'negate', 'name'.
            negate: Negate the rule (rule text only).
            name: Optional rule name (rule text only).

        Returns:
            Rule: The compiled rule.

        Raises:
            CompileError: If the rule text is malformed; nothing is added.
            TypeError: If negate or name is given with a compiled Rule or a mapping.
        """
        compiled = self._compile(rule, negate=negate, name=name)
        self._insert([compiled])
        return compiled

    def add_rules(self, rules: Iterable[RuleSource]) -> List[Rule]:
        """
        Compile and add several rules.

        Every rule is compiled before any is added, so a malformed entry leaves
        the Criteria unchanged.

        Args:
            rules: Iterable of rule text, compiled Rules, or mappings with 'rule', 'negate', 'name'.

        Returns:
            List[Rule]: The compiled rules, in input order.
        """
        compiled = [self._compile(r) for r in rules]
        self._insert(compiled)
        logger.info(f"Added {len(compiled)} rule(s); criteria now has {len(self._rules)}")
        return compiled

    def _insert(self, new_rules: List[Rule]) -> None:
        with self._lock:
            existing = dict.fromkeys(self._rules)
            for rule in new_rules:
                existing.setdefault(rule, None)
            self._rules = tuple(existing)
            self._generation += 1
            if self.auto_refresh:
                self._refresh_locked()

    def contains(self, value: Any) -> bool:
        """
        Return whether a date is in the criteria.

        Args:
            value: Date to test; anything date_utils.to_date accepts.

        Raises:
            LookupRangeError: If a rule needs table data (e.g. Easter) for a year
                the table does not cover.
        """
        d = to_date(value)
        cached = self._cache.get(d)
        if cached is not None:
            return cached

        generation = self._generation
        result = self._evaluate(d, self._rules, self._negate)
        with self._lock:
            if generation != self._generation:
                # rules or negate changed while computing
                result = self._evaluate(d, self._rules, self._negate)
            return self._cache.setdefault(d, result)

    @staticmethod
    def _evaluate(d: _date, rules: Tuple[Rule, ...], negate: bool) -> bool:
        return any(rule.matches(d) for rule in rules) ^ negate

    def refresh_cache(self) -> None:
        """Recompute every cached result against the current rules and negate flag."""
        with self._lock:
            self._refresh_locked()

    def _refresh_locked(self) -> None:
        rules = self._rules
        negate = self._negate
        for d in list(self._cache):
            try:
                self._cache[d] = self._evaluate(d, rules, negate)
            except LookupRangeError as e:
                # contains(d) will raise it to the caller that asks for d
                logger.warning(f"Evicting cached result for {d.isoformat()}: {e}")
                del self._cache[d]
        logger.debug(f"Refreshed {len(self._cache)} cached result(s) against {len(rules)} rule(s)")

    def clear_cache(self) -> None:
        """Drop every cached result."""
        with self._lock:
            self._cache.clear()
            self._generation += 1

    def contains_any(self, dates: Iterable[Any]) -> bool:
        """Return True if at least one of the dates is in the criteria."""
        return any(self.contains(d) for d in dates)

    def contains_all(self, dates: Iterable[Any]) -> bool:
        """Return True if every one of the dates is in the criteria."""
        return all(self.contains(d) for d in dates)

    def matching_dates(self, start: Any, end: Any) -> Iterator[_date]:
        """
        Yield every date from start to end (both inclusive) that is in the criteria.

        Args:
            start: First date of the range.
            end: Last date of the range.
        """
        current = to_date(start)
        last = to_date(end)
        while current <= last:
            if self.contains(current):
                yield current
            if current == last:
                break
            current += timedelta(days=1)
