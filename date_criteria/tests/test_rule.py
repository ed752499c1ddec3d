"""
Tests for rule module.
"""
from __future__ import annotations

import pytest
from datetime import date as _date

from date_criteria.constraint import compile_constraint
from date_criteria.exceptions import GrammarError
from date_criteria.rule import Rule, compile_rule


class TestMatches:
    """Tests for Rule.matches."""

    def test_all_constraints_must_hold(self):
        """Test AND semantics."""
        rule = compile_rule("day==4;month==12;year==2022")
        assert rule.matches(_date(2022, 12, 4))
        assert not rule.matches(_date(2022, 12, 21))
        assert not rule.matches(_date(2021, 12, 4))

    def test_negate(self):
        """Test that negate inverts the AND result."""
        rule = compile_rule("dayofweek == friday", negate=True)
        assert not rule.matches(_date(2022, 12, 16))
        assert rule.matches(_date(2022, 12, 17))

    def test_clauses_evaluated_in_order(self):
        """Test that an earlier failing clause stops later clauses from running."""
        rule = compile_rule("year <= 2099; year >= 1900; Date == Easter + 1")
        assert [c.text for c in rule.constraints] == ["year<=2099", "year>=1900", "Date==Easter + 1"]
        assert not rule.matches(_date(3000, 1, 1))
        assert rule.matches(_date(2022, 4, 18))

    def test_clause_order_kept_after_duplicates(self):
        """Test that duplicates keep the position of their first occurrence."""
        rule = compile_rule("month == 12; day == 25; MONTH==12")
        assert rule.text == "month==12;day==25"

    def test_empty_rule_is_vacuously_true(self):
        """Test that a rule with no constraints matches every date."""
        assert compile_rule("").matches(_date(2022, 12, 10))
        assert not compile_rule("", negate=True).matches(_date(2022, 12, 10))

    def test_repeated_evaluation_is_deterministic(self):
        """Test that evaluating twice gives the same answer."""
        rule = compile_rule("Date == EndOfMonth; DayOfWeek != Wednesday")
        d = _date(2023, 1, 31)
        assert rule.matches(d) == rule.matches(d) is True


class TestIdentity:
    """Tests for Rule equality."""

    def test_order_and_case_insensitive(self):
        """Test that clause order and case do not change identity."""
        a = compile_rule("date == easter; day == 1")
        b = compile_rule("DAY==1;Date==Easter")
        assert a == b
        assert hash(a) == hash(b)

    def test_negate_and_name_matter(self):
        """Test that negate and name are part of identity."""
        base = compile_rule("day == 1")
        assert base != compile_rule("day == 1", negate=True)
        assert base != compile_rule("day == 1", name="first")
        assert compile_rule("day == 1", name="first") == compile_rule("Day==1", name="first")

    def test_duplicate_constraints_collapse(self):
        """Test that repeated clauses count once."""
        rule = compile_rule("day == 1; Day==1; day == 1")
        assert len(rule.constraints) == 1

    def test_constructed_from_iterable(self):
        """Test building a Rule directly from constraints."""
        rule = Rule([compile_constraint("day == 1"), compile_constraint("month == 1")], name="New Year")
        assert isinstance(rule.constraints, tuple)
        assert isinstance(rule.constraint_set, frozenset)
        assert rule == compile_rule("month == 1; day == 1", name="New Year")

    def test_text_and_str(self):
        """Test canonical text and display form."""
        rule = compile_rule("month == 12; day == 25", name="Christmas")
        assert rule.text == "month==12;day==25"
        assert str(rule) == "Christmas: [month==12;day==25]"
        assert str(compile_rule("day == 1", negate=True)) == "not [day==1]"


def test_compile_rule_rejects_bad_clause():
    """Test that a malformed clause fails compilation."""
    with pytest.raises(GrammarError):
        compile_rule("day == 1; month")
