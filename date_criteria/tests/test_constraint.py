"""
Tests for constraint module.
"""
from __future__ import annotations

import pytest
from datetime import date as _date

from date_criteria.constraint import compile_constraint, compile_constraints, split_clauses
from date_criteria.exceptions import (
    ArithmeticTypeError,
    CategoryMismatchError,
    CompileError,
    GrammarError,
    UnsupportedOperatorError,
)


class TestCompileConstraint:
    """Tests for compile_constraint."""

    @pytest.mark.parametrize("clause,d,expected", [
        ("date == 2022-12-25", _date(2022, 12, 25), True),
        ("date != 2022-12-19", _date(2022, 12, 19), False),
        ("date < 2022-12-19", _date(2022, 12, 15), True),
        ("date <= 2022-12-19", _date(2022, 12, 19), True),
        ("date > 2022-12-19", _date(2022, 12, 19), False),
        ("date >= 2022-12-19", _date(2022, 12, 20), True),
        ("day==4", _date(2022, 12, 4), True),
        ("year<=2010", _date(2011, 1, 1), False),
        ("dayofweek == friday", _date(2022, 12, 16), True),
        ("DayOfWeek != Wednesday", _date(2022, 12, 21), False),
        ("Date == EndOfMonth - 3", _date(2022, 12, 28), True),
        ("Date == Easter + 1", _date(1900, 4, 16), True),
        ("Month - 1 == 11", _date(2022, 12, 1), True),
        ("day % 2 == 0", _date(2022, 12, 3), False),
    ])
    def test_evaluation(self, clause, d, expected):
        """Test evaluating compiled clauses."""
        assert compile_constraint(clause).evaluate(d) is expected

    def test_operands_either_side(self):
        """Test that tokens may appear on the right-hand side."""
        constraint = compile_constraint("2022-12-25 == Date")
        assert constraint.evaluate(_date(2022, 12, 25))
        assert not constraint.evaluate(_date(2022, 12, 24))

    @pytest.mark.parametrize("clause", ["date 2022-12-25", "date = 2022-12-25", "date => 2022-12-25", "day <== 3", "a !== b"])
    def test_missing_operator(self, clause):
        """Test clauses without exactly one recognisable operator."""
        with pytest.raises(GrammarError) as excinfo:
            compile_constraint(clause)
        assert excinfo.value.clause == clause

    def test_multiple_operators(self):
        """Test that chained comparisons are rejected."""
        with pytest.raises(GrammarError):
            compile_constraint("2022-01-01 < date < 2022-12-31")

    @pytest.mark.parametrize("clause", [
        "date == 5",
        "day == friday",
        "dayofweek == 2022-12-25",
        "Easter > Year",
    ])
    def test_category_mismatch(self, clause):
        """Test that both sides must share a value category."""
        with pytest.raises(CategoryMismatchError):
            compile_constraint(clause)

    def test_category_mismatch_message(self):
        """Test that the message names both operands and their categories."""
        with pytest.raises(CategoryMismatchError) as excinfo:
            compile_constraint("date == 5")
        message = str(excinfo.value)
        assert '"date" (Date)' in message
        assert '"5" (Integer)' in message

    @pytest.mark.parametrize("op", ["<", "<=", ">", ">="])
    def test_day_of_week_ordering(self, op):
        """Test that days of the week cannot be ordered."""
        with pytest.raises(UnsupportedOperatorError) as excinfo:
            compile_constraint(f"dayofweek {op} friday")
        assert excinfo.value.clause == f"dayofweek {op} friday"

    def test_operand_error_carries_clause(self):
        """Test that operand errors are tagged with the clause."""
        with pytest.raises(ArithmeticTypeError) as excinfo:
            compile_constraint("dayofweek + 1 == friday")
        assert excinfo.value.clause == "dayofweek + 1 == friday"

    def test_compile_errors_are_value_errors(self):
        """Test that compile errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            compile_constraint("nonsense")


class TestConstraintIdentity:
    """Tests for case-insensitive constraint identity."""

    def test_case_and_spacing_insensitive(self):
        """Test that case and spacing do not change identity."""
        a = compile_constraint("Date==Easter")
        b = compile_constraint("date == easter")
        assert a == b
        assert hash(a) == hash(b)

    def test_operand_text_kept_as_written(self):
        """Test that identity uses each trimmed operand exactly as written, ignoring case."""
        assert compile_constraint("Date == Easter + 1") == compile_constraint("date==EASTER + 1")
        assert compile_constraint("Date == Easter + 1") != compile_constraint("date==easter+1")
        assert compile_constraint("day == +5") != compile_constraint("day == 5")

    def test_different_constraints(self):
        """Test that different comparisons are different constraints."""
        assert compile_constraint("day == 1") != compile_constraint("day != 1")
        assert compile_constraint("day == 1") != compile_constraint("1 == day")

    def test_text(self):
        """Test canonical text."""
        constraint = compile_constraint("  Date  ==  2022-12-25 ")
        assert constraint.text == "Date==2022-12-25"
        assert str(constraint) == constraint.text

    def test_set_collapses_duplicates(self):
        """Test that duplicate constraints collapse in a set."""
        constraints = {compile_constraint("Day == 1"), compile_constraint("day==1"), compile_constraint("day == 2")}
        assert len(constraints) == 2


class TestClauses:
    """Tests for splitting rule text into clauses."""

    def test_split_clauses(self):
        """Test splitting, trimming and dropping empty clauses."""
        assert split_clauses(" day == 1 ;; month == 2; ") == ["day == 1", "month == 2"]

    def test_empty_text(self):
        """Test that empty text has no clauses."""
        assert split_clauses("") == []
        assert compile_constraints(" ; ") == []

    def test_compile_constraints_fails_fast(self):
        """Test that one bad clause fails the whole text."""
        with pytest.raises(CompileError):
            compile_constraints("day == 1; day == monday")
