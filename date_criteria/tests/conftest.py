"""
Pytest fixtures for date_criteria tests.
"""
from __future__ import annotations

import pytest
from datetime import date as _date
from typing import List

from date_criteria.criteria import Criteria


@pytest.fixture
def make_criteria():
    """Create a Criteria from rule strings."""
    def _create(*rules: str, negate: bool = False, auto_refresh: bool = True) -> Criteria:
        criteria = Criteria(negate=negate, auto_refresh=auto_refresh)
        for rule in rules:
            criteria.add_rule(rule)
        return criteria

    return _create


@pytest.fixture
def december_2022() -> List[_date]:
    """Every day of December 2022 (1 December is a Thursday)."""
    return [_date(2022, 12, day) for day in range(1, 32)]


@pytest.fixture
def calendars_yaml(tmp_path):
    """Write a calendars YAML file and return its path."""
    def _write(text: str):
        path = tmp_path / "calendars.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
