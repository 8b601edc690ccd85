"""Tests for threshold classification."""

import pytest

from fleetwatch.checks.results import Verdict
from fleetwatch.checks.thresholds import GreaterThan, LessThan, Threshold, classify


@pytest.mark.parametrize(
    "value,expected",
    [
        (4.0, Verdict.OK),
        (5.0, Verdict.OK),
        (5.5, Verdict.WARNING),
        (10.0, Verdict.WARNING),
        (10.1, Verdict.ERROR),
    ],
)
def test_greater_than(value, expected):
    assert classify(value, warning=5.0, error=10.0, comparator=GreaterThan()) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (8.0, Verdict.OK),
        (7.0, Verdict.OK),
        (6.0, Verdict.WARNING),
        (5.0, Verdict.ERROR),
    ],
)
def test_less_than(value, expected):
    assert classify(value, warning=7.0, error=6.0, comparator=LessThan()) == expected


def test_value_at_error_threshold_is_warning():
    """Strict comparison: hitting the error threshold exactly is only a warning."""
    epsilon = 1e-6
    error = 10.0
    warning = error - epsilon

    assert classify(error, warning, error, GreaterThan()) == Verdict.WARNING


def test_error_takes_precedence():
    assert classify(100.0, warning=50.0, error=10.0, comparator=GreaterThan()) == Verdict.ERROR


def test_threshold_defaults_to_greater_than():
    threshold = Threshold(warning=1.0, error=2.0)

    assert threshold.comparator == GreaterThan()
    assert threshold.classify(1.5) == Verdict.WARNING
    assert threshold.classify(3.0) == Verdict.ERROR


def test_comparators_are_distinct():
    assert GreaterThan() != LessThan()
    assert GreaterThan().symbol == ">"
    assert LessThan().symbol == "<"
    assert GreaterThan().exceeds(2, 1)
    assert not LessThan().exceeds(2, 1)
