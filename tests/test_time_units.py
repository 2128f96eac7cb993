"""Tests for duration conversion."""
import pytest

from querytrace.utils.time_units import TimeUnit, to_nanoseconds


@pytest.mark.parametrize(
    "value,unit,expected",
    [
        (5, TimeUnit.NATIVE, 5),
        (5, TimeUnit.NANOSECOND, 5),
        (5, TimeUnit.MICROSECOND, 5_000),
        (5, TimeUnit.MILLISECOND, 5_000_000),
        (2, TimeUnit.SECOND, 2_000_000_000),
        (1.5, TimeUnit.MILLISECOND, 1_500_000),
        (0.0000004, TimeUnit.MILLISECOND, 0),
    ],
)
def test_numeric_conversion(value, unit, expected):
    assert to_nanoseconds(value, unit) == expected


@pytest.mark.parametrize("value", [None, "5", b"5", [5], True, False, float("nan"), float("inf"), -3, -0.5, 0])
def test_non_numeric_or_negative_is_zero(value):
    assert to_nanoseconds(value, TimeUnit.MILLISECOND) == 0


def test_default_unit_is_native():
    assert to_nanoseconds(1234) == 1234


def test_conversion_is_deterministic():
    assert to_nanoseconds(7, TimeUnit.MICROSECOND) == to_nanoseconds(7, TimeUnit.MICROSECOND)
    assert isinstance(to_nanoseconds(1.25, TimeUnit.SECOND), int)
