"""Test variable resolution."""
import math
import pytest
from datetime import datetime, timedelta, timezone
from core.pricing import EvaluationContext, PriceRuleVariable
from core.pricing.variables import (
    CALENDAR_VARIABLES,
    DURATION_UNITS,
    VariableTable,
    derive_calendar_variables,
    derive_duration_variables,
    resolve_variables,
)


def test_duration_derivation():
    derived = derive_duration_variables(48)
    assert derived["booking_hours"] == 48
    assert derived["booking_days"] == 2
    assert derived["booking_weeks"] == pytest.approx(0.2857, abs=1e-4)
    assert derived["booking_months"] == pytest.approx(0.0667, abs=1e-4)


def test_duration_keys_always_present():
    table = resolve_variables([], EvaluationContext(booking_hours=0))
    for key in DURATION_UNITS:
        assert table.lookup(key) == 0


def test_non_finite_hours_treated_as_zero():
    assert derive_duration_variables(math.nan)["booking_days"] == 0
    assert derive_duration_variables(math.inf)["booking_hours"] == 0


def test_defaults_are_used():
    table = resolve_variables([PriceRuleVariable("base", 100)], EvaluationContext(booking_hours=1))
    assert table.lookup("base") == 100


def test_override_wins_over_default():
    table = resolve_variables(
        [PriceRuleVariable("guest_count", 1)],
        EvaluationContext(booking_hours=1, variable_overrides={"guest_count": 8}),
    )
    assert table.lookup("guest_count") == 8


def test_override_wins_over_derived_duration():
    table = resolve_variables(
        [PriceRuleVariable("booking_days", 9)],
        EvaluationContext(booking_hours=48, variable_overrides={"booking_days": 5}),
    )
    assert table.lookup("booking_days") == 5


def test_derived_duration_wins_over_default():
    table = resolve_variables(
        [PriceRuleVariable("booking_hours", 1)],
        EvaluationContext(booking_hours=6),
    )
    assert table.lookup("booking_hours") == 6


def test_keys_are_case_insensitive():
    table = resolve_variables(
        [PriceRuleVariable(" Guest_Count ", 1)],
        EvaluationContext(booking_hours=1, variable_overrides={"guest_count": 4}),
    )
    assert table.lookup("GUEST_COUNT") == 4
    assert "Guest_Count" in table
    assert len([k for k in table if k == "guest_count"]) == 1


def test_non_numeric_overrides_are_ignored():
    table = resolve_variables(
        [PriceRuleVariable("base", 10)],
        EvaluationContext(
            booking_hours=1,
            variable_overrides={"base": math.nan, "flag": True, "label": "x"},
        ),
    )
    assert table.lookup("base") == 10
    assert table.lookup("flag") is None
    assert table.lookup("label") is None


def test_unresolved_lookup_is_none():
    assert VariableTable({"a": 1}).lookup("b") is None


def test_calendar_variables_from_start_time():
    # 2024-01-15 is a Monday
    derived = derive_calendar_variables(datetime(2024, 1, 15, 19, 30, 15))
    assert derived == {"day_of_week": 0, "time_of_day": 19 * 3600 + 30 * 60 + 15}
    assert derive_calendar_variables(datetime(2024, 1, 21))["day_of_week"] == 6


def test_calendar_variables_use_own_timezone():
    start = datetime(2024, 1, 15, 1, 0, tzinfo=timezone(timedelta(hours=9)))
    assert derive_calendar_variables(start) == {"day_of_week": 0, "time_of_day": 3600}


def test_calendar_variables_absent_without_start_time():
    table = resolve_variables([], EvaluationContext(booking_hours=1))
    for key in CALENDAR_VARIABLES:
        assert table.lookup(key) is None


def test_override_wins_over_calendar_variable():
    table = resolve_variables(
        [],
        EvaluationContext(
            booking_hours=1,
            now=datetime(2024, 1, 15, 9, 0),
            variable_overrides={"day_of_week": 4},
        ),
    )
    assert table.lookup("day_of_week") == 4
    assert table.lookup("time_of_day") == 9 * 3600
