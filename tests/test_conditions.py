"""Test condition evaluation."""
import math
import pytest
from core.pricing import (
    Comparator,
    Condition,
    NumberLiteral,
    VariableRef,
    evaluate_condition,
    evaluate_conditions,
    explain_conditions,
)
from core.pricing.variables import VariableTable


TABLE = VariableTable({"guest_count": 5, "booking_weeks": 1 / 7})


def _cond(left, op, right, negated=False):
    return Condition(left=left, operator=op, right=right, negated=negated)


@pytest.mark.parametrize("op, right, expected", [
    ("=", 5, True),
    ("!=", 5, False),
    ("<", 6, True),
    ("<=", 5, True),
    (">", 5, False),
    (">=", 5, True),
])
def test_operators(op, right, expected):
    condition = _cond(VariableRef("guest_count"), op, NumberLiteral(right))
    assert evaluate_condition(condition, TABLE) is expected


def test_operator_strings_become_comparators():
    condition = _cond(NumberLiteral(1), ">=", NumberLiteral(1))
    assert condition.operator is Comparator.GE


def test_unresolved_operand_is_false():
    condition = _cond(VariableRef("missing"), Comparator.NE, NumberLiteral(1))
    assert evaluate_condition(condition, TABLE) is False


def test_unresolved_operand_is_false_even_when_negated():
    condition = _cond(VariableRef("missing"), Comparator.EQ, NumberLiteral(1), negated=True)
    assert evaluate_condition(condition, TABLE) is False


def test_negation_inverts_result():
    condition = _cond(VariableRef("guest_count"), Comparator.GT, NumberLiteral(10), negated=True)
    assert evaluate_condition(condition, TABLE) is True


def test_equality_is_exact():
    # 1/7 is not exactly representable; no epsilon is applied
    condition = _cond(VariableRef("booking_weeks"), Comparator.EQ, NumberLiteral(0.142857))
    assert evaluate_condition(condition, TABLE) is False


def test_case_insensitive_variable_operand():
    condition = _cond(VariableRef("Guest_Count"), Comparator.EQ, NumberLiteral(5))
    assert evaluate_condition(condition, TABLE) is True


def test_and_semantics():
    passing = _cond(VariableRef("guest_count"), Comparator.GE, NumberLiteral(1))
    failing = _cond(VariableRef("guest_count"), Comparator.GT, NumberLiteral(10))
    assert evaluate_conditions([passing, passing], TABLE) is True
    assert evaluate_conditions([passing, failing], TABLE) is False
    assert evaluate_conditions([], TABLE) is True


def test_unknown_operand_shape_raises():
    condition = _cond("guest_count", Comparator.EQ, NumberLiteral(5))
    with pytest.raises(TypeError):
        evaluate_condition(condition, TABLE)


def test_explain_conditions():
    passing = _cond(VariableRef("guest_count"), Comparator.GE, NumberLiteral(1))
    missing = _cond(VariableRef("area_max_capacity"), Comparator.GT, NumberLiteral(10))
    result = explain_conditions([passing, missing], TABLE)

    assert not result.all_passed
    assert len(result.results) == 2
    assert result.failed == [result.results[1]]
    assert result.results[0].left_value == 5
    assert "unresolved area_max_capacity" in result.results[1].message


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_literal_is_unsatisfiable(value):
    condition = _cond(NumberLiteral(value), Comparator.NE, NumberLiteral(1))
    assert evaluate_condition(condition, TABLE) is False
    negated = _cond(NumberLiteral(value), Comparator.EQ, NumberLiteral(1), negated=True)
    assert evaluate_condition(negated, TABLE) is False
