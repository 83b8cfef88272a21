"""Test the pricing formula language."""
import pytest
from core.pricing.formula import (
    FORMULA_MAX_LENGTH,
    FORMULA_MAX_NESTING_DEPTH,
    BinaryOp,
    FormulaError,
    Number,
    Variable,
    evaluate_formula,
    formula_variables,
    parse_formula,
    tokenize,
    validate_formula,
)
from core.pricing.variables import VariableTable


EMPTY = VariableTable()


@pytest.mark.parametrize("formula, expected", [
    ("42", 42),
    ("2 + 3", 5),
    ("10 - 4", 6),
    ("6 * 7", 42),
    ("20 / 4", 5),
    ("1.5 + 2.25", 3.75),
    (".5 * 4", 2),
    ("3 - 10", -7),
])
def test_basic_arithmetic(formula, expected):
    assert evaluate_formula(formula, EMPTY) == expected


def test_precedence_and_associativity():
    assert evaluate_formula("2 + 3 * 4", EMPTY) == 14
    assert evaluate_formula("20 - 10 / 2", EMPTY) == 15
    assert evaluate_formula("10 - 3 - 2", EMPTY) == 5
    assert evaluate_formula("16 / 4 / 2", EMPTY) == 2


def test_parentheses():
    assert evaluate_formula("(2 + 3) * 4", EMPTY) == 20
    assert evaluate_formula("((1 + 2) * (3 + 4))", EMPTY) == 21


def test_unary_operators():
    assert evaluate_formula("-5", EMPTY) == -5
    assert evaluate_formula("+5", EMPTY) == 5
    assert evaluate_formula("--5", EMPTY) == 5
    assert evaluate_formula("10 * -2", EMPTY) == -20


def test_variables_are_case_insensitive():
    table = VariableTable({"base": 100, "booking_hours": 3})
    assert evaluate_formula("BASE * Booking_Hours", table) == 300


def test_variable_names_with_digits_and_underscores():
    table = VariableTable({"_rate2": 4})
    assert evaluate_formula("_rate2 * 2", table) == 8


def test_unresolved_variable_is_none():
    assert evaluate_formula("base * 2", EMPTY) is None


def test_division_by_zero_is_none():
    assert evaluate_formula("10 / 0", EMPTY) is None
    assert evaluate_formula("10 / x", VariableTable({"x": 0})) is None


@pytest.mark.parametrize("formula", [
    "",
    "   ",
    "(1 + 2",
    "1 + 2)",
    "1 +",
    "* 2",
    "2 $ 3",
    "1 2",
    ".",
])
def test_malformed_formula_is_none(formula):
    assert evaluate_formula(formula, EMPTY) is None


def test_negative_zero_is_normalized():
    result = evaluate_formula("-0", EMPTY)
    assert result == 0
    assert str(result) == "0.0"


def test_huge_literal_is_none():
    assert evaluate_formula("9" * 400, EMPTY) is None


def test_formula_length_limit():
    long_formula = "1 + " + "1 + " * (FORMULA_MAX_LENGTH // 4) + "1"
    with pytest.raises(FormulaError, match="maximum length"):
        parse_formula(long_formula)
    assert evaluate_formula(long_formula, EMPTY) is None


def test_nesting_depth_limit():
    too_deep = "(" * (FORMULA_MAX_NESTING_DEPTH + 1) + "1" + ")" * (FORMULA_MAX_NESTING_DEPTH + 1)
    with pytest.raises(FormulaError, match="nesting depth"):
        parse_formula(too_deep)

    at_limit = "(" * FORMULA_MAX_NESTING_DEPTH + "1" + ")" * FORMULA_MAX_NESTING_DEPTH
    assert evaluate_formula(at_limit, EMPTY) == 1


def test_unary_chain_counts_toward_depth():
    assert evaluate_formula("-" * (FORMULA_MAX_NESTING_DEPTH + 1) + "1", EMPTY) is None


def test_parse_builds_left_associative_tree():
    node = parse_formula("a - b - 1")
    assert node == BinaryOp("-", BinaryOp("-", Variable("a"), Variable("b")), Number(1.0))


def test_tokenize_reports_position():
    with pytest.raises(FormulaError) as exc:
        tokenize("1 + #")
    assert exc.value.position == 4


def test_formula_variables_in_order():
    assert formula_variables("Base * booking_hours + base / guest_count") == (
        "base", "booking_hours", "guest_count",
    )
    assert formula_variables("100") == ()
    assert formula_variables("(") == ()


def test_validate_formula():
    assert validate_formula("base * booking_days", known_keys=["Base"]) == []
    assert validate_formula("day_of_week + time_of_day", known_keys=[]) == []
    assert validate_formula("base * mystery", known_keys=["base"]) == ['Unknown variable "mystery".']
    assert validate_formula("base * mystery") == []
    errors = validate_formula("(1 + 2")
    assert len(errors) == 1
    assert "closing parenthesis" in errors[0]


def test_deterministic():
    table = VariableTable({"x": 3})
    results = {evaluate_formula("x / 7 + 0.1", table) for _ in range(5)}
    assert len(results) == 1
