"""Condition evaluation for pricing rules.

Conditions are pure functions of (condition, resolved table). An operand
that cannot be resolved, or a literal that is not a finite number, makes its
condition unsatisfiable, never an error.
Equality uses exact float comparison with no tolerance.
"""

import operator
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from core.pricing.definition import (
    Comparator,
    Condition,
    NumberLiteral,
    Operand,
    VariableRef,
)
from core.pricing.variables import VariableTable, as_finite_number

_COMPARE: dict[Comparator, Callable[[float, float], bool]] = {
    Comparator.EQ: operator.eq,
    Comparator.NE: operator.ne,
    Comparator.LT: operator.lt,
    Comparator.LE: operator.le,
    Comparator.GT: operator.gt,
    Comparator.GE: operator.ge,
}


def resolve_operand(operand: Operand, table: VariableTable) -> Optional[float]:
    if isinstance(operand, NumberLiteral):
        return as_finite_number(operand.value)
    if isinstance(operand, VariableRef):
        return table.lookup(operand.key)
    raise TypeError(f"Unsupported operand: {operand!r}")


def _compare(condition: Condition, left: Optional[float], right: Optional[float]) -> bool:
    if left is None or right is None:
        return False
    matches = _COMPARE[condition.operator](left, right)
    return not matches if condition.negated else matches


def evaluate_condition(condition: Condition, table: VariableTable) -> bool:
    left = resolve_operand(condition.left, table)
    right = resolve_operand(condition.right, table)
    return _compare(condition, left, right)


def evaluate_conditions(conditions: Sequence[Condition], table: VariableTable) -> bool:
    """AND over all conditions. An empty sequence holds."""
    return all(evaluate_condition(c, table) for c in conditions)


# ---------------------------------------------------------------------------
# Explanations
# ---------------------------------------------------------------------------

def _describe(operand: Operand) -> str:
    if isinstance(operand, NumberLiteral):
        return f"{operand.value:g}"
    if isinstance(operand, VariableRef):
        return operand.key
    raise TypeError(f"Unsupported operand: {operand!r}")


@dataclass
class ConditionResult:
    """Outcome of a single condition, with the values it compared."""

    passed: bool
    condition: Condition
    left_value: Optional[float]
    right_value: Optional[float]
    message: str


@dataclass
class ConditionSetResult:
    all_passed: bool
    results: list[ConditionResult]
    failed: list[ConditionResult] = field(default_factory=list)

    def __post_init__(self):
        self.failed = [r for r in self.results if not r.passed]
        self.all_passed = len(self.failed) == 0


def explain_condition(condition: Condition, table: VariableTable) -> ConditionResult:
    left = resolve_operand(condition.left, table)
    right = resolve_operand(condition.right, table)
    passed = _compare(condition, left, right)

    expression = (
        f"{_describe(condition.left)} {condition.operator.value} {_describe(condition.right)}"
    )
    if condition.negated:
        expression = f"not ({expression})"

    unresolved = [
        _describe(operand)
        for operand, value in ((condition.left, left), (condition.right, right))
        if value is None
    ]
    if unresolved:
        message = f"{expression}: unresolved {', '.join(unresolved)}"
    else:
        message = f"{expression}: {left:g} vs {right:g} -> {'true' if passed else 'false'}"

    return ConditionResult(
        passed=passed,
        condition=condition,
        left_value=left,
        right_value=right,
        message=message,
    )


def explain_conditions(conditions: Sequence[Condition], table: VariableTable) -> ConditionSetResult:
    """Evaluate every condition (no short-circuit) and report each outcome."""
    results = [explain_condition(c, table) for c in conditions]
    return ConditionSetResult(
        all_passed=all(r.passed for r in results),
        results=results,
    )
