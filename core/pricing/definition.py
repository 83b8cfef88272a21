"""Pricing rule definition model.

Immutable value objects describing a host-authored pricing rule and the
per-call booking context it is evaluated against. No behavior lives here
beyond normalizing sequences into tuples; evaluation is in sibling modules.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Comparator(str, Enum):
    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


class Branch(str, Enum):
    """Which formula, if any, an evaluation selected."""

    THEN = "then"
    ELSE = "else"
    UNCONDITIONAL = "unconditional"
    NO_MATCH = "no-match"


# ---------------------------------------------------------------------------
# Operands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NumberLiteral:
    value: float


@dataclass(frozen=True)
class VariableRef:
    key: str


Operand = Union[NumberLiteral, VariableRef]


# ---------------------------------------------------------------------------
# Rule definition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PriceRuleVariable:
    """A declared variable with the value used when nothing overrides it."""

    key: str
    default_value: float = 0.0


@dataclass(frozen=True)
class Condition:
    """One comparison: ``left <operator> right``, optionally inverted."""

    left: Operand
    operator: Comparator
    right: Operand
    negated: bool = False

    def __post_init__(self):
        if not isinstance(self.operator, Comparator):
            object.__setattr__(self, "operator", Comparator(self.operator))


@dataclass(frozen=True)
class PriceRuleDefinition:
    """The persisted rule: variables, AND-ed conditions, then/else formulas.

    Usage::

        definition = PriceRuleDefinition(
            variables=[PriceRuleVariable("base", 100)],
            conditions=[
                Condition(VariableRef("booking_hours"), Comparator.GT, NumberLiteral(4)),
            ],
            formula="base * booking_hours",
            else_formula="base",
        )
    """

    variables: tuple[PriceRuleVariable, ...] = ()
    conditions: tuple[Condition, ...] = ()
    formula: str = ""
    else_formula: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "variables", tuple(self.variables))
        object.__setattr__(self, "conditions", tuple(self.conditions))


# ---------------------------------------------------------------------------
# Runtime context and result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EvaluationContext:
    """Per-call booking parameters. Never persisted.

    ``now`` is the booking start; when given, calendar variables
    (``day_of_week``, ``time_of_day``) are derived from its wall-clock time.
    """

    booking_hours: float = 0.0
    variable_overrides: Mapping[str, float] = field(default_factory=dict)
    now: Optional[datetime] = None


@dataclass(frozen=True)
class PriceRuleEvaluationResult:
    """Outcome of one rule evaluation.

    ``price`` is ``None`` whenever no price could be computed; callers must
    render that as "pricing unavailable", never as zero.
    """

    price: Optional[float]
    branch: Branch
    applied_expression: Optional[str] = None
    conditions_satisfied: bool = False
    used_variables: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "price": self.price,
            "branch": self.branch.value,
            "applied_expression": self.applied_expression,
            "conditions_satisfied": self.conditions_satisfied,
            "used_variables": list(self.used_variables),
        }
