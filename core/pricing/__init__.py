"""
Coworking Core Pricing: Dynamic Pricing-Rule Engine.

Evaluates host-authored pricing rules against a booking context:
- Definition model: immutable rule, operand and result types
- Variable resolution: defaults, derived durations and calendar, overrides
- Conditions: AND-ed numeric comparisons
- Formulas: small arithmetic expression language
- Orchestrator: branch selection and price quote
"""
from core.pricing.conditions import (
    ConditionResult,
    ConditionSetResult,
    evaluate_condition,
    evaluate_conditions,
    explain_conditions,
)
from core.pricing.definition import (
    Branch,
    Comparator,
    Condition,
    EvaluationContext,
    NumberLiteral,
    Operand,
    PriceRuleDefinition,
    PriceRuleEvaluationResult,
    PriceRuleVariable,
    VariableRef,
)
from core.pricing.evaluator import evaluate_price_rule
from core.pricing.formula import (
    FORMULA_MAX_LENGTH,
    FORMULA_MAX_NESTING_DEPTH,
    FormulaError,
    evaluate_formula,
    formula_variables,
    parse_formula,
    validate_formula,
)
from core.pricing.starting_price import compute_starting_price
from core.pricing.variables import (
    CALENDAR_VARIABLES,
    DURATION_UNITS,
    VariableTable,
    derive_calendar_variables,
    derive_duration_variables,
    resolve_variables,
)

__all__ = [
    # Definition
    "Branch",
    "Comparator",
    "Condition",
    "EvaluationContext",
    "NumberLiteral",
    "Operand",
    "PriceRuleDefinition",
    "PriceRuleEvaluationResult",
    "PriceRuleVariable",
    "VariableRef",
    # Variables
    "CALENDAR_VARIABLES",
    "DURATION_UNITS",
    "VariableTable",
    "derive_calendar_variables",
    "derive_duration_variables",
    "resolve_variables",
    # Conditions
    "ConditionResult",
    "ConditionSetResult",
    "evaluate_condition",
    "evaluate_conditions",
    "explain_conditions",
    # Formulas
    "FORMULA_MAX_LENGTH",
    "FORMULA_MAX_NESTING_DEPTH",
    "FormulaError",
    "evaluate_formula",
    "formula_variables",
    "parse_formula",
    "validate_formula",
    # Orchestration
    "evaluate_price_rule",
    "compute_starting_price",
]
