"""Pricing rule orchestrator.

``evaluate_price_rule`` is the single public entry point: resolve variables,
check conditions, pick a branch, evaluate its formula. Pure and synchronous;
every call is independent.

Branch selection::

    no conditions            -> unconditional (formula)
    all conditions hold      -> then          (formula)
    otherwise, else formula  -> else          (else_formula, if not blank)
    otherwise                -> no-match      (price None)
"""

import logging
from typing import Optional

from core.pricing.conditions import evaluate_conditions
from core.pricing.definition import (
    Branch,
    EvaluationContext,
    PriceRuleDefinition,
    PriceRuleEvaluationResult,
)
from core.pricing.formula import evaluate_formula, formula_variables
from core.pricing.variables import VariableTable, resolve_variables

logger = logging.getLogger(__name__)


def _apply(
    expression: Optional[str],
    table: VariableTable,
    branch: Branch,
    conditions_satisfied: bool,
) -> PriceRuleEvaluationResult:
    expression = (expression or "").strip() or None
    if expression is None:
        return PriceRuleEvaluationResult(
            price=None,
            branch=branch,
            conditions_satisfied=conditions_satisfied,
        )
    return PriceRuleEvaluationResult(
        price=evaluate_formula(expression, table),
        branch=branch,
        applied_expression=expression,
        conditions_satisfied=conditions_satisfied,
        used_variables=formula_variables(expression),
    )


def evaluate_price_rule(
    definition: PriceRuleDefinition,
    context: EvaluationContext,
) -> PriceRuleEvaluationResult:
    """Evaluate a pricing rule for one booking context.

    Example::

        result = evaluate_price_rule(definition, EvaluationContext(booking_hours=6))
        if result.price is None:
            show_pricing_unavailable()
    """
    table = resolve_variables(definition.variables, context)

    if not definition.conditions:
        result = _apply(definition.formula, table, Branch.UNCONDITIONAL, True)
    elif evaluate_conditions(definition.conditions, table):
        result = _apply(definition.formula, table, Branch.THEN, True)
    elif (definition.else_formula or "").strip():
        result = _apply(definition.else_formula, table, Branch.ELSE, False)
    else:
        result = PriceRuleEvaluationResult(price=None, branch=Branch.NO_MATCH)

    logger.debug(
        "Price rule evaluated: branch=%s price=%s hours=%s",
        result.branch.value, result.price, context.booking_hours,
    )
    return result
