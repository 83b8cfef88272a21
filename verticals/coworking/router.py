"""Coworking pricing-rule API router.

Partner-facing endpoints around the pricing engine:
- Evaluate a rule for a booking (with guest multiplier)
- Validate a rule's formulas while it is being authored
- Starting ("from") price across a space's areas

Request bodies are validated by pydantic; FastAPI answers 422 on bad input.
"""

import logging
from datetime import datetime

from fastapi import APIRouter

from core.pricing import validate_formula
from verticals.coworking.models.schemas import (
    ConditionOutcome,
    EvaluateRequest,
    EvaluateResponse,
    StartingPriceRequest,
    StartingPriceResponse,
    ValidateRequest,
    ValidateResponse,
)
from verticals.coworking.quote import (
    GUEST_COUNT_KEY,
    quote_booking,
    starting_price_for_areas,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Pricing Rule Endpoints
# ============================================================================

@router.post("/pricing-rules/evaluate")
async def evaluate_pricing_rule(request: EvaluateRequest):
    """Evaluate a pricing rule for a booking duration and guest count.

    The booking start (``startAt``) defaults to the server's current local time.
    """
    quote = quote_booking(
        request.definition.to_definition(),
        booking_hours=request.booking_hours,
        guest_count=request.guest_count,
        variable_overrides=request.variable_overrides,
        now=request.start_at or datetime.now().astimezone(),
    )
    evaluation = quote.evaluation
    logger.info(
        "Evaluated pricing rule: branch=%s price=%s",
        evaluation.branch.value, quote.price,
    )

    response = EvaluateResponse(
        price=quote.price,
        unit_price=quote.unit_price,
        branch=evaluation.branch.value,
        applied_expression=evaluation.applied_expression,
        conditions_satisfied=evaluation.conditions_satisfied,
        used_variables=list(evaluation.used_variables),
        guest_multiplier_applied=quote.guest_multiplier_applied,
        conditions=[
            ConditionOutcome(passed=r.passed, message=r.message)
            for r in quote.conditions.results
        ],
    )
    return {"data": response}


@router.post("/pricing-rules/validate", response_model=ValidateResponse)
async def validate_pricing_rule(request: ValidateRequest):
    """Check that the rule's formulas parse and reference known variables."""
    definition = request.definition
    known_keys = [v.key for v in definition.variables] + [GUEST_COUNT_KEY]

    errors = [f"formula: {e}" for e in validate_formula(definition.formula, known_keys)]
    if definition.else_formula is not None:
        errors.extend(
            f"elseFormula: {e}"
            for e in validate_formula(definition.else_formula, known_keys)
        )

    return ValidateResponse(valid=not errors, errors=errors)


# ============================================================================
# Space Endpoints
# ============================================================================

@router.post("/spaces/starting-price", response_model=StartingPriceResponse)
async def space_starting_price(request: StartingPriceRequest):
    """Lowest one-hour price across the given areas."""
    return StartingPriceResponse(starting_price=starting_price_for_areas(request.areas))
