"""Booking quotes built on the pricing-rule engine.

A rule prices one guest unless its selected formula already references
``guest_count``; in that case the formula's result is the total.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional

from core.pricing import (
    ConditionSetResult,
    EvaluationContext,
    PriceRuleDefinition,
    PriceRuleEvaluationResult,
    compute_starting_price,
    evaluate_price_rule,
    explain_conditions,
    resolve_variables,
)
from verticals.coworking.config import config
from verticals.coworking.models.schemas import AreaPricing

logger = logging.getLogger(__name__)

GUEST_COUNT_KEY = "guest_count"


@dataclass(frozen=True)
class BookingQuote:
    price: Optional[float]
    unit_price: Optional[float]
    guest_multiplier_applied: bool
    evaluation: PriceRuleEvaluationResult
    conditions: ConditionSetResult


def quote_booking(
    definition: PriceRuleDefinition,
    booking_hours: float,
    guest_count: int = 1,
    variable_overrides: Optional[Mapping[str, float]] = None,
    now: Optional[datetime] = None,
) -> BookingQuote:
    """Price a booking of ``booking_hours`` for ``guest_count`` guests.

    ``now`` is the booking start and feeds the calendar variables. A total
    that overflows to a non-finite number is reported as unavailable.
    """
    overrides = dict(variable_overrides or {})
    overrides[GUEST_COUNT_KEY] = guest_count
    context = EvaluationContext(
        booking_hours=booking_hours,
        variable_overrides=overrides,
        now=now,
    )

    evaluation = evaluate_price_rule(definition, context)
    conditions = explain_conditions(
        definition.conditions, resolve_variables(definition.variables, context)
    )

    handles_guests = GUEST_COUNT_KEY in evaluation.used_variables
    multiplier = 1 if handles_guests else guest_count
    unit_price = evaluation.price
    price = unit_price * multiplier if unit_price is not None else None
    if price is not None and not math.isfinite(price):
        logger.warning(
            "Quote total overflowed: unit_price=%s guests=%s", unit_price, guest_count
        )
        price = None

    return BookingQuote(
        price=price,
        unit_price=unit_price,
        guest_multiplier_applied=not handles_guests,
        evaluation=evaluation,
        conditions=conditions,
    )


def starting_price_for_areas(
    areas: Iterable[AreaPricing],
    booking_hours: float = config.pricing.starting_price_booking_hours,
) -> Optional[float]:
    """Lowest price among a space's areas with an active pricing rule."""
    definitions = []
    for area in areas:
        rule = area.price_rule
        if rule is None or rule.definition is None:
            continue
        if not rule.is_active:
            logger.debug("Skipping inactive price rule on area %r", area.name)
            continue
        definitions.append(rule.definition.to_definition())

    return compute_starting_price(definitions, booking_hours=booking_hours)
