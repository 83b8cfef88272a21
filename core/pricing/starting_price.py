"""Lowest "from" price across a space's areas."""

from typing import Iterable, Optional

from core.pricing.definition import EvaluationContext, PriceRuleDefinition
from core.pricing.evaluator import evaluate_price_rule


def compute_starting_price(
    definitions: Iterable[Optional[PriceRuleDefinition]],
    booking_hours: float,
) -> Optional[float]:
    """Minimum price over all definitions for a ``booking_hours`` booking.

    Missing definitions, uncomputable prices and negative prices are skipped.
    Returns ``None`` when nothing yields a usable price.
    """
    context = EvaluationContext(booking_hours=booking_hours)
    prices = []
    for definition in definitions:
        if definition is None:
            continue
        price = evaluate_price_rule(definition, context).price
        if price is None or price < 0:
            continue
        prices.append(price)

    return min(prices) if prices else None
