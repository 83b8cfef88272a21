"""Variable resolution for pricing rules.

Several sources are merged into one flat, case-insensitive lookup table per
evaluation call. Later layers win:

1. Rule-declared defaults
2. Booking-duration variables derived from ``booking_hours``
3. Calendar variables derived from ``now`` (only when a start time is given)
4. Runtime overrides (``guest_count``, ``area_max_capacity``, ...)

Keys that end up in none of the layers are *unresolved*: ``lookup`` returns
``None`` rather than zero so that callers never price off a missing value.
"""

import logging
import math
from datetime import datetime
from numbers import Real
from typing import Iterable, Iterator, Mapping, Optional

from core.pricing.definition import EvaluationContext, PriceRuleVariable

logger = logging.getLogger(__name__)

# Hours per unit.
DURATION_UNITS: dict[str, int] = {
    "booking_hours": 1,
    "booking_days": 24,
    "booking_weeks": 168,
    "booking_months": 720,
}

# Present only when the context carries a start time.
CALENDAR_VARIABLES = ("day_of_week", "time_of_day")


def normalize_key(key: str) -> str:
    return key.strip().lower()


def as_finite_number(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def derive_duration_variables(booking_hours: float) -> dict[str, float]:
    """Derive every duration unit from the single ``booking_hours`` input.

    A non-finite input is treated as zero hours.
    """
    hours = as_finite_number(booking_hours)
    if hours is None:
        hours = 0.0
    return {key: hours / multiplier for key, multiplier in DURATION_UNITS.items()}


def derive_calendar_variables(now: Optional[datetime]) -> dict[str, float]:
    """Day of week (Monday=0) and seconds into the day of ``now``.

    Uses ``now``'s own wall-clock fields; an aware datetime is read in its
    own timezone. Returns nothing when ``now`` is ``None``.
    """
    if now is None:
        return {}
    return {
        CALENDAR_VARIABLES[0]: float(now.weekday()),
        CALENDAR_VARIABLES[1]: float(now.hour * 3600 + now.minute * 60 + now.second),
    }


class VariableTable(Mapping[str, float]):
    """Read-only mapping of normalized variable key to value."""

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, float]] = None):
        self._values = {normalize_key(k): float(v) for k, v in (values or {}).items()}

    def lookup(self, key: str) -> Optional[float]:
        """Resolve ``key`` case-insensitively; ``None`` when unresolved."""
        return self._values.get(normalize_key(key))

    def __getitem__(self, key: str) -> float:
        return self._values[normalize_key(key)]

    def __contains__(self, key) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableTable({self._values!r})"


def resolve_variables(
    variables: Iterable[PriceRuleVariable],
    context: EvaluationContext,
) -> VariableTable:
    """Build the resolved variable table for one evaluation call."""
    values: dict[str, float] = {}

    for variable in variables:
        default = as_finite_number(variable.default_value)
        if default is None:
            logger.debug("Skipping non-numeric default for %r", variable.key)
            continue
        values[normalize_key(variable.key)] = default

    values.update(derive_duration_variables(context.booking_hours))
    values.update(derive_calendar_variables(context.now))

    for key, raw in (context.variable_overrides or {}).items():
        value = as_finite_number(raw)
        if value is None:
            logger.debug("Ignoring non-numeric override %r=%r", key, raw)
            continue
        values[normalize_key(key)] = value

    return VariableTable(values)
