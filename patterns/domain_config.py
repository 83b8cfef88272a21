"""Dataclass-based domain configuration pattern.

The coworking vertical defines its pricing limits and service settings as
frozen dataclasses. This gives you:
- Type safety (IDE autocompletion, mypy checking)
- Default values (sensible out-of-the-box)
- Immutability (frozen=True prevents accidental mutation)
- Easy overrides (from env vars)
"""

import os
from dataclasses import dataclass, field, replace


# ---------------------------------------------------------------------------
# Nested config sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PricingConfig:
    """Bounds applied to authored rules and evaluation requests."""

    max_conditions: int = 25
    min_booking_hours: float = 0.5
    max_booking_hours: float = 8760.0  # one year
    max_guest_count: int = 999
    starting_price_booking_hours: float = 1.0


# ---------------------------------------------------------------------------
# Top-level domain config
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CoworkingConfig:
    """Complete configuration for the coworking vertical.

    Usage::

        config = CoworkingConfig.from_env()
        if len(definition.conditions) > config.pricing.max_conditions:
            reject(definition)
    """

    pricing: PricingConfig = field(default_factory=PricingConfig)
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("http://localhost:3000", "http://localhost:3001")

    @classmethod
    def default(cls) -> "CoworkingConfig":
        """Create config with all defaults."""
        return cls()

    @classmethod
    def from_env(cls, prefix: str = "COWORKING_") -> "CoworkingConfig":
        """Create config from environment variables.

        Example: COWORKING_MAX_CONDITIONS=10 COWORKING_LOG_LEVEL=DEBUG
        """
        overrides = {}
        log_level = os.getenv(f"{prefix}LOG_LEVEL")
        if log_level:
            overrides["log_level"] = log_level.upper()

        origins = os.getenv(f"{prefix}CORS_ORIGINS")
        if origins:
            overrides["cors_origins"] = tuple(o.strip() for o in origins.split(",") if o.strip())

        pricing = PricingConfig()
        max_conditions = os.getenv(f"{prefix}MAX_CONDITIONS")
        if max_conditions:
            pricing = replace(pricing, max_conditions=int(max_conditions))

        return cls(pricing=pricing, **overrides)
