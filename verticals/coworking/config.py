"""Coworking vertical configuration.

Re-exports the CoworkingConfig from the patterns module, read once from
the environment at import time.
"""

from patterns.domain_config import CoworkingConfig, PricingConfig

# Process-wide configuration instance
config = CoworkingConfig.from_env()

__all__ = ["CoworkingConfig", "PricingConfig", "config"]
