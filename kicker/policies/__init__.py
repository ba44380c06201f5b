"""
Kick policies: Different strategies for selecting which candidates to kick.

- immediate: Kick everything past max age (up to the limit), then cool down
- spread: Pace kicks at max_age / population, then cool down
"""

from kicker.config import STRATEGY_IMMEDIATE, STRATEGY_SPREAD
from kicker.registry import StrategyRegistry

from .base import core_pipeline, target_predicate
from .immediate import immediate
from .spread import spread


def register_builtin_policies(registry: StrategyRegistry) -> StrategyRegistry:
    """Register the built-in policies under their configuration names."""
    registry.register(STRATEGY_IMMEDIATE, immediate)
    registry.register(STRATEGY_SPREAD, spread)
    return registry


__all__ = [
    "core_pipeline",
    "target_predicate",
    "immediate",
    "spread",
    "register_builtin_policies",
]
