"""
Strategy: one Criteria bound to the stateful Evaluator built for it.
"""

import logging
import time
from typing import List, Optional, Sequence

from kicker.config import Criteria
from kicker.interfaces import Candidate, Evaluator
from kicker.registry import StrategyRegistry

logger = logging.getLogger(__name__)


class Strategy:
    """
    Statefully evaluates candidates to kick for a single Criteria.

    The evaluator's throttle state belongs to this instance alone. Create one
    Strategy per Criteria at startup and keep it for the process lifetime.
    """

    def __init__(self, criteria: Criteria, evaluator: Evaluator):
        self._criteria = criteria
        self._evaluator = evaluator

    @property
    def criteria(self) -> Criteria:
        """The Criteria used to create this Strategy."""
        return self._criteria

    def evaluate(self, candidates: List[Candidate], now: Optional[float] = None) -> List[Candidate]:
        """Run the evaluation defined by this Strategy's Criteria."""
        if now is None:
            now = time.time()
        logger.debug(
            f"Evaluate '{self._criteria.name}' ({self._criteria.strategy}) "
            f"called with {len(candidates)} candidates"
        )
        return self._evaluator.evaluate(candidates, now)

    def __repr__(self) -> str:
        return (
            f"Strategy(name={self._criteria.name!r}, namespace={self._criteria.namespace!r}, "
            f"strategy={self._criteria.strategy!r})"
        )


def new_strategy(criteria: Criteria, registry: StrategyRegistry) -> Strategy:
    """
    Build a Strategy for ``criteria``.

    Raises:
        UnknownStrategyError: If ``criteria.strategy`` is not registered. No
            evaluator is constructed in that case.
    """
    constructor = registry.lookup(criteria.strategy)
    return Strategy(criteria, constructor(criteria))


def new_group(criteria_list: Sequence[Criteria], registry: StrategyRegistry) -> List[Strategy]:
    """Build one Strategy per Criteria, in order. Fails on the first error."""
    strategies = [new_strategy(criteria, registry) for criteria in criteria_list]
    logger.info(f"Built {len(strategies)} strategies: {strategies}")
    return strategies
