"""
Immediate Policy: Kick every candidate past its max age.

Kicks any targeted, running candidate older than max age, oldest first, up
to the per-cycle limit, regardless of how many others are due. This is a
fairly drastic approach and should be used with caution on large groups.

Strategy:
1. Filter to the Criteria's name prefix, namespace and running candidates
2. Sort oldest first
3. Keep those older than max age, then the first ``limit`` of them
4. After any kick, wait ``cool_down`` seconds before kicking again
"""

import logging

from kicker.config import Criteria
from kicker.interfaces import Evaluator
from kicker.policies.base import core_pipeline
from kicker.throttles import cool_down

logger = logging.getLogger(__name__)


def immediate(criteria: Criteria) -> Evaluator:
    """Build the immediate evaluator for ``criteria``."""
    logger.info(
        f"Immediate policy for '{criteria.name}' in '{criteria.namespace}' "
        f"(max_age={criteria.max_age}s, limit={criteria.limit}, cool_down={criteria.cool_down}s)"
    )
    return cool_down(criteria.cool_down, core_pipeline(criteria))
