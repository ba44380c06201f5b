"""
Spread Policy: Spread kicks evenly across max age.

When many candidates age out together (e.g. after a full redeploy), kicking
all of them at once causes a burst of rescheduling. This policy paces kicks
so that roughly one happens per ``max_age / population`` seconds.

Strategy:
1. Same core as Immediate: filter, sort oldest first, older than max age, limit
2. After a kick, wait ``max_age / population`` before the next one. The wait
   is skipped if the population has grown since the last kick.
3. On top of that, a fixed ``cool_down`` after any kick prevents scheduler
   thrash however large the population is.

Keep in mind that candidates closer together in age than the pacing interval
may live somewhat past max age.
"""

import logging

from kicker.config import Criteria
from kicker.interfaces import Evaluator
from kicker.policies.base import core_pipeline
from kicker.throttles import cool_down, spread as spread_throttle

logger = logging.getLogger(__name__)


def spread(criteria: Criteria) -> Evaluator:
    """Build the spread evaluator for ``criteria``."""
    logger.info(
        f"Spread policy for '{criteria.name}' in '{criteria.namespace}' "
        f"(max_age={criteria.max_age}s, limit={criteria.limit}, cool_down={criteria.cool_down}s)"
    )
    paced = spread_throttle(criteria.max_age, core_pipeline(criteria))
    return cool_down(criteria.cool_down, paced)
