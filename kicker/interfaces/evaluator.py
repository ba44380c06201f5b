"""
Evaluator: Pluggable stage for selecting which candidates to kick.

Every piece of a kick policy is an Evaluator:
- Filters: keep candidates matching a predicate
- Orderings: sort candidates (oldest first)
- Cutoffs: age thresholds and per-cycle limits
- Throttles: suppress output based on timers carried between cycles

Stages compose into a pipeline, and a finished pipeline is itself an
Evaluator. This lets new policies be assembled without core changes.
"""

from abc import ABC, abstractmethod
from typing import List

from .candidate import Candidate


class Evaluator(ABC):
    """
    Transformation from a candidate sequence to a (possibly smaller) one.

    Most evaluators are pure. Throttle evaluators keep timer state between
    calls and must be invoked at most once per control-loop cycle.
    Instances are not safe for concurrent use.
    """

    @abstractmethod
    def evaluate(self, candidates: List[Candidate], now: float) -> List[Candidate]:
        """
        Select a subsequence of candidates.

        Args:
            candidates: Candidates to evaluate, in order
            now: Current Unix timestamp, injected by the caller

        Returns:
            Selected candidates, in their relative input order unless the
            evaluator's purpose is to reorder them

        Constraints:
            - Must not mutate the input list
            - Must not return candidates absent from the input

        Example (keep running candidates):
            return [c for c in candidates if c.phase == CandidatePhase.RUNNING]
        """
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__
