"""
Evaluator pipeline: stateless stages that narrow and order candidates.

Stages:
- FilterStage: keep candidates matching a predicate
- SortStage: oldest first, by creation time
- AgeStage: keep candidates older than a duration
- LimitStage: keep at most N candidates
- ExcludeStage: drop candidates already chosen earlier in the cycle
- ComposeStage: run stages in order, stopping as soon as one yields nothing

Sorting oldest first is the shared convention: AgeStage followed by
LimitStage on a sorted sequence yields "the oldest N eligible candidates".
"""

import logging
from typing import Iterable, List

from kicker.interfaces import Candidate, Evaluator
from kicker.predicates import Predicate

logger = logging.getLogger(__name__)


class FilterStage(Evaluator):
    """Keeps candidates for which the predicate holds, preserving order."""

    def __init__(self, predicate: Predicate):
        self.predicate = predicate

    def evaluate(self, candidates: List[Candidate], now: float) -> List[Candidate]:
        logger.debug(f"FilterStage called with {len(candidates)} candidates")
        out = [c for c in candidates if self.predicate(c)]
        logger.debug(f"FilterStage exiting with {len(out)} candidates")
        return out


class SortStage(Evaluator):
    """Stable sort by creation time, oldest first."""

    def evaluate(self, candidates: List[Candidate], now: float) -> List[Candidate]:
        logger.debug(f"SortStage called with {len(candidates)} candidates")
        return sorted(candidates, key=lambda c: c.created_at)


class AgeStage(Evaluator):
    """
    Keeps candidates strictly older than ``max_age_seconds`` at ``now``.

    Every candidate is checked; the stage does not stop at the first one that
    is too young, so it works on unsorted input as well.
    """

    def __init__(self, max_age_seconds: float):
        self.max_age_seconds = max_age_seconds

    def evaluate(self, candidates: List[Candidate], now: float) -> List[Candidate]:
        logger.debug(f"AgeStage called with {len(candidates)} candidates")
        out = [c for c in candidates if c.age(now) > self.max_age_seconds]
        logger.debug(f"AgeStage exiting with {len(out)} candidates")
        return out


class LimitStage(Evaluator):
    """Truncates to the first ``limit`` candidates."""

    def __init__(self, limit: int):
        if limit < 0:
            raise ValueError("limit must be non-negative")
        self.limit = limit

    def evaluate(self, candidates: List[Candidate], now: float) -> List[Candidate]:
        logger.debug(f"LimitStage called with {len(candidates)} candidates")
        return list(candidates[:self.limit])


class ExcludeStage(Evaluator):
    """Drops candidates whose (name, namespace) matches one in ``removed``."""

    def __init__(self, removed: Iterable[Candidate]):
        self._removed = frozenset(c.identity for c in removed)

    def evaluate(self, candidates: List[Candidate], now: float) -> List[Candidate]:
        if not self._removed:
            return list(candidates)
        out = [c for c in candidates if c.identity not in self._removed]
        logger.debug(
            f"ExcludeStage dropped {len(candidates) - len(out)} of {len(candidates)} candidates"
        )
        return out


class ComposeStage(Evaluator):
    """
    Threads candidates through each stage in order (a sieve).

    Once a stage returns an empty sequence, evaluation stops and later stages
    are never invoked. Later stages may hold throttle state, so this is part
    of the contract and not only a shortcut.
    """

    def __init__(self, *stages: Evaluator):
        self.stages = list(stages)

    def evaluate(self, candidates: List[Candidate], now: float) -> List[Candidate]:
        logger.debug(f"ComposeStage called with {len(candidates)} candidates")
        for stage in self.stages:
            candidates = stage.evaluate(candidates, now)
            if not candidates:
                logger.debug(f"ComposeStage short-circuited at {stage.name}")
                return []
        logger.debug(f"ComposeStage exiting with {len(candidates)} candidates")
        return candidates


def apply_filter(predicate: Predicate) -> FilterStage:
    return FilterStage(predicate)


def sort_by_age_ascending() -> SortStage:
    return SortStage()


def older_than(max_age_seconds: float) -> AgeStage:
    return AgeStage(max_age_seconds)


def limit(n: int) -> LimitStage:
    return LimitStage(n)


def compose(*stages: Evaluator) -> ComposeStage:
    return ComposeStage(*stages)


def exclude_by_identity(removed: Iterable[Candidate]) -> ExcludeStage:
    return ExcludeStage(removed)
