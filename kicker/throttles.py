"""
Temporal throttles: give a policy memory across control-loop cycles.

- CoolDown: fixed dead time after any kick.
- Spread: adaptive dead time of ``max_age / population`` after a kick, so
  that roughly one candidate turns over per interval instead of every
  candidate that ages out at once. A population larger than the one seen at
  the last kick lifts the wait early so the policy can catch up.

Each throttle keeps its timers in a small immutable state record. The
transition functions are pure: given the state, the current time, the input
and the inner evaluator, they return the new state and the selection. The
stage classes own one state record each and swap it after every call.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from kicker.interfaces import Candidate, Evaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoolDownState:
    """Timers for CoolDown. ``next_eligible`` of None never blocks."""
    next_eligible: Optional[float] = None

    def is_cooling(self, now: float) -> bool:
        return self.next_eligible is not None and now < self.next_eligible


@dataclass(frozen=True)
class SpreadState:
    """Timers for Spread. ``last_count`` of -1 means it has never fired."""
    next_eligible: Optional[float] = None
    last_count: int = -1

    def is_waiting(self, now: float) -> bool:
        return self.next_eligible is not None and now < self.next_eligible


def cool_down_step(
    state: CoolDownState,
    duration_seconds: float,
    inner: Evaluator,
    candidates: List[Candidate],
    now: float,
) -> Tuple[CoolDownState, List[Candidate]]:
    """
    Run ``inner`` unless cooling down; start a cool down after any selection.

    While cooling down ``inner`` is not invoked at all, so throttle state
    nested inside it is left untouched.
    """
    if state.is_cooling(now):
        logger.debug(f"CoolDown active for another {state.next_eligible - now:.1f}s")
        return state, []

    selected = inner.evaluate(candidates, now)
    if selected:
        state = replace(state, next_eligible=now + duration_seconds)
        logger.info(f"CoolDown engaged for {duration_seconds}s")
    return state, selected


def spread_step(
    state: SpreadState,
    max_age_seconds: float,
    inner: Evaluator,
    candidates: List[Candidate],
    now: float,
) -> Tuple[SpreadState, List[Candidate]]:
    """
    Pace kicks so one happens per ``max_age / N`` seconds for population N.

    The wait only holds while the population is no larger than at the last
    kick. The interval uses the population size before ``inner`` narrows it.
    Empty input never reaches the division and leaves the state unchanged.
    """
    population = len(candidates)
    if population == 0:
        return state, []

    if state.is_waiting(now) and population <= state.last_count:
        logger.debug(
            f"Spread waiting another {state.next_eligible - now:.1f}s "
            f"(population={population}, last_count={state.last_count})"
        )
        return state, []

    selected = inner.evaluate(candidates, now)
    if selected:
        interval = max_age_seconds / population
        state = SpreadState(next_eligible=now + interval, last_count=population)
        logger.info(f"Spread engaged for {interval:.1f}s (population={population})")
    return state, selected


class CoolDownStage(Evaluator):
    """Wraps ``inner`` with a fixed cool down after each non-empty selection."""

    def __init__(self, duration_seconds: float, inner: Evaluator):
        self.duration_seconds = duration_seconds
        self.inner = inner
        self.state = CoolDownState()

    def evaluate(self, candidates: List[Candidate], now: float) -> List[Candidate]:
        self.state, selected = cool_down_step(
            self.state, self.duration_seconds, self.inner, candidates, now
        )
        return selected


class SpreadStage(Evaluator):
    """Wraps ``inner`` with population-proportional pacing."""

    def __init__(self, max_age_seconds: float, inner: Evaluator):
        self.max_age_seconds = max_age_seconds
        self.inner = inner
        self.state = SpreadState()

    def evaluate(self, candidates: List[Candidate], now: float) -> List[Candidate]:
        self.state, selected = spread_step(
            self.state, self.max_age_seconds, self.inner, candidates, now
        )
        return selected


def cool_down(duration_seconds: float, inner: Evaluator) -> CoolDownStage:
    return CoolDownStage(duration_seconds, inner)


def spread(max_age_seconds: float, inner: Evaluator) -> SpreadStage:
    return SpreadStage(max_age_seconds, inner)
