"""
Kicker Engine: the control loop that fetches, evaluates and kicks.

One cycle:
1. Fetch every candidate from the CandidateSource
2. Run each Strategy in configuration order over the remaining candidates
3. Remove what the Strategy selected, using its Criteria's grace period
4. Drop the selected candidates before the next Strategy sees the set, so
   no candidate is kicked twice in one cycle
5. Wait check_interval seconds, then repeat

Cycles run sequentially on one thread; throttle state and cross-strategy
exclusion depend on that ordering. A failed removal is logged and skipped.
A failed fetch is fatal and ends the loop.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from kicker.exceptions import RemovalError
from kicker.interfaces import Candidate, CandidateSource
from kicker.pipeline import exclude_by_identity
from kicker.strategy import Strategy

logger = logging.getLogger(__name__)


@dataclass
class StrategyOutcome:
    """What one Strategy did during one cycle."""
    strategy: str
    selected: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


@dataclass
class CycleReport:
    """Summary of one control-loop cycle."""
    started_at: float
    candidates_fetched: int = 0
    outcomes: List[StrategyOutcome] = field(default_factory=list)

    @property
    def total_removed(self) -> int:
        return sum(len(o.removed) for o in self.outcomes)

    @property
    def total_failed(self) -> int:
        return sum(len(o.failed) for o in self.outcomes)


class KickerEngine:
    """
    Runs kick cycles against a CandidateSource until stopped.

    ``clock`` supplies the current Unix time for each cycle; tests inject a
    fake one. stop() may be called from a signal handler or another thread
    and interrupts the wait between cycles.
    """

    def __init__(
        self,
        source: CandidateSource,
        strategies: Sequence[Strategy],
        check_interval_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.source = source
        self.strategies = list(strategies)
        self.check_interval_seconds = check_interval_seconds
        self._clock = clock

        self._stop_event = threading.Event()
        self._loop_thread: Optional[threading.Thread] = None
        self._error: Optional[Exception] = None

        self.stats = {
            "cycles": 0,
            "candidates_seen": 0,
            "removals": 0,
            "removal_errors": 0,
        }

        logger.info(
            "KickerEngine initialized: "
            f"strategies={len(self.strategies)}, "
            f"check_interval={check_interval_seconds}s"
        )

    def run_cycle(self) -> CycleReport:
        """
        Run a single fetch, evaluate and kick cycle.

        Raises:
            FetchError: If the source cannot list candidates
        """
        now = self._clock()
        report = CycleReport(started_at=now)

        candidates = self.source.list_candidates()
        report.candidates_fetched = len(candidates)
        logger.info(f"There are {len(candidates)} candidates in the cluster")
        logger.info(f"Running {len(self.strategies)} strategies...")

        remaining: List[Candidate] = list(candidates)
        for strategy in self.strategies:
            outcome = self._run_strategy(strategy, remaining, now)
            report.outcomes.append(outcome)

        self.stats["cycles"] += 1
        self.stats["candidates_seen"] += report.candidates_fetched
        logger.info(
            f"Cycle complete: removed={report.total_removed}, failed={report.total_failed}"
        )
        return report

    def _run_strategy(self, strategy: Strategy, remaining: List[Candidate], now: float) -> StrategyOutcome:
        criteria = strategy.criteria
        outcome = StrategyOutcome(strategy=criteria.name)

        selected = strategy.evaluate(list(remaining), now)
        for candidate in selected:
            outcome.selected.append(candidate.name)
            logger.info(f"kicking: {candidate.namespace}/{candidate.name}...")
            try:
                self.source.remove_candidate(
                    candidate.name, criteria.namespace, criteria.grace_period
                )
            except RemovalError as e:
                outcome.failed.append(candidate.name)
                self.stats["removal_errors"] += 1
                logger.error(f"error kicking candidate '{candidate.name}': {e}")
                continue
            outcome.removed.append(candidate.name)
            self.stats["removals"] += 1

        if selected:
            # Selected candidates leave the pool whether or not removal succeeded
            remaining[:] = exclude_by_identity(selected).evaluate(remaining, now)
        return outcome

    def run(self) -> None:
        """
        Run cycles until stop() is called.

        Raises:
            FetchError: If a cycle cannot fetch candidates; the loop ends
        """
        logger.info("🔄 Kick loop started")
        self._stop_event.clear()
        while not self._stop_event.is_set():
            self.run_cycle()
            if self._stop_event.is_set():
                break
            logger.info(f"sleeping for {self.check_interval_seconds}s")
            self._stop_event.wait(self.check_interval_seconds)
        logger.info("Kick loop stopped")

    def start(self) -> None:
        """Run the loop on a background thread."""
        if self._loop_thread is not None:
            if self._loop_thread.is_alive():
                logger.warning("KickerEngine already started")
                return
            # Previous loop ended on its own; its thread is done
            self._loop_thread = None

        self._error = None
        self._loop_thread = threading.Thread(
            target=self._run_in_thread,
            daemon=True,
            name="KickerEngine",
        )
        self._loop_thread.start()
        logger.info("KickerEngine loop thread started")

    def _run_in_thread(self) -> None:
        try:
            self.run()
        except Exception as e:
            self._error = e
            logger.error(f"Kick loop terminated: {e}")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the loop; joins the background thread if start() was used."""
        self._stop_event.set()
        if self._loop_thread is not None and self._loop_thread is not threading.current_thread():
            self._loop_thread.join(timeout=timeout)
            if self._loop_thread.is_alive():
                # Still inside a cycle; keep the thread so start() cannot overlap it
                logger.warning(
                    f"KickerEngine loop thread did not stop within {timeout}s, "
                    "it will exit after the current cycle"
                )
                return
            self._loop_thread = None
            logger.info("KickerEngine loop thread stopped")

    @property
    def error(self) -> Optional[Exception]:
        """Exception that ended a background loop, if any."""
        return self._error

    @property
    def is_running(self) -> bool:
        return self._loop_thread is not None and self._loop_thread.is_alive()

    def get_stats(self) -> Dict:
        return {
            **self.stats,
            "strategies": len(self.strategies),
        }
