"""
Unit tests for the KickerEngine control loop.

Tests:
- Selected candidates are removed with their Criteria's namespace and grace period
- Cross-strategy exclusion within one cycle
- A failed removal is skipped without affecting siblings or later strategies
- A failed fetch propagates and ends the loop
- run() / start() / stop() lifecycle, including restarts after a stop that timed out
"""

import threading
import unittest
from typing import List

from kicker.config import STRATEGY_IMMEDIATE, Criteria
from kicker.engine import KickerEngine
from kicker.exceptions import FetchError, RemovalError
from kicker.interfaces import Candidate, CandidatePhase, CandidateSource, Evaluator
from kicker.pipeline import apply_filter, compose, limit
from kicker.policies import register_builtin_policies
from kicker.predicates import name_has_prefix
from kicker.registry import StrategyRegistry
from kicker.strategy import Strategy, new_group

NOW = 1_000_000.0


def _candidate(name, age=5000, namespace="default"):
    return Candidate(name=name, namespace=namespace, created_at=NOW - age,
                     phase=CandidatePhase.RUNNING)


class FakeSource(CandidateSource):
    """In-memory CandidateSource recording removals."""

    def __init__(self, candidates, failing=(), fetch_error=None):
        self.candidates = list(candidates)
        self.failing = set(failing)
        self.fetch_error = fetch_error
        self.removed = []
        self.listed = threading.Event()

    def list_candidates(self) -> List[Candidate]:
        self.listed.set()
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.candidates)

    def remove_candidate(self, name, namespace, grace_period_seconds):
        if name in self.failing:
            raise RemovalError(f"pod '{namespace}/{name}' no longer exists",
                               name=name, namespace=namespace)
        self.removed.append((name, namespace, grace_period_seconds))


class BlockingSource(CandidateSource):
    """Blocks inside list_candidates() until released; tracks overlapping calls."""

    def __init__(self):
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls = 0
        self.active = 0
        self.max_concurrent = 0
        self._lock = threading.Lock()

    def list_candidates(self) -> List[Candidate]:
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_concurrent = max(self.max_concurrent, self.active)
        self.entered.set()
        self.release.wait(timeout=5.0)
        with self._lock:
            self.active -= 1
        return []

    def remove_candidate(self, name, namespace, grace_period_seconds):
        pass


class RecordingEvaluator(Evaluator):
    """Selects everything it receives and remembers what that was."""

    def __init__(self):
        self.received = []

    def evaluate(self, candidates, now):
        self.received.append([c.name for c in candidates])
        return list(candidates)


def _criteria(name, **fields):
    return Criteria(name=name, **fields).validate()


def _select(prefix, n=10, **fields):
    """Strategy kicking up to ``n`` candidates whose name starts with ``prefix``."""
    return Strategy(
        _criteria(prefix, **fields),
        compose(apply_filter(name_has_prefix(prefix)), limit(n)),
    )


class TestRunCycle(unittest.TestCase):
    """Test a single cycle."""

    def test_removes_with_criteria_settings(self):
        source = FakeSource([_candidate("worker-1"), _candidate("api-1")])
        strategy = _select("worker", namespace="jobs", grace_period=45)
        engine = KickerEngine(source, [strategy], 60, clock=lambda: NOW)

        report = engine.run_cycle()

        self.assertEqual(source.removed, [("worker-1", "jobs", 45)])
        self.assertEqual(report.candidates_fetched, 2)
        self.assertEqual(report.outcomes[0].removed, ["worker-1"])
        self.assertEqual(report.total_removed, 1)

    def test_cross_strategy_exclusion(self):
        source = FakeSource([_candidate("worker-1"), _candidate("worker-2"), _candidate("api-1")])
        recorder = RecordingEvaluator()
        first = _select("worker")
        second = Strategy(_criteria("everything"), recorder)
        engine = KickerEngine(source, [first, second], 60, clock=lambda: NOW)

        engine.run_cycle()

        self.assertEqual(recorder.received, [["api-1"]])
        self.assertEqual([r[0] for r in source.removed], ["worker-1", "worker-2", "api-1"])

    def test_exclusion_matches_namespace_too(self):
        source = FakeSource([_candidate("worker-1", namespace="a"),
                             _candidate("worker-1", namespace="b")])
        recorder = RecordingEvaluator()
        only_a = Strategy(_criteria("worker"),
                          compose(apply_filter(lambda c: c.namespace == "a")))
        engine = KickerEngine(source, [only_a, Strategy(_criteria("x"), recorder)], 60,
                              clock=lambda: NOW)

        engine.run_cycle()

        self.assertEqual(recorder.received, [["worker-1"]])

    def test_removal_failure_is_skipped(self):
        source = FakeSource(
            [_candidate("worker-1"), _candidate("worker-2"), _candidate("api-1")],
            failing={"worker-1"},
        )
        recorder = RecordingEvaluator()
        engine = KickerEngine(
            source, [_select("worker"), Strategy(_criteria("rest"), recorder)], 60,
            clock=lambda: NOW,
        )

        report = engine.run_cycle()

        self.assertEqual(report.outcomes[0].failed, ["worker-1"])
        self.assertEqual(report.outcomes[0].removed, ["worker-2"])
        # The failed candidate was still selected, so later strategies never see it
        self.assertEqual(recorder.received, [["api-1"]])
        self.assertEqual(engine.stats["removal_errors"], 1)
        self.assertEqual(engine.stats["removals"], 2)

    def test_fetch_failure_propagates(self):
        source = FakeSource([], fetch_error=FetchError("apiserver unreachable"))
        recorder = RecordingEvaluator()
        engine = KickerEngine(source, [Strategy(_criteria("x"), recorder)], 60)

        with self.assertRaises(FetchError):
            engine.run_cycle()
        self.assertEqual(recorder.received, [])

    def test_throttle_state_carries_across_cycles(self):
        registry = register_builtin_policies(StrategyRegistry())
        strategies = new_group(
            [_criteria("worker", strategy=STRATEGY_IMMEDIATE, max_age=3600, cool_down=300)],
            registry,
        )
        source = FakeSource([_candidate("worker-1"), _candidate("worker-2", age=6000)])
        clock = iter([NOW, NOW + 60, NOW + 300])
        engine = KickerEngine(source, strategies, 60, clock=lambda: next(clock))

        engine.run_cycle()
        engine.run_cycle()
        engine.run_cycle()

        self.assertEqual([r[0] for r in source.removed], ["worker-2", "worker-2"])
        self.assertEqual(engine.get_stats()["cycles"], 3)


class TestLifecycle(unittest.TestCase):
    """Test run(), start() and stop()."""

    def test_run_until_stopped(self):
        source = FakeSource([_candidate("worker-1")])
        engine = KickerEngine(source, [_select("worker")], 3600, clock=lambda: NOW)

        original = source.list_candidates

        def list_then_stop():
            engine.stop()
            return original()

        source.list_candidates = list_then_stop
        engine.run()

        self.assertEqual(engine.stats["cycles"], 1)

    def test_run_raises_on_fetch_failure(self):
        source = FakeSource([], fetch_error=FetchError("boom"))
        engine = KickerEngine(source, [], 3600)
        with self.assertRaises(FetchError):
            engine.run()

    def test_background_start_stop(self):
        source = FakeSource([])
        engine = KickerEngine(source, [], 3600)

        engine.start()
        self.assertTrue(source.listed.wait(timeout=5.0))
        self.assertTrue(engine.is_running)

        engine.stop()
        self.assertFalse(engine.is_running)
        self.assertIsNone(engine.error)

    def test_background_fetch_failure_is_recorded(self):
        source = FakeSource([], fetch_error=FetchError("boom"))
        engine = KickerEngine(source, [], 3600)

        engine.start()
        self.assertTrue(source.listed.wait(timeout=5.0))
        engine.stop()

        self.assertIsInstance(engine.error, FetchError)

    def test_restart_while_cycle_blocked_does_not_overlap(self):
        source = BlockingSource()
        engine = KickerEngine(source, [], 3600)

        engine.start()
        self.assertTrue(source.entered.wait(timeout=5.0))

        # The cycle is stuck in the fetch, so the join times out
        engine.stop(timeout=0.1)
        self.assertTrue(engine.is_running)

        engine.start()
        source.release.set()
        engine.stop()

        self.assertFalse(engine.is_running)
        self.assertEqual(source.calls, 1)
        self.assertEqual(source.max_concurrent, 1)

    def test_restart_after_background_loop_ended(self):
        source = FakeSource([], fetch_error=FetchError("boom"))
        engine = KickerEngine(source, [], 3600)

        engine.start()
        engine._loop_thread.join(timeout=5.0)
        self.assertFalse(engine.is_running)
        self.assertIsInstance(engine.error, FetchError)

        # No stop() in between: the dead thread must not block a restart
        source.fetch_error = None
        source.listed.clear()
        engine.start()
        self.assertTrue(source.listed.wait(timeout=5.0))
        engine.stop()
        self.assertIsNone(engine.error)


if __name__ == '__main__':
    unittest.main()
