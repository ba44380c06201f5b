"""
Strategy registry: maps strategy names to evaluator constructors.

A constructor takes one validated Criteria and returns a fresh Evaluator
with its own throttle state. Criteria refer to a strategy by name, so new
policies plug in by registering a constructor before strategies are built.

The registry is an ordinary object created at startup and passed to the
code that registers policies and the code that builds strategies.

Example
    registry = StrategyRegistry()
    register_builtin_policies(registry)

    @registry.strategy("oldest-only")
    def oldest_only(criteria):
        return compose(sort_by_age_ascending(), limit(1))
"""

import logging
import threading
from typing import Callable, Dict, List, Optional

from kicker.config import Criteria
from kicker.exceptions import DuplicateStrategyError, UnknownStrategyError
from kicker.interfaces import Evaluator

logger = logging.getLogger(__name__)

EvaluatorConstructor = Callable[[Criteria], Evaluator]


class StrategyRegistry:
    """
    Write-once mapping of strategy name to EvaluatorConstructor.

    Registration normally happens during initialization and lookups during
    startup; both are guarded by a single lock so they may interleave. The
    lock is exclusive, so concurrent lookups serialize as well.
    """

    def __init__(self, name: str = "strategies") -> None:
        self._name = name
        self._constructors: Dict[str, EvaluatorConstructor] = {}
        self._lock = threading.Lock()

    def register(self, name: str, constructor: EvaluatorConstructor) -> None:
        """
        Bind ``name`` to ``constructor``.

        Raises:
            DuplicateStrategyError: If ``name`` is already bound
        """
        with self._lock:
            if name in self._constructors:
                raise DuplicateStrategyError(f"strategy '{name}' is already registered")
            self._constructors[name] = constructor
        logger.debug(f"{self._name}: registered strategy '{name}'")

    def strategy(self, name: Optional[str] = None) -> Callable[[EvaluatorConstructor], EvaluatorConstructor]:
        """Decorator form of register(). Defaults to the function name."""

        def _decorator(constructor: EvaluatorConstructor) -> EvaluatorConstructor:
            key = name or getattr(constructor, "__name__", None)
            if not key:
                raise ValueError("Cannot infer strategy name; provide one explicitly.")
            self.register(key, constructor)
            return constructor

        return _decorator

    def lookup(self, name: str) -> EvaluatorConstructor:
        """
        Get the constructor bound to ``name``.

        Raises:
            UnknownStrategyError: If ``name`` is not bound
        """
        with self._lock:
            constructor = self._constructors.get(name)
        if constructor is None:
            raise UnknownStrategyError(f"strategy '{name}' is not registered for use")
        return constructor

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._constructors)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return isinstance(name, str) and name in self._constructors

    def __len__(self) -> int:
        with self._lock:
            return len(self._constructors)

    def __repr__(self) -> str:
        return f"StrategyRegistry(name={self._name!r}, strategies={self.names()})"
