"""
Predicates: Boolean tests over a single candidate.

Atomic predicates match on namespace, name prefix and phase. Combinators
group them with early exit, so put the cheapest or most selective predicate
first; ordering affects speed, never the result.
"""

from typing import Callable

from kicker.interfaces import Candidate, CandidatePhase

Predicate = Callable[[Candidate], bool]


def namespace_is(namespace: str) -> Predicate:
    """Matches when the candidate lives in ``namespace``."""
    def _match(candidate: Candidate) -> bool:
        return candidate.namespace == namespace
    return _match


def name_has_prefix(prefix: str) -> Predicate:
    """Matches when the candidate's name starts with ``prefix``."""
    def _match(candidate: Candidate) -> bool:
        return candidate.name.startswith(prefix)
    return _match


def phase_is(phase: CandidatePhase) -> Predicate:
    """Matches when the candidate is in ``phase``."""
    def _match(candidate: Candidate) -> bool:
        return candidate.phase == phase
    return _match


def not_(predicate: Predicate) -> Predicate:
    """Inverts ``predicate``."""
    def _match(candidate: Candidate) -> bool:
        return not predicate(candidate)
    return _match


def or_(*predicates: Predicate) -> Predicate:
    """
    True if at least one predicate is true. Stops at the first true one.

    With no predicates this is always false.
    """
    def _match(candidate: Candidate) -> bool:
        for predicate in predicates:
            if predicate(candidate):
                return True
        return False
    return _match


def and_(*predicates: Predicate) -> Predicate:
    """
    True if every predicate is true. Stops at the first false one.

    With no predicates this is always true.
    """
    def _match(candidate: Candidate) -> bool:
        for predicate in predicates:
            if not predicate(candidate):
                return False
        return True
    return _match
