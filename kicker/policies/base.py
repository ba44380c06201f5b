"""
Building blocks shared by the built-in policies.
"""

from kicker.config import Criteria
from kicker.interfaces import CandidatePhase, Evaluator
from kicker.pipeline import apply_filter, compose, limit, older_than, sort_by_age_ascending
from kicker.predicates import Predicate, and_, name_has_prefix, namespace_is, phase_is


def target_predicate(criteria: Criteria) -> Predicate:
    """Healthy candidates named and placed as ``criteria`` targets."""
    return and_(
        name_has_prefix(criteria.name),
        namespace_is(criteria.namespace),
        phase_is(CandidatePhase.RUNNING),
    )


def core_pipeline(criteria: Criteria) -> Evaluator:
    """
    The oldest ``criteria.limit`` targeted candidates older than ``max_age``.

    Filters first so sorting and age checks only see targeted candidates.
    """
    return compose(
        apply_filter(target_predicate(criteria)),
        sort_by_age_ascending(),
        older_than(criteria.max_age),
        limit(criteria.limit),
    )
