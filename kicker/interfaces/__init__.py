"""
Kicker extensibility interfaces.

These abstract base classes define the contract for pluggable components:
- Candidate: Snapshot of a workload instance that may be kicked
- Evaluator: A stage (or whole policy) that selects candidates to kick
- CandidateSource: Where candidates come from and how they are removed
"""

from .candidate import Candidate, CandidatePhase
from .evaluator import Evaluator
from .candidate_source import CandidateSource

__all__ = [
    "Candidate",
    "CandidatePhase",
    "Evaluator",
    "CandidateSource",
]
