"""
Candidate: A workload instance the engine may choose to kick.

Candidates are snapshots taken by a CandidateSource at the start of a cycle.
The engine never mutates them; identity is the (name, namespace) pair.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class CandidatePhase(str, Enum):
    """Lifecycle phase of a candidate, mirroring Kubernetes pod phases."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "CandidatePhase":
        if value is None:
            return cls.UNKNOWN
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class Candidate:
    """Information about a workload that could be kicked."""
    name: str
    namespace: str
    created_at: float                 # Unix timestamp of creation
    phase: CandidatePhase = CandidatePhase.UNKNOWN

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.name, self.namespace)

    def age(self, now: float) -> float:
        """Seconds elapsed between creation and ``now``."""
        return now - self.created_at
