"""
CandidateSource: Cluster-agnostic access to the candidate pool.

Enables Kicker to work against different workload managers:
- Kubernetes pods (current)
- Anything else that can list workloads and remove one by name

The key abstraction: the source knows how to fetch and remove workloads,
while Kicker decides which ones to remove and when.
"""

from abc import ABC, abstractmethod
from typing import List

from .candidate import Candidate


class CandidateSource(ABC):
    """
    Abstract interface for listing and removing candidates.

    The control loop is the only caller. Calls are made sequentially from a
    single thread, so implementations need not be thread-safe.
    """

    @abstractmethod
    def list_candidates(self) -> List[Candidate]:
        """
        Fetch the full candidate set.

        Returns:
            Every candidate currently known to the source

        Raises:
            FetchError: If the source is unavailable. The control loop treats
                this as fatal.
        """
        pass

    @abstractmethod
    def remove_candidate(self, name: str, namespace: str, grace_period_seconds: int) -> None:
        """
        Remove one candidate, giving it ``grace_period_seconds`` to shut down.

        Where the underlying system supports propagation policies, dependents
        are removed before the candidate is considered gone (foreground).

        Raises:
            RemovalError: If the removal failed, including when the candidate
                no longer exists. The control loop logs and skips it.
                Any other exception is not caught and ends the control loop.
        """
        pass
