"""
Candidate source implementations.

- kube: Kubernetes pods via the official client (current default)
"""

from .kube import KubernetesCandidateSource, pod_to_candidate

__all__ = [
    "KubernetesCandidateSource",
    "pod_to_candidate",
]
