"""
Kubernetes source adapter: Wraps the Kubernetes CoreV1 API as a CandidateSource.

Pods are the candidates. Listing covers every namespace; removal deletes a
single pod with foreground propagation and the Criteria's grace period.
"""

import logging
from typing import Any, List, Optional

import urllib3
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client.exceptions import ApiException, OpenApiException
from kubernetes.config.config_exception import ConfigException

from kicker.exceptions import ConfigurationError, FetchError, RemovalError
from kicker.interfaces import Candidate, CandidatePhase, CandidateSource

logger = logging.getLogger(__name__)

FOREGROUND_PROPAGATION = "Foreground"


def pod_to_candidate(pod: Any) -> Optional[Candidate]:
    """
    Convert a V1Pod into a Candidate.

    Returns None for pods without a creation timestamp, which have not been
    persisted by the API server yet.
    """
    metadata = pod.metadata
    created = metadata.creation_timestamp if metadata is not None else None
    if created is None:
        return None

    status = pod.status
    phase = CandidatePhase.from_string(status.phase if status is not None else None)
    return Candidate(
        name=metadata.name,
        namespace=metadata.namespace,
        created_at=created.timestamp(),
        phase=phase,
    )


class KubernetesCandidateSource(CandidateSource):
    """
    CandidateSource backed by a ``kubernetes.client.CoreV1Api``.

    Use from_kube_config() to build one from a kubeconfig file, the
    in-cluster service account, or the invoking user's ~/.kube/config.
    """

    def __init__(self, core_api: Any):
        self.core_api = core_api

    @classmethod
    def from_kube_config(cls, kube_config: Optional[str] = None) -> "KubernetesCandidateSource":
        """
        Resolve cluster credentials and build a source.

        Args:
            kube_config: Path to a kubeconfig file. If not provided, the
                in-cluster config is tried first, then the user's default
                kubeconfig.

        Raises:
            ConfigurationError: If no usable cluster configuration is found
        """
        try:
            if kube_config:
                k8s_config.load_kube_config(config_file=kube_config)
                logger.info(f"Using kubeconfig at {kube_config}")
            else:
                try:
                    k8s_config.load_incluster_config()
                    logger.info("Using in-cluster config")
                except ConfigException:
                    k8s_config.load_kube_config()
                    logger.info("Using default kubeconfig of the invoking user")
        except (ConfigException, OSError) as e:
            raise ConfigurationError(f"error creating Kubernetes client: {e}") from e

        return cls(k8s_client.CoreV1Api())

    def list_candidates(self) -> List[Candidate]:
        try:
            pods = self.core_api.list_pod_for_all_namespaces()
        except (OpenApiException, urllib3.exceptions.HTTPError) as e:
            raise FetchError(f"error listing pods: {e}") from e

        candidates = []
        for pod in pods.items:
            candidate = pod_to_candidate(pod)
            if candidate is None:
                name = getattr(pod.metadata, "name", None)
                logger.debug(f"Skipping pod without creation timestamp: {name}")
                continue
            candidates.append(candidate)
        return candidates

    def remove_candidate(self, name: str, namespace: str, grace_period_seconds: int) -> None:
        body = k8s_client.V1DeleteOptions(
            propagation_policy=FOREGROUND_PROPAGATION,
            grace_period_seconds=grace_period_seconds,
        )
        try:
            self.core_api.delete_namespaced_pod(name=name, namespace=namespace, body=body)
        except ApiException as e:
            if e.status == 404:
                raise RemovalError(
                    f"pod '{namespace}/{name}' no longer exists", name=name, namespace=namespace
                ) from e
            raise RemovalError(
                f"error deleting pod '{namespace}/{name}': {e.status} {e.reason}",
                name=name,
                namespace=namespace,
            ) from e
        except (OpenApiException, urllib3.exceptions.HTTPError) as e:
            # Client-side rejections (ApiValueError, ApiTypeError) and transport errors
            raise RemovalError(
                f"error deleting pod '{namespace}/{name}': {e}", name=name, namespace=namespace
            ) from e
        logger.debug(f"Deleted pod {namespace}/{name} (grace_period={grace_period_seconds}s)")
