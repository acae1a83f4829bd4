"""
Pod discovery through kubectl.

Runs `kubectl get pods -o json` and maps each pod to its containers and the
images they run.
"""

import json
import logging
import subprocess
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ClusterError(Exception):
    """Raised when pods cannot be listed from the cluster."""
    pass


@dataclass(frozen=True)
class ContainerRef:
    """A container in a pod spec and the image it runs."""

    name: str
    image: str


@dataclass
class PodInfo:
    """A pod and its containers."""

    name: str
    namespace: str
    containers: list[ContainerRef] = field(default_factory=list)

    def find_container(self, name: str) -> Optional[ContainerRef]:
        for container in self.containers:
            if container.name == name:
                return container
        return None


def build_kubectl_command(
    kubectl: str = "kubectl",
    kubeconfig: Optional[str] = None,
    context: Optional[str] = None,
    namespace: Optional[str] = None,
) -> list[str]:
    """Build the kubectl argv for listing pods as JSON."""
    command = [kubectl, "get", "pods", "-o", "json"]
    if namespace:
        command.extend(["--namespace", namespace])
    else:
        command.append("--all-namespaces")
    if kubeconfig:
        command.extend(["--kubeconfig", kubeconfig])
    if context:
        command.extend(["--context", context])
    return command


def parse_pod_list(payload: dict[str, Any]) -> list[PodInfo]:
    """
    Parse a PodList object as printed by kubectl.

    Args:
        payload: Decoded `kubectl get pods -o json` output

    Returns:
        Pods in API order, with every container of every pod
    """
    pods = []
    for item in payload.get("items", []):
        metadata = item.get("metadata", {})
        spec = item.get("spec", {})
        containers = [
            ContainerRef(name=c.get("name", ""), image=c.get("image", ""))
            for c in spec.get("containers", [])
        ]
        pods.append(
            PodInfo(
                name=metadata.get("name", ""),
                namespace=metadata.get("namespace", ""),
                containers=containers,
            )
        )
    return pods


def list_pods(
    kubectl: str = "kubectl",
    kubeconfig: Optional[str] = None,
    context: Optional[str] = None,
    namespace: Optional[str] = None,
    timeout: int = 30,
) -> list[PodInfo]:
    """
    List pods in the current cluster.

    Args:
        kubectl: kubectl executable
        kubeconfig: kubeconfig file (None for kubectl's default)
        context: kubeconfig context (None for current context)
        namespace: Namespace to list (None for all namespaces)
        timeout: Seconds to wait for kubectl

    Returns:
        Pods with their containers

    Raises:
        ClusterError: If kubectl fails or its output cannot be parsed
    """
    command = build_kubectl_command(kubectl, kubeconfig, context, namespace)
    logger.debug(f"Running: {' '.join(command)}")

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise ClusterError(f"kubectl timed out after {timeout}s")
    except FileNotFoundError:
        raise ClusterError(f"kubectl not found: {kubectl}")

    if result.returncode != 0:
        raise ClusterError(f"kubectl get pods failed: {result.stderr.strip()}")

    try:
        payload = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ClusterError(f"Unexpected kubectl output: {e}") from e

    pods = parse_pod_list(payload)
    logger.info(f"Found {len(pods)} pods")
    return pods
