"""Shared utility functions for K8s schemas and cross-reference rules.

This module provides common helpers for reaching into Pod templates of the
different workload kinds, so every rule locates them the same way.
"""

from typing import Iterator, Optional, Tuple

from kubelint.core.schema.document import Document, MappingNode, SequenceNode, lookup, string_map
from kubelint.k8s.constants import CONTAINER_LISTS


def pod_template_path(kind: str) -> Optional[Tuple[str, ...]]:
    """Key path from the document root to the Pod (or Pod template) object.

    Returns:
        () for Pods, the template path for workloads, None for other kinds
    """
    if kind == "Pod":
        return ()
    if kind == "CronJob":
        return ("spec", "jobTemplate", "spec", "template")
    if kind in ("Deployment", "StatefulSet", "DaemonSet", "ReplicaSet", "Job"):
        return ("spec", "template")
    return None


def _dotted(path: Tuple[str, ...], tail: str) -> str:
    return ".".join(path + (tail,))


def get_pod_labels(document: Document) -> dict:
    """Extract labels the produced Pods will carry.

    Args:
        document: Pod or Pod-producing workload document

    Returns:
        Label dict, empty when not found
    """
    path = pod_template_path(document.kind)
    if path is None:
        return {}
    return string_map(lookup(document.root, *path, "metadata", "labels"))


def get_pod_spec(document: Document) -> Tuple[Optional[MappingNode], str]:
    """Extract the Pod spec node and its field path.

    Returns:
        (pod spec node or None, dotted path such as "spec.template.spec")
    """
    path = pod_template_path(document.kind)
    if path is None:
        return None, ""
    node = lookup(document.root, *path, "spec")
    if not isinstance(node, MappingNode):
        return None, _dotted(path, "spec")
    return node, _dotted(path, "spec")


def iter_containers(pod_spec: Optional[MappingNode], spec_path: str) -> Iterator[Tuple[MappingNode, str]]:
    """Yield (container node, container path) for every container list of a Pod spec."""
    if pod_spec is None:
        return
    for list_name in CONTAINER_LISTS:
        containers = pod_spec.get(list_name)
        if not isinstance(containers, SequenceNode):
            continue
        for i, container in enumerate(containers):
            if isinstance(container, MappingNode):
                yield container, f"{spec_path}.{list_name}[{i}]"


def labels_match(selector: dict, labels: dict) -> bool:
    """Check if all selector key-value pairs are present in labels."""
    if not selector:
        return False
    return all(labels.get(k) == v for k, v in selector.items())


def namespaces_compatible(a: Optional[str], b: Optional[str]) -> bool:
    """Two namespaces are compatible when either is unspecified or both are equal."""
    return a is None or b is None or a == b
