"""K8s cross-reference rules.

Each rule is a stateless callable evaluated against the whole batch of
classified documents. Rules that look for a referenced object elsewhere in the
batch only warn, since the object may be created outside the batch. Rules that
compare fields of a single document (volume mounts, selector vs. template
labels) report errors.
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from kubelint.core.classifier import Classification
from kubelint.core.schema.check import NAME_STAGE, SELECTOR_STAGE, VOLUME_STAGE
from kubelint.core.schema.document import (
    Document,
    MappingNode,
    Node,
    SequenceNode,
    lookup,
    scalar_value,
    string_map,
)
from kubelint.core.schema.finding import ERROR, WARNING, Finding
from kubelint.k8s.constants import POD_PRODUCING_KINDS, TEMPLATED_WORKLOADS
from kubelint.k8s.utils import (
    get_pod_labels,
    get_pod_spec,
    iter_containers,
    labels_match,
    namespaces_compatible,
)

logger = logging.getLogger(__name__)

DANGLING_SELECTOR = "xref.danglingSelector"
DANGLING_ROLE_REF = "xref.danglingRoleRef"
DANGLING_SERVICE_BACKEND = "xref.danglingServiceBackend"
DANGLING_SCALE_TARGET = "xref.danglingScaleTarget"
DANGLING_CONFIG_REFERENCE = "xref.danglingConfigReference"
VOLUME_MOUNT_MISMATCH = "xref.volumeMountMismatch"
SELECTOR_TEMPLATE_MISMATCH = "xref.selectorTemplateMismatch"


def _documents(batch: Sequence[Classification], kinds) -> Iterator[Document]:
    for classification in batch:
        if classification.schema is not None and classification.document.kind in kinds:
            yield classification.document


def _string(node: Optional[Node]) -> Optional[str]:
    value = scalar_value(node)
    return value if isinstance(value, str) and value else None


def _items(node: Optional[Node]) -> Iterator[Tuple[int, MappingNode]]:
    if isinstance(node, SequenceNode):
        for i, item in enumerate(node):
            if isinstance(item, MappingNode):
                yield i, item


def _format_labels(labels: dict) -> str:
    return ", ".join(f"{k}={v}" for k, v in sorted(labels.items()))


class _NameIndex:
    """Names of classified documents grouped by kind.

    Each name keeps its namespace and the scope of the schema it was
    classified under; cluster-scoped names match from any namespace.
    """

    def __init__(self, batch: Sequence[Classification]) -> None:
        self._names: Dict[str, List[Tuple[str, Optional[str], bool]]] = {}
        for classification in batch:
            if classification.schema is None:
                continue
            document = classification.document
            name = _string(lookup(document.root, "metadata", "name"))
            if name:
                entry = (name, document.namespace, classification.schema.namespaced)
                self._names.setdefault(document.kind, []).append(entry)

    def contains(self, kind: str, name: str, namespace: Optional[str]) -> bool:
        for candidate, candidate_ns, namespaced in self._names.get(kind, []):
            if candidate != name:
                continue
            if not namespaced or namespaces_compatible(namespace, candidate_ns):
                return True
        return False


class DanglingSelectorCheck:
    """Label selectors must select at least one Pod produced in the batch.

    Applies to Service ``spec.selector``, NetworkPolicy
    ``spec.podSelector.matchLabels`` and PodDisruptionBudget
    ``spec.selector.matchLabels``. Empty selectors are skipped.
    """

    rule_id = DANGLING_SELECTOR
    stage = SELECTOR_STAGE
    SELECTOR_PATHS = {
        "Service": ("spec", "selector"),
        "NetworkPolicy": ("spec", "podSelector", "matchLabels"),
        "PodDisruptionBudget": ("spec", "selector", "matchLabels"),
    }
    kinds = frozenset(SELECTOR_PATHS)

    def __call__(self, batch: Sequence[Classification]) -> List[Finding]:
        producers = [
            (document.namespace, get_pod_labels(document))
            for document in _documents(batch, POD_PRODUCING_KINDS)
        ]
        findings = []
        for document in _documents(batch, self.kinds):
            path = self.SELECTOR_PATHS[document.kind]
            node = lookup(document.root, *path)
            selector = string_map(node)
            if not selector:
                continue
            if any(
                namespaces_compatible(document.namespace, namespace)
                and labels_match(selector, labels)
                for namespace, labels in producers
            ):
                continue
            findings.append(Finding.for_document(
                document,
                self.rule_id,
                f"selector {{{_format_labels(selector)}}} matches no Pod template in this batch",
                WARNING,
                node.mark,
                ".".join(path),
            ))
        return findings


class DanglingRoleRefCheck:
    """RoleBinding/ClusterRoleBinding ``roleRef`` must name a role in the batch."""

    rule_id = DANGLING_ROLE_REF
    stage = NAME_STAGE
    kinds = frozenset({"RoleBinding", "ClusterRoleBinding"})

    def __call__(self, batch: Sequence[Classification]) -> List[Finding]:
        index = _NameIndex(batch)
        findings = []
        for document in _documents(batch, self.kinds):
            role_kind = _string(lookup(document.root, "roleRef", "kind"))
            name_node = lookup(document.root, "roleRef", "name")
            role_name = _string(name_node)
            if role_kind not in ("Role", "ClusterRole") or not role_name:
                continue
            if index.contains(role_kind, role_name, document.namespace):
                continue
            findings.append(Finding.for_document(
                document,
                self.rule_id,
                f"roleRef names {role_kind} \"{role_name}\", which is not defined in this batch",
                WARNING,
                name_node.mark,
                "roleRef.name",
            ))
        return findings


class DanglingServiceBackendCheck:
    """Ingress backends must name a Service in the batch."""

    rule_id = DANGLING_SERVICE_BACKEND
    stage = NAME_STAGE
    kinds = frozenset({"Ingress"})

    def _backends(self, document: Document) -> Iterator[Tuple[Node, str]]:
        default = lookup(document.root, "spec", "defaultBackend", "service", "name")
        if default is not None:
            yield default, "spec.defaultBackend.service.name"
        for i, rule in _items(lookup(document.root, "spec", "rules")):
            for j, path in _items(lookup(rule, "http", "paths")):
                node = lookup(path, "backend", "service", "name")
                if node is not None:
                    yield node, f"spec.rules[{i}].http.paths[{j}].backend.service.name"

    def __call__(self, batch: Sequence[Classification]) -> List[Finding]:
        index = _NameIndex(batch)
        findings = []
        for document in _documents(batch, self.kinds):
            for node, path in self._backends(document):
                name = _string(node)
                if not name or index.contains("Service", name, document.namespace):
                    continue
                findings.append(Finding.for_document(
                    document,
                    self.rule_id,
                    f"backend Service \"{name}\" is not defined in this batch",
                    WARNING,
                    node.mark,
                    path,
                ))
        return findings


class DanglingScaleTargetCheck:
    """HorizontalPodAutoscaler ``scaleTargetRef`` must name an object in the batch."""

    rule_id = DANGLING_SCALE_TARGET
    stage = NAME_STAGE
    kinds = frozenset({"HorizontalPodAutoscaler"})

    def __call__(self, batch: Sequence[Classification]) -> List[Finding]:
        index = _NameIndex(batch)
        findings = []
        for document in _documents(batch, self.kinds):
            target_kind = _string(lookup(document.root, "spec", "scaleTargetRef", "kind"))
            name_node = lookup(document.root, "spec", "scaleTargetRef", "name")
            target_name = _string(name_node)
            if not target_kind or not target_name:
                continue
            if index.contains(target_kind, target_name, document.namespace):
                continue
            findings.append(Finding.for_document(
                document,
                self.rule_id,
                f"scale target {target_kind} \"{target_name}\" is not defined in this batch",
                WARNING,
                name_node.mark,
                "spec.scaleTargetRef.name",
            ))
        return findings


class DanglingConfigReferenceCheck:
    """Pod specs should reference ConfigMaps, Secrets, claims and service accounts in the batch.

    References marked ``optional: true`` and the implicit ``default``
    ServiceAccount are skipped.
    """

    rule_id = DANGLING_CONFIG_REFERENCE
    stage = NAME_STAGE
    kinds = POD_PRODUCING_KINDS

    def _references(self, document: Document) -> Iterator[Tuple[str, Node, str]]:
        pod_spec, spec_path = get_pod_spec(document)
        if pod_spec is None:
            return
        for i, volume in _items(pod_spec.get("volumes")):
            base = f"{spec_path}.volumes[{i}]"
            for source, key, kind in (
                ("configMap", "name", "ConfigMap"),
                ("secret", "secretName", "Secret"),
                ("persistentVolumeClaim", "claimName", "PersistentVolumeClaim"),
            ):
                ref = volume.get(source)
                if isinstance(ref, MappingNode) and scalar_value(ref.get("optional")) is not True:
                    node = ref.get(key)
                    if node is not None:
                        yield kind, node, f"{base}.{source}.{key}"

        for container, container_path in iter_containers(pod_spec, spec_path):
            for i, env in _items(container.get("env")):
                for source, kind in (("configMapKeyRef", "ConfigMap"), ("secretKeyRef", "Secret")):
                    ref = lookup(env, "valueFrom", source)
                    if isinstance(ref, MappingNode) and scalar_value(ref.get("optional")) is not True:
                        node = ref.get("name")
                        if node is not None:
                            yield kind, node, f"{container_path}.env[{i}].valueFrom.{source}.name"
            for i, env_from in _items(container.get("envFrom")):
                for source, kind in (("configMapRef", "ConfigMap"), ("secretRef", "Secret")):
                    ref = env_from.get(source)
                    if isinstance(ref, MappingNode) and scalar_value(ref.get("optional")) is not True:
                        node = ref.get("name")
                        if node is not None:
                            yield kind, node, f"{container_path}.envFrom[{i}].{source}.name"

        account = pod_spec.get("serviceAccountName")
        if _string(account) not in (None, "default"):
            yield "ServiceAccount", account, f"{spec_path}.serviceAccountName"

    def __call__(self, batch: Sequence[Classification]) -> List[Finding]:
        index = _NameIndex(batch)
        findings = []
        for document in _documents(batch, self.kinds):
            for kind, node, path in self._references(document):
                name = _string(node)
                if not name or index.contains(kind, name, document.namespace):
                    continue
                findings.append(Finding.for_document(
                    document,
                    self.rule_id,
                    f"references {kind} \"{name}\", which is not defined in this batch",
                    WARNING,
                    node.mark,
                    path,
                ))
        return findings


class VolumeMountCheck:
    """Every container volume mount must name a volume declared in the same Pod spec.

    For StatefulSets, names of ``spec.volumeClaimTemplates`` also count.
    """

    rule_id = VOLUME_MOUNT_MISMATCH
    stage = VOLUME_STAGE
    kinds = POD_PRODUCING_KINDS

    def _volume_names(self, document: Document, pod_spec: MappingNode) -> Set[str]:
        names = set()
        for _, volume in _items(pod_spec.get("volumes")):
            name = _string(volume.get("name"))
            if name:
                names.add(name)
        if document.kind == "StatefulSet":
            for _, claim in _items(lookup(document.root, "spec", "volumeClaimTemplates")):
                name = _string(lookup(claim, "metadata", "name"))
                if name:
                    names.add(name)
        return names

    def __call__(self, batch: Sequence[Classification]) -> List[Finding]:
        findings = []
        for document in _documents(batch, self.kinds):
            pod_spec, spec_path = get_pod_spec(document)
            if pod_spec is None:
                continue
            volumes = self._volume_names(document, pod_spec)
            for container, container_path in iter_containers(pod_spec, spec_path):
                container_name = _string(container.get("name")) or "unknown"
                for list_name in ("volumeMounts", "volumeDevices"):
                    for i, mount in _items(container.get(list_name)):
                        node = mount.get("name")
                        name = _string(node)
                        if not name or name in volumes:
                            continue
                        findings.append(Finding.for_document(
                            document,
                            self.rule_id,
                            f"container \"{container_name}\" mounts volume \"{name}\", "
                            f"which is not declared in volumes",
                            ERROR,
                            node.mark,
                            f"{container_path}.{list_name}[{i}].name",
                        ))
        return findings


class SelectorTemplateCheck:
    """A workload's ``spec.selector.matchLabels`` must match its own template labels."""

    rule_id = SELECTOR_TEMPLATE_MISMATCH
    stage = VOLUME_STAGE
    kinds = TEMPLATED_WORKLOADS

    def __call__(self, batch: Sequence[Classification]) -> List[Finding]:
        findings = []
        for document in _documents(batch, self.kinds):
            node = lookup(document.root, "spec", "selector", "matchLabels")
            selector = string_map(node)
            if not selector:
                continue
            labels = get_pod_labels(document)
            if labels_match(selector, labels):
                continue
            findings.append(Finding.for_document(
                document,
                self.rule_id,
                f"selector {{{_format_labels(selector)}}} does not match template labels "
                f"{{{_format_labels(labels)}}}",
                ERROR,
                node.mark,
                "spec.selector.matchLabels",
            ))
        return findings


DANGLING_SELECTOR_CHECK = DanglingSelectorCheck()
DANGLING_ROLE_REF_CHECK = DanglingRoleRefCheck()
DANGLING_SERVICE_BACKEND_CHECK = DanglingServiceBackendCheck()
DANGLING_SCALE_TARGET_CHECK = DanglingScaleTargetCheck()
DANGLING_CONFIG_REFERENCE_CHECK = DanglingConfigReferenceCheck()
VOLUME_MOUNT_CHECK = VolumeMountCheck()
SELECTOR_TEMPLATE_CHECK = SelectorTemplateCheck()

POD_PRODUCER_CHECKS = (DANGLING_CONFIG_REFERENCE_CHECK, VOLUME_MOUNT_CHECK)
WORKLOAD_CHECKS = POD_PRODUCER_CHECKS + (SELECTOR_TEMPLATE_CHECK,)
