"""K8s constants used across the catalog and cross-reference modules.

This module contains constants that are shared across multiple modules
to avoid circular import issues.
"""

# Kinds whose documents are, or carry a template for, Pods
POD_PRODUCING_KINDS = frozenset({
    "Pod", "Deployment", "StatefulSet", "DaemonSet", "ReplicaSet", "Job", "CronJob",
})

# Workloads with spec.selector + spec.template
TEMPLATED_WORKLOADS = frozenset({"Deployment", "StatefulSet", "DaemonSet", "ReplicaSet", "Job"})

# Kinds that live outside namespaces
CLUSTER_SCOPED_KINDS = frozenset({
    "Namespace", "PersistentVolume", "ClusterRole", "ClusterRoleBinding",
    "CustomResourceDefinition", "PodSecurityPolicy", "StorageClass", "Node",
})

CONTAINER_LISTS = ("initContainers", "containers", "ephemeralContainers")

PSP_REMOVED = (
    "policy/v1beta1 PodSecurityPolicy was removed in Kubernetes v1.25; "
    "use Pod Security Admission instead"
)
HPA_V1_SUPERSEDED = "autoscaling/v2 is the recommended HorizontalPodAutoscaler API"
