"""Built-in schemas for the standard K8s kinds.

``build_default_catalog()`` returns a frozen RuleCatalog holding one
ObjectSchema per supported (apiVersion, kind) pair. Bodies are composed from
the shared structures in ``kubelint.k8s.fields``.
"""

import logging
from typing import Optional, Tuple

from kubelint.core.catalog import ObjectKind, ObjectSchema, RuleCatalog
from kubelint.core.rules import (
    ANY,
    BOOL,
    INT,
    INT_OR_STR,
    NON_NEGATIVE,
    OPEN,
    PORT,
    POSITIVE,
    QUANTITY,
    RESOURCE_LIST,
    STR,
    STRING_MAP,
    STRINGS,
    TIME,
    FieldRule,
    ListOf,
    MapOf,
    RangeRule,
    Scalar,
    Struct,
    enum,
    opt,
    req,
)
from kubelint.core.schema.check import Check
from kubelint.k8s.constants import CLUSTER_SCOPED_KINDS, HPA_V1_SUPERSEDED, PSP_REMOVED
from kubelint.k8s.crossrefs import (
    DANGLING_ROLE_REF_CHECK,
    DANGLING_SCALE_TARGET_CHECK,
    DANGLING_SELECTOR_CHECK,
    DANGLING_SERVICE_BACKEND_CHECK,
    POD_PRODUCER_CHECKS,
    WORKLOAD_CHECKS,
)
from kubelint.k8s.fields import (
    HEADER,
    INT_OR_PERCENT,
    JOB_POD_TEMPLATE,
    LABEL_SELECTOR,
    LOCAL_REFERENCE,
    OBJECT_REFERENCE,
    PERSISTENT_VOLUME_CLAIM_SPEC,
    POD_SPEC,
    POD_TEMPLATE,
    POLICY_RULE,
    PROTOCOL,
    SERVICE_PORT,
    STATUS,
    SUBJECT,
    TEMPLATE_META,
)

logger = logging.getLogger(__name__)


def _body(kind: str, *fields: FieldRule, **options) -> Struct:
    """Top-level Struct: apiVersion, kind, metadata, the kind's fields, status."""
    return Struct(name=kind, fields=HEADER + fields + (STATUS,), **options)


def _schema(
    api_version: str,
    kind: str,
    *fields: FieldRule,
    cross_refs: Tuple[Check, ...] = (),
    deprecated: Optional[str] = None,
) -> ObjectSchema:
    return ObjectSchema(
        kind=ObjectKind.parse(api_version, kind),
        body=_body(kind, *fields),
        cross_refs=cross_refs,
        namespaced=kind not in CLUSTER_SCOPED_KINDS,
        deprecated=deprecated,
    )


# ============================================================================
# Core (v1)
# ============================================================================

SERVICE_SPEC = Struct(
    name="ServiceSpec",
    fields=(
        opt("selector", STRING_MAP),
        opt("ports", ListOf(SERVICE_PORT)),
        opt("type", enum("ClusterIP", "NodePort", "LoadBalancer", "ExternalName")),
        opt("clusterIP", STR),
        opt("clusterIPs", STRINGS),
        opt("externalIPs", STRINGS),
        opt("externalName", STR),
        opt("sessionAffinity", enum("ClientIP", "None")),
        opt("sessionAffinityConfig", OPEN),
        opt("loadBalancerIP", STR),
        opt("loadBalancerClass", STR),
        opt("loadBalancerSourceRanges", ListOf(Scalar(format="cidr"))),
        opt("allocateLoadBalancerNodePorts", BOOL),
        opt("externalTrafficPolicy", enum("Cluster", "Local")),
        opt("internalTrafficPolicy", enum("Cluster", "Local")),
        opt("healthCheckNodePort", PORT),
        opt("publishNotReadyAddresses", BOOL),
        opt("ipFamilies", ListOf(enum("IPv4", "IPv6"))),
        opt("ipFamilyPolicy", enum("SingleStack", "PreferDualStack", "RequireDualStack")),
        opt("trafficDistribution", STR),
    ),
)

BASE64_MAP = MapOf(Scalar(format="base64"))

PERSISTENT_VOLUME_SPEC = Struct(
    name="PersistentVolumeSpec",
    fields=(
        opt("capacity", RESOURCE_LIST),
        opt("accessModes", ListOf(
            enum("ReadWriteOnce", "ReadOnlyMany", "ReadWriteMany", "ReadWriteOncePod"),
        )),
        opt("persistentVolumeReclaimPolicy", enum("Retain", "Recycle", "Delete")),
        opt("storageClassName", STR),
        opt("volumeMode", enum("Filesystem", "Block")),
        opt("mountOptions", STRINGS),
        opt("claimRef", OBJECT_REFERENCE),
        opt("nodeAffinity", OPEN),
        opt("volumeAttributesClassName", STR),
        opt("hostPath", Struct(
            name="HostPathVolumeSource",
            fields=(req("path", STR), opt("type", STR)),
        )),
        opt("nfs", Struct(
            name="NFSVolumeSource",
            fields=(req("server", STR), req("path", STR), opt("readOnly", BOOL)),
        )),
        opt("local", Struct(name="LocalVolumeSource", fields=(req("path", STR), opt("fsType", STR)))),
        opt("csi", OPEN),
        opt("iscsi", OPEN),
        opt("fc", OPEN),
        opt("awsElasticBlockStore", OPEN),
        opt("gcePersistentDisk", OPEN),
        opt("azureDisk", OPEN),
        opt("azureFile", OPEN),
    ),
    exclusive=((
        "hostPath", "nfs", "local", "csi", "iscsi", "fc",
        "awsElasticBlockStore", "gcePersistentDisk", "azureDisk", "azureFile",
    ),),
)

LIMIT_RANGE_ITEM = Struct(
    name="LimitRangeItem",
    fields=(
        req("type", enum("Container", "Pod", "PersistentVolumeClaim")),
        opt("max", RESOURCE_LIST),
        opt("min", RESOURCE_LIST),
        opt("default", RESOURCE_LIST),
        opt("defaultRequest", RESOURCE_LIST),
        opt("maxLimitRequestRatio", RESOURCE_LIST),
    ),
    ranges=(
        RangeRule("min", "max", per_key=True),
        RangeRule("defaultRequest", "default", per_key=True),
        RangeRule("default", "max", per_key=True),
        RangeRule("min", "defaultRequest", per_key=True),
    ),
)

ENDPOINT_ADDRESS = Struct(
    name="EndpointAddress",
    fields=(
        req("ip", Scalar(format="ip")),
        opt("hostname", STR),
        opt("nodeName", STR),
        opt("targetRef", OBJECT_REFERENCE),
    ),
)

ENDPOINT_SUBSET = Struct(
    name="EndpointSubset",
    fields=(
        opt("addresses", ListOf(ENDPOINT_ADDRESS)),
        opt("notReadyAddresses", ListOf(ENDPOINT_ADDRESS)),
        opt("ports", ListOf(Struct(
            name="EndpointPort",
            fields=(
                req("port", PORT),
                opt("name", STR),
                opt("protocol", PROTOCOL),
                opt("appProtocol", STR),
            ),
        ))),
    ),
)

CORE_SCHEMAS = (
    _schema("v1", "Pod", req("spec", POD_SPEC), cross_refs=POD_PRODUCER_CHECKS),
    _schema("v1", "Service", opt("spec", SERVICE_SPEC), cross_refs=(DANGLING_SELECTOR_CHECK,)),
    _schema(
        "v1", "ConfigMap",
        opt("data", STRING_MAP),
        opt("binaryData", BASE64_MAP),
        opt("immutable", BOOL),
    ),
    _schema(
        "v1", "Secret",
        opt("type", STR),
        opt("data", BASE64_MAP),
        opt("stringData", STRING_MAP),
        opt("immutable", BOOL),
    ),
    _schema("v1", "PersistentVolume", req("spec", PERSISTENT_VOLUME_SPEC)),
    _schema("v1", "PersistentVolumeClaim", req("spec", PERSISTENT_VOLUME_CLAIM_SPEC)),
    _schema(
        "v1", "ServiceAccount",
        opt("secrets", ListOf(OBJECT_REFERENCE)),
        opt("imagePullSecrets", ListOf(LOCAL_REFERENCE)),
        opt("automountServiceAccountToken", BOOL),
    ),
    _schema(
        "v1", "ResourceQuota",
        opt("spec", Struct(
            name="ResourceQuotaSpec",
            fields=(opt("hard", RESOURCE_LIST), opt("scopes", STRINGS), opt("scopeSelector", OPEN)),
        )),
    ),
    _schema(
        "v1", "LimitRange",
        req("spec", Struct(
            name="LimitRangeSpec",
            fields=(req("limits", ListOf(LIMIT_RANGE_ITEM)),),
        )),
    ),
    _schema("v1", "Namespace", opt("spec", Struct(name="NamespaceSpec", fields=(opt("finalizers", STRINGS),)))),
    _schema(
        "v1", "Event",
        req("involvedObject", OBJECT_REFERENCE),
        opt("reason", STR),
        opt("message", STR),
        opt("type", enum("Normal", "Warning")),
        opt("source", Struct(name="EventSource", fields=(opt("component", STR), opt("host", STR)))),
        opt("firstTimestamp", TIME),
        opt("lastTimestamp", TIME),
        opt("eventTime", TIME),
        opt("count", INT),
        opt("action", STR),
        opt("related", OBJECT_REFERENCE),
        opt("reportingComponent", STR),
        opt("reportingInstance", STR),
        opt("series", OPEN),
    ),
    _schema("v1", "Endpoints", opt("subsets", ListOf(ENDPOINT_SUBSET))),
)

# ============================================================================
# Workloads (apps/v1, batch/v1)
# ============================================================================

_REPLICATED_FIELDS = (
    opt("replicas", NON_NEGATIVE),
    req("selector", LABEL_SELECTOR),
    req("template", POD_TEMPLATE),
    opt("minReadySeconds", NON_NEGATIVE),
    opt("revisionHistoryLimit", NON_NEGATIVE),
)

DEPLOYMENT_SPEC = Struct(
    name="DeploymentSpec",
    fields=_REPLICATED_FIELDS + (
        opt("strategy", Struct(
            name="DeploymentStrategy",
            fields=(
                opt("type", enum("Recreate", "RollingUpdate")),
                opt("rollingUpdate", Struct(
                    name="RollingUpdateDeployment",
                    fields=(opt("maxSurge", INT_OR_PERCENT), opt("maxUnavailable", INT_OR_PERCENT)),
                )),
            ),
        )),
        opt("progressDeadlineSeconds", POSITIVE),
        opt("paused", BOOL),
    ),
)

STATEFUL_SET_SPEC = Struct(
    name="StatefulSetSpec",
    fields=_REPLICATED_FIELDS + (
        opt("serviceName", STR),
        opt("podManagementPolicy", enum("OrderedReady", "Parallel")),
        opt("updateStrategy", OPEN),
        opt("volumeClaimTemplates", ListOf(Struct(
            name="PersistentVolumeClaimTemplate",
            fields=(
                opt("apiVersion", STR),
                opt("kind", STR),
                req("metadata", TEMPLATE_META),
                req("spec", PERSISTENT_VOLUME_CLAIM_SPEC),
            ),
        ))),
        opt("persistentVolumeClaimRetentionPolicy", OPEN),
        opt("ordinals", OPEN),
    ),
)

DAEMON_SET_SPEC = Struct(
    name="DaemonSetSpec",
    fields=(
        req("selector", LABEL_SELECTOR),
        req("template", POD_TEMPLATE),
        opt("updateStrategy", OPEN),
        opt("minReadySeconds", NON_NEGATIVE),
        opt("revisionHistoryLimit", NON_NEGATIVE),
    ),
)

REPLICA_SET_SPEC = Struct(name="ReplicaSetSpec", fields=_REPLICATED_FIELDS)

JOB_SPEC = Struct(
    name="JobSpec",
    fields=(
        req("template", JOB_POD_TEMPLATE),
        opt("selector", LABEL_SELECTOR),
        opt("manualSelector", BOOL),
        opt("parallelism", NON_NEGATIVE),
        opt("completions", NON_NEGATIVE),
        opt("completionMode", enum("NonIndexed", "Indexed")),
        opt("backoffLimit", NON_NEGATIVE),
        opt("backoffLimitPerIndex", NON_NEGATIVE),
        opt("maxFailedIndexes", NON_NEGATIVE),
        opt("activeDeadlineSeconds", POSITIVE),
        opt("ttlSecondsAfterFinished", NON_NEGATIVE),
        opt("suspend", BOOL),
        opt("podFailurePolicy", OPEN),
        opt("successPolicy", OPEN),
        opt("podReplacementPolicy", enum("TerminatingOrFailed", "Failed")),
    ),
)

CRON_JOB_SPEC = Struct(
    name="CronJobSpec",
    fields=(
        req("schedule", Scalar(format="cron")),
        req("jobTemplate", Struct(
            name="JobTemplateSpec",
            fields=(opt("metadata", TEMPLATE_META), req("spec", JOB_SPEC)),
        )),
        opt("timeZone", STR),
        opt("concurrencyPolicy", enum("Allow", "Forbid", "Replace")),
        opt("startingDeadlineSeconds", NON_NEGATIVE),
        opt("successfulJobsHistoryLimit", NON_NEGATIVE),
        opt("failedJobsHistoryLimit", NON_NEGATIVE),
        opt("suspend", BOOL),
    ),
)

WORKLOAD_SCHEMAS = (
    _schema("apps/v1", "Deployment", req("spec", DEPLOYMENT_SPEC), cross_refs=WORKLOAD_CHECKS),
    _schema("apps/v1", "StatefulSet", req("spec", STATEFUL_SET_SPEC), cross_refs=WORKLOAD_CHECKS),
    _schema("apps/v1", "DaemonSet", req("spec", DAEMON_SET_SPEC), cross_refs=WORKLOAD_CHECKS),
    _schema("apps/v1", "ReplicaSet", req("spec", REPLICA_SET_SPEC), cross_refs=WORKLOAD_CHECKS),
    _schema("batch/v1", "Job", req("spec", JOB_SPEC), cross_refs=WORKLOAD_CHECKS),
    _schema("batch/v1", "CronJob", req("spec", CRON_JOB_SPEC), cross_refs=POD_PRODUCER_CHECKS),
)

# ============================================================================
# Networking (networking.k8s.io/v1)
# ============================================================================

INGRESS_BACKEND = Struct(
    name="IngressBackend",
    fields=(
        opt("service", Struct(
            name="IngressServiceBackend",
            fields=(
                req("name", STR),
                opt("port", Struct(
                    name="ServiceBackendPort",
                    fields=(opt("number", PORT), opt("name", STR)),
                    exclusive=(("number", "name"),),
                )),
            ),
        )),
        opt("resource", Struct(
            name="TypedLocalObjectReference",
            fields=(opt("apiGroup", STR), req("kind", STR), req("name", STR)),
        )),
    ),
    one_of=(("service", "resource"),),
    exclusive=(("service", "resource"),),
)

INGRESS_SPEC = Struct(
    name="IngressSpec",
    fields=(
        opt("ingressClassName", STR),
        opt("defaultBackend", INGRESS_BACKEND),
        opt("tls", ListOf(Struct(
            name="IngressTLS", fields=(opt("hosts", STRINGS), opt("secretName", STR)),
        ))),
        opt("rules", ListOf(Struct(
            name="IngressRule",
            fields=(
                opt("host", STR),
                opt("http", Struct(
                    name="HTTPIngressRuleValue",
                    fields=(req("paths", ListOf(Struct(
                        name="HTTPIngressPath",
                        fields=(
                            opt("path", STR),
                            req("pathType", enum("Exact", "Prefix", "ImplementationSpecific")),
                            req("backend", INGRESS_BACKEND),
                        ),
                    ), min_items=1)),),
                )),
            ),
        ))),
    ),
)

NETWORK_POLICY_PEER = Struct(
    name="NetworkPolicyPeer",
    fields=(
        opt("ipBlock", Struct(
            name="IPBlock",
            fields=(
                req("cidr", Scalar(format="cidr")),
                opt("except", ListOf(Scalar(format="cidr"))),
            ),
        )),
        opt("podSelector", LABEL_SELECTOR),
        opt("namespaceSelector", LABEL_SELECTOR),
    ),
)

NETWORK_POLICY_PORT = Struct(
    name="NetworkPolicyPort",
    fields=(opt("protocol", PROTOCOL), opt("port", INT_OR_STR), opt("endPort", PORT)),
)

NETWORK_POLICY_SPEC = Struct(
    name="NetworkPolicySpec",
    fields=(
        req("podSelector", LABEL_SELECTOR),
        opt("policyTypes", ListOf(enum("Ingress", "Egress"))),
        opt("ingress", ListOf(Struct(
            name="NetworkPolicyIngressRule",
            fields=(opt("from", ListOf(NETWORK_POLICY_PEER)), opt("ports", ListOf(NETWORK_POLICY_PORT))),
        ))),
        opt("egress", ListOf(Struct(
            name="NetworkPolicyEgressRule",
            fields=(opt("to", ListOf(NETWORK_POLICY_PEER)), opt("ports", ListOf(NETWORK_POLICY_PORT))),
        ))),
    ),
)

NETWORKING_SCHEMAS = (
    _schema(
        "networking.k8s.io/v1", "Ingress",
        opt("spec", INGRESS_SPEC),
        cross_refs=(DANGLING_SERVICE_BACKEND_CHECK,),
    ),
    _schema(
        "networking.k8s.io/v1", "NetworkPolicy",
        req("spec", NETWORK_POLICY_SPEC),
        cross_refs=(DANGLING_SELECTOR_CHECK,),
    ),
)

# ============================================================================
# RBAC (rbac.authorization.k8s.io/v1)
# ============================================================================

RBAC = "rbac.authorization.k8s.io/v1"


def _role_ref(*kinds: str) -> Struct:
    return Struct(
        name="RoleRef",
        fields=(req("apiGroup", STR), req("kind", enum(*kinds)), req("name", STR)),
    )


RBAC_SCHEMAS = (
    _schema(RBAC, "Role", opt("rules", ListOf(POLICY_RULE))),
    _schema(
        RBAC, "ClusterRole",
        opt("rules", ListOf(POLICY_RULE)),
        opt("aggregationRule", Struct(
            name="AggregationRule", fields=(opt("clusterRoleSelectors", ListOf(LABEL_SELECTOR)),),
        )),
    ),
    _schema(
        RBAC, "RoleBinding",
        opt("subjects", ListOf(SUBJECT)),
        req("roleRef", _role_ref("Role", "ClusterRole")),
        cross_refs=(DANGLING_ROLE_REF_CHECK,),
    ),
    _schema(
        RBAC, "ClusterRoleBinding",
        opt("subjects", ListOf(SUBJECT)),
        req("roleRef", _role_ref("ClusterRole")),
        cross_refs=(DANGLING_ROLE_REF_CHECK,),
    ),
)

# ============================================================================
# Autoscaling, policy, API extensions
# ============================================================================

SCALE_TARGET_REF = Struct(
    name="CrossVersionObjectReference",
    fields=(opt("apiVersion", STR), req("kind", STR), req("name", STR)),
)

METRIC_TARGET = Struct(
    name="MetricTarget",
    fields=(
        req("type", enum("Utilization", "Value", "AverageValue")),
        opt("value", QUANTITY),
        opt("averageValue", QUANTITY),
        opt("averageUtilization", POSITIVE),
    ),
)

METRIC_SPEC = Struct(
    name="MetricSpec",
    fields=(
        req("type", enum("Resource", "Pods", "Object", "External", "ContainerResource")),
        opt("resource", Struct(
            name="ResourceMetricSource", fields=(req("name", STR), req("target", METRIC_TARGET)),
        )),
        opt("containerResource", Struct(
            name="ContainerResourceMetricSource",
            fields=(req("name", STR), req("container", STR), req("target", METRIC_TARGET)),
        )),
        opt("pods", OPEN),
        opt("object", OPEN),
        opt("external", OPEN),
    ),
)

HPA_V2_SPEC = Struct(
    name="HorizontalPodAutoscalerSpec",
    fields=(
        req("scaleTargetRef", SCALE_TARGET_REF),
        opt("minReplicas", POSITIVE),
        req("maxReplicas", POSITIVE),
        opt("metrics", ListOf(METRIC_SPEC)),
        opt("behavior", OPEN),
    ),
    ranges=(RangeRule("minReplicas", "maxReplicas"),),
)

HPA_V1_SPEC = Struct(
    name="HorizontalPodAutoscalerSpec",
    fields=(
        req("scaleTargetRef", SCALE_TARGET_REF),
        opt("minReplicas", POSITIVE),
        req("maxReplicas", POSITIVE),
        opt("targetCPUUtilizationPercentage", POSITIVE),
    ),
    ranges=(RangeRule("minReplicas", "maxReplicas"),),
)

PDB_SPEC = Struct(
    name="PodDisruptionBudgetSpec",
    fields=(
        opt("minAvailable", INT_OR_PERCENT),
        opt("maxUnavailable", INT_OR_PERCENT),
        opt("selector", LABEL_SELECTOR),
        opt("unhealthyPodEvictionPolicy", enum("IfHealthyBudget", "AlwaysAllow")),
    ),
    exclusive=(("minAvailable", "maxUnavailable"),),
)

CRD_VERSION = Struct(
    name="CustomResourceDefinitionVersion",
    fields=(
        req("name", STR),
        req("served", BOOL),
        req("storage", BOOL),
        opt("schema", Struct(
            name="CustomResourceValidation", fields=(opt("openAPIV3Schema", ANY),),
        )),
        opt("subresources", OPEN),
        opt("additionalPrinterColumns", ListOf(OPEN)),
        opt("selectableFields", ListOf(OPEN)),
        opt("deprecated", BOOL),
        opt("deprecationWarning", STR),
    ),
)

CRD_SPEC = Struct(
    name="CustomResourceDefinitionSpec",
    fields=(
        req("group", STR),
        req("names", Struct(
            name="CustomResourceDefinitionNames",
            fields=(
                req("plural", STR),
                req("kind", STR),
                opt("singular", STR),
                opt("listKind", STR),
                opt("shortNames", STRINGS),
                opt("categories", STRINGS),
            ),
        )),
        req("scope", enum("Namespaced", "Cluster")),
        req("versions", ListOf(CRD_VERSION, min_items=1)),
        opt("conversion", OPEN),
        opt("preserveUnknownFields", BOOL),
    ),
)


def _psp_strategy(name: str, *rules: str) -> Struct:
    return Struct(
        name=name,
        fields=(req("rule", enum(*rules)), opt("ranges", ListOf(OPEN)), opt("seLinuxOptions", OPEN)),
    )


PSP_SPEC = Struct(
    name="PodSecurityPolicySpec",
    fields=(
        opt("privileged", BOOL),
        opt("volumes", STRINGS),
        opt("hostNetwork", BOOL),
        opt("hostIPC", BOOL),
        opt("hostPID", BOOL),
        opt("hostPorts", ListOf(Struct(name="HostPortRange", fields=(req("min", PORT), req("max", PORT))))),
        opt("allowPrivilegeEscalation", BOOL),
        opt("defaultAllowPrivilegeEscalation", BOOL),
        opt("readOnlyRootFilesystem", BOOL),
        opt("requiredDropCapabilities", STRINGS),
        opt("allowedCapabilities", STRINGS),
        opt("defaultAddCapabilities", STRINGS),
        opt("allowedHostPaths", ListOf(OPEN)),
        req("runAsUser", _psp_strategy("RunAsUserStrategyOptions", "MustRunAs", "MustRunAsNonRoot", "RunAsAny")),
        opt("runAsGroup", _psp_strategy("RunAsGroupStrategyOptions", "MustRunAs", "MayRunAs", "RunAsAny")),
        req("seLinux", _psp_strategy("SELinuxStrategyOptions", "MustRunAs", "RunAsAny")),
        req("supplementalGroups", _psp_strategy(
            "SupplementalGroupsStrategyOptions", "MustRunAs", "MayRunAs", "RunAsAny",
        )),
        req("fsGroup", _psp_strategy("FSGroupStrategyOptions", "MustRunAs", "MayRunAs", "RunAsAny")),
    ),
)

EXTENSION_SCHEMAS = (
    _schema(
        "autoscaling/v2", "HorizontalPodAutoscaler",
        req("spec", HPA_V2_SPEC),
        cross_refs=(DANGLING_SCALE_TARGET_CHECK,),
    ),
    _schema(
        "autoscaling/v1", "HorizontalPodAutoscaler",
        req("spec", HPA_V1_SPEC),
        cross_refs=(DANGLING_SCALE_TARGET_CHECK,),
        deprecated=HPA_V1_SUPERSEDED,
    ),
    _schema(
        "policy/v1", "PodDisruptionBudget",
        req("spec", PDB_SPEC),
        cross_refs=(DANGLING_SELECTOR_CHECK,),
    ),
    _schema("apiextensions.k8s.io/v1", "CustomResourceDefinition", req("spec", CRD_SPEC)),
    _schema("policy/v1beta1", "PodSecurityPolicy", req("spec", PSP_SPEC), deprecated=PSP_REMOVED),
)

DEFAULT_SCHEMAS = CORE_SCHEMAS + WORKLOAD_SCHEMAS + NETWORKING_SCHEMAS + RBAC_SCHEMAS + EXTENSION_SCHEMAS


def build_default_catalog() -> RuleCatalog:
    """Build the frozen catalog of built-in kinds.

    Returns:
        Frozen RuleCatalog

    Raises:
        DuplicateSchema: If two built-in schemas share an ObjectKind
    """
    catalog = RuleCatalog()
    for schema in DEFAULT_SCHEMAS:
        catalog.register(schema)
    logger.debug(f"Default catalog holds {len(catalog)} schema(s)")
    return catalog.freeze()
