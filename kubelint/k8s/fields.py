"""Reusable K8s structures shared by several kinds.

Object metadata, label selectors, Pod specs and their building blocks are
declared once here and composed by ``kubelint.k8s.catalog``.
"""

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
    ListOf,
    RangeRule,
    Scalar,
    Struct,
    enum,
    opt,
    req,
)

PROTOCOL = enum("TCP", "UDP", "SCTP")
DNS_LABEL = Scalar(format="dns-label")
INT_OR_PERCENT = Scalar("int-or-string", format="percent", minimum=0)

OWNER_REFERENCE = Struct(
    name="OwnerReference",
    fields=(
        req("apiVersion", STR),
        req("kind", STR),
        req("name", STR),
        req("uid", STR),
        opt("controller", BOOL),
        opt("blockOwnerDeletion", BOOL),
    ),
)

_META_FIELDS = (
    opt("name", STR),
    opt("generateName", STR),
    opt("namespace", STR),
    opt("labels", STRING_MAP),
    opt("annotations", STRING_MAP),
    opt("uid", STR),
    opt("resourceVersion", STR),
    opt("generation", INT),
    opt("creationTimestamp", TIME),
    opt("deletionTimestamp", TIME),
    opt("deletionGracePeriodSeconds", INT),
    opt("ownerReferences", ListOf(OWNER_REFERENCE)),
    opt("finalizers", STRINGS),
    opt("managedFields", ANY),
    opt("selfLink", STR),
)

# metadata of a top-level object: needs a name (or generateName)
OBJECT_META = Struct(name="ObjectMeta", fields=_META_FIELDS, one_of=(("name", "generateName"),))

# metadata inside templates: name is optional
TEMPLATE_META = Struct(name="ObjectMeta", fields=_META_FIELDS)

LABEL_SELECTOR = Struct(
    name="LabelSelector",
    fields=(
        opt("matchLabels", STRING_MAP),
        opt("matchExpressions", ListOf(Struct(
            name="LabelSelectorRequirement",
            fields=(
                req("key", STR),
                req("operator", enum("In", "NotIn", "Exists", "DoesNotExist")),
                opt("values", STRINGS),
            ),
        ))),
    ),
)

OBJECT_REFERENCE = Struct(
    name="ObjectReference",
    fields=(
        opt("apiVersion", STR),
        opt("kind", STR),
        opt("name", STR),
        opt("namespace", STR),
        opt("uid", STR),
        opt("resourceVersion", STR),
        opt("fieldPath", STR),
    ),
)

LOCAL_REFERENCE = Struct(name="LocalObjectReference", fields=(opt("name", STR),))

KEY_SELECTOR = Struct(
    name="KeySelector",
    fields=(req("key", STR), opt("name", STR), opt("optional", BOOL)),
)

ENV_VAR = Struct(
    name="EnvVar",
    fields=(
        req("name", STR),
        opt("value", STR),
        opt("valueFrom", Struct(
            name="EnvVarSource",
            fields=(
                opt("configMapKeyRef", KEY_SELECTOR),
                opt("secretKeyRef", KEY_SELECTOR),
                opt("fieldRef", Struct(
                    name="ObjectFieldSelector",
                    fields=(req("fieldPath", STR), opt("apiVersion", STR)),
                )),
                opt("resourceFieldRef", Struct(
                    name="ResourceFieldSelector",
                    fields=(
                        req("resource", STR),
                        opt("containerName", STR),
                        opt("divisor", QUANTITY),
                    ),
                )),
            ),
        )),
    ),
    exclusive=(("value", "valueFrom"),),
)

ENV_FROM_SOURCE = Struct(
    name="EnvFromSource",
    fields=(
        opt("prefix", STR),
        opt("configMapRef", Struct(name="ConfigMapEnvSource", fields=(req("name", STR), opt("optional", BOOL)))),
        opt("secretRef", Struct(name="SecretEnvSource", fields=(req("name", STR), opt("optional", BOOL)))),
    ),
)

CONTAINER_PORT = Struct(
    name="ContainerPort",
    fields=(
        req("containerPort", PORT),
        opt("name", STR),
        opt("protocol", PROTOCOL),
        opt("hostPort", PORT),
        opt("hostIP", Scalar(format="ip")),
    ),
)

RESOURCE_REQUIREMENTS = Struct(
    name="ResourceRequirements",
    fields=(
        opt("limits", RESOURCE_LIST),
        opt("requests", RESOURCE_LIST),
        opt("claims", ListOf(Struct(name="ResourceClaim", fields=(req("name", STR),)))),
    ),
    ranges=(RangeRule("requests", "limits", per_key=True),),
)

VOLUME_MOUNT = Struct(
    name="VolumeMount",
    fields=(
        req("name", STR),
        req("mountPath", STR),
        opt("readOnly", BOOL),
        opt("subPath", STR),
        opt("subPathExpr", STR),
        opt("mountPropagation", enum("None", "HostToContainer", "Bidirectional")),
        opt("recursiveReadOnly", STR),
    ),
    exclusive=(("subPath", "subPathExpr"),),
)

HANDLER_FIELDS = (
    opt("exec", Struct(name="ExecAction", fields=(opt("command", STRINGS),))),
    opt("httpGet", Struct(
        name="HTTPGetAction",
        fields=(
            req("port", INT_OR_STR),
            opt("path", STR),
            opt("host", STR),
            opt("scheme", enum("HTTP", "HTTPS")),
            opt("httpHeaders", ListOf(Struct(
                name="HTTPHeader", fields=(req("name", STR), req("value", STR)),
            ))),
        ),
    )),
    opt("tcpSocket", Struct(name="TCPSocketAction", fields=(req("port", INT_OR_STR), opt("host", STR)))),
    opt("grpc", Struct(name="GRPCAction", fields=(req("port", PORT), opt("service", STR)))),
)

PROBE = Struct(
    name="Probe",
    fields=HANDLER_FIELDS + (
        opt("initialDelaySeconds", NON_NEGATIVE),
        opt("periodSeconds", POSITIVE),
        opt("timeoutSeconds", POSITIVE),
        opt("successThreshold", POSITIVE),
        opt("failureThreshold", POSITIVE),
        opt("terminationGracePeriodSeconds", POSITIVE),
    ),
    exclusive=(("exec", "httpGet", "tcpSocket", "grpc"),),
)

LIFECYCLE_HANDLER = Struct(
    name="LifecycleHandler",
    fields=HANDLER_FIELDS[:3] + (opt("sleep", Struct(name="SleepAction", fields=(req("seconds", INT),))),),
)

CAPABILITIES = Struct(name="Capabilities", fields=(opt("add", STRINGS), opt("drop", STRINGS)))

SECURITY_CONTEXT = Struct(
    name="SecurityContext",
    fields=(
        opt("runAsUser", NON_NEGATIVE),
        opt("runAsGroup", NON_NEGATIVE),
        opt("runAsNonRoot", BOOL),
        opt("privileged", BOOL),
        opt("allowPrivilegeEscalation", BOOL),
        opt("readOnlyRootFilesystem", BOOL),
        opt("capabilities", CAPABILITIES),
        opt("procMount", enum("Default", "Unmasked")),
        opt("seLinuxOptions", OPEN),
        opt("seccompProfile", OPEN),
        opt("appArmorProfile", OPEN),
        opt("windowsOptions", OPEN),
    ),
)

CONTAINER = Struct(
    name="Container",
    fields=(
        req("name", DNS_LABEL),
        req("image", STR),
        opt("command", STRINGS),
        opt("args", STRINGS),
        opt("workingDir", STR),
        opt("ports", ListOf(CONTAINER_PORT)),
        opt("env", ListOf(ENV_VAR)),
        opt("envFrom", ListOf(ENV_FROM_SOURCE)),
        opt("resources", RESOURCE_REQUIREMENTS),
        opt("resizePolicy", ANY),
        opt("restartPolicy", enum("Always")),
        opt("volumeMounts", ListOf(VOLUME_MOUNT)),
        opt("volumeDevices", ListOf(Struct(
            name="VolumeDevice", fields=(req("name", STR), req("devicePath", STR)),
        ))),
        opt("livenessProbe", PROBE),
        opt("readinessProbe", PROBE),
        opt("startupProbe", PROBE),
        opt("lifecycle", Struct(
            name="Lifecycle",
            fields=(opt("postStart", LIFECYCLE_HANDLER), opt("preStop", LIFECYCLE_HANDLER)),
        )),
        opt("terminationMessagePath", STR),
        opt("terminationMessagePolicy", enum("File", "FallbackToLogsOnError")),
        opt("imagePullPolicy", enum("Always", "IfNotPresent", "Never")),
        opt("securityContext", SECURITY_CONTEXT),
        opt("stdin", BOOL),
        opt("stdinOnce", BOOL),
        opt("tty", BOOL),
    ),
)

KEY_TO_PATH = Struct(
    name="KeyToPath",
    fields=(req("key", STR), req("path", STR), opt("mode", INT)),
)

VOLUME = Struct(
    name="Volume",
    fields=(
        req("name", DNS_LABEL),
        opt("configMap", Struct(
            name="ConfigMapVolumeSource",
            fields=(
                opt("name", STR),
                opt("items", ListOf(KEY_TO_PATH)),
                opt("defaultMode", INT),
                opt("optional", BOOL),
            ),
        )),
        opt("secret", Struct(
            name="SecretVolumeSource",
            fields=(
                opt("secretName", STR),
                opt("items", ListOf(KEY_TO_PATH)),
                opt("defaultMode", INT),
                opt("optional", BOOL),
            ),
        )),
        opt("emptyDir", Struct(
            name="EmptyDirVolumeSource",
            fields=(opt("medium", enum("", "Memory")), opt("sizeLimit", QUANTITY)),
        )),
        opt("hostPath", Struct(
            name="HostPathVolumeSource",
            fields=(
                req("path", STR),
                opt("type", enum(
                    "", "DirectoryOrCreate", "Directory", "FileOrCreate", "File",
                    "Socket", "CharDevice", "BlockDevice",
                )),
            ),
        )),
        opt("persistentVolumeClaim", Struct(
            name="PersistentVolumeClaimVolumeSource",
            fields=(req("claimName", STR), opt("readOnly", BOOL)),
        )),
        opt("nfs", Struct(
            name="NFSVolumeSource",
            fields=(req("server", STR), req("path", STR), opt("readOnly", BOOL)),
        )),
        opt("projected", OPEN),
        opt("downwardAPI", OPEN),
        opt("csi", OPEN),
        opt("ephemeral", OPEN),
        opt("image", OPEN),
    ),
    exclusive=((
        "configMap", "secret", "emptyDir", "hostPath", "persistentVolumeClaim",
        "nfs", "projected", "downwardAPI", "csi", "ephemeral", "image",
    ),),
)

TOLERATION = Struct(
    name="Toleration",
    fields=(
        opt("key", STR),
        opt("operator", enum("Exists", "Equal")),
        opt("value", STR),
        opt("effect", enum("", "NoSchedule", "PreferNoSchedule", "NoExecute")),
        opt("tolerationSeconds", INT),
    ),
)

_POD_SPEC_FIELDS = (
    req("containers", ListOf(CONTAINER, min_items=1)),
    opt("initContainers", ListOf(CONTAINER)),
    opt("ephemeralContainers", ListOf(OPEN)),
    opt("volumes", ListOf(VOLUME)),
    opt("restartPolicy", enum("Always", "OnFailure", "Never")),
    opt("terminationGracePeriodSeconds", NON_NEGATIVE),
    opt("activeDeadlineSeconds", POSITIVE),
    opt("dnsPolicy", enum("ClusterFirstWithHostNet", "ClusterFirst", "Default", "None")),
    opt("dnsConfig", OPEN),
    opt("nodeSelector", STRING_MAP),
    opt("nodeName", STR),
    opt("serviceAccountName", STR),
    opt("serviceAccount", STR),
    opt("automountServiceAccountToken", BOOL),
    opt("hostNetwork", BOOL),
    opt("hostPID", BOOL),
    opt("hostIPC", BOOL),
    opt("hostUsers", BOOL),
    opt("shareProcessNamespace", BOOL),
    opt("securityContext", OPEN),
    opt("imagePullSecrets", ListOf(LOCAL_REFERENCE)),
    opt("hostname", STR),
    opt("subdomain", STR),
    opt("affinity", OPEN),
    opt("schedulerName", STR),
    opt("tolerations", ListOf(TOLERATION)),
    opt("hostAliases", ListOf(Struct(
        name="HostAlias", fields=(req("ip", Scalar(format="ip")), opt("hostnames", STRINGS)),
    ))),
    opt("priorityClassName", STR),
    opt("priority", INT),
    opt("readinessGates", ListOf(OPEN)),
    opt("runtimeClassName", STR),
    opt("enableServiceLinks", BOOL),
    opt("preemptionPolicy", enum("PreemptLowerPriority", "Never")),
    opt("overhead", RESOURCE_LIST),
    opt("topologySpreadConstraints", ListOf(OPEN)),
    opt("setHostnameAsFQDN", BOOL),
    opt("os", Struct(name="PodOS", fields=(req("name", enum("linux", "windows")),))),
    opt("schedulingGates", ListOf(OPEN)),
    opt("resourceClaims", ListOf(OPEN)),
)

POD_SPEC = Struct(name="PodSpec", fields=_POD_SPEC_FIELDS)

# Pods created by Jobs must not restart in place
JOB_POD_SPEC = POD_SPEC.extend(req("restartPolicy", enum("OnFailure", "Never")))

POD_TEMPLATE = Struct(
    name="PodTemplateSpec",
    fields=(opt("metadata", TEMPLATE_META), req("spec", POD_SPEC)),
)

JOB_POD_TEMPLATE = Struct(
    name="PodTemplateSpec",
    fields=(opt("metadata", TEMPLATE_META), req("spec", JOB_POD_SPEC)),
)

PERSISTENT_VOLUME_CLAIM_SPEC = Struct(
    name="PersistentVolumeClaimSpec",
    fields=(
        opt("accessModes", ListOf(
            enum("ReadWriteOnce", "ReadOnlyMany", "ReadWriteMany", "ReadWriteOncePod"),
        )),
        opt("resources", Struct(
            name="VolumeResourceRequirements",
            fields=(opt("requests", RESOURCE_LIST), opt("limits", RESOURCE_LIST)),
            ranges=(RangeRule("requests", "limits", per_key=True),),
        )),
        opt("storageClassName", STR),
        opt("volumeName", STR),
        opt("volumeMode", enum("Filesystem", "Block")),
        opt("selector", LABEL_SELECTOR),
        opt("dataSource", OPEN),
        opt("dataSourceRef", OPEN),
        opt("volumeAttributesClassName", STR),
    ),
)

SERVICE_PORT = Struct(
    name="ServicePort",
    fields=(
        req("port", PORT),
        opt("targetPort", INT_OR_STR),
        opt("protocol", PROTOCOL),
        opt("name", STR),
        opt("nodePort", PORT),
        opt("appProtocol", STR),
    ),
)

POLICY_RULE = Struct(
    name="PolicyRule",
    fields=(
        req("verbs", STRINGS),
        opt("apiGroups", STRINGS),
        opt("resources", STRINGS),
        opt("resourceNames", STRINGS),
        opt("nonResourceURLs", STRINGS),
    ),
)

SUBJECT = Struct(
    name="Subject",
    fields=(
        req("kind", enum("User", "Group", "ServiceAccount")),
        req("name", STR),
        opt("apiGroup", STR),
        opt("namespace", STR),
    ),
)

# Common Struct fields for top-level objects; kinds add their own body fields
HEADER = (req("apiVersion", STR), req("kind", STR), req("metadata", OBJECT_META))
STATUS = opt("status", ANY)
