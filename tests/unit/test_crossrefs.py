"""Tests for cross-reference rules and the resolver."""

from kubelint.core.classifier import classify
from kubelint.core.loader import load_documents
from kubelint.core.resolver import resolve
from kubelint.k8s.catalog import build_default_catalog
from kubelint.k8s.crossrefs import (
    DANGLING_CONFIG_REFERENCE,
    DANGLING_ROLE_REF,
    DANGLING_SCALE_TARGET,
    DANGLING_SELECTOR,
    DANGLING_SERVICE_BACKEND,
    SELECTOR_TEMPLATE_MISMATCH,
    VOLUME_MOUNT_MISMATCH,
)

CATALOG = build_default_catalog()

SERVICE = """apiVersion: v1
kind: Service
metadata:
  name: my-service
spec:
  selector:
    app: my-app
  ports:
    - port: 80
"""

DEPLOYMENT = """apiVersion: apps/v1
kind: Deployment
metadata:
  name: my-deployment
spec:
  selector:
    matchLabels:
      app: my-app
  template:
    metadata:
      labels:
        app: my-app
        tier: web
    spec:
      containers:
        - name: web
          image: nginx
"""


def _resolve(*texts):
    text = "---\n".join(texts)
    batch = [classify(document, CATALOG) for document in load_documents(text)]
    return resolve(batch, CATALOG)


def _rule_ids(findings):
    return [f.rule_id for f in findings]


# ============================================================================
# Selector pass
# ============================================================================


class TestDanglingSelector:
    """Tests for xref.danglingSelector."""

    def test_service_without_pods_warns(self):
        """Test that a Service selecting nothing yields one warning."""
        findings = _resolve(SERVICE)

        assert _rule_ids(findings) == [DANGLING_SELECTOR]
        assert findings[0].severity == "warning"
        assert findings[0].path == "spec.selector"
        assert findings[0].line == 7
        assert "app=my-app" in findings[0].message

    def test_service_with_matching_deployment(self):
        """Test that a matching Pod template satisfies the selector."""
        assert _resolve(SERVICE, DEPLOYMENT) == []

    def test_namespace_mismatch(self):
        """Test that producers in another namespace do not count."""
        service = SERVICE.replace("  name: my-service\n", "  name: my-service\n  namespace: a\n")
        deployment = DEPLOYMENT.replace(
            "  name: my-deployment\n", "  name: my-deployment\n  namespace: b\n"
        )

        assert _rule_ids(_resolve(service, deployment)) == [DANGLING_SELECTOR]

    def test_empty_network_policy_selector_is_skipped(self):
        """Test that an empty podSelector selects everything."""
        policy = "apiVersion: networking.k8s.io/v1\nkind: NetworkPolicy\nmetadata:\n  name: np\nspec:\n  podSelector: {}\n"
        assert _resolve(policy) == []

    def test_pdb_selector(self):
        """Test that PodDisruptionBudget selectors are checked."""
        pdb = """apiVersion: policy/v1
kind: PodDisruptionBudget
metadata:
  name: pdb
spec:
  minAvailable: 1
  selector:
    matchLabels:
      app: other
"""
        findings = _resolve(pdb, DEPLOYMENT)

        assert _rule_ids(findings) == [DANGLING_SELECTOR]
        assert findings[0].path == "spec.selector.matchLabels"


# ============================================================================
# Name pass
# ============================================================================


class TestNameReferences:
    """Tests for name-reference rules."""

    def test_dangling_role_ref(self):
        """Test a RoleBinding naming a missing Role."""
        binding = """apiVersion: rbac.authorization.k8s.io/v1
kind: RoleBinding
metadata:
  name: read-pods
roleRef:
  apiGroup: rbac.authorization.k8s.io
  kind: Role
  name: pod-reader
"""
        role = """apiVersion: rbac.authorization.k8s.io/v1
kind: Role
metadata:
  name: pod-reader
rules: []
"""
        findings = _resolve(binding)

        assert _rule_ids(findings) == [DANGLING_ROLE_REF]
        assert findings[0].path == "roleRef.name"
        assert _resolve(binding, role) == []

    def test_role_ref_kind_must_match(self):
        """Test that a ClusterRole does not satisfy a Role reference."""
        binding = """apiVersion: rbac.authorization.k8s.io/v1
kind: RoleBinding
metadata:
  name: rb
roleRef:
  apiGroup: rbac.authorization.k8s.io
  kind: Role
  name: admin
"""
        cluster_role = """apiVersion: rbac.authorization.k8s.io/v1
kind: ClusterRole
metadata:
  name: admin
"""
        assert _rule_ids(_resolve(binding, cluster_role)) == [DANGLING_ROLE_REF]

    def test_dangling_service_backend(self):
        """Test an Ingress backend naming a missing Service."""
        ingress = """apiVersion: networking.k8s.io/v1
kind: Ingress
metadata:
  name: web
spec:
  rules:
    - http:
        paths:
          - path: /
            pathType: Prefix
            backend:
              service:
                name: missing
                port:
                  number: 80
"""
        findings = _resolve(ingress)

        assert _rule_ids(findings) == [DANGLING_SERVICE_BACKEND]
        assert findings[0].path == "spec.rules[0].http.paths[0].backend.service.name"

    def test_dangling_scale_target(self):
        """Test an HPA targeting a missing Deployment."""
        hpa = """apiVersion: autoscaling/v2
kind: HorizontalPodAutoscaler
metadata:
  name: hpa
spec:
  scaleTargetRef:
    apiVersion: apps/v1
    kind: Deployment
    name: my-deployment
  maxReplicas: 3
"""
        assert _rule_ids(_resolve(hpa)) == [DANGLING_SCALE_TARGET]
        assert _resolve(hpa, DEPLOYMENT) == []

    def test_dangling_config_references(self):
        """Test ConfigMap, Secret and ServiceAccount references from a Pod."""
        pod = """apiVersion: v1
kind: Pod
metadata:
  name: p
spec:
  serviceAccountName: builder
  containers:
    - name: app
      image: app
      envFrom:
        - secretRef:
            name: creds
      env:
        - name: OPTIONAL
          valueFrom:
            configMapKeyRef:
              name: maybe
              key: k
              optional: true
  volumes:
    - name: cfg
      configMap:
        name: settings
"""
        findings = _resolve(pod)

        assert _rule_ids(findings) == [DANGLING_CONFIG_REFERENCE] * 3
        assert sorted(f.path for f in findings) == [
            "spec.containers[0].envFrom[0].secretRef.name",
            "spec.serviceAccountName",
            "spec.volumes[0].configMap.name",
        ]

    def test_config_reference_satisfied(self):
        """Test that referenced objects in the batch satisfy the rule."""
        pod = """apiVersion: v1
kind: Pod
metadata:
  name: p
spec:
  containers:
    - name: app
      image: app
  volumes:
    - name: data
      persistentVolumeClaim:
        claimName: data
"""
        claim = """apiVersion: v1
kind: PersistentVolumeClaim
metadata:
  name: data
spec:
  accessModes: [ReadWriteOnce]
"""
        assert _resolve(pod, claim) == []


# ============================================================================
# Volume pass
# ============================================================================


class TestVolumeRules:
    """Tests for volume-pass rules."""

    def test_volume_mount_mismatch(self):
        """Test a mount naming an undeclared volume."""
        pod = """apiVersion: v1
kind: Pod
metadata:
  name: volume-demo
spec:
  containers:
    - name: web
      image: nginx
      volumeMounts:
        - name: html-volume
          mountPath: /usr/share/nginx/html
"""
        findings = _resolve(pod)

        assert _rule_ids(findings) == [VOLUME_MOUNT_MISMATCH]
        assert findings[0].severity == "error"
        assert findings[0].path == "spec.containers[0].volumeMounts[0].name"
        assert findings[0].line == 10

    def test_stateful_set_claim_templates_count_as_volumes(self):
        """Test that volumeClaimTemplates satisfy mounts."""
        stateful_set = """apiVersion: apps/v1
kind: StatefulSet
metadata:
  name: db
spec:
  selector:
    matchLabels:
      app: db
  template:
    metadata:
      labels:
        app: db
    spec:
      containers:
        - name: db
          image: postgres
          volumeMounts:
            - name: data
              mountPath: /data
  volumeClaimTemplates:
    - metadata:
        name: data
      spec:
        accessModes: [ReadWriteOnce]
"""
        assert _resolve(stateful_set) == []

    def test_selector_template_mismatch(self):
        """Test a workload whose selector does not match its template."""
        deployment = DEPLOYMENT.replace("      app: my-app\n  template", "      app: other\n  template")
        findings = _resolve(deployment)

        assert _rule_ids(findings) == [SELECTOR_TEMPLATE_MISMATCH]
        assert findings[0].severity == "error"
        assert findings[0].path == "spec.selector.matchLabels"


# ============================================================================
# Resolver ordering
# ============================================================================


class TestResolverOrdering:
    """Tests for pass ordering."""

    def test_passes_run_in_order(self):
        """Test selector, then name, then volume findings."""
        pod = """apiVersion: v1
kind: Pod
metadata:
  name: p
spec:
  containers:
    - name: app
      image: app
      volumeMounts:
        - name: missing
          mountPath: /m
  volumes:
    - name: cfg
      secret:
        secretName: absent
"""
        findings = _resolve(pod, SERVICE)

        assert _rule_ids(findings) == [
            DANGLING_SELECTOR, DANGLING_CONFIG_REFERENCE, VOLUME_MOUNT_MISMATCH,
        ]

    def test_unclassified_documents_are_ignored(self):
        """Test that unknown kinds do not take part in resolution."""
        widget = "apiVersion: example.com/v1\nkind: Widget\nmetadata:\n  name: w\n"
        assert _resolve(widget) == []
