"""Tests for the rule catalog and the built-in K8s table."""

import pytest

from kubelint.core.catalog import ObjectKind, ObjectSchema, RuleCatalog
from kubelint.core.errors import CatalogFrozen, DuplicateSchema
from kubelint.core.rules import OPEN, Struct
from kubelint.core.schema.check import NAME_STAGE, SELECTOR_STAGE, VOLUME_STAGE
from kubelint.k8s.catalog import build_default_catalog

CHEAT_SHEET_KINDS = [
    ("v1", "Pod"),
    ("apps/v1", "Deployment"),
    ("v1", "Service"),
    ("v1", "ConfigMap"),
    ("v1", "Secret"),
    ("v1", "PersistentVolume"),
    ("v1", "PersistentVolumeClaim"),
    ("apps/v1", "StatefulSet"),
    ("apps/v1", "DaemonSet"),
    ("batch/v1", "Job"),
    ("batch/v1", "CronJob"),
    ("networking.k8s.io/v1", "Ingress"),
    ("v1", "ServiceAccount"),
    ("rbac.authorization.k8s.io/v1", "Role"),
    ("rbac.authorization.k8s.io/v1", "RoleBinding"),
    ("rbac.authorization.k8s.io/v1", "ClusterRole"),
    ("rbac.authorization.k8s.io/v1", "ClusterRoleBinding"),
    ("networking.k8s.io/v1", "NetworkPolicy"),
    ("autoscaling/v2", "HorizontalPodAutoscaler"),
    ("policy/v1", "PodDisruptionBudget"),
    ("v1", "ResourceQuota"),
    ("v1", "LimitRange"),
    ("apiextensions.k8s.io/v1", "CustomResourceDefinition"),
    ("policy/v1beta1", "PodSecurityPolicy"),
    ("v1", "Event"),
    ("v1", "Endpoints"),
]


def _schema(api_version="example.com/v1", kind="Widget", **kwargs):
    return ObjectSchema(kind=ObjectKind.parse(api_version, kind), body=OPEN, **kwargs)


class _Rule:
    def __init__(self, rule_id, stage):
        self.rule_id = rule_id
        self.stage = stage
        self.kinds = frozenset({"Widget"})

    def __call__(self, batch):
        return []


# ============================================================================
# Tests for ObjectKind
# ============================================================================


class TestObjectKind:
    """Tests for ObjectKind parsing and rendering."""

    def test_parse_grouped(self):
        """Test a grouped apiVersion."""
        kind = ObjectKind.parse("networking.k8s.io/v1", "Ingress")
        assert (kind.group, kind.version, kind.kind) == ("networking.k8s.io", "v1", "Ingress")

    def test_core_group_round_trip(self):
        """Test that the core group renders without a slash."""
        kind = ObjectKind.parse("v1", "Pod")
        assert kind.group == ""
        assert kind.api_version == "v1"
        assert str(kind) == "v1 Pod"


# ============================================================================
# Tests for RuleCatalog
# ============================================================================


class TestRuleCatalog:
    """Tests for registration, freezing and lookup."""

    def test_register_and_lookup(self):
        """Test basic registration."""
        catalog = RuleCatalog()
        schema = _schema()
        catalog.register(schema)

        assert catalog.lookup(schema.kind) is schema
        assert schema.kind in catalog
        assert len(catalog) == 1

    def test_duplicate_schema(self):
        """Test that registering the same ObjectKind twice fails."""
        catalog = RuleCatalog()
        catalog.register(_schema())

        with pytest.raises(DuplicateSchema) as exc_info:
            catalog.register(_schema())
        assert exc_info.value.kind == ObjectKind("example.com", "v1", "Widget")

    def test_frozen_catalog_rejects_registration(self):
        """Test that a frozen catalog cannot change."""
        catalog = RuleCatalog().freeze()

        assert catalog.frozen
        with pytest.raises(CatalogFrozen):
            catalog.register(_schema())

    def test_derive_returns_unfrozen_copy(self):
        """Test that derive() can be extended without touching the original."""
        base = RuleCatalog()
        base.register(_schema())
        base.freeze()

        derived = base.derive()
        derived.register(_schema(api_version="example.com/v2"))

        assert not derived.frozen
        assert len(derived) == 2
        assert len(base) == 1

    def test_versions_of(self):
        """Test the secondary index by kind name."""
        catalog = RuleCatalog()
        catalog.register(_schema("example.com/v1"))
        catalog.register(_schema("example.com/v2"))

        assert catalog.versions_of("Widget") == ["example.com/v1", "example.com/v2"]
        assert catalog.versions_of("Gadget") == []

    def test_cross_ref_rules_distinct_and_ordered(self):
        """Test that shared rules are listed once, ordered by stage."""
        volume = _Rule("volume", VOLUME_STAGE)
        name = _Rule("name", NAME_STAGE)
        selector = _Rule("selector", SELECTOR_STAGE)
        catalog = RuleCatalog()
        catalog.register(_schema("example.com/v1", cross_refs=(volume, name)))
        catalog.register(_schema("example.com/v2", cross_refs=(name, selector)))

        assert [r.rule_id for r in catalog.cross_ref_rules()] == ["selector", "name", "volume"]

    def test_scope_is_kept(self):
        """Test that the registered scope is returned with the schema."""
        catalog = RuleCatalog()
        catalog.register(_schema(kind="Cluster", namespaced=False))

        assert not catalog.lookup(ObjectKind("example.com", "v1", "Cluster")).namespaced


# ============================================================================
# Tests for the built-in table
# ============================================================================


class TestDefaultCatalog:
    """Tests for build_default_catalog()."""

    def test_is_frozen(self):
        """Test that the default catalog is frozen."""
        assert build_default_catalog().frozen

    @pytest.mark.parametrize("api_version,kind", CHEAT_SHEET_KINDS)
    def test_contains_catalog_kinds(self, api_version, kind):
        """Test that every reference kind has a schema."""
        catalog = build_default_catalog()
        schema = catalog.lookup(ObjectKind.parse(api_version, kind))

        assert schema is not None
        assert isinstance(schema.body, Struct)
        assert schema.body.field("apiVersion").required
        assert schema.body.field("metadata").required

    def test_deprecations(self):
        """Test deprecated apiVersions."""
        catalog = build_default_catalog()

        assert catalog.lookup(ObjectKind.parse("policy/v1beta1", "PodSecurityPolicy")).deprecated
        assert catalog.lookup(ObjectKind.parse("autoscaling/v1", "HorizontalPodAutoscaler")).deprecated
        assert catalog.lookup(ObjectKind.parse("apps/v1", "Deployment")).deprecated is None

    def test_scopes(self):
        """Test cluster-scoped kinds."""
        catalog = build_default_catalog()

        assert not catalog.lookup(ObjectKind.parse("rbac.authorization.k8s.io/v1", "ClusterRole")).namespaced
        assert not catalog.lookup(ObjectKind.parse("v1", "PersistentVolume")).namespaced
        assert catalog.lookup(ObjectKind.parse("rbac.authorization.k8s.io/v1", "Role")).namespaced

    def test_cross_ref_rules_are_staged(self):
        """Test that built-in rules come out in pass order."""
        stages = [rule.stage for rule in build_default_catalog().cross_ref_rules()]

        assert stages == sorted(stages)
        assert set(stages) == {SELECTOR_STAGE, NAME_STAGE, VOLUME_STAGE}
        assert len({rule.rule_id for rule in build_default_catalog().cross_ref_rules()}) == 7
