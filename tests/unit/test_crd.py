"""Tests for CustomResourceDefinition discovery."""

from kubelint.core.catalog import ObjectKind
from kubelint.core.loader import load_documents
from kubelint.core.rules import INT_OR_STRING, INTEGER, STRING, AnyValue, ListOf, MapOf, Scalar, Struct
from kubelint.k8s.catalog import build_default_catalog
from kubelint.k8s.crd import DUPLICATE_CUSTOM_RESOURCE, register_custom_resources, translate_schema

CRONTAB_CRD = """apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
metadata:
  name: crontabs.stable.example.com
spec:
  group: stable.example.com
  scope: Namespaced
  names:
    plural: crontabs
    kind: CronTab
  versions:
    - name: v1
      served: true
      storage: true
      schema:
        openAPIV3Schema:
          type: object
          properties:
            spec:
              type: object
              required: [cronSpec]
              properties:
                cronSpec:
                  type: string
                replicas:
                  type: integer
                  minimum: 1
    - name: v2
      served: false
      storage: false
"""


class TestTranslateSchema:
    """Tests for translate_schema()."""

    def test_object_with_properties(self):
        """Test that properties become closed Struct fields."""
        shape = translate_schema({
            "type": "object",
            "required": ["a"],
            "properties": {"a": {"type": "string"}, "b": {"type": "integer", "minimum": 0}},
        })

        assert isinstance(shape, Struct)
        assert not shape.open
        assert shape.field("a").required
        assert not shape.field("b").required
        assert shape.field("b").shape == Scalar(INTEGER, minimum=0)

    def test_preserve_unknown_fields_opens_struct(self):
        """Test x-kubernetes-preserve-unknown-fields."""
        shape = translate_schema({
            "type": "object",
            "x-kubernetes-preserve-unknown-fields": True,
            "properties": {"a": {"type": "string"}},
        })
        assert shape.open

    def test_additional_properties_map(self):
        """Test that additionalProperties without properties is a map."""
        shape = translate_schema({"type": "object", "additionalProperties": {"type": "string"}})
        assert isinstance(shape, MapOf)

    def test_array(self):
        """Test arrays and minItems."""
        shape = translate_schema({"type": "array", "minItems": 2, "items": {"type": "string"}})

        assert isinstance(shape, ListOf)
        assert shape.min_items == 2

    def test_int_or_string(self):
        """Test x-kubernetes-int-or-string."""
        assert translate_schema({"x-kubernetes-int-or-string": True}) == Scalar(INT_OR_STRING)

    def test_unknown_becomes_any(self):
        """Test that untyped schemas accept anything."""
        assert isinstance(translate_schema({"description": "free form"}), AnyValue)

    def test_non_string_required_entries_are_ignored(self):
        """Test that malformed required lists do not break translation."""
        shape = translate_schema({
            "type": "object",
            "required": [{"a": 1}, "b"],
            "properties": {"a": {"type": "string"}, "b": {"type": "string"}},
        })

        assert not shape.field("a").required
        assert shape.field("b").required

    def test_non_numeric_bounds_are_ignored(self):
        """Test that only numeric minimum/maximum values become bounds."""
        shape = translate_schema({"type": "integer", "minimum": "1", "maximum": True})
        assert shape == Scalar(INTEGER)

    def test_unhashable_keywords(self):
        """Test that list-valued type, format and enum entries are tolerated."""
        assert isinstance(translate_schema({"type": ["string", "null"]}), AnyValue)
        shape = translate_schema({"type": "string", "format": ["ip"], "enum": ["a", {"b": 1}]})
        assert shape == Scalar(STRING, enum=("a",))


class TestRegisterCustomResources:
    """Tests for register_custom_resources()."""

    def test_no_crds_returns_same_catalog(self):
        """Test that a batch without CRDs leaves the catalog untouched."""
        catalog = build_default_catalog()
        docs = list(load_documents("apiVersion: v1\nkind: Pod\nmetadata:\n  name: p\n"))

        result, findings = register_custom_resources(catalog, docs)

        assert result is catalog
        assert findings == []

    def test_registers_served_versions(self):
        """Test that every served version becomes a frozen schema."""
        catalog = build_default_catalog()
        docs = list(load_documents(CRONTAB_CRD))

        result, findings = register_custom_resources(catalog, docs)

        assert findings == []
        assert result.frozen
        assert result.lookup(ObjectKind("stable.example.com", "v1", "CronTab")) is not None
        assert result.lookup(ObjectKind("stable.example.com", "v2", "CronTab")) is None
        assert catalog.lookup(ObjectKind("stable.example.com", "v1", "CronTab")) is None

    def test_custom_body_keeps_header(self):
        """Test that custom bodies still require the object header."""
        result, _ = register_custom_resources(build_default_catalog(), list(load_documents(CRONTAB_CRD)))
        body = result.lookup(ObjectKind("stable.example.com", "v1", "CronTab")).body

        assert body.field("metadata").required
        assert body.field("spec").shape.field("cronSpec").required
        assert body.field("status") is not None

    def test_crd_without_schema_is_open(self):
        """Test that a CRD without openAPIV3Schema yields an open body."""
        text = CRONTAB_CRD.split("      schema:")[0] + "\n"
        result, _ = register_custom_resources(build_default_catalog(), list(load_documents(text)))

        assert result.lookup(ObjectKind("stable.example.com", "v1", "CronTab")).body.open

    def test_duplicate_definition_warns(self):
        """Test that a second definition of the same kind is skipped with a warning."""
        docs = list(load_documents(CRONTAB_CRD + "---\n" + CRONTAB_CRD))

        result, findings = register_custom_resources(build_default_catalog(), docs)

        assert [f.rule_id for f in findings] == [DUPLICATE_CUSTOM_RESOURCE]
        assert findings[0].severity == "warning"
        assert findings[0].document_index == 1
        assert findings[0].path == "spec.names.kind"

    def test_builtin_kind_redefinition_warns(self):
        """Test that a CRD cannot replace a built-in kind."""
        text = """apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
metadata:
  name: deployments.apps
spec:
  group: apps
  scope: Namespaced
  names:
    plural: deployments
    kind: Deployment
  versions:
    - name: v1
      served: true
      storage: true
"""
        _, findings = register_custom_resources(build_default_catalog(), list(load_documents(text)))
        assert [f.rule_id for f in findings] == [DUPLICATE_CUSTOM_RESOURCE]

    def test_incomplete_crd_is_skipped(self):
        """Test that a CRD without versions registers nothing."""
        text = """apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
metadata:
  name: broken.example.com
spec:
  group: example.com
  names:
    kind: Broken
"""
        catalog = build_default_catalog()
        result, findings = register_custom_resources(catalog, list(load_documents(text)))

        assert findings == []
        assert len(result) == len(catalog)
