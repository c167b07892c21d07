"""Custom resource discovery.

CustomResourceDefinitions found in a batch extend the catalog for that batch
only: each served version of a well-formed CRD becomes an ObjectSchema, so
custom objects in the same batch are classified and validated instead of
being reported as unknown kinds.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from kubelint.core.catalog import ObjectKind, ObjectSchema, RuleCatalog
from kubelint.core.rules import (
    ANY,
    BOOLEAN,
    INT_OR_STRING,
    INTEGER,
    NUMBER,
    STRING,
    FieldRule,
    ListOf,
    MapOf,
    Scalar,
    Shape,
    Struct,
)
from kubelint.core.schema.document import Document, lookup
from kubelint.core.schema.finding import WARNING, Finding
from kubelint.k8s.fields import HEADER, STATUS

logger = logging.getLogger(__name__)

DUPLICATE_CUSTOM_RESOURCE = "classify.duplicateCustomResource"
CRD_API_VERSION = "apiextensions.k8s.io/v1"

# OpenAPI string formats with a validator counterpart
_FORMATS = {"ipv4": "ip", "ipv6": "ip", "ip": "ip", "byte": "base64", "cidr": "cidr"}
_SCALAR_TYPES = {"string": STRING, "integer": INTEGER, "number": NUMBER, "boolean": BOOLEAN}


def translate_schema(schema: Any, name: str = "object") -> Shape:
    """Translate an OpenAPI v3 schema (plain data) into a Shape.

    Supports ``type``, ``properties``, ``required``, ``items``, ``enum``,
    ``minimum``/``maximum``, ``minItems``, ``additionalProperties``,
    ``x-kubernetes-int-or-string`` and ``x-kubernetes-preserve-unknown-fields``.
    Anything it does not understand becomes AnyValue.

    Args:
        schema: openAPIV3Schema mapping (or a nested property schema)
        name: Display name for object shapes

    Returns:
        Equivalent Shape
    """
    if not isinstance(schema, dict):
        return ANY
    if schema.get("x-kubernetes-int-or-string"):
        return Scalar(INT_OR_STRING)

    kind = schema.get("type")
    if kind == "object" or (kind is None and "properties" in schema):
        properties = schema.get("properties")
        additional = schema.get("additionalProperties")
        if not isinstance(properties, dict):
            if isinstance(additional, dict):
                return MapOf(translate_schema(additional))
            return Struct(name=name, open=True)
        required = {key for key in _list(schema.get("required")) if isinstance(key, str)}
        fields = tuple(
            FieldRule(key, translate_schema(value, key), key in required)
            for key, value in properties.items()
        )
        open_ = bool(schema.get("x-kubernetes-preserve-unknown-fields")) or bool(additional)
        return Struct(name=name, fields=fields, open=open_)

    if kind == "array":
        min_items = _number(schema.get("minItems"))
        return ListOf(
            translate_schema(schema.get("items")),
            min_items=min_items if isinstance(min_items, int) else 0,
        )

    if isinstance(kind, str) and kind in _SCALAR_TYPES:
        enum = schema.get("enum")
        if isinstance(enum, list):
            enum = tuple(v for v in enum if not isinstance(v, (dict, list)))
        else:
            enum = None
        fmt = schema.get("format")
        return Scalar(
            _SCALAR_TYPES[kind],
            enum=enum,
            minimum=_number(schema.get("minimum")),
            maximum=_number(schema.get("maximum")),
            format=_FORMATS.get(fmt) if kind == "string" and isinstance(fmt, str) else None,
        )
    return ANY


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _number(value: Any) -> Optional[Any]:
    """Numeric schema keyword, None when absent or not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _custom_body(kind: str, version: Dict[str, Any]) -> Struct:
    """Top-level Struct for a custom kind; open when the CRD declares no schema."""
    schema = lookup_plain(version, "schema", "openAPIV3Schema")
    shape = translate_schema(schema, kind) if schema is not None else None
    if not isinstance(shape, Struct) or not shape.fields:
        return Struct(name=kind, fields=HEADER, open=True)

    header_names = {rule.name for rule in HEADER}
    fields = tuple(rule for rule in shape.fields if rule.name not in header_names)
    if "status" not in shape.field_names():
        fields += (STATUS,)
    return Struct(name=kind, fields=HEADER + fields, open=shape.open)


def lookup_plain(data: Any, *path: str) -> Any:
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _deprecation(version: Dict[str, Any]) -> Optional[str]:
    warning = version.get("deprecationWarning")
    if isinstance(warning, str) and warning:
        return warning
    if version.get("deprecated") is True:
        return f"version {version.get('name')} of this custom resource is deprecated"
    return None


def _crd_documents(documents: Sequence[Document]) -> List[Document]:
    return [
        document
        for document in documents
        if not document.is_placeholder
        and document.kind == "CustomResourceDefinition"
        and document.api_version == CRD_API_VERSION
    ]


def register_custom_resources(
    catalog: RuleCatalog, documents: Sequence[Document]
) -> Tuple[RuleCatalog, List[Finding]]:
    """Extend ``catalog`` with the custom kinds declared in ``documents``.

    CRDs missing a group, kind or versions are skipped here; the schema
    validator reports what is wrong with them.

    Args:
        catalog: Frozen base catalog
        documents: The whole batch

    Returns:
        (catalog to use for the batch, duplicate-definition findings). The
        base catalog is returned unchanged when the batch holds no CRD.
    """
    crds = _crd_documents(documents)
    if not crds:
        return catalog, []

    derived = catalog.derive()
    findings: List[Finding] = []
    for document in crds:
        spec = lookup_plain(document.to_plain(), "spec")
        group = lookup_plain(spec, "group")
        kind_name = lookup_plain(spec, "names", "kind")
        versions = lookup_plain(spec, "versions")
        if not isinstance(group, str) or not isinstance(kind_name, str) or not isinstance(versions, list):
            logger.debug(f"Skipping incomplete CustomResourceDefinition {document.identity}")
            continue
        namespaced = lookup_plain(spec, "scope") != "Cluster"

        for version in versions:
            if not isinstance(version, dict) or version.get("served") is not True:
                continue
            version_name = version.get("name")
            if not isinstance(version_name, str):
                continue
            kind = ObjectKind(group, version_name, kind_name)
            if kind in derived:
                logger.warning(f"Skipping duplicate definition of {kind} in {document.identity}")
                findings.append(Finding.for_document(
                    document,
                    DUPLICATE_CUSTOM_RESOURCE,
                    f"{kind} is already defined; this definition is ignored",
                    WARNING,
                    lookup(document.root, "spec", "names", "kind").mark,
                    "spec.names.kind",
                ))
                continue
            derived.register(ObjectSchema(
                kind=kind,
                body=_custom_body(kind_name, version),
                namespaced=namespaced,
                deprecated=_deprecation(version),
            ))
            logger.debug(f"Registered custom resource {kind}")

    return derived.freeze(), findings
