"""Object classifier: maps documents to catalog schemas."""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from kubelint.core.catalog import ObjectKind, ObjectSchema, RuleCatalog
from kubelint.core.schema.document import Document, MappingNode, Mark
from kubelint.core.schema.finding import ERROR, WARNING, Finding

logger = logging.getLogger(__name__)

PARSE_ERROR = "parse.error"
MALFORMED_HEADER = "classify.malformedHeader"
UNKNOWN_KIND = "classify.unknownKind"
DEPRECATED_API = "classify.deprecatedApiVersion"


@dataclass(frozen=True)
class Classification:
    """Result of classifying one document.

    Attributes:
        document: The classified document
        kind: Matched ObjectKind, None when unknown or malformed
        schema: Matched ObjectSchema, None when unknown or malformed
        findings: Findings produced by classification
        unknown: True when the header was well-formed but matched no schema
    """

    document: Document
    kind: Optional[ObjectKind] = None
    schema: Optional[ObjectSchema] = None
    findings: Tuple[Finding, ...] = ()
    unknown: bool = False

    @property
    def classified(self) -> bool:
        return self.schema is not None


def _header_field(root: MappingNode, key: str):
    entry = root.entry(key)
    if entry is None:
        return None, root.mark
    value = entry.value
    raw = getattr(value, "value", None)
    if isinstance(raw, str) and raw.strip():
        return raw.strip(), value.mark
    return None, value.mark


def classify(document: Document, catalog: RuleCatalog) -> Classification:
    """Classify a document against the catalog.

    Args:
        document: Document to classify
        catalog: Rule catalog to look kinds up in

    Returns:
        Classification with the matched schema, or with a finding explaining
        why no schema applies:

        - placeholder documents: ``parse.error`` (error)
        - missing/non-string ``apiVersion`` or ``kind``, or a non-mapping root:
          ``classify.malformedHeader`` (error)
        - well-formed header not in the catalog: ``classify.unknownKind`` (warning)

        A matched but deprecated apiVersion adds ``classify.deprecatedApiVersion``
        (warning).
    """
    if document.error is not None:
        error = document.error
        mark = Mark(error.line or document.mark.line, error.column or 1)
        finding = Finding.for_document(document, PARSE_ERROR, error.message, ERROR, mark)
        return Classification(document, findings=(finding,))

    root = document.root
    if not isinstance(root, MappingNode):
        finding = Finding.for_document(
            document,
            MALFORMED_HEADER,
            "document root must be a mapping with apiVersion and kind",
            ERROR,
        )
        return Classification(document, findings=(finding,))

    api_version, api_mark = _header_field(root, "apiVersion")
    kind_name, kind_mark = _header_field(root, "kind")
    missing = []
    if kind_name is None:
        missing.append(("kind", kind_mark))
    if api_version is None:
        missing.append(("apiVersion", api_mark))
    if missing:
        names = " and ".join(name for name, _ in missing)
        finding = Finding.for_document(
            document,
            MALFORMED_HEADER,
            f"{names} must be a non-empty string",
            ERROR,
            missing[0][1],
            path=missing[0][0],
        )
        return Classification(document, findings=(finding,))

    kind = ObjectKind.parse(api_version, kind_name)
    schema = catalog.lookup(kind)
    if schema is None:
        known = catalog.versions_of(kind_name)
        if known:
            message = (
                f"{kind_name} is not served at apiVersion {api_version}; "
                f"known apiVersions: {', '.join(known)}"
            )
            mark = api_mark
        else:
            message = f"unknown kind {kind_name} (apiVersion {api_version})"
            mark = kind_mark
        logger.debug(f"document {document.index}: {message}")
        finding = Finding.for_document(document, UNKNOWN_KIND, message, WARNING, mark)
        return Classification(document, kind=kind, findings=(finding,), unknown=True)

    findings = ()
    if schema.deprecated:
        findings = (
            Finding.for_document(
                document,
                DEPRECATED_API,
                f"{kind} is deprecated: {schema.deprecated}",
                WARNING,
                api_mark,
                path="apiVersion",
            ),
        )
    return Classification(document, kind=kind, schema=schema, findings=findings)
