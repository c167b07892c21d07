"""Finding model for representing validation results."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from kubelint.core.schema.document import UNKNOWN, Document, Mark

ERROR = "error"
WARNING = "warning"

SEVERITY_RANK = {ERROR: 0, WARNING: 1}


@dataclass(frozen=True)
class Finding:
    """One validation result.

    Findings are produced by the classifier, validator and resolver, and are
    never mutated after creation. The aggregator orders them into a Report.

    Attributes:
        rule_id: Stable rule identifier (e.g., "schema.requiredField")
        message: Human-readable description of the problem
        severity: "error" or "warning"
        document_index: 0-based position of the offending document in the batch
        kind: Kind of the offending document, "unknown" if unresolvable
        name: metadata.name of the offending document, "unknown" if unresolvable
        namespace: metadata.namespace of the offending document (optional)
        source: Input name the document came from
        line: 1-based line of the problem
        column: 1-based column of the problem
        path: Field path inside the document (e.g., "spec.containers[0].image"),
              empty for document-level findings
        sequence: Emission order within the producing stage; only used to keep
                  report ordering stable and not part of the serialized form
    """

    rule_id: str
    message: str
    severity: str = ERROR
    document_index: int = -1
    kind: str = UNKNOWN
    name: str = UNKNOWN
    namespace: Optional[str] = None
    source: str = "<string>"
    line: int = 0
    column: int = 0
    path: str = ""
    sequence: int = field(default=0, compare=False)

    @classmethod
    def for_document(
        cls,
        document: Document,
        rule_id: str,
        message: str,
        severity: str = ERROR,
        mark: Optional[Mark] = None,
        path: str = "",
    ) -> "Finding":
        """Create a Finding anchored on ``document``.

        Args:
            document: The offending document
            rule_id: Stable rule identifier
            message: Human-readable message
            severity: "error" or "warning" (default: "error")
            mark: Source position, defaults to the document start
            path: Field path inside the document

        Returns:
            New Finding carrying the document's identity
        """
        mark = mark or document.mark
        return cls(
            rule_id=rule_id,
            message=message,
            severity=severity,
            document_index=document.index,
            kind=document.kind,
            name=document.name,
            namespace=document.namespace,
            source=document.source,
            line=mark.line,
            column=mark.column,
            path=path,
        )

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    def with_sequence(self, sequence: int) -> "Finding":
        return replace(self, sequence=sequence)

    def sort_key(self):
        return (self.document_index, SEVERITY_RANK.get(self.severity, 2), self.sequence)

    def to_dict(self) -> Dict[str, Any]:
        """Convert finding to a JSON-serializable dict.

        Every field is present; ``namespace`` is None when the document has none.
        """
        return {
            "severity": self.severity,
            "documentIndex": self.document_index,
            "kind": self.kind,
            "name": self.name,
            "namespace": self.namespace,
            "source": self.source,
            "line": self.line,
            "column": self.column,
            "ruleId": self.rule_id,
            "path": self.path,
            "message": self.message,
        }

    def __str__(self) -> str:
        location = f"{self.source}:{self.line}:{self.column}"
        where = f" {self.path}" if self.path else ""
        return f"{location}: {self.severity}: [{self.rule_id}]{where}: {self.message}"
