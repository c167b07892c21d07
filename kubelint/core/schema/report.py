"""Report model: the ordered findings of one validation run."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from kubelint.core.schema.finding import ERROR, WARNING, Finding


@dataclass(frozen=True)
class Report:
    """Terminal artifact of a validation run.

    Attributes:
        findings: Findings ordered by document position, then severity
                  (errors first), then emission order
        documents: Number of documents in the batch (placeholders included)
        unknown_kinds: Number of documents whose kind is not in the catalog
    """

    findings: Tuple[Finding, ...]
    documents: int
    unknown_kinds: int = 0

    @property
    def errors(self) -> int:
        return sum(1 for f in self.findings if f.severity == ERROR)

    @property
    def warnings(self) -> int:
        return sum(1 for f in self.findings if f.severity == WARNING)

    @property
    def has_errors(self) -> bool:
        return self.errors > 0

    @property
    def exit_code(self) -> int:
        """1 when at least one error finding exists; warnings alone pass."""
        return 1 if self.has_errors else 0

    def summary(self) -> Dict[str, int]:
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "documents": self.documents,
            "unknownKinds": self.unknown_kinds,
        }

    def for_document(self, index: int) -> Tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.document_index == index)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary(),
            "findings": [f.to_dict() for f in self.findings],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_jsonl(self) -> str:
        """One JSON object per finding, followed by a summary record."""
        lines = [json.dumps(f.to_dict()) for f in self.findings]
        lines.append(json.dumps({"summary": self.summary()}))
        return "\n".join(lines)

    def format_text(self) -> str:
        lines = [str(f) for f in self.findings]
        s = self.summary()
        lines.append(
            f"{s['documents']} document(s): {s['errors']} error(s), "
            f"{s['warnings']} warning(s), {s['unknownKinds']} unknown kind(s)"
        )
        return "\n".join(lines)
