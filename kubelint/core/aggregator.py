"""Diagnostic aggregator: orders findings into a Report."""

from typing import Iterable

from kubelint.core.schema.finding import Finding
from kubelint.core.schema.report import Report


def aggregate(findings: Iterable[Finding], documents: int, unknown_kinds: int = 0) -> Report:
    """Collect findings into a Report.

    Findings are ordered by document position, then severity (errors before
    warnings), then the order they were emitted in. Aggregating the findings
    of an existing Report again yields an equal Report.

    Args:
        findings: Findings in emission order (classification, validation, then
                  cross-reference findings)
        documents: Number of documents in the batch
        unknown_kinds: Number of documents whose kind is not in the catalog

    Returns:
        The Report for the run
    """
    sequenced = [f.with_sequence(i) for i, f in enumerate(findings)]
    ordered = sorted(sequenced, key=Finding.sort_key)
    return Report(findings=tuple(ordered), documents=documents, unknown_kinds=unknown_kinds)
