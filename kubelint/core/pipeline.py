"""Validation pipeline: Loader -> Classifier -> Validator -> Resolver -> Aggregator.

Classification and validation are independent per document and may run on a
thread pool. The resolver needs every document's classification and therefore
starts only once all of them are done.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import IO, Any, Dict, Iterable, List, Optional, Sequence, Tuple

from kubelint.core.aggregator import aggregate
from kubelint.core.catalog import RuleCatalog
from kubelint.core.classifier import Classification, classify
from kubelint.core.config import as_bool, as_int, get_config_value
from kubelint.core.errors import ValidationCancelled
from kubelint.core.loader import load_documents, load_sources
from kubelint.core.resolver import resolve
from kubelint.core.schema.document import Document
from kubelint.core.schema.finding import Finding
from kubelint.core.schema.report import Report
from kubelint.core.validator import validate_document

logger = logging.getLogger(__name__)


@dataclass
class ValidationOptions:
    """Configuration for validation runs.

    Attributes:
        strict: Report undeclared fields as errors instead of warnings
        workers: Number of threads for per-document classification/validation;
                 1 runs everything on the calling thread
        discover_crds: Register kinds declared by CustomResourceDefinitions in
                       the batch before classifying
    """
    strict: bool = False
    workers: int = 1
    discover_crds: bool = True

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "ValidationOptions":
        """Build options from the ``validation`` section of the config file.

        Environment variables (VALIDATION_STRICT, VALIDATION_WORKERS,
        VALIDATION_DISCOVER_CRDS) are used when the file has no value.
        """
        defaults = cls()
        return cls(
            strict=as_bool(get_config_value(["validation", "strict"], defaults.strict, config)),
            workers=max(1, as_int(get_config_value(["validation", "workers"], defaults.workers, config))),
            discover_crds=as_bool(
                get_config_value(["validation", "discover_crds"], defaults.discover_crds, config)
            ),
        )


def _check_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise ValidationCancelled("validation run cancelled")


def _classify_and_validate(
    document: Document, catalog: RuleCatalog, strict: bool
) -> Tuple[Classification, List[Finding]]:
    classification = classify(document, catalog)
    findings = list(classification.findings)
    findings.extend(validate_document(classification, strict=strict))
    return classification, findings


def _run_documents(
    documents: Sequence[Document],
    catalog: RuleCatalog,
    options: ValidationOptions,
    cancel: Optional[threading.Event],
) -> List[Tuple[Classification, List[Finding]]]:
    results = []
    if options.workers <= 1 or len(documents) <= 1:
        for document in documents:
            _check_cancelled(cancel)
            results.append(_classify_and_validate(document, catalog, options.strict))
        return results

    with ThreadPoolExecutor(max_workers=options.workers) as pool:
        futures = [
            pool.submit(_classify_and_validate, document, catalog, options.strict)
            for document in documents
        ]
        for future in futures:
            if cancel is not None and cancel.is_set():
                for pending in futures:
                    pending.cancel()
                raise ValidationCancelled("validation run cancelled")
            results.append(future.result())
    return results


def validate_documents(
    documents: Iterable[Document],
    catalog: RuleCatalog,
    options: Optional[ValidationOptions] = None,
    cancel: Optional[threading.Event] = None,
) -> Report:
    """Validate a batch of documents and produce a Report.

    Args:
        documents: Documents of the batch (e.g., from ``load_documents``)
        catalog: Frozen rule catalog
        options: Validation options (default: ValidationOptions())
        cancel: Optional event; when set, the run stops between documents

    Returns:
        Report covering every document, placeholders included

    Raises:
        ValidationCancelled: If ``cancel`` is set before the run completes

    Example:
        >>> from kubelint.k8s.catalog import build_default_catalog
        >>> catalog = build_default_catalog()
        >>> report = validate_documents(load_documents(text), catalog)
        >>> report.exit_code
        0
    """
    if options is None:
        options = ValidationOptions()

    batch: List[Document] = []
    for document in documents:
        _check_cancelled(cancel)
        batch.append(document)

    findings: List[Finding] = []
    if options.discover_crds:
        from kubelint.k8s.crd import register_custom_resources

        catalog, crd_findings = register_custom_resources(catalog, batch)
        findings.extend(crd_findings)

    logger.info(f"Validating {len(batch)} document(s) with {options.workers} worker(s)")
    results = _run_documents(batch, catalog, options, cancel)

    classifications = []
    for classification, document_findings in results:
        classifications.append(classification)
        findings.extend(document_findings)

    _check_cancelled(cancel)
    findings.extend(resolve(classifications, catalog))
    _check_cancelled(cancel)

    unknown = sum(1 for c in classifications if c.unknown)
    report = aggregate(findings, documents=len(batch), unknown_kinds=unknown)
    logger.info(
        f"Report: {report.errors} error(s), {report.warnings} warning(s) "
        f"across {report.documents} document(s)"
    )
    return report


def validate_text(
    text: str,
    catalog: RuleCatalog,
    options: Optional[ValidationOptions] = None,
    source: str = "<string>",
    cancel: Optional[threading.Event] = None,
) -> Report:
    """Validate in-memory YAML text."""
    return validate_documents(load_documents(text, source=source), catalog, options, cancel)


def validate_paths(
    paths: Iterable[str],
    catalog: RuleCatalog,
    options: Optional[ValidationOptions] = None,
    cancel: Optional[threading.Event] = None,
    stdin: Optional[IO[str]] = None,
) -> Report:
    """Validate files, directories and/or standard input (``-``) as one batch.

    Raises:
        InputError: If a source cannot be read
    """
    return validate_documents(load_sources(paths, stdin=stdin), catalog, options, cancel)
