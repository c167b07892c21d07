"""Cross-reference resolver: evaluates batch-wide rules."""

import logging
from typing import List, Sequence

from kubelint.core.catalog import RuleCatalog
from kubelint.core.classifier import Classification
from kubelint.core.schema.check import STAGE_NAMES
from kubelint.core.schema.finding import Finding

logger = logging.getLogger(__name__)


def resolve(batch: Sequence[Classification], catalog: RuleCatalog) -> List[Finding]:
    """Evaluate the catalog's cross-reference rules against a batch.

    Rules run in a fixed pass order (selector rules, then name-reference
    rules, then volume rules) so reports are reproducible. Only rules that
    inspect a kind present in the batch are evaluated.

    Args:
        batch: Classifications for every document of the run, in document order
        catalog: Catalog whose schemas carry the rules

    Returns:
        Findings in pass order
    """
    present = {c.schema.kind.kind for c in batch if c.schema is not None}
    findings: List[Finding] = []
    for rule in catalog.cross_ref_rules():
        if not rule.kinds & present:
            continue
        produced = rule(batch)
        if produced:
            logger.debug(
                f"{STAGE_NAMES.get(rule.stage, rule.stage)} pass: {rule.rule_id} "
                f"produced {len(produced)} finding(s)"
            )
        findings.extend(produced)
    return findings
