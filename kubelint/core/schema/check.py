"""Check protocol for cross-document rules."""

from typing import FrozenSet, List, Protocol, Sequence

from kubelint.core.schema.finding import Finding

SELECTOR_STAGE = 0
NAME_STAGE = 1
VOLUME_STAGE = 2

STAGE_NAMES = {
    SELECTOR_STAGE: "selector",
    NAME_STAGE: "name",
    VOLUME_STAGE: "volume",
}


class Check(Protocol):
    """Cross-reference rule interface.

    A check is a stateless callable evaluated against the whole batch of
    classified documents. It reads documents only and returns the findings it
    produces, anchored on the referring document.

    Attributes:
        rule_id: Stable rule identifier (e.g., "xref.danglingSelector")
        stage: Pass the check runs in (selector, name or volume)
        kinds: Kinds of documents the check inspects

    Example:
        class NoopCheck:
            rule_id = "xref.noop"
            stage = NAME_STAGE
            kinds = frozenset({"Service"})

            def __call__(self, batch):
                return []
    """

    rule_id: str
    stage: int
    kinds: FrozenSet[str]

    def __call__(self, batch: Sequence) -> List[Finding]:
        """Evaluate the rule.

        Args:
            batch: Classifications for every document of the run, in order

        Returns:
            Findings produced by this rule; empty when it holds.
        """
        ...
