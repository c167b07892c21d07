"""
Core schema definitions for documents, findings, reports and checks.

These domain-agnostic dataclasses and protocols form the data model shared
by every pipeline stage.
"""

from kubelint.core.schema.check import Check
from kubelint.core.schema.document import (
    Document,
    Entry,
    MappingNode,
    Mark,
    Node,
    ScalarNode,
    SequenceNode,
)
from kubelint.core.schema.finding import ERROR, WARNING, Finding
from kubelint.core.schema.report import Report

__all__ = [
    "Check",
    "Document",
    "Entry",
    "MappingNode",
    "Mark",
    "Node",
    "ScalarNode",
    "SequenceNode",
    "ERROR",
    "WARNING",
    "Finding",
    "Report",
]
