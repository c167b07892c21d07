"""
Core domain-agnostic components for kubelint.

This package contains the document model, the rule catalog container and
the pipeline stages: loader, classifier, validator, resolver and aggregator.
"""

__all__ = []
