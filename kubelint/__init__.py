"""
kubelint: Kubernetes manifest validation and structural linting

Parses multi-document YAML into a position-tagged object model, validates
each document against a catalog of per-kind field rules, resolves references
across the batch, and reports aggregated findings with exact source positions.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
