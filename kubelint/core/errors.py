"""Exceptions raised by the validation engine.

Only catalog defects, input I/O failures and cancellation abort a run.
ParseError and QuantityError are raised internally and converted into
Findings by the stage that catches them.
"""

from typing import Optional


class KubelintError(Exception):
    """Base class for all kubelint exceptions."""


class ParseError(KubelintError):
    """Raised when a document chunk is not well-formed YAML.

    Attributes:
        message: Description of the syntax problem
        line: 1-based line of the best-known error position (optional)
        column: 1-based column of the best-known error position (optional)
    """

    def __init__(
        self, message: str, line: Optional[int] = None, column: Optional[int] = None
    ) -> None:
        """Initialize ParseError exception.

        Args:
            message: Error message describing the syntax problem
            line: 1-based line number (optional)
            column: 1-based column number (optional)
        """
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line}, column {self.column})"


class QuantityError(KubelintError, ValueError):
    """Raised when a resource quantity string cannot be parsed."""

    def __init__(self, text: str, reason: str = "invalid quantity") -> None:
        super().__init__(f"{reason}: {text!r}")
        self.text = text
        self.reason = reason


class CatalogError(KubelintError):
    """Base class for rule catalog defects."""


class DuplicateSchema(CatalogError):
    """Raised when a schema is registered twice for the same ObjectKind.

    Attributes:
        kind: The ObjectKind that was already registered
    """

    def __init__(self, kind) -> None:
        super().__init__(f"Schema already registered for {kind}")
        self.kind = kind


class CatalogFrozen(CatalogError):
    """Raised when registering into a catalog that has been frozen."""


class InputError(KubelintError):
    """Raised when an input source cannot be read.

    Attributes:
        source: Path or name of the source that failed
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot read {source}: {reason}")
        self.source = source
        self.reason = reason


class ValidationCancelled(KubelintError):
    """Raised when a validation run is cancelled before completion."""
