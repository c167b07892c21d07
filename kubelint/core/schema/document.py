"""Position-tagged document model.

Documents are immutable trees of scalar, sequence and mapping nodes. Every
node records the 1-based line/column it was parsed from so that findings can
point back into the original input.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple

from kubelint.core.errors import ParseError

UNKNOWN = "unknown"


@dataclass(frozen=True, order=True)
class Mark:
    """1-based source position."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Node:
    """Base class for document tree nodes."""

    mark: Mark

    def to_plain(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class ScalarNode(Node):
    """Leaf value: str, int, float, bool, None or a timestamp."""

    value: Any

    def to_plain(self) -> Any:
        return self.value


@dataclass(frozen=True)
class SequenceNode(Node):
    """Ordered list of nodes."""

    items: Tuple[Node, ...]

    def __iter__(self) -> Iterator[Node]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_plain(self) -> list:
        return [item.to_plain() for item in self.items]


@dataclass(frozen=True)
class Entry:
    """One key/value pair of a mapping, with the key's own position."""

    key: str
    key_mark: Mark
    value: Node


@dataclass(frozen=True)
class MappingNode(Node):
    """Ordered mapping of string keys to nodes."""

    entries: Tuple[Entry, ...]

    def get(self, key: str) -> Optional[Node]:
        """Return the node stored under ``key``, or None."""
        for entry in self.entries:
            if entry.key == key:
                return entry.value
        return None

    def entry(self, key: str) -> Optional[Entry]:
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def keys(self) -> Tuple[str, ...]:
        return tuple(entry.key for entry in self.entries)

    def __contains__(self, key: str) -> bool:
        return self.entry(key) is not None

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def to_plain(self) -> dict:
        return {entry.key: entry.value.to_plain() for entry in self.entries}


def scalar_value(node: Optional[Node]) -> Any:
    """Return the value of a scalar node, or None for anything else."""
    if isinstance(node, ScalarNode):
        return node.value
    return None


def lookup(node: Optional[Node], *path: str) -> Optional[Node]:
    """Follow a chain of mapping keys, returning None when any step is missing.

    Example:
        >>> lookup(document.root, "spec", "template", "metadata")
    """
    current = node
    for key in path:
        if not isinstance(current, MappingNode):
            return None
        current = current.get(key)
    return current


def string_map(node: Optional[Node]) -> dict:
    """Return the string-valued entries of a mapping node as a plain dict.

    Used for label and selector maps; non-scalar values are ignored.
    """
    if not isinstance(node, MappingNode):
        return {}
    result = {}
    for entry in node.entries:
        if isinstance(entry.value, ScalarNode) and entry.value.value is not None:
            result[entry.key] = str(entry.value.value)
    return result


@dataclass(frozen=True)
class Document:
    """One parsed unit of an input batch.

    A Document whose chunk failed to parse is kept as a placeholder: ``root``
    is None and ``error`` carries the ParseError, so the rest of the batch is
    still reported on.

    Attributes:
        index: 0-based position in the batch
        source: Name of the input the document came from (file path or "<stdin>")
        mark: Position of the first line of the document's chunk
        root: Root node, None for placeholders
        error: ParseError for placeholders, None otherwise
    """

    index: int
    source: str
    mark: Mark
    root: Optional[Node] = None
    error: Optional[ParseError] = None

    @property
    def is_placeholder(self) -> bool:
        return self.error is not None

    def _header(self, key: str) -> Optional[str]:
        value = scalar_value(lookup(self.root, key))
        return value if isinstance(value, str) and value else None

    @property
    def api_version(self) -> Optional[str]:
        return self._header("apiVersion")

    @property
    def kind(self) -> str:
        return self._header("kind") or UNKNOWN

    @property
    def name(self) -> str:
        value = scalar_value(lookup(self.root, "metadata", "name"))
        if value is None:
            value = scalar_value(lookup(self.root, "metadata", "generateName"))
        return str(value) if value not in (None, "") else UNKNOWN

    @property
    def namespace(self) -> Optional[str]:
        value = scalar_value(lookup(self.root, "metadata", "namespace"))
        return str(value) if value not in (None, "") else None

    @property
    def identity(self) -> str:
        """Human-readable ``Kind/namespace/name`` label."""
        if self.namespace:
            return f"{self.kind}/{self.namespace}/{self.name}"
        return f"{self.kind}/{self.name}"

    def to_plain(self) -> Any:
        """Plain Python data for the document, None for placeholders."""
        if self.root is None:
            return None
        return self.root.to_plain()
