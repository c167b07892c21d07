"""Document loader for multi-document YAML input.

Input text is split on document separator lines and each chunk is parsed on
its own with ruamel.yaml's round-trip loader, which records line/column data
for every mapping key and sequence item. Parsing chunks independently means a
single malformed document only produces a placeholder; the documents after
it are still loaded.
"""

import io
import logging
import re
import sys
from pathlib import Path
from typing import IO, Any, Iterable, Iterator, List, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarbool import ScalarBoolean

from kubelint.core.errors import InputError, ParseError
from kubelint.core.schema.document import (
    Document,
    Entry,
    MappingNode,
    Mark,
    Node,
    ScalarNode,
    SequenceNode,
)

logger = logging.getLogger(__name__)

_SEPARATOR = re.compile(r"^---(?=\s|$)")
_END_MARKER = re.compile(r"^\.\.\.(?=\s|$)")
_DIRECTIVE = re.compile(r"^%")

STDIN_SOURCE = "<stdin>"


def _create_yaml_instance() -> YAML:
    """Create configured ruamel.yaml instance for loading and dumping manifests.

    Returns:
        Round-trip YAML instance that rejects duplicate keys and does not
        wrap long strings when dumping.
    """
    yaml = YAML(typ="rt")
    yaml.allow_duplicate_keys = False
    yaml.width = 4096
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    return yaml


def _split_chunks(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    """Split lines into document chunks.

    Yields:
        (first_line_index, chunk_text) pairs, where first_line_index is the
        0-based line of the chunk's first line in the whole input. Separator
        lines are replaced by blanks, keeping any inline content after ``---``
        at its original column.
    """
    buffer: List[str] = []
    start = 0
    for number, raw in enumerate(lines):
        line = raw.rstrip("\r\n")
        if _SEPARATOR.match(line):
            if buffer:
                yield start, "\n".join(buffer)
            start = number
            buffer = ["   " + line[3:]]
        elif _END_MARKER.match(line):
            if buffer:
                yield start, "\n".join(buffer)
            start = number + 1
            buffer = []
        else:
            if not buffer:
                start = number
            if _DIRECTIVE.match(line) and not any(b.strip() for b in buffer):
                line = ""
            buffer.append(line)
    if buffer:
        yield start, "\n".join(buffer)


def _normalize_scalar(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, ScalarBoolean):
        return bool(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, str):
        return str(value)
    return value


def _mark(position: Optional[Tuple[int, int]], offset: int, fallback: Mark) -> Mark:
    if position is None:
        return fallback
    line, column = position[0], position[1]
    return Mark(line + offset + 1, column + 1)


def _own_mark(data: Any, offset: int, fallback: Mark) -> Mark:
    lc = getattr(data, "lc", None)
    if lc is None or lc.line is None:
        return fallback
    return Mark(lc.line + offset + 1, lc.col + 1)


def _to_node(data: Any, mark: Mark, offset: int) -> Node:
    """Convert ruamel round-trip data into an immutable node tree.

    Args:
        data: Value produced by the round-trip loader
        mark: Position recorded by the parent for this value
        offset: 0-based line index of the chunk within the whole input

    Returns:
        Node tree with every node tagged with its source position
    """
    if isinstance(data, CommentedMap):
        own = _own_mark(data, offset, mark)
        entries = []
        for key, value in data.items():
            positions = data.lc.data.get(key)
            if positions is not None:
                key_mark = _mark(positions[0:2], offset, own)
                value_mark = _mark(positions[2:4], offset, key_mark)
            else:
                key_mark = value_mark = own
            entries.append(Entry(str(key), key_mark, _to_node(value, value_mark, offset)))
        return MappingNode(own, tuple(entries))
    if isinstance(data, CommentedSeq):
        own = _own_mark(data, offset, mark)
        items = []
        for i, value in enumerate(data):
            positions = data.lc.data.get(i)
            item_mark = _mark(positions[0:2], offset, own) if positions is not None else own
            items.append(_to_node(value, item_mark, offset))
        return SequenceNode(own, tuple(items))
    if isinstance(data, dict):
        entries = [Entry(str(k), mark, _to_node(v, mark, offset)) for k, v in data.items()]
        return MappingNode(mark, tuple(entries))
    if isinstance(data, (list, tuple)):
        return SequenceNode(mark, tuple(_to_node(v, mark, offset) for v in data))
    return ScalarNode(mark, _normalize_scalar(data))


def _parse_error(exc: Exception, offset: int, chunk_start: Mark) -> ParseError:
    mark = getattr(exc, "problem_mark", None) or getattr(exc, "context_mark", None)
    lines = str(exc).strip().splitlines()
    problem = getattr(exc, "problem", None) or (lines[0] if lines else type(exc).__name__)
    if mark is None:
        return ParseError(f"invalid YAML: {problem}", chunk_start.line, chunk_start.column)
    return ParseError(f"invalid YAML: {problem}", mark.line + offset + 1, mark.column + 1)


def _load_lines(
    lines: Iterable[str], source: str, start_index: int
) -> Iterator[Document]:
    yaml = _create_yaml_instance()
    index = start_index
    for offset, chunk in _split_chunks(lines):
        chunk_start = Mark(offset + 1, 1)
        # ruamel raises ValueError for impossible timestamps; deep nesting exhausts the stack
        try:
            data = yaml.load(chunk)
            root = None if data is None else _to_node(data, chunk_start, offset)
        except (YAMLError, ValueError, RecursionError) as exc:
            error = _parse_error(exc, offset, chunk_start)
            yaml = _create_yaml_instance()
            logger.debug(f"{source}: document {index} failed to parse: {error}")
            yield Document(
                index=index,
                source=source,
                mark=Mark(error.line or chunk_start.line, error.column or 1),
                error=error,
            )
            index += 1
            continue
        if root is None:
            continue
        yield Document(index=index, source=source, mark=root.mark, root=root)
        index += 1


def load_documents(
    text: str, source: str = "<string>", start_index: int = 0
) -> Iterator[Document]:
    """Parse multi-document YAML text into a lazy sequence of Documents.

    The returned generator is finite and is not restartable once exhausted;
    call again with the same text to re-parse. Chunks that hold only comments
    or whitespace are skipped and do not consume an index.

    Args:
        text: Raw YAML text, documents separated by ``---``
        source: Name reported in findings (default: "<string>")
        start_index: Index assigned to the first document (default: 0)

    Yields:
        Documents in input order; malformed chunks yield placeholders whose
        ``error`` is a ParseError

    Example:
        >>> docs = list(load_documents("kind: Pod\\n---\\nkind: Service\\n"))
        >>> [d.kind for d in docs]
        ['Pod', 'Service']
    """
    return _load_lines(io.StringIO(text), source, start_index)


def load_stream(
    stream: IO[str], source: str = STDIN_SOURCE, start_index: int = 0
) -> Iterator[Document]:
    """Parse documents from a text stream, reading it line by line."""

    def _lines() -> Iterator[str]:
        try:
            for line in stream:
                yield line
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError(source, str(exc)) from exc

    return _load_lines(_lines(), source, start_index)


def load_file(path: str, start_index: int = 0) -> Iterator[Document]:
    """Load documents from a YAML file.

    Args:
        path: Path to the YAML file
        start_index: Index assigned to the first document

    Returns:
        Lazy iterator of Documents

    Raises:
        InputError: If the file cannot be read
    """
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(str(path), str(exc)) from exc
    return load_documents(content, source=str(path), start_index=start_index)


def expand_sources(sources: Iterable[str], patterns: Tuple[str, ...] = ("*.yaml", "*.yml")) -> List[str]:
    """Expand directories into the manifest files they contain.

    Files and ``-`` (standard input) are kept as given; directories are
    replaced by their matching files in sorted order.
    """
    expanded: List[str] = []
    for source in sources:
        path = Path(source)
        if source != "-" and path.is_dir():
            matches = set()
            for pattern in patterns:
                matches.update(p for p in path.glob(pattern) if p.is_file())
            expanded.extend(str(p) for p in sorted(matches))
        else:
            expanded.append(source)
    return expanded


def load_sources(sources: Iterable[str], stdin: Optional[IO[str]] = None) -> List[Document]:
    """Load every document from a list of sources into one batch.

    Args:
        sources: File paths, directories, or ``-`` for standard input
        stdin: Stream used for ``-`` (default: sys.stdin)

    Returns:
        Documents indexed consecutively across all sources

    Raises:
        InputError: If a source cannot be read
    """
    documents: List[Document] = []
    for source in expand_sources(sources):
        if source == "-":
            if stdin is None:
                stdin = sys.stdin
            loaded = load_stream(stdin, STDIN_SOURCE, start_index=len(documents))
        else:
            loaded = load_file(source, start_index=len(documents))
        documents.extend(loaded)
        logger.info(f"Loaded {source}: {len(documents)} document(s) so far")
    return documents


def dump_document(document: Document) -> str:
    """Re-serialize a document's plain data as YAML text.

    Args:
        document: A successfully parsed Document

    Returns:
        YAML text; empty string for placeholders
    """
    data = document.to_plain()
    if data is None:
        return ""
    yaml = _create_yaml_instance()
    buffer = io.StringIO()
    yaml.dump(data, buffer)
    return buffer.getvalue()
