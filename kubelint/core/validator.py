"""Schema validator: checks a classified document against its field rules.

The validator walks the document and the schema's Shape tree together,
emitting one Finding per problem with the precise sub-path and source
position. It never raises for document defects and never mutates the
document.
"""

import base64
import binascii
import datetime
import difflib
import ipaddress
import logging
import re
from typing import List, Optional

from kubelint.core import quantity
from kubelint.core.classifier import Classification
from kubelint.core.errors import QuantityError
from kubelint.core.rules import (
    BOOLEAN,
    INT_OR_STRING,
    INTEGER,
    NUMBER,
    STRING,
    TIMESTAMP,
    AnyValue,
    ListOf,
    MapOf,
    Quantity,
    RangeRule,
    Scalar,
    Shape,
    Struct,
)
from kubelint.core.schema.document import (
    Document,
    Mark,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
)
from kubelint.core.schema.finding import ERROR, WARNING, Finding

logger = logging.getLogger(__name__)

REQUIRED_FIELD = "schema.requiredField"
TYPE_MISMATCH = "schema.typeMismatch"
ENUM_VIOLATION = "schema.enumViolation"
INVALID_VALUE = "schema.invalidValue"
INVALID_QUANTITY = "schema.invalidQuantity"
RANGE_VIOLATION = "schema.rangeViolation"
EXCLUSIVE_FIELDS = "schema.exclusiveFields"
UNKNOWN_FIELD = "schema.unknownField"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$-]*$")
_DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_PERCENT = re.compile(r"^\d+%$")
_CRON_FIELD = re.compile(r"^[0-9A-Za-z*?/,#LW-]+$")
_CRON_MACROS = {
    "@yearly", "@annually", "@monthly", "@weekly", "@daily", "@midnight", "@hourly",
}


def join_path(path: str, key) -> str:
    """Append a mapping key or list index to a field path.

    Example:
        >>> join_path("spec", "containers")
        'spec.containers'
        >>> join_path("spec.containers", 0)
        'spec.containers[0]'
        >>> join_path("spec.hard", "requests.cpu")
        'spec.hard["requests.cpu"]'
    """
    if isinstance(key, int):
        return f"{path}[{key}]"
    if _IDENTIFIER.match(key):
        return f"{path}.{key}" if path else key
    return f'{path}["{key}"]'


def describe_node(node: Node) -> str:
    if isinstance(node, MappingNode):
        return "mapping"
    if isinstance(node, SequenceNode):
        return "list"
    value = node.value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return "timestamp"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def _is_null(node: Optional[Node]) -> bool:
    return node is None or (isinstance(node, ScalarNode) and node.value is None)


def _type_matches(value, expected: str) -> bool:
    is_int = isinstance(value, int) and not isinstance(value, bool)
    if expected == STRING:
        return isinstance(value, str)
    if expected == INTEGER:
        return is_int
    if expected == NUMBER:
        return is_int or (isinstance(value, float) and not isinstance(value, bool))
    if expected == BOOLEAN:
        return isinstance(value, bool)
    if expected == INT_OR_STRING:
        return is_int or isinstance(value, str)
    if expected == TIMESTAMP:
        return isinstance(value, (str, datetime.date, datetime.datetime))
    return False


def _check_format(value: str, fmt: str) -> Optional[str]:
    """Return a problem description when ``value`` violates ``fmt``, else None."""
    if fmt == "cron":
        text = value.strip()
        if text in _CRON_MACROS or text.startswith("@every "):
            return None
        fields = text.split()
        if len(fields) != 5 or not all(_CRON_FIELD.match(f) for f in fields):
            return "must be a cron expression with five fields"
        return None
    if fmt == "cidr":
        try:
            ipaddress.ip_network(value, strict=False)
        except ValueError:
            return "must be a CIDR block (e.g., 10.0.0.0/16)"
        return None
    if fmt == "ip":
        try:
            ipaddress.ip_address(value)
        except ValueError:
            return "must be an IP address"
        return None
    if fmt == "base64":
        try:
            base64.b64decode("".join(value.split()), validate=True)
        except (binascii.Error, ValueError):
            return "must be base64 encoded"
        return None
    if fmt == "dns-label":
        if len(value) > 63 or not _DNS_LABEL.match(value):
            return "must be a lowercase RFC 1123 label (at most 63 characters)"
        return None
    if fmt == "percent":
        if not _PERCENT.match(value):
            return "must be an integer or a percentage (e.g., 25%)"
        return None
    return None


class _Walker:
    """Collects findings for a single document."""

    def __init__(self, document: Document, strict: bool) -> None:
        self.document = document
        self.strict = strict
        self.findings: List[Finding] = []

    def emit(self, rule_id: str, message: str, mark: Mark, path: str, severity: str = ERROR):
        self.findings.append(
            Finding.for_document(self.document, rule_id, message, severity, mark, path)
        )

    def check(self, node: Node, shape: Shape, path: str) -> None:
        if isinstance(shape, AnyValue):
            return
        if isinstance(shape, Struct):
            self.check_struct(node, shape, path)
        elif isinstance(shape, MapOf):
            self.check_map(node, shape, path)
        elif isinstance(shape, ListOf):
            self.check_list(node, shape, path)
        elif isinstance(shape, Quantity):
            self.check_quantity(node, path)
        elif isinstance(shape, Scalar):
            self.check_scalar(node, shape, path)
        else:
            raise TypeError(f"unsupported shape {shape!r}")

    def mismatch(self, node: Node, shape: Shape, path: str) -> None:
        self.emit(
            TYPE_MISMATCH,
            f"expected {shape.describe()}, got {describe_node(node)}",
            node.mark,
            path,
        )

    def check_struct(self, node: Node, shape: Struct, path: str) -> None:
        if not isinstance(node, MappingNode):
            self.mismatch(node, shape, path)
            return

        for rule in shape.fields:
            entry = node.entry(rule.name)
            field_path = join_path(path, rule.name)
            if entry is None or _is_null(entry.value):
                if rule.required:
                    mark = entry.key_mark if entry is not None else node.mark
                    self.emit(
                        REQUIRED_FIELD,
                        f"missing required field \"{rule.name}\" in {shape.name}",
                        mark,
                        field_path,
                    )
                continue
            self.check(entry.value, rule.shape, field_path)

        for group in shape.one_of:
            if all(_is_null(node.get(name)) for name in group):
                self.emit(
                    REQUIRED_FIELD,
                    f"one of {', '.join(group)} is required in {shape.name}",
                    node.mark,
                    join_path(path, group[0]),
                )

        for group in shape.exclusive:
            present = [node.entry(name) for name in group if not _is_null(node.get(name))]
            if len(present) > 1:
                names = ", ".join(entry.key for entry in present)
                self.emit(
                    EXCLUSIVE_FIELDS,
                    f"fields {names} are mutually exclusive",
                    present[1].key_mark,
                    join_path(path, present[1].key),
                )

        if not shape.open:
            declared = shape.field_names()
            for entry in node:
                if entry.key in declared:
                    continue
                message = f"unknown field \"{entry.key}\" in {shape.name}"
                close = difflib.get_close_matches(entry.key, declared, n=1, cutoff=0.7)
                if close:
                    message += f"; did you mean \"{close[0]}\"?"
                self.emit(
                    UNKNOWN_FIELD,
                    message,
                    entry.key_mark,
                    join_path(path, entry.key),
                    ERROR if self.strict else WARNING,
                )

        for rule in shape.ranges:
            self.check_range(node, rule, path)

    def check_map(self, node: Node, shape: MapOf, path: str) -> None:
        if not isinstance(node, MappingNode):
            self.mismatch(node, shape, path)
            return
        for entry in node:
            self.check(entry.value, shape.values, join_path(path, entry.key))

    def check_list(self, node: Node, shape: ListOf, path: str) -> None:
        if not isinstance(node, SequenceNode):
            self.mismatch(node, shape, path)
            return
        if len(node) < shape.min_items:
            self.emit(
                INVALID_VALUE,
                f"must contain at least {shape.min_items} item(s)",
                node.mark,
                path,
            )
        for i, item in enumerate(node):
            self.check(item, shape.items, join_path(path, i))

    def check_quantity(self, node: Node, path: str) -> None:
        if not isinstance(node, ScalarNode):
            self.emit(
                TYPE_MISMATCH, f"expected quantity, got {describe_node(node)}", node.mark, path
            )
            return
        try:
            parsed = quantity.parse_quantity(node.value)
        except QuantityError as exc:
            self.emit(INVALID_QUANTITY, str(exc), node.mark, path)
            return
        if parsed.value < 0:
            self.emit(
                INVALID_VALUE, f"quantity {parsed.text} must not be negative", node.mark, path
            )

    def check_scalar(self, node: Node, shape: Scalar, path: str) -> None:
        if not isinstance(node, ScalarNode) or not _type_matches(node.value, shape.type):
            self.mismatch(node, shape, path)
            return
        value = node.value
        if shape.enum is not None and value not in shape.enum:
            allowed = ", ".join(str(v) for v in shape.enum)
            self.emit(
                ENUM_VIOLATION, f"{value!r} is not one of: {allowed}", node.mark, path
            )
            return
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if shape.minimum is not None and value < shape.minimum:
                self.emit(
                    INVALID_VALUE, f"{value} is less than minimum {shape.minimum}", node.mark, path
                )
            if shape.maximum is not None and value > shape.maximum:
                self.emit(
                    INVALID_VALUE, f"{value} is greater than maximum {shape.maximum}", node.mark, path
                )
        if isinstance(value, str) and shape.format:
            problem = _check_format(value, shape.format)
            if problem:
                self.emit(INVALID_VALUE, f"{value!r} {problem}", node.mark, path)

    def check_range(self, node: MappingNode, rule: RangeRule, path: str) -> None:
        lower = node.get(rule.lower)
        upper = node.get(rule.upper)
        if rule.per_key:
            if not isinstance(lower, MappingNode) or not isinstance(upper, MappingNode):
                return
            for entry in lower:
                high = upper.get(entry.key)
                low_q = _quantity_or_none(entry.value)
                high_q = _quantity_or_none(high)
                if low_q is None or high_q is None or low_q <= high_q:
                    continue
                self.emit(
                    RANGE_VIOLATION,
                    f"{rule.lower}.{entry.key} ({low_q.text}) must not exceed "
                    f"{rule.upper}.{entry.key} ({high_q.text})",
                    entry.value.mark,
                    join_path(join_path(path, rule.lower), entry.key),
                )
            return
        low_v = _number_or_none(lower)
        high_v = _number_or_none(upper)
        if low_v is not None and high_v is not None and low_v > high_v:
            self.emit(
                RANGE_VIOLATION,
                f"{rule.lower} ({low_v}) must not exceed {rule.upper} ({high_v})",
                lower.mark,
                join_path(path, rule.lower),
            )


def _quantity_or_none(node: Optional[Node]):
    if not isinstance(node, ScalarNode):
        return None
    try:
        return quantity.parse_quantity(node.value)
    except QuantityError:
        return None


def _number_or_none(node: Optional[Node]):
    if not isinstance(node, ScalarNode):
        return None
    value = node.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def validate_document(classification: Classification, strict: bool = False) -> List[Finding]:
    """Validate a classified document against its schema.

    Args:
        classification: Result of ``classify`` for the document
        strict: Report undeclared fields as errors instead of warnings

    Returns:
        Findings in walk order; empty when the document satisfies its schema
        or when it has no schema (unknown or malformed documents)
    """
    if classification.schema is None or classification.document.root is None:
        return []
    walker = _Walker(classification.document, strict)
    walker.check(classification.document.root, classification.schema.body, "")
    logger.debug(
        f"document {classification.document.index} ({classification.document.identity}): "
        f"{len(walker.findings)} schema finding(s)"
    )
    return walker.findings
