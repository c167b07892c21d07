"""Declarative field rules.

A schema is a tree of Shapes. Structs hold ordered FieldRules; each FieldRule
names one field, whether it is required, and the Shape its value must have.
Shapes are immutable and shared freely between schemas.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

STRING = "string"
INTEGER = "integer"
NUMBER = "number"
BOOLEAN = "boolean"
INT_OR_STRING = "int-or-string"
TIMESTAMP = "timestamp"

SCALAR_TYPES = (STRING, INTEGER, NUMBER, BOOLEAN, INT_OR_STRING, TIMESTAMP)


class Shape:
    """Base class for value shapes."""

    def describe(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Scalar(Shape):
    """A scalar value.

    Attributes:
        type: One of SCALAR_TYPES
        enum: Allowed literal values (optional)
        minimum: Inclusive lower bound for numbers (optional)
        maximum: Inclusive upper bound for numbers (optional)
        format: Named string format checked by the validator
                ("cron", "cidr", "ip", "base64", "dns-label", "percent")
    """

    type: str = STRING
    enum: Optional[Tuple] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    format: Optional[str] = None

    def describe(self) -> str:
        return self.type


@dataclass(frozen=True)
class Quantity(Shape):
    """A non-negative resource quantity (e.g., "500m", "1Gi", 2)."""

    def describe(self) -> str:
        return "quantity"


@dataclass(frozen=True)
class AnyValue(Shape):
    """Any value; contents are not inspected."""

    def describe(self) -> str:
        return "any"


@dataclass(frozen=True)
class ListOf(Shape):
    """A sequence whose items all have the same shape."""

    items: Shape
    min_items: int = 0

    def describe(self) -> str:
        return f"list of {self.items.describe()}"


@dataclass(frozen=True)
class MapOf(Shape):
    """A mapping with arbitrary keys whose values share one shape."""

    values: Shape

    def describe(self) -> str:
        return f"map of {self.values.describe()}"


@dataclass(frozen=True)
class FieldRule:
    """One declared field of a Struct.

    Attributes:
        name: Field name (mapping key)
        shape: Expected shape of the value
        required: Whether the field must be present and non-null
    """

    name: str
    shape: Shape
    required: bool = False


@dataclass(frozen=True)
class RangeRule:
    """Ordering constraint between two sibling fields.

    With ``per_key`` the two fields are resource maps and every key present in
    both is compared (``min.cpu <= max.cpu``); otherwise the two scalar
    values are compared directly (``minReplicas <= maxReplicas``).
    """

    lower: str
    upper: str
    per_key: bool = False


@dataclass(frozen=True)
class Struct(Shape):
    """A mapping with declared fields.

    Attributes:
        fields: Ordered field rules
        open: When True, undeclared fields are accepted silently
        ranges: Ordering constraints between fields
        one_of: Groups of which at least one member must be present
        exclusive: Groups of which at most one member may be present
        name: Display name used in messages (e.g., "Container")
    """

    fields: Tuple[FieldRule, ...] = ()
    open: bool = False
    ranges: Tuple[RangeRule, ...] = ()
    one_of: Tuple[Tuple[str, ...], ...] = ()
    exclusive: Tuple[Tuple[str, ...], ...] = ()
    name: str = "object"

    def describe(self) -> str:
        return self.name

    def field_names(self) -> Tuple[str, ...]:
        return tuple(rule.name for rule in self.fields)

    def field(self, name: str) -> Optional[FieldRule]:
        for rule in self.fields:
            if rule.name == name:
                return rule
        return None

    def extend(self, *rules: FieldRule, **changes) -> "Struct":
        """Return a copy with ``rules`` added or replacing same-named fields."""
        replaced = {rule.name: rule for rule in rules}
        merged = [replaced.pop(rule.name, rule) for rule in self.fields]
        merged.extend(rule for rule in rules if rule.name in replaced)
        values = {
            "fields": tuple(merged),
            "open": self.open,
            "ranges": self.ranges,
            "one_of": self.one_of,
            "exclusive": self.exclusive,
            "name": self.name,
        }
        values.update(changes)
        return Struct(**values)


def req(name: str, shape: Shape) -> FieldRule:
    """Shorthand for a required FieldRule."""
    return FieldRule(name, shape, required=True)


def opt(name: str, shape: Shape) -> FieldRule:
    """Shorthand for an optional FieldRule."""
    return FieldRule(name, shape)


def enum(*values, type: str = STRING) -> Scalar:
    return Scalar(type=type, enum=tuple(values))


STR = Scalar(STRING)
INT = Scalar(INTEGER)
NON_NEGATIVE = Scalar(INTEGER, minimum=0)
POSITIVE = Scalar(INTEGER, minimum=1)
BOOL = Scalar(BOOLEAN)
NUM = Scalar(NUMBER)
INT_OR_STR = Scalar(INT_OR_STRING)
TIME = Scalar(TIMESTAMP)
PORT = Scalar(INTEGER, minimum=1, maximum=65535)
STRINGS = ListOf(STR)
STRING_MAP = MapOf(STR)
QUANTITY = Quantity()
RESOURCE_LIST = MapOf(QUANTITY)
ANY = AnyValue()
OPEN = Struct(open=True)
