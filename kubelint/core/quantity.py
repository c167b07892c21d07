"""Resource quantity parsing.

Quantities are numbers with an optional suffix, as used for CPU and memory
requests and limits::

    200m    -> 0.2 cores   -> 200 millicores
    2       -> 2 cores     -> 2000 millicores
    6Mi     -> 6291456 bytes
    1.5Gi   -> 1610612736 bytes
    1e3     -> 1000

Values are kept as Decimal so that comparisons between differently-suffixed
quantities are exact.
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal, DecimalException
from typing import Any

from kubelint.core.errors import QuantityError

BINARY_SUFFIXES = {
    "Ki": Decimal(2) ** 10,
    "Mi": Decimal(2) ** 20,
    "Gi": Decimal(2) ** 30,
    "Ti": Decimal(2) ** 40,
    "Pi": Decimal(2) ** 50,
    "Ei": Decimal(2) ** 60,
}

DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}

_QUANTITY = re.compile(
    r"^(?P<number>[+-]?(?:\d+(?:\.\d*)?|\.\d+))"
    r"(?:(?P<exponent>[eE][+-]?\d+)|(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|[numkMGTPE])?)$"
)

CPU = "cpu"
BYTES = "bytes"

# Largest accepted power of ten; keeps canonical conversions within the Decimal context
MAX_EXPONENT = 100


@dataclass(frozen=True)
class Quantity:
    """A parsed quantity.

    Attributes:
        text: Original text
        value: Exact value in base units (cores for CPU, bytes for memory)
    """

    text: str
    value: Decimal

    def millis(self) -> int:
        """Value in thousandths of a base unit, rounded up."""
        return int(math.ceil(self.value * 1000))

    def units(self) -> int:
        """Value in whole base units, rounded up."""
        return int(math.ceil(self.value))

    def canonical(self, unit: str) -> int:
        """Canonical integer for ``unit``: millicores for CPU, base units otherwise."""
        return self.millis() if unit == CPU else self.units()

    def __lt__(self, other: "Quantity") -> bool:
        return self.value < other.value

    def __le__(self, other: "Quantity") -> bool:
        return self.value <= other.value


def parse_quantity(raw: Any) -> Quantity:
    """Parse a quantity string or number.

    Args:
        raw: Quantity text (e.g., "200m", "1Gi") or a plain int/float

    Returns:
        Parsed Quantity

    Raises:
        QuantityError: If the value is not a valid quantity
    """
    if isinstance(raw, bool) or raw is None:
        raise QuantityError(str(raw), "quantity must be a number or string")
    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and not math.isfinite(raw):
            raise QuantityError(str(raw))
        return _bounded(str(raw), Decimal(str(raw)))
    if not isinstance(raw, str):
        raise QuantityError(str(raw), "quantity must be a number or string")

    text = raw.strip()
    match = _QUANTITY.match(text)
    if not match:
        raise QuantityError(raw)
    exponent = match.group("exponent")
    suffix = match.group("suffix") or ""
    try:
        number = Decimal(match.group("number"))
        if exponent:
            value = number * (Decimal(10) ** int(exponent[1:]))
        elif suffix in BINARY_SUFFIXES:
            value = number * BINARY_SUFFIXES[suffix]
        else:
            value = number * DECIMAL_SUFFIXES[suffix]
    except DecimalException as exc:
        raise QuantityError(raw, "quantity out of range") from exc
    return _bounded(raw, value)


def _bounded(text: str, value: Decimal) -> Quantity:
    if value and value.adjusted() > MAX_EXPONENT:
        raise QuantityError(text, "quantity out of range")
    return Quantity(text, value)


def resource_unit(resource_name: str) -> str:
    """Canonical unit for a resource name.

    ``cpu`` and scoped names such as ``requests.cpu`` are measured in
    millicores; everything else (memory, storage, counts) in base units.
    """
    if resource_name == CPU or resource_name.endswith("." + CPU):
        return CPU
    return BYTES


def normalize(raw: Any, resource_name: str) -> int:
    """Parse ``raw`` and return its canonical integer for ``resource_name``.

    Example:
        >>> normalize("200m", "cpu")
        200
        >>> normalize("2", "cpu")
        2000
        >>> normalize("6Mi", "memory")
        6291456
    """
    return parse_quantity(raw).canonical(resource_unit(resource_name))
