"""
Quantity: Resource Measurements.

A Quantity wraps a resource measurement reported by a node (CPU cores, memory
bytes, pod slots, ephemeral storage bytes) and supports the operations rule
evaluation needs: parse, zero, addition and three-way comparison.

Grammar (Kubernetes resource quantity):
    quantity := sign? number suffix?
    number   := digits | digits "." digits? | "." digits
    suffix   := Ki | Mi | Gi | Ti | Pi | Ei           (powers of 1024)
              | n | u | m | k | M | G | T | P | E     (decimal SI)
              | (e | E) sign? digits                 (decimal exponent)

Examples:
    "4"      -> 4
    "500m"   -> 0.5
    "16Gi"   -> 17179869184
    "1e3"    -> 1000

Values are exact decimals, so "4" and "4000m" compare equal.
"""

import re
from dataclasses import dataclass, field
from decimal import Context, Decimal
from functools import total_ordering
from typing import Optional

from kpreflight.core.errors import QuantityParseError


# =============================================================================
# SUFFIX TABLES
# =============================================================================

BINARY_SUFFIXES = {
    "Ki": 1024,
    "Mi": 1024 ** 2,
    "Gi": 1024 ** 3,
    "Ti": 1024 ** 4,
    "Pi": 1024 ** 5,
    "Ei": 1024 ** 6,
}

# suffix -> power of ten
DECIMAL_SUFFIXES = {
    "n": -9,
    "u": -6,
    "m": -3,
    "k": 3,
    "M": 6,
    "G": 9,
    "T": 12,
    "P": 15,
    "E": 18,
}

QUANTITY_PATTERN = re.compile(
    r"^(?P<number>[+-]?(?:\d+(?:\.\d*)?|\.\d+))"
    r"(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|[eE][+-]?\d+|[numkMGTPE])?$"
)

# Wide enough that no realistic quantity is rounded.
_CONTEXT = Context(prec=64)


def _format_decimal(value: Decimal) -> str:
    """Render a decimal without exponent notation or trailing zeros."""
    text = format(value.normalize(_CONTEXT), "f")
    return "0" if text in ("-0", "") else text


# =============================================================================
# QUANTITY
# =============================================================================

@total_ordering
@dataclass(frozen=True)
class Quantity:
    """
    An exact, comparable resource measurement.

    Attributes:
        value: The measurement in base units (cores, bytes, pods).
        text: The string the quantity was parsed from, if any. Used for
            display only; never for comparison.
    """
    value: Decimal
    text: Optional[str] = field(default=None, compare=False)

    @classmethod
    def parse(cls, text: str) -> "Quantity":
        """
        Parse a quantity string.

        Args:
            text: Quantity string such as "4", "250m" or "100Gi".

        Returns:
            The parsed Quantity.

        Raises:
            QuantityParseError: If the string does not match the grammar.
        """
        if not isinstance(text, str):
            raise QuantityParseError(f"quantity must be a string, got {type(text).__name__}")

        match = QUANTITY_PATTERN.match(text)
        if not match:
            raise QuantityParseError(f"quantities must match the regular expression: {text!r}")

        number = Decimal(match.group("number"))
        suffix = match.group("suffix") or ""

        try:
            if suffix in BINARY_SUFFIXES:
                value = _CONTEXT.multiply(number, Decimal(BINARY_SUFFIXES[suffix]))
            elif suffix in DECIMAL_SUFFIXES:
                value = number.scaleb(DECIMAL_SUFFIXES[suffix], _CONTEXT)
            elif suffix:
                value = number.scaleb(int(suffix[1:]), _CONTEXT)
            else:
                value = number
        except ArithmeticError as e:
            raise QuantityParseError(f"quantity out of range: {text!r}") from e

        return cls(value=value, text=text)

    @classmethod
    def zero(cls) -> "Quantity":
        """The additive identity."""
        return cls(value=Decimal(0))

    def cmp(self, other: "Quantity") -> int:
        """Three-way comparison: -1 if self < other, 0 if equal, 1 if greater."""
        if not isinstance(other, Quantity):
            raise TypeError(f"cannot compare Quantity with {type(other).__name__}")
        if self.value < other.value:
            return -1
        if self.value > other.value:
            return 1
        return 0

    def __add__(self, other: "Quantity") -> "Quantity":
        if not isinstance(other, Quantity):
            return NotImplemented
        return Quantity(value=_CONTEXT.add(self.value, other.value))

    def __lt__(self, other: "Quantity") -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.value < other.value

    def __str__(self) -> str:
        if self.text is not None:
            return self.text
        return _format_decimal(self.value)

    def __repr__(self) -> str:
        return f"Quantity({str(self)!r})"


def parse_quantity(text: str) -> Quantity:
    """Shorthand for Quantity.parse()."""
    return Quantity.parse(text)
