from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN, localcontext
from functools import total_ordering
import re

# Number of fractional digits every Amount carries
DECIMAL_PLACES = 4
SCALE = 10 ** DECIMAL_PLACES

_DECIMAL_PATTERN = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)$")


class ParseError(ValueError):
    """Raised when text cannot be read as a decimal amount."""

    def __init__(self, text: str, reason: str = "not a valid decimal number"):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse amount {text!r}: {reason}")


@total_ordering
@dataclass(frozen=True)
class Amount:
    """
    Signed fixed-point value with four fractional digits.

    Stored as an integer scaled by 10^4, so ``Amount(314)`` is ``0.0314``.
    Python integers never overflow, so arithmetic is always exact.
    """
    scaled: int

    def __post_init__(self):
        if isinstance(self.scaled, bool) or not isinstance(self.scaled, int):
            raise TypeError(f"Amount expects an integer scaled value, got {type(self.scaled).__name__}")

    @classmethod
    def new(cls, scaled: int) -> "Amount":
        return cls(scaled)

    @classmethod
    def zero(cls) -> "Amount":
        return cls(0)

    @classmethod
    def from_text(cls, text: str, strict: bool = False) -> "Amount":
        """
        Parse a plain decimal string such as ``"2.5"`` or ``"-0.0001"``.

        Extra non-zero fractional digits are rounded half-to-even, or rejected with
        ParseError when ``strict`` is set.
        """
        if not isinstance(text, str):
            raise ParseError(repr(text), "expected text")

        candidate = text.strip()
        if not _DECIMAL_PATTERN.match(candidate):
            raise ParseError(text)

        value = Decimal(candidate)
        with localcontext() as ctx:
            # Wide enough for any digit string the pattern accepts
            ctx.prec = len(candidate) + DECIMAL_PLACES + 1
            quantized = value.quantize(Decimal(1).scaleb(-DECIMAL_PLACES), rounding=ROUND_HALF_EVEN)
            # Trailing zeros beyond the scale lose nothing
            if strict and quantized != value:
                raise ParseError(text, f"more than {DECIMAL_PLACES} significant fractional digits")
            return cls(int(quantized.scaleb(DECIMAL_PLACES)))

    def add(self, other: "Amount") -> "Amount":
        return Amount(self.scaled + other.scaled)

    def subtract(self, other: "Amount") -> "Amount":
        return Amount(self.scaled - other.scaled)

    def less_than_zero(self) -> bool:
        return self.scaled < 0

    def to_decimal(self) -> Decimal:
        return Decimal(self.scaled).scaleb(-DECIMAL_PLACES)

    def __add__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> "Amount":
        return Amount(-self.scaled)

    def __lt__(self, other: "Amount") -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return self.scaled < other.scaled

    def __str__(self) -> str:
        sign = "-" if self.scaled < 0 else ""
        whole, fraction = divmod(abs(self.scaled), SCALE)
        return f"{sign}{whole}.{fraction:0{DECIMAL_PLACES}d}"

    def __repr__(self) -> str:
        return f"Amount('{self}')"
