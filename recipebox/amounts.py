"""Amount parsing, rounding and fraction display helpers."""

import math
import re
from decimal import ROUND_HALF_UP, Decimal

# Unicode vulgar fractions accepted on input
UNICODE_FRACTIONS: dict[str, str] = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

_DECIMAL_RE = re.compile(r"^\d*[\.,]?\d+$")
_MIXED_RE = re.compile(r"^(\d+)\s+(\d+)\s*/\s*(\d+)$")
_FRACTION_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_RANGE_RE = re.compile(r"^(\d*\.?\d+)\s*[-–]\s*\d*\.?\d+$")


class InvalidAmountError(ValueError):
    """Raised when an amount is not a finite number."""

    pass


def replace_unicode_fractions(text: str) -> str:
    """Rewrite unicode fractions as ASCII, e.g. "1½" -> "1 1/2"."""
    for symbol, fraction in UNICODE_FRACTIONS.items():
        if symbol in text:
            text = re.sub(rf"(\d){symbol}", rf"\1 {fraction}", text)
            text = text.replace(symbol, fraction)
    return text.strip()


def _parse_text(text: str) -> float | None:
    clean = replace_unicode_fractions(text.strip())
    sign = -1.0 if clean.startswith("-") else 1.0
    unsigned = clean[1:].strip() if sign < 0 else clean

    if _DECIMAL_RE.match(unsigned):
        return sign * float(unsigned.replace(",", "."))

    mixed = _MIXED_RE.match(unsigned)
    if mixed:
        whole, numerator, denominator = (int(g) for g in mixed.groups())
        if denominator == 0:
            return None
        return sign * (whole + numerator / denominator)

    fraction = _FRACTION_RE.match(unsigned)
    if fraction:
        numerator, denominator = (int(g) for g in fraction.groups())
        if denominator == 0:
            return None
        return sign * (numerator / denominator)

    # Ranges like "1-2" take the first value
    rng = _RANGE_RE.match(unsigned)
    if rng:
        return sign * float(rng.group(1))

    return None


def parse_amount(value: object) -> float:
    """
    Convert a caller-supplied amount to a finite float.

    Accepts ints, floats and numeric strings ("2", "1.5", "1,5", "1/2",
    "1 1/2", "1½", "1-2").

    Raises:
        InvalidAmountError: If the value is missing, non-numeric or not finite
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    if isinstance(value, int | float):
        result = float(value)
    elif isinstance(value, Decimal):
        result = float(value)
    elif isinstance(value, str):
        parsed = _parse_text(value)
        if parsed is None:
            raise InvalidAmountError(f"Invalid amount: {value!r}")
        result = parsed
    else:
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    if not math.isfinite(result):
        raise InvalidAmountError(f"Amount must be finite, got {value!r}")
    return result


def parse_optional_amount(value: object) -> float | None:
    """Like parse_amount, but None and blank strings mean "no amount"."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return parse_amount(value)


def round_half_up(value: float, places: int = 2) -> float:
    """Round half away from zero, e.g. 2.125 -> 2.13 and -2.125 -> -2.13."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
