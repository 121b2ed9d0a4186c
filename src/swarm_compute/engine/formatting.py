"""Number-to-text and digest helpers shared by every processor.

Peers compare digests of formatted text, never raw floats, so these two
functions are the wire contract:

- `to_fixed` renders the exact binary value of a double with a fixed number of
  decimals, rounding half away from zero.
- `sha256_hex` digests the UTF-8 encoding of a string as lowercase hex.
"""

from __future__ import annotations

import hashlib
import math
from decimal import ROUND_HALF_UP, Context, Decimal

# Fixed notation covers |value| < 1e21 (21 integer digits) plus up to 100 decimals.
_DECIMAL_CONTEXT = Context(prec=128, rounding=ROUND_HALF_UP)
_FIXED_NOTATION_LIMIT = 1e21


def to_fixed(value: float, digits: int) -> str:
    """Render `value` with exactly `digits` decimal places.

    Raises:
        ValueError: If `value` is NaN or infinite, or `digits` is out of range.
    """

    if not 0 <= digits <= 100:
        raise ValueError(f"digits must be within 0..100, got {digits}")
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value: {value!r}")

    if value == 0:
        value = 0.0  # negative zero renders unsigned
    if abs(value) >= _FIXED_NOTATION_LIMIT:
        return repr(float(value))

    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(value).quantize(quantum, context=_DECIMAL_CONTEXT)
    return f"{rounded:f}"


def _utf8(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates: substitute U+FFFD, matching WHATWG UTF-8 encoders.
        cleaned = text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
        return cleaned.encode("utf-8")


def sha256_hex(text: str) -> str:
    """Lowercase hex SHA-256 of `text`."""

    return hashlib.sha256(_utf8(text)).hexdigest()
