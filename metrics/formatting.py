"""Number and timestamp rendering for bulk documents"""
import math
from datetime import datetime, timezone
from decimal import Context, Decimal, ROUND_HALF_EVEN
from typing import Optional


NAN = "NaN"
POSITIVE_INFINITY = "Infinity"
NEGATIVE_INFINITY = "-Infinity"

_SIX_PLACES = Decimal("0.000001")
# Wide enough for the full range of a double plus six fractional digits
_CONTEXT = Context(prec=400, rounding=ROUND_HALF_EVEN)


def _non_finite_word(value: float) -> str:
    if math.isnan(value):
        return NAN
    return POSITIVE_INFINITY if value > 0 else NEGATIVE_INFINITY


def _format_finite(value: float) -> str:
    rounded = Decimal(value).quantize(_SIX_PLACES, context=_CONTEXT)
    if rounded.is_zero():
        return "0"
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def decimal_or_whole(value: float) -> str:
    """Render up to six decimals, whole numbers without a fraction"""
    if not math.isfinite(value):
        return _non_finite_word(value)
    return _format_finite(value)


def decimal_or_nan(value: float) -> str:
    """Render a number as a JSON token.

    Finite values are written as bare numbers. NaN and the infinities are not
    valid JSON numbers, so they are written as the quoted strings "NaN",
    "Infinity" and "-Infinity" instead.
    """
    if not math.isfinite(value):
        return f'"{_non_finite_word(value)}"'
    return _format_finite(value)


def iso_timestamp(wall_time: int) -> str:
    """ISO-8601 UTC instant for epoch milliseconds, e.g. 1970-01-01T00:16:40Z"""
    seconds, millis = divmod(int(wall_time), 1000)
    instant = datetime.fromtimestamp(seconds, tz=timezone.utc)
    text = instant.strftime("%Y-%m-%dT%H:%M:%S")
    if millis:
        text += f".{millis:03d}"
    return text + "Z"


def is_not_blank(value: Optional[str]) -> bool:
    """False for None, empty and whitespace-only strings"""
    return value is not None and value.strip() != ""
