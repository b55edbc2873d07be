"""
Chainage text conversion.

Site documents write chainage as ``km+meters`` (``1+040``, ``0+922.50``);
the engine works in plain float meters. These helpers translate between
the two at the boundary.
"""

import logging
import math
import re

from tunnelpour.core.errors import ParseError

logger = logging.getLogger(__name__)

_STATION_PATTERN = re.compile(r"^(?P<km>\d+)\+(?P<m>\d+(?:\.\d+)?)$")
_PLAIN_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


def parse_chainage(value: str) -> float:
    """
    Parse chainage text into meters.

    Args:
        value: Text such as ``"1+040"``, ``"0+922.50"`` or ``"1040"``;
            whitespace anywhere is ignored

    Returns:
        Chainage in meters

    Raises:
        ParseError: If the text is empty or not a chainage

    Example:
        >>> parse_chainage("1+040")
        1040.0
    """
    if value is None:
        raise ParseError("Chainage text is missing", value=value)

    clean = re.sub(r"\s", "", str(value))
    if not clean:
        raise ParseError("Chainage text is empty", value=value)

    match = _STATION_PATTERN.match(clean)
    if match:
        return float(match.group("km")) * 1000.0 + float(match.group("m"))

    if _PLAIN_PATTERN.match(clean):
        return float(clean)

    logger.debug(f"Rejected chainage text: {value!r}")
    raise ParseError(f"Cannot parse chainage '{value}'", value=value)


def format_chainage(value: float) -> str:
    """
    Format meters as ``km+meters`` with two decimals.

    The value is rounded to whole centimeters before splitting so that
    e.g. 1999.996 formats as ``2+000.00`` rather than ``1+1000.00``.

    Args:
        value: Chainage in meters

    Returns:
        Formatted chainage, e.g. ``"1+040.00"``

    Raises:
        ParseError: If the value is not a finite number
    """
    if not math.isfinite(value):
        raise ParseError(f"Cannot format non-finite chainage {value!r}", value=str(value))

    sign = "-" if value < 0 else ""
    centimeters = int(round(abs(value) * 100))
    km, remainder = divmod(centimeters, 100_000)
    meters = remainder / 100
    return f"{sign}{km}+{meters:06.2f}"


def format_range(start: float, end: float) -> str:
    """Format a chainage range as ``"0+922.00 - 0+941.00"``."""
    return f"{format_chainage(start)} - {format_chainage(end)}"
