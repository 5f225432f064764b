"""
Angle Parser: degree-minute-second text <-> radians

Accepted forms (whitespace anywhere is ignored):
    "10"            plain decimal degrees
    "-12.5"         signed decimal degrees
    "12d10'4\""     degrees, minutes, seconds ('d' or the degree sign)
    "24N", "48S"    trailing hemisphere letter, S and W negate
    "0.5r"          value already in radians

Minutes and seconds must be below 60. Anything that does not match raises
AngleParseError.
"""

import math
import re
from typing import Final, Union

from src.core.errors import AngleParseError
from src.core.math.numerical_safeguards import DEG_TO_RAD, RAD_TO_DEG

# =============================================================================
# GRAMMAR
# =============================================================================

_NUMBER: Final[str] = r"(?:\d+(?:\.\d*)?|\.\d+)"

_DMS_PATTERN: Final[re.Pattern] = re.compile(
    rf"""
    ^(?P<sign>[+-])?
    (?P<deg>{_NUMBER}(?:[eE][+-]?\d+)?)
    (?:
        (?P<unit>[dD°r])
        (?:(?P<min>{_NUMBER})')?
        (?:(?P<sec>{_NUMBER})")?
    )?
    (?P<hemi>[NSEWnsew])?$
    """,
    re.VERBOSE,
)

_NEGATIVE_HEMISPHERES: Final[frozenset[str]] = frozenset("SWsw")

# Default number of decimals kept on the seconds field by format_dms
DMS_SECONDS_DECIMALS: Final[int] = 3


# =============================================================================
# PARSING
# =============================================================================


def parse_dms(text: Union[str, float, int]) -> float:
    """
    Convert a DMS angle (or plain degrees) to radians.

    Args:
        text: Angle text, or a number interpreted as decimal degrees

    Returns:
        Angle in radians

    Raises:
        AngleParseError: If the text has no parseable numeric component,
            carries trailing garbage, or has minutes/seconds >= 60

    Examples:
        >>> round(parse_dms("24N"), 12) == round(math.radians(24), 12)
        True
        >>> parse_dms("48S") == -parse_dms("48N")
        True
    """
    if isinstance(text, bool):
        raise AngleParseError(f"not an angle: {text!r}")
    if isinstance(text, (int, float)):
        if not math.isfinite(text):
            raise AngleParseError(f"angle must be finite, got {text!r}")
        return float(text) * DEG_TO_RAD
    if not isinstance(text, str):
        raise AngleParseError(f"not an angle: {text!r}")

    compact = "".join(text.split())
    match = _DMS_PATTERN.match(compact)
    if match is None:
        raise AngleParseError(f"unparseable angle: {text!r}")

    unit = match.group("unit")
    minutes_text = match.group("min")
    seconds_text = match.group("sec")

    value = float(match.group("deg"))
    if unit == "r":
        if minutes_text is not None or seconds_text is not None:
            raise AngleParseError(f"radian angle cannot carry minutes/seconds: {text!r}")
    else:
        minutes = float(minutes_text) if minutes_text is not None else 0.0
        seconds = float(seconds_text) if seconds_text is not None else 0.0
        if minutes >= 60.0 or seconds >= 60.0:
            raise AngleParseError(f"minutes and seconds must be below 60: {text!r}")
        value = (value + minutes / 60.0 + seconds / 3600.0) * DEG_TO_RAD

    if match.group("sign") == "-":
        value = -value
    if match.group("hemi") in _NEGATIVE_HEMISPHERES:
        value = -value

    return value


# =============================================================================
# FORMATTING
# =============================================================================


def format_dms(
    value: float,
    positive: str = "N",
    negative: str = "S",
    decimals: int = DMS_SECONDS_DECIMALS,
) -> str:
    """
    Render an angle in radians as DMS text readable by parse_dms.

    Args:
        value: Angle in radians
        positive: Hemisphere letter for values >= 0 ("N" or "E")
        negative: Hemisphere letter for values < 0 ("S" or "W")
        decimals: Decimals kept on the seconds field (trailing zeros dropped)

    Returns:
        Text such as 12d32'12"S

    Examples:
        >>> format_dms(parse_dms("12d32'12\\"S"))
        '12d32\\'12"S'
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot format non-finite angle {value!r}")
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    hemisphere = negative if value < 0.0 else positive
    total_seconds = round(abs(value) * RAD_TO_DEG * 3600.0, decimals)

    degrees = int(total_seconds // 3600.0)
    remainder = total_seconds - degrees * 3600.0
    minutes = int(remainder // 60.0)
    seconds = remainder - minutes * 60.0

    seconds_text = f"{seconds:.{decimals}f}"
    if "." in seconds_text:
        seconds_text = seconds_text.rstrip("0").rstrip(".")

    return f"{degrees}d{minutes}'{seconds_text}\"{hemisphere}"
