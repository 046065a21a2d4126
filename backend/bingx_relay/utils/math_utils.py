"""
PURPOSE: Number rendering helpers shared by order serialization and request signing.

BingX documents its numbers the way JavaScript prints them, so integral floats
are rendered without a trailing ".0" (5000.0 → "5000") while all other floats
keep Python's shortest round-trip representation.
"""

from typing import Any


def compact_number(value: Any) -> Any:
    """
    PURPOSE: Collapse integral floats to int, leave everything else untouched.

    Args:
        value: Any value about to be serialized.

    Returns:
        Any: int(value) for finite integral floats, otherwise value itself.

    Example:
        >>> compact_number(31968.0)
        31968
        >>> compact_number(0.25)
        0.25
    """
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def format_number(value: Any) -> str:
    """
    PURPOSE: Render a scalar for a signed query string.

    Booleans become "true"/"false"; numbers go through compact_number().

    Args:
        value: Scalar parameter value.

    Returns:
        str: Text form of the value, not yet percent-encoded.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(compact_number(value))
