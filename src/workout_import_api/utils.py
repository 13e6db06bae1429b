"""Utility functions."""
import math
from typing import Any, Optional


def to_int(s: Optional[str]) -> Optional[int]:
    """Convert string to int, returning None if conversion fails."""
    if s is None:
        return None
    try:
        return int(str(s).strip())
    except ValueError:
        pass
    value = to_float(s)
    return int(value) if value is not None else None


def to_float(s: Optional[str]) -> Optional[float]:
    """Convert string to float, returning None if conversion fails."""
    try:
        value = float(str(s).strip()) if s is not None else None
    except ValueError:
        return None
    if value is None or not math.isfinite(value):
        return None
    return value


def is_number(value: Any) -> bool:
    """True for finite int/float values (bools are not numbers here)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def clean_text(value: Any) -> Optional[str]:
    """Strip a text value, mapping blanks to None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None

