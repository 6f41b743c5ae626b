"""
Field guards shared by every create/update path.

Each ``require_*`` helper raises a 400 ``HTTPException`` naming the field on
the first failure, so handlers can call them in order and stop at the first
bad field.
"""

import math
from typing import Any, Optional, Union

from fastapi import HTTPException

Number = Union[int, float]


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def is_boolean(value: Any) -> bool:
    return type(value) is bool


def to_number(value: Any) -> Optional[Number]:
    """Coerce a JSON value to a number, or ``None`` when it is not numeric.

    Numeric strings are accepted after trimming. Booleans are not numbers here.
    Integral values come back as ``int``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def is_non_negative_int(value: Any) -> bool:
    number = to_number(value)
    return isinstance(number, int) and number >= 0


def require_object(value: Any, field: str) -> dict:
    if not isinstance(value, dict):
        raise HTTPException(status_code=400, detail=f"{field} is required")
    return value


def require_non_empty_string(value: Any, field: str, detail: Optional[str] = None) -> str:
    if not is_non_empty_string(value):
        raise HTTPException(status_code=400, detail=detail or f"{field} is required")
    return value.strip()


def require_non_negative_int(value: Any, field: str) -> int:
    if not is_non_negative_int(value):
        raise HTTPException(status_code=400, detail=f"{field} must be a non-negative integer")
    return to_number(value)


def optional_trimmed(value: Any) -> Optional[str]:
    return value.strip() if is_non_empty_string(value) else None
