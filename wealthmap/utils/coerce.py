import math
from typing import Optional


def _is_blank(v) -> bool:
    return v is None or v == "" or str(v).strip().lower() in ("null", "undefined", "nan")


def to_int(v) -> Optional[int]:
    try:
        if _is_blank(v) or isinstance(v, bool):
            return None
        return int(float(v))
    except (TypeError, ValueError, OverflowError):
        return None


def to_float(v) -> Optional[float]:
    try:
        if _is_blank(v) or isinstance(v, bool):
            return None
        result = float(v)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def to_optional_str(v) -> Optional[str]:
    if v is None:
        return None
    text = str(v).strip()
    return text or None
