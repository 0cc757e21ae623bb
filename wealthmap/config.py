"""Environment driven settings.

Values are read once at import time. A ``.env`` file at the project root is
loaded first so local development does not need exported variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Pins the default random source used by valuation and market analytics.
RANDOM_SEED = _optional_int("WEALTHMAP_RANDOM_SEED")

# Overrides the calendar year used to compute building age.
CURRENT_YEAR = _optional_int("WEALTHMAP_CURRENT_YEAR")

REPORT_MAX_PROPERTIES = _optional_int("WEALTHMAP_REPORT_MAX_PROPERTIES") or 1000


__all__ = ["LOG_LEVEL", "RANDOM_SEED", "CURRENT_YEAR", "REPORT_MAX_PROPERTIES"]
