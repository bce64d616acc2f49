# grain/planner/parsers.py
from __future__ import annotations

import math
import re
from typing import Any, Optional


_CLEAN_RE = re.compile(r"[,\s]")
_CURRENCY_RE = re.compile(r"[$]|cad|usd", re.IGNORECASE)


def parse_amount(value: Any) -> Optional[float]:
    """
    Lenient money parser for user-entered fields.
    Handles:
      - 1200, "1200", "1,200"
      - "$1,200", "CAD 1200"
      - "2.5k", "12K"
    Returns float dollars or None when nothing numeric can be read.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            # int too large for a float
            return None

    s = str(value).strip()
    if not s:
        return None

    s = _CURRENCY_RE.sub("", s).strip().lower()
    s = _CLEAN_RE.sub("", s)

    m = re.match(r"^([0-9]*\.?[0-9]+)k$", s)
    if m:
        return float(m.group(1)) * 1000.0

    try:
        return float(s)
    except ValueError:
        return None


def coerce_amount(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Finite, non-negative amount; anything else collapses to `default`."""
    num = parse_amount(value)
    if num is None or not math.isfinite(num) or num < 0:
        return default
    return num


def coerce_pct(value: Any, lo: float = 0.0, hi: float = 100.0) -> float:
    num = parse_amount(value)
    if num is None or not math.isfinite(num):
        return lo
    return max(lo, min(hi, num))


def round_half_up(x: float) -> int:
    # Matches the web client's Math.round (halves go up, not to even).
    return int(math.floor(x + 0.5))


def format_money(value: Any) -> str:
    num = parse_amount(value)
    if num is None or not math.isfinite(num):
        num = 0.0
    negative = num < 0
    num_abs = abs(num)
    if float(num_abs).is_integer():
        text = f"{int(num_abs):,}"
    else:
        text = f"{num_abs:,.2f}".rstrip("0").rstrip(".")
    if negative:
        return f"-${text}"
    return f"${text}"


def format_number(value: Any) -> str:
    num = parse_amount(value)
    if num is None or not math.isfinite(num):
        num = 0.0
    if float(num).is_integer():
        return str(int(num))
    return f"{num:.2f}".rstrip("0").rstrip(".")
