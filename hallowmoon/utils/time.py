"""
Duration formatting for log lines and countdowns.

Log text depends on these strings byte for byte:
    0 -> "0ms", 500 -> "500ms", 1500 -> "1.5s", 12500 -> "13s",
    60000 -> "1m", 90500 -> "1m 31s"

Halves always round up, never to even.
"""

import math
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return int(math.floor(value + 0.5))


def _one_decimal(value: float) -> str:
    return str(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_duration(ms: float) -> str:
    """Render milliseconds as a compact human duration."""
    clamped = max(0, ms)
    if clamped >= 60000:
        minutes = int(clamped // 60000)
        seconds = round_half_up((clamped % 60000) / 1000)
        if seconds == 0:
            return f"{minutes}m"
        return f"{minutes}m {seconds}s"
    if clamped >= 10000:
        return f"{round_half_up(clamped / 1000)}s"
    if clamped >= 1000:
        return f"{_one_decimal(clamped / 1000)}s"
    if isinstance(clamped, float) and not clamped.is_integer():
        return f"{clamped}ms"
    return f"{int(clamped)}ms"


def format_duration_label(ms: float) -> str:
    return format_duration(ms)
