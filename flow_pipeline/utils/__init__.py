import time
from typing import Dict, Iterable, Optional

SECONDS_PER_DAY = 24 * 3600


def get_window_seconds(window_days: int) -> int:
    return window_days * SECONDS_PER_DAY


def calculate_cutoffs(window_days: Iterable[int], now: Optional[int] = None) -> Dict[int, int]:
    """Inclusive lower-bound block timestamp (seconds) for each trailing window."""
    if now is None:
        now = int(time.time())
    return {days: now - get_window_seconds(days) for days in window_days}
