from __future__ import annotations
import datetime as dt
from typing import Iterable, Optional, Tuple

from .models import Task

# completion path / hourly sweep
INSERT_WINDOW = dt.timedelta(seconds=1)
SWEEP_WINDOW = dt.timedelta(minutes=1)


def window_bounds(candidate: Task, window: dt.timedelta) -> Tuple[dt.datetime, dt.datetime]:
    return candidate.due_at - window, candidate.due_at + window


def is_duplicate(candidate: Task, existing_nearby: Iterable[Task], window: Optional[dt.timedelta] = None) -> bool:
    """
    True if any existing row counts as the same logical occurrence.

    Rows are assumed to come from a window query around candidate.due_at.
    Passing window narrows them first. No other field is compared, so a
    legitimate occurrence may be skipped but never created twice.
    """
    if window is None:
        return any(True for _ in existing_nearby)
    start, end = window_bounds(candidate, window)
    return any(start <= t.due_at <= end for t in existing_nearby)
