"""Time remaining until a goal deadline, in approximate calendar units."""

from __future__ import annotations

import math
from datetime import date

from app.fitness.models import TimeRemaining

DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30  # approximate; not calendar-month aware


def compute_time_remaining(deadline: date | None, today: date | None = None) -> TimeRemaining | None:
    """Days / weeks / months left until `deadline`, each rounded up independently.

    A deadline on or before today yields all zeros. No deadline yields None.
    """
    if deadline is None:
        return None
    today = today or date.today()
    diff = (deadline - today).days
    if diff <= 0:
        return TimeRemaining(days=0, weeks=0, months=0)
    return TimeRemaining(
        days=diff,
        weeks=math.ceil(diff / DAYS_PER_WEEK),
        months=math.ceil(diff / DAYS_PER_MONTH),
    )
