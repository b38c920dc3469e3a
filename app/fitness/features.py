"""Pure stateless numeric helpers. Math only, never raises."""

from __future__ import annotations

import math
from typing import Sequence

from app.fitness.models import WeightLogEntry


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp `value` into [low, high]."""
    return max(low, min(high, value))


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is zero."""
    if denominator == 0.0:
        return 0.0
    return numerator / denominator


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean. Returns 0.0 if empty."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def is_loss_goal(starting_weight: float, target_weight: float) -> bool:
    """A goal whose target is at or below the start is a loss goal."""
    return target_weight <= starting_weight


def has_reached(current_weight: float, target_weight: float, loss: bool) -> bool:
    """Direction-aware 'reached or passed' comparison."""
    if loss:
        return current_weight <= target_weight
    return current_weight >= target_weight


def overall_progress_pct(
    starting_weight: float,
    current_weight: float,
    target_weight: float,
) -> float:
    """Absolute-value, non-staged completion toward the goal (0-100).

    progress = |start - current| / |start - target| * 100, capped at 100.
    A zero-width goal yields 0.
    """
    total_needed = abs(starting_weight - target_weight)
    achieved = abs(starting_weight - current_weight)
    return clamp(safe_ratio(achieved, total_needed) * 100.0)


# ---------------------------------------------------------------------------
# Log history helpers
# ---------------------------------------------------------------------------

def sort_logs(logs: Sequence[WeightLogEntry]) -> list[WeightLogEntry]:
    """Ascending by log_date. Stable, so same-day entries keep input order."""
    return sorted(logs, key=lambda e: e.log_date)


def latest_entry(logs: Sequence[WeightLogEntry]) -> WeightLogEntry | None:
    """Most recent entry by log_date; the last one wins among same-day entries."""
    if not logs:
        return None
    return sort_logs(logs)[-1]


def previous_entry(logs: Sequence[WeightLogEntry]) -> WeightLogEntry | None:
    """Entry immediately before the latest one, or None with fewer than 2 logs."""
    if len(logs) < 2:
        return None
    return sort_logs(logs)[-2]


def current_weight(logs: Sequence[WeightLogEntry], fallback: float) -> float:
    """Weight of the latest entry, or `fallback` when there are no logs."""
    entry = latest_entry(logs)
    return entry.weight if entry is not None else fallback
