"""Required-pace projection: a straight line from the latest weigh-in to the goal.

This is not a fitted trend. Consumers draw it next to the observed series.
"""

from __future__ import annotations

from typing import Sequence

from app.fitness import features
from app.fitness.models import Goal, ProjectionPoint, WeightLogEntry

MIN_LOGS_FOR_PROJECTION = 2


def compute_projection(goal: Goal | None, logs: Sequence[WeightLogEntry]) -> list[ProjectionPoint]:
    """Two points, (latest log date, latest weight) then (deadline, target), or []."""
    if goal is None or len(logs) < MIN_LOGS_FOR_PROJECTION:
        return []
    latest = features.latest_entry(logs)
    if latest is None:
        return []
    return [
        ProjectionPoint(point_date=latest.log_date, weight=latest.weight),
        ProjectionPoint(point_date=goal.deadline, weight=goal.target_weight),
    ]
