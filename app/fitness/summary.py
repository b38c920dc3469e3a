"""Dashboard summary for one goal.

Combines overall progress, the latest-vs-previous weight trend, time left
and the weekly rate still needed to hit the target by the deadline.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from app.fitness import features
from app.fitness.models import Goal, GoalSummary, WeightLogEntry, WeightTrend
from app.fitness.timeline import compute_time_remaining


def weight_trend(
    logs: Sequence[WeightLogEntry],
    starting_weight: float,
    target_weight: float,
) -> WeightTrend | None:
    """Latest minus previous weigh-in. None with fewer than 2 logs."""
    latest = features.latest_entry(logs)
    previous = features.previous_entry(logs)
    if latest is None or previous is None:
        return None
    change = latest.weight - previous.weight
    if change > 0:
        direction = "up"
    elif change < 0:
        direction = "down"
    else:
        direction = "stable"
    loss = features.is_loss_goal(starting_weight, target_weight)
    return WeightTrend(
        change=change,
        direction=direction,
        is_good_trend=change < 0 if loss else change > 0,
    )


def required_weekly_rate(remaining_weight: float, days_remaining: int) -> float | None:
    """Weight per week still needed; None once the deadline has passed."""
    if days_remaining <= 0:
        return None
    return remaining_weight / days_remaining * 7


def summarize_goal(
    goal: Goal | None,
    logs: Sequence[WeightLogEntry],
    today: date | None = None,
) -> GoalSummary | None:
    if goal is None or not logs:
        return None

    current = features.current_weight(logs, goal.starting_weight)
    remaining = abs(current - goal.target_weight)
    time_left = compute_time_remaining(goal.deadline, today)
    days_left = time_left.days if time_left is not None else 0

    return GoalSummary(
        goal_id=goal.id,
        name=goal.name,
        current_weight=current,
        starting_weight=goal.starting_weight,
        target_weight=goal.target_weight,
        weight_change=goal.starting_weight - current,
        remaining_weight=remaining,
        progress_percent=features.overall_progress_pct(goal.starting_weight, current, goal.target_weight),
        time_remaining=time_left,
        trend=weight_trend(logs, goal.starting_weight, goal.target_weight),
        required_weekly_rate=required_weekly_rate(remaining, days_left),
    )
