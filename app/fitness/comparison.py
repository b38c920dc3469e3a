"""Cross-goal comparison: per-goal stats, aggregates and rankings.

Progress here is the blunt absolute-value view of overall completion,
not the staged milestone percentage from `progress`.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Mapping, Sequence

from app.fitness import features
from app.fitness.models import (
    ComparisonReport,
    Goal,
    GoalRanking,
    GoalStats,
    GoalStatus,
    WeightLogEntry,
)


def goal_stats(goal: Goal, logs: Sequence[WeightLogEntry], today: date | None = None) -> GoalStats:
    """Statistics for one goal from its full log history."""
    today = today or date.today()
    ordered = features.sort_logs(logs)
    last = ordered[-1] if ordered else None

    current = last.weight if last is not None else goal.starting_weight
    change = goal.starting_weight - current
    end_date = last.log_date if last is not None else today
    duration_days = abs((end_date - goal.starting_date).days)
    rate = change / (duration_days / 7) if duration_days > 0 else 0.0

    return GoalStats(
        goal_id=goal.id,
        name=goal.name,
        status=goal.status,
        starting_weight=goal.starting_weight,
        target_weight=goal.target_weight,
        starting_date=goal.starting_date,
        current_weight=current,
        weight_change=change,
        progress_percent=features.overall_progress_pct(goal.starting_weight, current, goal.target_weight),
        duration_days=duration_days,
        average_rate_per_week=rate,
        log_count=len(ordered),
    )


def _rank_first_max(stats: Sequence[GoalStats], key: Callable[[GoalStats], float]) -> GoalRanking | None:
    """Highest `key`; ties go to the earliest goal in input order."""
    best: GoalStats | None = None
    for s in stats:
        if best is None or key(s) > key(best):
            best = s
    if best is None:
        return None
    return GoalRanking(goal_id=best.goal_id, name=best.name, value=float(key(best)))


def compare_goals(
    goals: Sequence[Goal],
    logs_by_goal: Mapping[str, Sequence[WeightLogEntry]],
    today: date | None = None,
) -> ComparisonReport:
    """Aggregate statistics across `goals`. An empty set yields an empty report."""
    stats = [goal_stats(g, logs_by_goal.get(g.id, []), today) for g in goals]
    if not stats:
        return ComparisonReport()

    return ComparisonReport(
        goals=stats,
        total_goals=len(stats),
        completed_goals=sum(1 for s in stats if s.status == GoalStatus.completed),
        total_weight_change=sum(s.weight_change for s in stats),
        average_rate_per_week=features.mean([s.average_rate_per_week for s in stats]),
        best_performance=_rank_first_max(stats, lambda s: s.average_rate_per_week),
        most_consistent=_rank_first_max(stats, lambda s: s.log_count),
    )
