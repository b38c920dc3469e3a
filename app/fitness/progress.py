"""Staged milestone progress.

A milestone is "current" only once every earlier milestone is completed,
so at most one milestone is current: the first incomplete one. Only the
current milestone carries a partial percentage, measured from the previous
milestone target (or the starting weight for milestone 1).
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.fitness import features
from app.fitness.models import Goal, Milestone, MilestoneProgress, ProgressSnapshot, WeightLogEntry
from app.fitness.planner import plan_milestones
from app.fitness.validation import require_finite, validate_milestone_sequence

logger = logging.getLogger(__name__)

DEFAULT_MILESTONE_COUNT = 4


def _segment_pct(base: float, current_weight: float, target: float) -> int:
    """Share of the base → target segment already covered, 0-100."""
    ratio = features.safe_ratio(base - current_weight, base - target)
    return int(features.clamp(features.round_half_up(ratio * 100.0)))


def evaluate_milestones(
    milestones: Sequence[Milestone],
    starting_weight: float,
    current_weight: float,
    target_weight: float | None = None,
) -> list[MilestoneProgress]:
    """Per-milestone completion for an ascending, dense 1..N milestone list.

    Direction comes from `target_weight` when given, else from the last
    milestone's target. An empty list yields an empty result.
    """
    if not milestones:
        return []
    validate_milestone_sequence(milestones)
    start = require_finite(starting_weight, "starting_weight")
    current = require_finite(current_weight, "current_weight")
    final_target = (
        require_finite(target_weight, "target_weight")
        if target_weight is not None
        else milestones[-1].target_weight
    )
    loss = features.is_loss_goal(start, final_target)

    results: list[MilestoneProgress] = []
    all_previous_completed = True
    for index, milestone in enumerate(milestones):
        completed = features.has_reached(current, milestone.target_weight, loss)
        is_current = not completed and all_previous_completed

        if completed:
            pct = 100
        elif is_current:
            base = start if index == 0 else milestones[index - 1].target_weight
            pct = _segment_pct(base, current, milestone.target_weight)
        else:
            pct = 0

        results.append(
            MilestoneProgress(
                milestone_number=milestone.milestone_number,
                target=milestone.target_weight,
                completed=completed,
                current=is_current,
                progress_percentage=pct,
            )
        )
        all_previous_completed = all_previous_completed and completed
    return results


def compute_milestone_progress(
    goal: Goal | None,
    milestones: Sequence[Milestone],
    logs: Sequence[WeightLogEntry],
    default_milestone_count: int = DEFAULT_MILESTONE_COUNT,
) -> ProgressSnapshot | None:
    """Build the staged progress snapshot for one goal.

    Returns None when there is no goal or no weight-log history. When the
    goal has no stored milestones, `default_milestone_count` evenly spaced
    milestones are derived instead.
    """
    if goal is None or not logs:
        return None

    current = features.current_weight(logs, goal.starting_weight)

    auto_generated = False
    ordered = list(milestones)
    if not ordered:
        ordered = plan_milestones(
            goal.starting_weight, goal.target_weight, default_milestone_count, goal_id=goal.id
        )
        auto_generated = True
        logger.debug("Goal %s has no stored milestones; derived %d", goal.id, len(ordered))

    return ProgressSnapshot(
        goal_id=goal.id,
        starting_weight=goal.starting_weight,
        target_weight=goal.target_weight,
        current_weight=current,
        total_change=goal.starting_weight - current,
        milestones=evaluate_milestones(ordered, goal.starting_weight, current, goal.target_weight),
        auto_generated=auto_generated,
    )
