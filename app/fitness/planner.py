"""Milestone planning: evenly stepped targets between start and goal weight.

step = (starting_weight - target_weight) / count
target_i = starting_weight - step * i        for i in 1..count

The sign of `step` covers both loss and gain goals. Editor helpers keep
user-customized targets unless the milestone count itself changes.
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.fitness.models import Milestone
from app.fitness.validation import (
    InvalidInput,
    require_finite,
    require_positive_count,
    validate_milestone_sequence,
)

logger = logging.getLogger(__name__)

MIN_MILESTONES = 1
MAX_MILESTONES = 10


def clamp_milestone_count(count: object) -> int:
    """Coerce an editor-entered count into [1, 10]. Unparseable input becomes 1."""
    try:
        value = int(count)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return MIN_MILESTONES
    return max(MIN_MILESTONES, min(MAX_MILESTONES, value))


def plan_milestones(
    starting_weight: float,
    target_weight: float,
    milestone_count: int,
    custom_targets: Sequence[float | None] | None = None,
    goal_id: str | None = None,
) -> list[Milestone]:
    """Return `milestone_count` milestones numbered 1..count.

    Counts above MAX_MILESTONES are clamped; counts below 1 raise InvalidInput.
    `custom_targets` carries one entry per milestone; a non-None entry replaces
    the computed target verbatim.
    """
    start = require_finite(starting_weight, "starting_weight")
    target = require_finite(target_weight, "target_weight")
    count = min(require_positive_count(milestone_count), MAX_MILESTONES)

    if custom_targets is not None and len(custom_targets) != count:
        raise InvalidInput(
            f"custom_targets must have {count} entries, got {len(custom_targets)}"
        )

    step = (start - target) / count
    milestones: list[Milestone] = []
    for i in range(1, count + 1):
        # Last milestone is the goal itself, free of float drift.
        weight = target if i == count else start - step * i
        if custom_targets is not None and custom_targets[i - 1] is not None:
            weight = require_finite(custom_targets[i - 1], f"custom target {i}")
        milestones.append(Milestone(milestone_number=i, target_weight=weight, goal_id=goal_id))
    return milestones


def regenerate_milestones(
    existing: Sequence[Milestone],
    starting_weight: float,
    target_weight: float,
    milestone_count: int,
) -> list[Milestone]:
    """Recompute targets only when nothing exists yet or the count changed.

    Otherwise `existing` is returned untouched, customized values included.
    """
    count = clamp_milestone_count(milestone_count)
    if existing and len(existing) == count:
        validate_milestone_sequence(existing)
        return list(existing)
    goal_id = existing[0].goal_id if existing else None
    logger.debug("Regenerating %d milestones (had %d)", count, len(existing))
    return plan_milestones(starting_weight, target_weight, count, goal_id=goal_id)


def set_milestone_target(
    milestones: Sequence[Milestone],
    milestone_number: int,
    target_weight: float,
) -> list[Milestone]:
    """Replace one milestone's target with a user-supplied value."""
    weight = require_finite(target_weight, "target_weight")
    if not any(m.milestone_number == milestone_number for m in milestones):
        raise InvalidInput(f"No milestone numbered {milestone_number}")
    return [
        m.model_copy(update={"target_weight": weight}) if m.milestone_number == milestone_number else m
        for m in milestones
    ]


def remove_milestone(
    milestones: Sequence[Milestone],
    milestone_number: int,
    requested_count: int,
) -> tuple[list[Milestone], int]:
    """Drop milestone `milestone_number` and renumber the rest densely.

    Returns (renumbered milestones, requested_count - 1 floored at 1).
    """
    if not any(m.milestone_number == milestone_number for m in milestones):
        raise InvalidInput(f"No milestone numbered {milestone_number}")
    kept = [m for m in milestones if m.milestone_number != milestone_number]
    renumbered = [
        m.model_copy(update={"milestone_number": n}) for n, m in enumerate(kept, start=1)
    ]
    return renumbered, max(MIN_MILESTONES, requested_count - 1)
