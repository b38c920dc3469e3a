"""Input validation at the planner / evaluator boundary.

Everything rejected here raises InvalidInput. "No data" is not invalid:
empty inputs are handled by the callers and never reach these checks.
"""

from __future__ import annotations

import math
from typing import Sequence

from app.fitness.models import Milestone


class InvalidInput(ValueError):
    """Raised for non-finite weights, bad milestone counts or broken milestone sequences."""


def require_finite(value: float, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise InvalidInput(f"{name} must be finite, got {value!r}")
    return number


def require_positive_count(count: int, name: str = "milestone_count") -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidInput(f"{name} must be an integer, got {count!r}")
    if count < 1:
        raise InvalidInput(f"{name} must be at least 1, got {count}")
    return count


def validate_milestone_sequence(milestones: Sequence[Milestone]) -> None:
    """Milestones must be numbered 1..N in ascending order with finite targets."""
    for expected, milestone in enumerate(milestones, start=1):
        if milestone.milestone_number != expected:
            raise InvalidInput(
                f"Milestone sequence must be 1..{len(milestones)} in order; "
                f"found {milestone.milestone_number} at position {expected}"
            )
        require_finite(milestone.target_weight, f"milestone {expected} target_weight")
