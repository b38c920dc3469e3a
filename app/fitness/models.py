"""Goal / milestone / weight-log contracts as Pydantic v2 models."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class GoalStatus(str, Enum):
    active = "active"
    completed = "completed"
    archived = "archived"


# ---------------------------------------------------------------------------
# Stored records
# ---------------------------------------------------------------------------


class Goal(BaseModel):
    id: str
    name: str = "My Fitness Goal"
    status: GoalStatus = GoalStatus.active
    starting_weight: float
    starting_date: date
    target_weight: float
    deadline: date
    enable_milestones: bool = False


class Milestone(BaseModel):
    """One intermediate weight checkpoint. Immutable; renumbering builds new values."""

    milestone_number: int
    target_weight: float
    goal_id: str | None = None

    model_config = {"frozen": True}


class WeightLogEntry(BaseModel):
    id: str
    weight: float
    log_date: date
    goal_id: str | None = None


# ---------------------------------------------------------------------------
# Computed results
# ---------------------------------------------------------------------------


class MilestoneProgress(BaseModel):
    milestone_number: int
    target: float
    completed: bool = False
    current: bool = False
    progress_percentage: int = 0  # 0-100


class ProgressSnapshot(BaseModel):
    """Staged milestone view of one goal. Always recomputed, never stored."""

    goal_id: str
    starting_weight: float
    target_weight: float
    current_weight: float
    total_change: float
    milestones: list[MilestoneProgress] = Field(default_factory=list)
    auto_generated: bool = False  # True when milestones were derived, not stored


class TimeRemaining(BaseModel):
    days: int = 0
    weeks: int = 0
    months: int = 0


class ProjectionPoint(BaseModel):
    point_date: date
    weight: float


class WeightTrend(BaseModel):
    change: float
    direction: str  # "up" | "down" | "stable"
    is_good_trend: bool


class GoalSummary(BaseModel):
    """Dashboard card for a single goal."""

    goal_id: str
    name: str
    current_weight: float
    starting_weight: float
    target_weight: float
    weight_change: float
    remaining_weight: float
    progress_percent: float
    time_remaining: TimeRemaining | None = None
    trend: WeightTrend | None = None
    required_weekly_rate: float | None = None


class GoalStats(BaseModel):
    goal_id: str
    name: str
    status: GoalStatus
    starting_weight: float
    target_weight: float
    starting_date: date
    current_weight: float
    weight_change: float
    progress_percent: float
    duration_days: int
    average_rate_per_week: float
    log_count: int


class GoalRanking(BaseModel):
    goal_id: str
    name: str
    value: float


class ComparisonReport(BaseModel):
    goals: list[GoalStats] = Field(default_factory=list)
    total_goals: int = 0
    completed_goals: int = 0
    total_weight_change: float = 0.0
    average_rate_per_week: float = 0.0
    best_performance: GoalRanking | None = None
    most_consistent: GoalRanking | None = None


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class GoalCreate(BaseModel):
    name: str = "My Fitness Goal"
    status: GoalStatus = GoalStatus.active
    starting_weight: float = Field(..., gt=0)
    starting_date: date
    target_weight: float = Field(..., gt=0)
    deadline: date
    enable_milestones: bool = False
    milestone_count: int = Field(default=4, ge=1, le=10)
    # One entry per milestone; None keeps the computed target.
    milestone_targets: list[float | None] | None = None

    @model_validator(mode="after")
    def _deadline_after_start(self) -> "GoalCreate":
        if self.deadline < self.starting_date:
            raise ValueError("deadline must not be before starting_date")
        return self


# Goal columns that a PATCH may omit but never set to null.
NON_NULL_GOAL_FIELDS = frozenset(
    {"name", "status", "starting_weight", "starting_date", "target_weight", "deadline", "enable_milestones"}
)


class GoalUpdate(BaseModel):
    name: str | None = None
    status: GoalStatus | None = None
    starting_weight: float | None = Field(default=None, gt=0)
    starting_date: date | None = None
    target_weight: float | None = Field(default=None, gt=0)
    deadline: date | None = None
    enable_milestones: bool | None = None
    milestone_count: int | None = Field(default=None, ge=1, le=10)
    milestone_targets: list[float | None] | None = None

    @model_validator(mode="after")
    def _no_null_columns(self) -> "GoalUpdate":
        nulled = sorted(f for f in self.model_fields_set & NON_NULL_GOAL_FIELDS if getattr(self, f) is None)
        if nulled:
            raise ValueError(f"fields cannot be null: {', '.join(nulled)}")
        return self

    @model_validator(mode="after")
    def _deadline_after_start(self) -> "GoalUpdate":
        if self.deadline and self.starting_date and self.deadline < self.starting_date:
            raise ValueError("deadline must not be before starting_date")
        return self

    def goal_patch(self) -> dict:
        """Column updates only; milestone fields are handled separately."""
        return self.model_dump(
            exclude_unset=True,
            exclude={"milestone_count", "milestone_targets"},
        )

    def touches_milestones(self) -> bool:
        fields = self.model_fields_set
        return bool(
            fields
            & {"enable_milestones", "milestone_count", "milestone_targets", "starting_weight", "target_weight"}
        )


class MilestoneInput(BaseModel):
    milestone_number: int = Field(..., ge=1)
    target_weight: float


class MilestonePlanRequest(BaseModel):
    starting_weight: float
    target_weight: float
    # Counts above the maximum are clamped by the planner.
    milestone_count: int = Field(default=4, ge=1)
    custom_targets: list[float | None] | None = None
    existing: list[MilestoneInput] = Field(default_factory=list)


class MilestoneRemoveRequest(BaseModel):
    milestones: list[MilestoneInput]
    milestone_number: int
    milestone_count: int


class MilestoneRemoveResult(BaseModel):
    milestones: list[Milestone]
    milestone_count: int


class LogEntryCreate(BaseModel):
    weight: float = Field(..., gt=0)
    log_date: date
    goal_id: str


class LogEntryUpdate(BaseModel):
    weight: float | None = Field(default=None, gt=0)
    log_date: date | None = None
