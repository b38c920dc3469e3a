"""Fitness HTTP router: goals, milestones, weight logs and progress views.

Every read loads a fresh snapshot from the store and recomputes; nothing
derived is cached or stored.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import verify_api_key
from app.config import settings
from app.db import get_session
from app.fitness import store
from app.fitness.comparison import compare_goals
from app.fitness.models import (
    ComparisonReport,
    Goal,
    GoalCreate,
    GoalStatus,
    GoalSummary,
    GoalUpdate,
    LogEntryCreate,
    LogEntryUpdate,
    Milestone,
    MilestoneInput,
    MilestonePlanRequest,
    MilestoneRemoveRequest,
    MilestoneRemoveResult,
    ProgressSnapshot,
    ProjectionPoint,
    TimeRemaining,
    WeightLogEntry,
)
from app.fitness.planner import (
    plan_milestones,
    regenerate_milestones,
    remove_milestone,
    set_milestone_target,
)
from app.fitness.progress import compute_milestone_progress
from app.fitness.projection import compute_projection
from app.fitness.summary import summarize_goal
from app.fitness.timeline import compute_time_remaining
from app.fitness.validation import InvalidInput, validate_milestone_sequence

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fitness", tags=["fitness"])


def _today() -> date:
    """Calendar date in the configured timezone; the single normalization point."""
    return datetime.now(ZoneInfo(settings.default_tz)).date()


def _invalid(exc: InvalidInput) -> HTTPException:
    logger.warning("Rejected input: %s", exc)
    return HTTPException(status_code=422, detail=str(exc))


def _to_milestones(items: list[MilestoneInput], goal_id: str | None = None) -> list[Milestone]:
    return [
        Milestone(milestone_number=m.milestone_number, target_weight=m.target_weight, goal_id=goal_id)
        for m in items
    ]


async def _load_goal(session: AsyncSession, goal_id: str) -> Goal:
    goal = await store.get_goal(session, settings.fitness_user_id, goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail=f"Goal not found: {goal_id}")
    return goal


async def _stored_milestones(session: AsyncSession, goal: Goal) -> list[Milestone]:
    if not goal.enable_milestones:
        return []
    return await store.list_milestones_for_goal(session, goal.id)


# ---------------------------------------------------------------------------
# /fitness/goals
# ---------------------------------------------------------------------------


@router.get("/goals", response_model=list[Goal])
async def list_goals(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    status: GoalStatus | None = Query(default=None, description="Filter by goal status"),
) -> list[Goal]:
    return await store.list_goals_for_user(session, settings.fitness_user_id, status)


@router.post("/goals", response_model=Goal, status_code=201)
async def create_goal(
    payload: GoalCreate,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> Goal:
    milestones: list[Milestone] = []
    if payload.enable_milestones:
        try:
            milestones = plan_milestones(
                payload.starting_weight,
                payload.target_weight,
                payload.milestone_count,
                custom_targets=payload.milestone_targets,
            )
        except InvalidInput as exc:
            raise _invalid(exc)

    goal = await store.create_goal(session, settings.fitness_user_id, payload)
    if milestones:
        await store.replace_milestones(session, goal.id, milestones)
    return goal


@router.get("/goals/{goal_id}", response_model=Goal)
async def get_goal(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> Goal:
    return await _load_goal(session, goal_id)


@router.patch("/goals/{goal_id}", response_model=Goal)
async def update_goal(
    goal_id: str,
    payload: GoalUpdate,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> Goal:
    existing = await _load_goal(session, goal_id)
    starting_date = payload.starting_date or existing.starting_date
    deadline = payload.deadline or existing.deadline
    if deadline < starting_date:
        raise HTTPException(status_code=422, detail="deadline must not be before starting_date")

    goal = await store.update_goal(session, settings.fitness_user_id, goal_id, payload.goal_patch())
    if goal is None:
        raise HTTPException(status_code=404, detail=f"Goal not found: {goal_id}")

    if payload.touches_milestones():
        try:
            milestones = await _replan(session, goal, payload)
        except InvalidInput as exc:
            raise _invalid(exc)
        await store.replace_milestones(session, goal.id, milestones)
    return goal


async def _replan(session: AsyncSession, goal: Goal, payload: GoalUpdate) -> list[Milestone]:
    """Milestone set after an edit: explicit targets, a regenerated plan, or none."""
    if not goal.enable_milestones:
        return []
    if payload.milestone_targets is not None:
        count = payload.milestone_count or len(payload.milestone_targets)
        return plan_milestones(
            goal.starting_weight,
            goal.target_weight,
            count,
            custom_targets=payload.milestone_targets,
            goal_id=goal.id,
        )
    existing = await store.list_milestones_for_goal(session, goal.id)
    count = payload.milestone_count or len(existing) or settings.default_milestone_count
    return regenerate_milestones(existing, goal.starting_weight, goal.target_weight, count)


@router.delete("/goals/{goal_id}", status_code=204)
async def delete_goal(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> Response:
    if not await store.delete_goal(session, settings.fitness_user_id, goal_id):
        raise HTTPException(status_code=404, detail=f"Goal not found: {goal_id}")
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# /fitness/goals/{id}/milestones
# ---------------------------------------------------------------------------


@router.get("/goals/{goal_id}/milestones", response_model=list[Milestone])
async def get_milestones(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> list[Milestone]:
    await _load_goal(session, goal_id)
    return await store.list_milestones_for_goal(session, goal_id)


@router.put("/goals/{goal_id}/milestones", response_model=list[Milestone])
async def put_milestones(
    goal_id: str,
    payload: list[MilestoneInput],
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> list[Milestone]:
    await _load_goal(session, goal_id)
    milestones = _to_milestones(payload, goal_id)
    try:
        validate_milestone_sequence(milestones)
    except InvalidInput as exc:
        raise _invalid(exc)
    return await store.replace_milestones(session, goal_id, milestones)


@router.patch("/goals/{goal_id}/milestones/{milestone_number}", response_model=list[Milestone])
async def patch_milestone_target(
    goal_id: str,
    milestone_number: int,
    target_weight: float = Body(..., embed=True),
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> list[Milestone]:
    await _load_goal(session, goal_id)
    existing = await store.list_milestones_for_goal(session, goal_id)
    try:
        updated = set_milestone_target(existing, milestone_number, target_weight)
    except InvalidInput as exc:
        raise _invalid(exc)
    return await store.replace_milestones(session, goal_id, updated)


# ---------------------------------------------------------------------------
# /fitness/goals/{id}: computed views
# ---------------------------------------------------------------------------


@router.get("/goals/{goal_id}/progress", response_model=ProgressSnapshot | None)
async def get_progress(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> ProgressSnapshot | None:
    goal = await _load_goal(session, goal_id)
    milestones = await _stored_milestones(session, goal)
    logs = await store.list_logs_for_goal(session, goal_id)
    try:
        return compute_milestone_progress(goal, milestones, logs, settings.default_milestone_count)
    except InvalidInput as exc:
        raise _invalid(exc)


@router.get("/goals/{goal_id}/time-remaining", response_model=TimeRemaining | None)
async def get_time_remaining(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> TimeRemaining | None:
    goal = await _load_goal(session, goal_id)
    return compute_time_remaining(goal.deadline, _today())


@router.get("/goals/{goal_id}/projection", response_model=list[ProjectionPoint])
async def get_projection(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> list[ProjectionPoint]:
    goal = await _load_goal(session, goal_id)
    logs = await store.list_logs_for_goal(session, goal_id)
    return compute_projection(goal, logs)


@router.get("/goals/{goal_id}/summary", response_model=GoalSummary | None)
async def get_summary(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> GoalSummary | None:
    goal = await _load_goal(session, goal_id)
    logs = await store.list_logs_for_goal(session, goal_id)
    return summarize_goal(goal, logs, _today())


@router.get("/comparison", response_model=ComparisonReport)
async def get_comparison(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    status: GoalStatus | None = Query(default=None, description="Only compare goals with this status"),
) -> ComparisonReport:
    goals = await store.list_goals_for_user(session, settings.fitness_user_id, status)
    logs_by_goal = {g.id: await store.list_logs_for_goal(session, g.id) for g in goals}
    return compare_goals(goals, logs_by_goal, _today())


# ---------------------------------------------------------------------------
# /fitness/milestones: planner, no persistence
# ---------------------------------------------------------------------------


@router.post("/milestones/plan", response_model=list[Milestone])
async def plan(
    payload: MilestonePlanRequest,
    _: str = Depends(verify_api_key),
) -> list[Milestone]:
    try:
        if payload.custom_targets is not None or not payload.existing:
            return plan_milestones(
                payload.starting_weight,
                payload.target_weight,
                payload.milestone_count,
                custom_targets=payload.custom_targets,
            )
        return regenerate_milestones(
            _to_milestones(payload.existing),
            payload.starting_weight,
            payload.target_weight,
            payload.milestone_count,
        )
    except InvalidInput as exc:
        raise _invalid(exc)


@router.post("/milestones/remove", response_model=MilestoneRemoveResult)
async def remove(
    payload: MilestoneRemoveRequest,
    _: str = Depends(verify_api_key),
) -> MilestoneRemoveResult:
    try:
        milestones, count = remove_milestone(
            _to_milestones(payload.milestones), payload.milestone_number, payload.milestone_count
        )
    except InvalidInput as exc:
        raise _invalid(exc)
    return MilestoneRemoveResult(milestones=milestones, milestone_count=count)


# ---------------------------------------------------------------------------
# Weight logs
# ---------------------------------------------------------------------------


@router.get("/goals/{goal_id}/logs", response_model=list[WeightLogEntry])
async def list_logs(
    goal_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> list[WeightLogEntry]:
    await _load_goal(session, goal_id)
    return await store.list_logs_for_goal(session, goal_id)


@router.post("/logs", response_model=WeightLogEntry, status_code=201)
async def create_log(
    payload: LogEntryCreate,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> WeightLogEntry:
    await _load_goal(session, payload.goal_id)
    entry = await store.create_log_entry(session, settings.fitness_user_id, payload)
    logger.info("Logged %.1f on %s (goal %s)", entry.weight, entry.log_date, entry.goal_id)
    return entry


@router.patch("/logs/{entry_id}", response_model=WeightLogEntry)
async def update_log(
    entry_id: str,
    payload: LogEntryUpdate,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> WeightLogEntry:
    entry = await store.update_log_entry(
        session, settings.fitness_user_id, entry_id, payload.model_dump(exclude_unset=True)
    )
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Log entry not found: {entry_id}")
    return entry


@router.delete("/logs/{entry_id}", status_code=204)
async def delete_log(
    entry_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> Response:
    if not await store.delete_log_entry(session, settings.fitness_user_id, entry_id):
        raise HTTPException(status_code=404, detail=f"Log entry not found: {entry_id}")
    return Response(status_code=204)
