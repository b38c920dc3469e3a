"""Store adapter: async access to fitness_goals, fitness_milestones and weight_logs.

Tables:
  fitness_goals       id, user_id, name, status, starting_weight, starting_date,
                      target_weight, deadline, enable_milestones, created_at, updated_at
  fitness_milestones  goal_id, milestone_number, target_weight
  weight_logs         id, user_id, goal_id, weight, log_date, created_at

Dates arrive here already normalized to calendar dates. Milestone sets are
only ever replaced wholesale (delete then insert). Deleting a goal removes
its milestones; its weight logs are left in place.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.fitness.models import (
    Goal,
    GoalCreate,
    GoalStatus,
    LogEntryCreate,
    Milestone,
    WeightLogEntry,
)

logger = logging.getLogger(__name__)

GOAL_COLUMNS = (
    "id, name, status, starting_weight, starting_date, target_weight, deadline, enable_milestones"
)
GOAL_PATCHABLE = {
    "name",
    "status",
    "starting_weight",
    "starting_date",
    "target_weight",
    "deadline",
    "enable_milestones",
}
LOG_COLUMNS = "id, goal_id, weight, log_date"
LOG_PATCHABLE = {"weight", "log_date"}


def _rows(result) -> list[dict[str, Any]]:
    columns = result.keys()
    return [dict(zip(columns, r)) for r in result.fetchall()]


def _row(result) -> dict[str, Any] | None:
    row = result.fetchone()
    if row is None:
        return None
    return dict(zip(result.keys(), row))


def _goal_from_row(row: dict[str, Any]) -> Goal:
    return Goal(
        id=str(row["id"]),
        name=row.get("name") or "My Fitness Goal",
        status=row.get("status") or GoalStatus.active,
        starting_weight=float(row["starting_weight"]),
        starting_date=row["starting_date"],
        target_weight=float(row["target_weight"]),
        deadline=row["deadline"],
        enable_milestones=bool(row.get("enable_milestones")),
    )


def _log_from_row(row: dict[str, Any]) -> WeightLogEntry:
    goal_id = row.get("goal_id")
    return WeightLogEntry(
        id=str(row["id"]),
        goal_id=str(goal_id) if goal_id is not None else None,
        weight=float(row["weight"]),
        log_date=row["log_date"],
    )


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _set_clause(patch: dict[str, Any], allowed: set[str]) -> tuple[str, dict[str, Any]]:
    """Build "col = :col, ..." for the allowed keys of `patch`."""
    columns = [k for k in patch if k in allowed]
    clause = ", ".join(f"{c} = :{c}" for c in columns)
    return clause, {c: _db_value(patch[c]) for c in columns}


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


async def create_goal(session: AsyncSession, user_id: str, goal: GoalCreate) -> Goal:
    now = datetime.now(timezone.utc)
    params = {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "name": goal.name,
        "status": goal.status.value,
        "starting_weight": goal.starting_weight,
        "starting_date": goal.starting_date,
        "target_weight": goal.target_weight,
        "deadline": goal.deadline,
        "enable_milestones": goal.enable_milestones,
        "created_at": now,
        "updated_at": now,
    }
    query = (
        "INSERT INTO fitness_goals "
        "(id, user_id, name, status, starting_weight, starting_date, target_weight, "
        "deadline, enable_milestones, created_at, updated_at) "
        "VALUES (:id, :user_id, :name, :status, :starting_weight, :starting_date, "
        ":target_weight, :deadline, :enable_milestones, :created_at, :updated_at) "
        f"RETURNING {GOAL_COLUMNS}"
    )
    result = await session.execute(text(query), params)
    row = _row(result)
    logger.info("Created goal %s for user %s", params["id"], user_id)
    return _goal_from_row(row) if row is not None else _goal_from_row(params)


async def get_goal(session: AsyncSession, user_id: str, goal_id: str) -> Goal | None:
    """Fetch one of the user's goals. Returns None when nothing found."""
    result = await session.execute(
        text(f"SELECT {GOAL_COLUMNS} FROM fitness_goals WHERE id = :goal_id AND user_id = :user_id"),
        {"goal_id": goal_id, "user_id": user_id},
    )
    row = _row(result)
    return _goal_from_row(row) if row is not None else None


async def update_goal(
    session: AsyncSession,
    user_id: str,
    goal_id: str,
    patch: dict[str, Any],
) -> Goal | None:
    """Apply a partial update. Unknown keys are ignored; returns None if the goal is missing."""
    clause, params = _set_clause(patch, GOAL_PATCHABLE)
    if not clause:
        return await get_goal(session, user_id, goal_id)
    params["goal_id"] = goal_id
    params["user_id"] = user_id
    params["updated_at"] = datetime.now(timezone.utc)
    result = await session.execute(
        text(
            f"UPDATE fitness_goals SET {clause}, updated_at = :updated_at "
            f"WHERE id = :goal_id AND user_id = :user_id RETURNING {GOAL_COLUMNS}"
        ),
        params,
    )
    row = _row(result)
    return _goal_from_row(row) if row is not None else None


async def delete_goal(session: AsyncSession, user_id: str, goal_id: str) -> bool:
    params = {"goal_id": goal_id, "user_id": user_id}
    await session.execute(
        text(
            "DELETE FROM fitness_milestones WHERE goal_id IN "
            "(SELECT id FROM fitness_goals WHERE id = :goal_id AND user_id = :user_id)"
        ),
        params,
    )
    result = await session.execute(
        text("DELETE FROM fitness_goals WHERE id = :goal_id AND user_id = :user_id RETURNING id"),
        params,
    )
    deleted = result.fetchone() is not None
    if deleted:
        logger.info("Deleted goal %s", goal_id)
    return deleted


async def list_goals_for_user(
    session: AsyncSession,
    user_id: str,
    status: GoalStatus | None = None,
) -> list[Goal]:
    """Goals for a user, oldest first. Optionally filter by status."""
    query = f"SELECT {GOAL_COLUMNS} FROM fitness_goals WHERE user_id = :user_id"
    params: dict[str, Any] = {"user_id": user_id}
    if status is not None:
        query += " AND status = :status"
        params["status"] = _db_value(status)
    query += " ORDER BY created_at"
    result = await session.execute(text(query), params)
    return [_goal_from_row(r) for r in _rows(result)]


# ---------------------------------------------------------------------------
# Milestones
# ---------------------------------------------------------------------------


async def replace_milestones(
    session: AsyncSession,
    goal_id: str,
    milestones: Sequence[Milestone],
) -> list[Milestone]:
    """Delete every milestone of the goal, then insert `milestones`."""
    await session.execute(
        text("DELETE FROM fitness_milestones WHERE goal_id = :goal_id"),
        {"goal_id": goal_id},
    )
    stored = [m.model_copy(update={"goal_id": goal_id}) for m in milestones]
    if stored:
        await session.execute(
            text(
                "INSERT INTO fitness_milestones (goal_id, milestone_number, target_weight) "
                "VALUES (:goal_id, :milestone_number, :target_weight)"
            ),
            [
                {"goal_id": goal_id, "milestone_number": m.milestone_number, "target_weight": m.target_weight}
                for m in stored
            ],
        )
    logger.info("Replaced milestones for goal %s (%d stored)", goal_id, len(stored))
    return stored


async def list_milestones_for_goal(session: AsyncSession, goal_id: str) -> list[Milestone]:
    result = await session.execute(
        text(
            "SELECT goal_id, milestone_number, target_weight FROM fitness_milestones "
            "WHERE goal_id = :goal_id ORDER BY milestone_number"
        ),
        {"goal_id": goal_id},
    )
    return [
        Milestone(
            goal_id=str(r["goal_id"]),
            milestone_number=int(r["milestone_number"]),
            target_weight=float(r["target_weight"]),
        )
        for r in _rows(result)
    ]


# ---------------------------------------------------------------------------
# Weight logs
# ---------------------------------------------------------------------------


async def create_log_entry(session: AsyncSession, user_id: str, entry: LogEntryCreate) -> WeightLogEntry:
    params = {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "goal_id": entry.goal_id,
        "weight": entry.weight,
        "log_date": entry.log_date,
        "created_at": datetime.now(timezone.utc),
    }
    result = await session.execute(
        text(
            "INSERT INTO weight_logs (id, user_id, goal_id, weight, log_date, created_at) "
            "VALUES (:id, :user_id, :goal_id, :weight, :log_date, :created_at) "
            f"RETURNING {LOG_COLUMNS}"
        ),
        params,
    )
    row = _row(result)
    return _log_from_row(row) if row is not None else _log_from_row(params)


async def update_log_entry(
    session: AsyncSession,
    user_id: str,
    entry_id: str,
    patch: dict[str, Any],
) -> WeightLogEntry | None:
    clause, params = _set_clause(patch, LOG_PATCHABLE)
    if not clause:
        result = await session.execute(
            text(f"SELECT {LOG_COLUMNS} FROM weight_logs WHERE id = :entry_id AND user_id = :user_id"),
            {"entry_id": entry_id, "user_id": user_id},
        )
    else:
        params["entry_id"] = entry_id
        params["user_id"] = user_id
        result = await session.execute(
            text(
                f"UPDATE weight_logs SET {clause} "
                f"WHERE id = :entry_id AND user_id = :user_id RETURNING {LOG_COLUMNS}"
            ),
            params,
        )
    row = _row(result)
    return _log_from_row(row) if row is not None else None


async def delete_log_entry(session: AsyncSession, user_id: str, entry_id: str) -> bool:
    result = await session.execute(
        text("DELETE FROM weight_logs WHERE id = :entry_id AND user_id = :user_id RETURNING id"),
        {"entry_id": entry_id, "user_id": user_id},
    )
    return result.fetchone() is not None


async def list_logs_for_goal(session: AsyncSession, goal_id: str) -> list[WeightLogEntry]:
    """Log history for a goal, ascending by date (same-day entries by insertion time)."""
    result = await session.execute(
        text(
            f"SELECT {LOG_COLUMNS} FROM weight_logs "
            "WHERE goal_id = :goal_id ORDER BY log_date, created_at"
        ),
        {"goal_id": goal_id},
    )
    return [_log_from_row(r) for r in _rows(result)]
