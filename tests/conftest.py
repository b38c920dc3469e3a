"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.db import get_session
from app.fitness.models import Goal, GoalStatus, Milestone, WeightLogEntry
from app.main import app


# ---------------------------------------------------------------------------
# Fake DB session (no real Postgres needed)
# ---------------------------------------------------------------------------

class FakeSession:
    """Minimal stand-in for AsyncSession; records every statement executed."""

    def __init__(self, rows: list[dict[str, Any]] | None = None):
        self._rows = rows or []
        self.executed: list[tuple[str, Any]] = []

    async def execute(self, stmt, params=None):
        self.executed.append((str(stmt), params))
        return FakeResult(self._rows)

    async def commit(self):
        pass

    async def rollback(self):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []

    def keys(self):
        return self._keys

    def fetchall(self):
        return [tuple(r[k] for k in self._keys) for r in self._rows]

    def fetchone(self):
        rows = self.fetchall()
        return rows[0] if rows else None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_session():
    """Return a FakeSession with no rows (override _rows in tests if needed)."""
    return FakeSession()


@pytest.fixture()
def override_session(fake_session):
    """Override the FastAPI dependency so no real DB is needed."""
    async def _override():
        yield fake_session

    app.dependency_overrides[get_session] = _override
    yield fake_session
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_session):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

START = date(2026, 1, 1)


def day(n: int) -> date:
    """Calendar date n days after START."""
    return date.fromordinal(START.toordinal() + n)


def make_goal(
    goal_id: str = "g1",
    starting_weight: float = 200.0,
    target_weight: float = 180.0,
    starting_date: date = START,
    deadline: date | None = None,
    status: GoalStatus = GoalStatus.active,
    name: str | None = None,
    enable_milestones: bool = True,
) -> Goal:
    return Goal(
        id=goal_id,
        name=name or f"Goal {goal_id}",
        status=status,
        starting_weight=starting_weight,
        starting_date=starting_date,
        target_weight=target_weight,
        deadline=deadline or day(90),
        enable_milestones=enable_milestones,
    )


def make_log(weight: float, log_date: date, entry_id: str | None = None, goal_id: str = "g1") -> WeightLogEntry:
    return WeightLogEntry(
        id=entry_id or f"{goal_id}-{log_date.isoformat()}-{weight}",
        weight=weight,
        log_date=log_date,
        goal_id=goal_id,
    )


def make_milestones(*targets: float, goal_id: str | None = "g1") -> list[Milestone]:
    return [
        Milestone(milestone_number=i, target_weight=t, goal_id=goal_id)
        for i, t in enumerate(targets, start=1)
    ]
