import logging

from fastapi import FastAPI

from app.config import settings
from app.fitness.router import router as fitness_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Fitness Goals", version="0.1.0")
app.include_router(fitness_router)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "fitness": {
            "goals": "/fitness/goals",
            "goal_detail": "/fitness/goals/{id}",
            "milestones": "/fitness/goals/{id}/milestones",
            "progress": "/fitness/goals/{id}/progress",
            "time_remaining": "/fitness/goals/{id}/time-remaining",
            "projection": "/fitness/goals/{id}/projection",
            "summary": "/fitness/goals/{id}/summary",
            "logs": "/fitness/goals/{id}/logs",
            "comparison": "/fitness/comparison",
            "plan_milestones": "/fitness/milestones/plan",
            "remove_milestone": "/fitness/milestones/remove",
            "log_entry": "/fitness/logs",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
