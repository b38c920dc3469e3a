from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/fitness"
    default_tz: str = "UTC"  # "today" for time-remaining / comparison is taken in this zone
    fitness_api_key: str | None = None

    # Single-user deployment: every goal and log belongs to this id.
    fitness_user_id: str = "default"

    # Milestones derived when a goal has none stored (and the planner's default count).
    default_milestone_count: int = 4

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
