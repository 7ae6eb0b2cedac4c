from datetime import UTC, datetime
from pathlib import Path

from pydantic_settings import BaseSettings


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Replaces the deprecated ``datetime.utcnow()`` while keeping datetimes
    naive so they stay compatible with SQLite (which doesn't store tz info).
    """
    return datetime.now(UTC).replace(tzinfo=None)


def localnow() -> datetime:
    """Return the current local wall-clock time.

    Review dates and achievement day boundaries are calendar days as the
    user sees them, so they are computed from local time rather than UTC.
    """
    return datetime.now()


class Settings(BaseSettings):
    app_name: str = "Daywise"
    database_url: str = f"sqlite+aiosqlite:///{Path(__file__).resolve().parent.parent / 'data' / 'daywise.db'}"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_max_retries: int = 3
    anthropic_rate_limit_rpm: int = 50

    # Review interval policy
    first_interval_hard: int = 1
    first_interval_medium: int = 2
    first_interval_easy: int = 7
    hard_multiplier: float = 2.0
    medium_multiplier: float = 3.0
    easy_multiplier: float = 3.3
    lapse_threshold_days: int = 7
    lapse_interval_days: int = 2
    min_interval_days: int = 1
    max_interval_days: int = 365
    graduation_interval_days: int | None = None  # unset: items never graduate

    min_title_length: int = 3
    max_title_length: int = 100
    max_content_length: int = 500
    debug: bool = False

    model_config = {"env_prefix": "DAYWISE_", "env_file": ".env"}


settings = Settings()
