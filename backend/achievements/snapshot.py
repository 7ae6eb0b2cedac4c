"""Read-only snapshot inputs for achievement evaluation, and date helpers.

Task and journal records are owned by sibling components and arrive here as
plain data. Timestamps stay as raw strings so a single malformed value only
knocks that one record out of the date-based rules.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from pydantic import BaseModel

from backend.config import localnow

logger = logging.getLogger(__name__)


class TaskRecord(BaseModel):
    """A task as seen by the achievement rules."""

    id: str = ""
    description: str = ""
    completed: bool = False
    completed_at: str | None = None  # ISO timestamp
    scheduled_date: str | None = None  # YYYY-MM-DD
    category: str | None = None
    estimated_time: int = 0  # minutes
    actual_time_spent: int = 0  # seconds


class JournalEntry(BaseModel):
    date: str
    content: str = ""


@dataclass(frozen=True)
class AchievementSnapshot:
    """Point-in-time view of everything the achievement rules read."""

    tasks: Sequence[TaskRecord] = ()
    journal_entries: Sequence[JournalEntry] = ()
    score: int = 0
    unlocked_ids: frozenset[str] = frozenset()
    now: datetime = field(default_factory=localnow)

    @property
    def today(self) -> date:
        return self.now.date()


def parse_timestamp(value: str, record_id: str = "") -> datetime | None:
    """Parse an ISO timestamp into local wall-clock time.

    Aware timestamps (``...Z`` or ``+02:00``) are converted to the local zone;
    naive ones are taken as already local. Returns None and logs on bad input.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        logger.warning("Skipping record %r: invalid timestamp %r", record_id, value)
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_day(value: str, record_id: str = "") -> date | None:
    """Parse a YYYY-MM-DD date (or the date part of a timestamp)."""
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        logger.warning("Skipping record %r: invalid date %r", record_id, value)
        return None


def completed_tasks(tasks: Iterable[TaskRecord]) -> list[TaskRecord]:
    return [t for t in tasks if t.completed]


def completion_time(task: TaskRecord) -> datetime | None:
    """When a completed task was completed, or None if unknown or malformed."""
    if not task.completed or not task.completed_at:
        return None
    return parse_timestamp(task.completed_at, task.id)


def completion_times(tasks: Iterable[TaskRecord]) -> list[datetime]:
    times = (completion_time(t) for t in tasks)
    return [t for t in times if t is not None]


def completion_dates(tasks: Iterable[TaskRecord]) -> list[date]:
    """Distinct calendar days with at least one completion, ascending."""
    return sorted({t.date() for t in completion_times(tasks)})


def longest_streak(days: Sequence[date]) -> int:
    """Length of the longest run of consecutive calendar days.

    Args:
        days: Distinct days in ascending order.
    """
    if not days:
        return 0
    best = current = 1
    for previous, day in zip(days, days[1:]):
        current = current + 1 if (day - previous).days == 1 else 1
        best = max(best, current)
    return best


def week_start(day: date) -> date:
    """The Monday starting the week that contains ``day``."""
    return day - timedelta(days=day.weekday())


def tracked_seconds(tasks: Iterable[TaskRecord]) -> int:
    return sum(t.actual_time_spent or 0 for t in tasks)
