"""Pydantic schemas for API request/response models."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from backend.achievements.snapshot import JournalEntry, TaskRecord
from backend.planning.day_summary import DayTask
from backend.planning.task_ordering import PlannedTask
from backend.srs.review_items import Difficulty

# --- Review items ---


class ReviewItemCreate(BaseModel):
    """Request to schedule a new review item."""

    title: str
    content: str | None = None
    first_review_date: date


class ReviewItemUpdate(BaseModel):
    """Partial edit of a review item. Omitted fields are left unchanged."""

    title: str | None = None
    content: str | None = None
    next_review_date: date | None = None


class ReviewRequest(BaseModel):
    difficulty: Difficulty


# --- Achievements ---


class AchievementResponse(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    points: int
    is_secret: bool = False
    unlocked_at: datetime | None = None


class AchievementCheckRequest(BaseModel):
    """Snapshot of task and journal data supplied by the client."""

    tasks: list[TaskRecord] = Field(default_factory=list)
    journal_entries: list[JournalEntry] = Field(default_factory=list)


class AchievementCheckResponse(BaseModel):
    newly_unlocked: list[AchievementResponse]
    points_awarded: int
    score: int


# --- Rewards ---


class RewardResponse(BaseModel):
    id: str
    name: str
    description: str
    points: int
    category: str
    type: str
    icon: str
    duration_days: float | None = None
    max_ownable: int | None = None
    uses: int | None = None


class PurchaseResponse(BaseModel):
    success: bool
    message: str
    score: int


class UnequipRequest(BaseModel):
    category: str
    effect_type: str
    target: str | None = None


class ThemeResponse(BaseModel):
    site_theme: str
    tab_themes: dict[str, str]


class ScoreResponse(BaseModel):
    score: int


# --- Planning ---


class TaskOrderingRequest(BaseModel):
    tasks: list[PlannedTask]


class DaySummaryRequest(BaseModel):
    tasks: list[DayTask]


class DaySummaryResponse(BaseModel):
    summary: str
    areas_for_improvement: str
