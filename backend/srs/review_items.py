"""Review item records for the spaced repetition scheduler."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class Difficulty(str, Enum):
    """How hard the most recent review felt."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ReviewStatus(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    GRADUATED = "graduated"


class ReviewItem(BaseModel):
    """A unit of content scheduled for spaced repetition review."""

    id: str
    title: str
    content: str | None = None
    first_review_date: date
    last_reviewed_date: date | None = None
    next_review_date: date
    difficulty: Difficulty | None = None
    current_interval_days: int = Field(default=0, ge=0)
    times_reviewed: int = Field(default=0, ge=0)
    created_at: datetime
    status: ReviewStatus = ReviewStatus.NEW

    @property
    def is_first_review(self) -> bool:
        return self.status == ReviewStatus.NEW or self.times_reviewed == 0
