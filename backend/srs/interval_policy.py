"""Review interval policy for spaced repetition.

A growth-factor scheme rather than SM-2 or FSRS: there is no per-item ease
factor, the previous interval alone drives the next one.

- First review: fixed interval per difficulty (hard=1, medium=2, easy=7 days)
- Later reviews: previous interval times a per-difficulty multiplier
  (hard=2.0, medium=3.0, easy=3.3)
- Lapse: a "hard" review on an interval already past the lapse threshold
  (7 days) resets the interval to 2 days instead of doubling it
- Every interval is clamped to [1, 365] days
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta

from backend.config import Settings, localnow
from backend.srs.review_items import Difficulty, ReviewStatus


@dataclass(frozen=True)
class IntervalResult:
    """The outcome of scheduling one review."""

    interval_days: int
    next_review_date: date
    is_lapse: bool = False


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (9.5 -> 10, 16.5 -> 17)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class IntervalPolicy:
    """Configurable interval constants and the scheduling formula."""

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
    graduation_interval_days: int | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "IntervalPolicy":
        return cls(
            first_interval_hard=settings.first_interval_hard,
            first_interval_medium=settings.first_interval_medium,
            first_interval_easy=settings.first_interval_easy,
            hard_multiplier=settings.hard_multiplier,
            medium_multiplier=settings.medium_multiplier,
            easy_multiplier=settings.easy_multiplier,
            lapse_threshold_days=settings.lapse_threshold_days,
            lapse_interval_days=settings.lapse_interval_days,
            min_interval_days=settings.min_interval_days,
            max_interval_days=settings.max_interval_days,
            graduation_interval_days=settings.graduation_interval_days,
        )

    def is_lapse(self, current_interval_days: int, difficulty: Difficulty, is_first_review: bool) -> bool:
        return (
            not is_first_review
            and difficulty == Difficulty.HARD
            and current_interval_days > self.lapse_threshold_days
        )

    def next_interval(self, current_interval_days: int, difficulty: Difficulty, is_first_review: bool) -> int:
        """Compute the next interval in days, clamped to the policy bounds.

        Args:
            current_interval_days: Interval that produced the current due date.
                Ignored on a first review.
            difficulty: How the review went.
            is_first_review: Whether the item has never been reviewed.

        Returns:
            The new interval in days.
        """
        if is_first_review:
            interval = {
                Difficulty.HARD: self.first_interval_hard,
                Difficulty.MEDIUM: self.first_interval_medium,
                Difficulty.EASY: self.first_interval_easy,
            }[difficulty]
        elif self.is_lapse(current_interval_days, difficulty, is_first_review):
            interval = self.lapse_interval_days
        else:
            multiplier = {
                Difficulty.HARD: self.hard_multiplier,
                Difficulty.MEDIUM: self.medium_multiplier,
                Difficulty.EASY: self.easy_multiplier,
            }[difficulty]
            interval = round_half_up(current_interval_days * multiplier)

        return max(self.min_interval_days, min(self.max_interval_days, interval))

    def schedule(
        self,
        current_interval_days: int,
        difficulty: Difficulty,
        is_first_review: bool,
        today: date | None = None,
    ) -> IntervalResult:
        """Compute the next interval and the calendar date it lands on."""
        today = today or localnow().date()
        interval = self.next_interval(current_interval_days, difficulty, is_first_review)
        return IntervalResult(
            interval_days=interval,
            next_review_date=today + timedelta(days=interval),
            is_lapse=self.is_lapse(current_interval_days, difficulty, is_first_review),
        )

    def status_after(self, result: IntervalResult, difficulty: Difficulty) -> ReviewStatus:
        """Status an item moves to after a review.

        Without a graduation threshold every reviewed item stays in learning.
        With one, a non-hard review reaching the threshold graduates the item;
        anything else (including a lapse) puts it back in learning.
        """
        if self.graduation_interval_days is None:
            return ReviewStatus.LEARNING
        if difficulty != Difficulty.HARD and result.interval_days >= self.graduation_interval_days:
            return ReviewStatus.GRADUATED
        return ReviewStatus.LEARNING
