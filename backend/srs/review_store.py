"""Review item store: the single owner of the review item collection.

Constructed once per process with an injected key-value store and passed to
whoever needs it (API routers, CLI commands). Every mutation writes the whole
collection before the in-memory copy is replaced, so a failed write or a
rejected edit leaves the store exactly as it was.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from backend.config import localnow, settings
from backend.srs.interval_policy import IntervalPolicy
from backend.srs.review_items import Difficulty, ReviewItem
from backend.storage.kv import KeyValueStore, VersionedCollection

logger = logging.getLogger(__name__)

REVIEW_ITEMS_KEY = "review_items"
REVIEW_ITEMS_VERSION = 1

# Fields an edit form may change; scheduling state only moves through mark_reviewed.
EDITABLE_FIELDS = frozenset({"title", "content", "next_review_date"})


class ReviewItemValidationError(ValueError):
    """Raised when an add or update is rejected."""


class ReviewItemStore:
    """Owns the review items and applies the interval policy on reviews."""

    def __init__(
        self,
        kv: KeyValueStore,
        policy: IntervalPolicy | None = None,
        clock: Callable[[], datetime] = localnow,
        min_title_length: int = settings.min_title_length,
        max_title_length: int = settings.max_title_length,
        max_content_length: int = settings.max_content_length,
    ) -> None:
        self.collection: VersionedCollection[list[ReviewItem]] = VersionedCollection(
            kv, REVIEW_ITEMS_KEY, REVIEW_ITEMS_VERSION, list[ReviewItem], list
        )
        self.policy = policy or IntervalPolicy.from_settings(settings)
        self.clock = clock
        self.min_title_length = min_title_length
        self.max_title_length = max_title_length
        self.max_content_length = max_content_length
        self._items: dict[str, ReviewItem] = {}
        self._lock = asyncio.Lock()

    async def load(self) -> None:
        """Load the persisted collection, starting empty if it is unusable."""
        items = await self.collection.load()
        self._items = {item.id: item for item in items}
        logger.info("Loaded %d review items", len(self._items))

    def today(self) -> date:
        return self.clock().date()

    # --- Queries ---

    def get(self, item_id: str) -> ReviewItem | None:
        return self._items.get(item_id)

    def items(self) -> list[ReviewItem]:
        """All items, soonest review first."""
        return sorted(self._items.values(), key=lambda i: (i.next_review_date, i.created_at))

    def get_for_date(self, day: date) -> list[ReviewItem]:
        """Items whose next review falls exactly on ``day``."""
        return [item for item in self.items() if item.next_review_date == day]

    def due_items(self, day: date | None = None) -> list[ReviewItem]:
        """Items due on or before ``day`` (default today), overdue first."""
        day = day or self.today()
        return [item for item in self.items() if item.next_review_date <= day]

    def calendar(self, start: date, end: date) -> dict[date, list[ReviewItem]]:
        """Map each day in [start, end] that has reviews to the items due that day."""
        days: dict[date, list[ReviewItem]] = {}
        for item in self.items():
            if start <= item.next_review_date <= end:
                days.setdefault(item.next_review_date, []).append(item)
        return days

    # --- Mutations ---

    async def add(self, title: str, first_review_date: date, content: str | None = None) -> ReviewItem:
        """Create a new item scheduled for its first review on ``first_review_date``.

        Raises:
            ReviewItemValidationError: If the title or content is invalid.
        """
        title = self._validate_title(title)
        content = self._validate_content(content)

        item = ReviewItem(
            id=uuid.uuid4().hex,
            title=title,
            content=content,
            first_review_date=first_review_date,
            next_review_date=first_review_date,
            created_at=self.clock(),
        )
        async with self._lock:
            await self._commit({**self._items, item.id: item})

        logger.info("Added review item %s scheduled for %s", item.id, first_review_date)
        return item

    async def update(self, item_id: str, changes: Mapping[str, Any]) -> ReviewItem | None:
        """Merge edited fields into an item without touching its interval.

        Supplying ``next_review_date`` reschedules the item manually.

        Returns:
            The updated item, or None if no item has that id.

        Raises:
            ReviewItemValidationError: If a field is not editable or invalid.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ReviewItemValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        updates: dict[str, Any] = {}
        if "title" in changes:
            updates["title"] = self._validate_title(changes["title"])
        if "content" in changes:
            updates["content"] = self._validate_content(changes["content"])
        if "next_review_date" in changes:
            next_review = changes["next_review_date"]
            if isinstance(next_review, datetime) or not isinstance(next_review, date):
                raise ReviewItemValidationError("next_review_date must be a date")
            if next_review < self.today():
                raise ReviewItemValidationError("next_review_date cannot be in the past")
            updates["next_review_date"] = next_review

        async with self._lock:
            item = self._items.get(item_id)
            if item is None:
                logger.debug("Update skipped: review item %s not found", item_id)
                return None
            updated = item.model_copy(update=updates)
            await self._commit({**self._items, item_id: updated})

        return updated

    async def delete(self, item_id: str) -> bool:
        """Remove an item. Returns False if it did not exist."""
        async with self._lock:
            if item_id not in self._items:
                return False
            remaining = {k: v for k, v in self._items.items() if k != item_id}
            await self._commit(remaining)

        logger.info("Deleted review item %s", item_id)
        return True

    async def mark_reviewed(self, item_id: str, difficulty: Difficulty) -> ReviewItem | None:
        """Record a review and schedule the next one.

        Returns:
            The rescheduled item, or None if no item has that id.
        """
        try:
            difficulty = Difficulty(difficulty)
        except ValueError:
            raise ReviewItemValidationError(f"Unknown difficulty: {difficulty!r}") from None

        async with self._lock:
            item = self._items.get(item_id)
            if item is None:
                logger.debug("Review skipped: review item %s not found", item_id)
                return None

            today = self.today()
            result = self.policy.schedule(
                item.current_interval_days,
                difficulty,
                item.is_first_review,
                today=today,
            )
            reviewed = item.model_copy(
                update={
                    "last_reviewed_date": today,
                    "next_review_date": result.next_review_date,
                    "difficulty": difficulty,
                    "current_interval_days": result.interval_days,
                    "times_reviewed": item.times_reviewed + 1,
                    "status": self.policy.status_after(result, difficulty),
                }
            )
            await self._commit({**self._items, item_id: reviewed})

        if result.is_lapse:
            logger.info("Review item %s lapsed, interval reset to %d days", item_id, result.interval_days)
        logger.info(
            "Reviewed %s as %s: next review in %d day(s) on %s",
            item_id,
            difficulty.value,
            result.interval_days,
            result.next_review_date,
        )
        return reviewed

    # --- Internals ---

    async def _commit(self, items: dict[str, ReviewItem]) -> None:
        await self.collection.save(list(items.values()))
        self._items = items

    def _validate_title(self, title: Any) -> str:
        if not isinstance(title, str):
            raise ReviewItemValidationError("Title must be a string")
        title = title.strip()
        if len(title) < self.min_title_length:
            raise ReviewItemValidationError(f"Title must be at least {self.min_title_length} characters")
        if len(title) > self.max_title_length:
            raise ReviewItemValidationError(f"Title must be at most {self.max_title_length} characters")
        return title

    def _validate_content(self, content: Any) -> str | None:
        if content is None:
            return None
        if not isinstance(content, str):
            raise ReviewItemValidationError("Content must be a string")
        if len(content) > self.max_content_length:
            raise ReviewItemValidationError(f"Content must be at most {self.max_content_length} characters")
        return content or None
