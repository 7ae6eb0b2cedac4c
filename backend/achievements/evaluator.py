"""Achievement evaluator: discovers newly satisfied achievements and records them.

Evaluation is a single pass over the definitions that are not yet unlocked.
Every predicate sees the unlocked set as it was at the start of the pass, so
the result does not depend on definition order and the meta achievement
never cascades off achievements unlocked in the same pass.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel

from backend.achievements.definitions import ACHIEVEMENTS, AchievementDefinition
from backend.achievements.snapshot import AchievementSnapshot, JournalEntry, TaskRecord
from backend.config import localnow
from backend.storage.kv import KeyValueStore, VersionedCollection

logger = logging.getLogger(__name__)

USER_ACHIEVEMENTS_KEY = "user_achievements"
USER_ACHIEVEMENTS_VERSION = 1


class UserAchievement(BaseModel):
    id: str
    unlocked_at: datetime


@dataclass(frozen=True)
class UnlockedAchievement:
    """A newly unlocked achievement, reported back to the caller."""

    definition: AchievementDefinition
    unlocked_at: datetime

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def points(self) -> int:
        return self.definition.points


def evaluate(
    definitions: Iterable[AchievementDefinition],
    snapshot: AchievementSnapshot,
) -> list[AchievementDefinition]:
    """Return the definitions not yet unlocked whose predicate now holds.

    A predicate that fails on unexpected data is logged and counted as not
    satisfied; the remaining definitions are still evaluated.
    """
    satisfied: list[AchievementDefinition] = []
    for definition in definitions:
        if definition.id in snapshot.unlocked_ids:
            continue
        try:
            if definition.predicate(snapshot):
                satisfied.append(definition)
        except (TypeError, ValueError, AttributeError):
            logger.exception("Achievement %s could not be evaluated", definition.id)
    return satisfied


class AchievementEvaluator:
    """Owns the unlocked-achievement set and evaluates snapshots against it."""

    def __init__(
        self,
        kv: KeyValueStore,
        definitions: Sequence[AchievementDefinition] = ACHIEVEMENTS,
        clock: Callable[[], datetime] = localnow,
    ) -> None:
        self.collection: VersionedCollection[list[UserAchievement]] = VersionedCollection(
            kv, USER_ACHIEVEMENTS_KEY, USER_ACHIEVEMENTS_VERSION, list[UserAchievement], list
        )
        self._definitions = tuple(definitions)
        self.clock = clock
        self._unlocked: list[UserAchievement] = []
        self._lock = asyncio.Lock()

    async def load(self) -> None:
        stored = await self.collection.load()
        # Keep the first unlock per id in case an older writer duplicated one.
        seen: set[str] = set()
        self._unlocked = []
        for achievement in stored:
            if achievement.id not in seen:
                seen.add(achievement.id)
                self._unlocked.append(achievement)
        logger.info("Loaded %d unlocked achievements", len(self._unlocked))

    def definitions(self) -> list[AchievementDefinition]:
        return list(self._definitions)

    def unlocked(self) -> list[UserAchievement]:
        return list(self._unlocked)

    def unlocked_ids(self) -> frozenset[str]:
        return frozenset(a.id for a in self._unlocked)

    async def check_all(
        self,
        tasks: Sequence[TaskRecord],
        journal_entries: Sequence[JournalEntry],
        score: int,
        now: datetime | None = None,
    ) -> list[UnlockedAchievement]:
        """Evaluate a snapshot and unlock every newly satisfied achievement.

        Args:
            tasks: Task records from the task component.
            journal_entries: Journal entries from the journal component.
            score: Current points balance.
            now: Evaluation time (defaults to the clock).

        Returns:
            The achievements unlocked by this call, in definition order.
            Empty when nothing new holds, so repeated calls are idempotent.
        """
        async with self._lock:
            now = now or self.clock()
            snapshot = AchievementSnapshot(
                tasks=tuple(tasks),
                journal_entries=tuple(journal_entries),
                score=score,
                unlocked_ids=self.unlocked_ids(),
                now=now,
            )
            satisfied = evaluate(self._definitions, snapshot)
            if not satisfied:
                return []

            new_records = [UserAchievement(id=d.id, unlocked_at=now) for d in satisfied]
            unlocked = self._unlocked + new_records
            await self.collection.save(unlocked)
            self._unlocked = unlocked

        for definition in satisfied:
            logger.info("Unlocked achievement %s (+%d points)", definition.id, definition.points)
        return [UnlockedAchievement(definition=d, unlocked_at=now) for d in satisfied]
