"""Wiring of the stateful components around one key-value store.

Each component owns exactly one persisted collection. They are built once
per process (API lifespan or CLI invocation) and handed to consumers by
reference.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from backend.achievements.evaluator import AchievementEvaluator, UnlockedAchievement
from backend.achievements.snapshot import JournalEntry, TaskRecord
from backend.config import settings
from backend.rewards.ledger import RewardsLedger
from backend.rewards.score import ScoreLedger
from backend.srs.interval_policy import IntervalPolicy
from backend.srs.review_store import ReviewItemStore
from backend.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    review_store: ReviewItemStore
    evaluator: AchievementEvaluator
    score: ScoreLedger
    rewards: RewardsLedger

    async def check_achievements(
        self,
        tasks: Sequence[TaskRecord],
        journal_entries: Sequence[JournalEntry],
    ) -> list[UnlockedAchievement]:
        """Evaluate achievements against the current score and credit new points."""
        unlocked = await self.evaluator.check_all(tasks, journal_entries, self.score.score)
        earned = sum(a.points for a in unlocked)
        if earned:
            await self.score.add(earned)
            logger.info("Credited %d points for %d achievement(s)", earned, len(unlocked))
        return unlocked


async def build_services(kv: KeyValueStore) -> Services:
    """Construct every component over ``kv`` and load its persisted state."""
    score = ScoreLedger(kv)
    services = Services(
        review_store=ReviewItemStore(kv, policy=IntervalPolicy.from_settings(settings)),
        evaluator=AchievementEvaluator(kv),
        score=score,
        rewards=RewardsLedger(kv, score),
    )
    await services.review_store.load()
    await services.evaluator.load()
    await services.score.load()
    await services.rewards.load()
    return services
