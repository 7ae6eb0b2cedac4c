"""Points balance earned from achievements and spent in the rewards store."""

import asyncio
import logging

from backend.storage.kv import KeyValueStore, VersionedCollection

logger = logging.getLogger(__name__)

SCORE_KEY = "score"
SCORE_VERSION = 1


class ScoreLedger:
    """Owns the user's points balance. The balance never goes below zero."""

    def __init__(self, kv: KeyValueStore) -> None:
        self.collection: VersionedCollection[int] = VersionedCollection(
            kv, SCORE_KEY, SCORE_VERSION, int, int
        )
        self._score = 0
        self._lock = asyncio.Lock()

    async def load(self) -> None:
        self._score = max(0, await self.collection.load())

    @property
    def score(self) -> int:
        return self._score

    async def add(self, points: int) -> int:
        """Add (or, with a negative value, deduct) points. Returns the new balance."""
        async with self._lock:
            await self._commit(max(0, self._score + points))
        return self._score

    async def spend(self, points: int) -> bool:
        """Deduct points if the balance covers them."""
        async with self._lock:
            if points < 0 or self._score < points:
                logger.debug("Cannot spend %d points with balance %d", points, self._score)
                return False
            await self._commit(self._score - points)
        return True

    async def reset(self) -> None:
        async with self._lock:
            await self._commit(0)

    async def _commit(self, score: int) -> None:
        await self.collection.save(score)
        self._score = score
