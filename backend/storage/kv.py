"""Key-value persistence for whole-collection documents.

Every component that owns state (review items, unlocked achievements, score,
rewards) persists it as a single JSON document under one key. The backing
store only needs atomic single-key writes:

- MemoryKeyValueStore: a dict, for tests and throwaway sessions
- SqlKeyValueStore: one row per key in the ``stored_collections`` table

VersionedCollection wraps a key with a schema version and pydantic
validation, so a corrupt or outdated document degrades to an empty default
instead of failing the caller.
"""

import json
import logging
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.models.stored_collection import StoredCollection

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueStore(Protocol):
    """Async string-to-string store with atomic single-key writes."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process key-value store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SqlKeyValueStore:
    """Key-value store backed by the ``stored_collections`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self.session_factory() as db:
            row = await db.get(StoredCollection, key)
            return row.value if row else None

    async def set(self, key: str, value: str) -> None:
        async with self.session_factory() as db:
            row = await db.get(StoredCollection, key)
            if row is None:
                db.add(StoredCollection(key=key, value=value))
            else:
                row.value = value
            await db.commit()

    async def delete(self, key: str) -> None:
        async with self.session_factory() as db:
            row = await db.get(StoredCollection, key)
            if row is not None:
                await db.delete(row)
                await db.commit()


class VersionedCollection(Generic[T]):
    """A typed, versioned JSON document stored under a single key.

    The stored shape is ``{"version": <int>, "data": <payload>}``. Bumping
    ``version`` invalidates documents written by an older schema.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        key: str,
        version: int,
        type_: Any,
        default: Callable[[], T],
    ) -> None:
        self.kv = kv
        self.key = key
        self.version = version
        self.adapter: TypeAdapter[T] = TypeAdapter(type_)
        self.default = default

    async def load(self) -> T:
        """Load and validate the document, discarding it if it is unusable."""
        raw = await self.kv.get(self.key)
        if raw is None:
            return self.default()

        try:
            envelope = json.loads(raw)
        except json.JSONDecodeError:
            return await self._discard("invalid JSON")

        if not isinstance(envelope, dict) or envelope.get("version") != self.version:
            return await self._discard("unexpected version")

        try:
            return self.adapter.validate_python(envelope.get("data"))
        except ValidationError as e:
            return await self._discard(f"{e.error_count()} validation error(s)")

    async def save(self, value: T) -> None:
        payload = self.adapter.dump_python(value, mode="json")
        await self.kv.set(self.key, json.dumps({"version": self.version, "data": payload}))

    async def _discard(self, reason: str) -> T:
        logger.warning("Discarding stored collection %r: %s", self.key, reason)
        await self.kv.delete(self.key)
        return self.default()
