"""Rewards ledger: purchases, ownership, boosts and equipped cosmetics.

Owned rewards, the equipped-slot map and the mascot accessories are
persisted documents owned by this ledger. Expired rewards are pruned whenever ownership is read, and
an expired cosmetic is unequipped along with it. Purchases debit the shared
ScoreLedger.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from pydantic import BaseModel

from backend.config import localnow
from backend.rewards.catalog import (
    MASCOT_HAT_TINY,
    POINTS_MULTIPLIER,
    REWARDS,
    SITE_THEME,
    TAB_THEME,
    RewardDefinition,
    RewardEffect,
    RewardType,
    slot_key,
)
from backend.rewards.score import ScoreLedger
from backend.storage.kv import KeyValueStore, VersionedCollection

logger = logging.getLogger(__name__)

OWNED_REWARDS_KEY = "owned_rewards"
EQUIPPED_COSMETICS_KEY = "equipped_cosmetics"
MASCOT_STATE_KEY = "mascot_state"
REWARDS_VERSION = 1

DEFAULT_THEME = "default"


class OwnedReward(BaseModel):
    id: str
    purchased_at: datetime
    expires_at: datetime | None = None
    uses_left: int | None = None
    is_active: bool | None = None


class MascotState(BaseModel):
    accessories: list[str] = []


@dataclass(frozen=True)
class PurchaseResult:
    success: bool
    message: str
    score: int


class RewardsLedger:
    """Owns purchased rewards and the cosmetic equip slots."""

    def __init__(
        self,
        kv: KeyValueStore,
        score_ledger: ScoreLedger,
        clock: Callable[[], datetime] = localnow,
        catalog: tuple[RewardDefinition, ...] = REWARDS,
    ) -> None:
        self.owned_collection: VersionedCollection[list[OwnedReward]] = VersionedCollection(
            kv, OWNED_REWARDS_KEY, REWARDS_VERSION, list[OwnedReward], list
        )
        self.equipped_collection: VersionedCollection[dict[str, str]] = VersionedCollection(
            kv, EQUIPPED_COSMETICS_KEY, REWARDS_VERSION, dict[str, str], dict
        )
        self.mascot_collection: VersionedCollection[MascotState] = VersionedCollection(
            kv, MASCOT_STATE_KEY, REWARDS_VERSION, MascotState, MascotState
        )
        self.score_ledger = score_ledger
        self.clock = clock
        self.catalog = {r.id: r for r in catalog}
        self._owned: list[OwnedReward] = []
        self._equipped: dict[str, str] = {}
        self._mascot = MascotState()
        self._lock = asyncio.Lock()

    async def load(self) -> None:
        self._owned = await self.owned_collection.load()
        self._equipped = await self.equipped_collection.load()
        self._mascot = await self.mascot_collection.load()
        logger.info("Loaded %d owned rewards, %d equipped", len(self._owned), len(self._equipped))

    def definitions(self) -> list[RewardDefinition]:
        return list(self.catalog.values())

    def definition(self, reward_id: str) -> RewardDefinition | None:
        return self.catalog.get(reward_id)

    # --- Ownership ---

    async def owned(self) -> list[OwnedReward]:
        """Owned rewards, after pruning (and unequipping) anything expired."""
        async with self._lock:
            await self._prune_expired()
            return list(self._owned)

    async def is_owned(self, reward_id: str) -> bool:
        return any(r.id == reward_id for r in await self.owned())

    async def purchase(self, reward_id: str) -> PurchaseResult:
        """Buy a reward with points.

        Refused when the reward is unknown, the balance is too low, a
        permanent unlock is already owned, or a consumable is at its
        ownership cap. A refused purchase leaves points and ownership as
        they were.
        """
        definition = self.catalog.get(reward_id)
        if definition is None:
            return PurchaseResult(False, "Reward not found.", self.score_ledger.score)

        async with self._lock:
            await self._prune_expired()
            score = self.score_ledger.score
            if score < definition.points:
                return PurchaseResult(False, "Not enough points.", score)

            existing = [r for r in self._owned if r.id == reward_id]
            if definition.type == RewardType.ONE_TIME_PERMANENT and existing:
                return PurchaseResult(False, "You already own this permanent unlock.", score)

            if definition.type == RewardType.ONE_TIME_CONSUMABLE and definition.max_ownable:
                usable = [r for r in existing if r.uses_left is None or r.uses_left > 0]
                if len(usable) >= definition.max_ownable:
                    return PurchaseResult(
                        False, f"You can only own {definition.max_ownable} of this item.", score
                    )

            if not await self.score_ledger.spend(definition.points):
                return PurchaseResult(False, "Not enough points.", self.score_ledger.score)

            now = self.clock()
            reward = OwnedReward(id=reward_id, purchased_at=now)
            if definition.duration_days:
                reward.expires_at = now + timedelta(days=definition.duration_days)
            if definition.uses:
                reward.uses_left = definition.uses
            if definition.type == RewardType.TEMPORARY_BOOST or (
                definition.type == RewardType.ONE_TIME_CONSUMABLE
                and definition.effect is not None
                and definition.effect.type == POINTS_MULTIPLIER
            ):
                reward.is_active = False
            await self._save_owned(self._owned + [reward])

            if reward_id == MASCOT_HAT_TINY:
                await self._add_mascot_accessory(reward_id)

            if definition.effect is not None and definition.is_cosmetic:
                slot = self._slot_for(definition, definition.effect)
                if (
                    definition.effect.type in (SITE_THEME, TAB_THEME)
                    or slot not in self._equipped
                    or definition.type != RewardType.ONE_TIME_PERMANENT
                ):
                    await self._save_equipped({**self._equipped, slot: reward_id})

        logger.info("Purchased reward %s for %d points", reward_id, definition.points)
        return PurchaseResult(
            True, f"{definition.name} purchased successfully!", self.score_ledger.score
        )

    async def consume_use(self, reward_id: str) -> bool:
        """Use up one charge of an owned consumable."""
        async with self._lock:
            await self._prune_expired()
            reward = self._find_owned(reward_id)
            if reward is None or reward.uses_left is None or reward.uses_left <= 0:
                return False
            await self._replace_owned(reward, reward.model_copy(update={"uses_left": reward.uses_left - 1}))
        return True

    # --- Boosts ---

    async def activate_boost(self, reward_id: str) -> bool:
        """Activate an owned boost, replacing any active boost with the same effect.

        Consumes a use when the boost has uses and starts its expiry clock if
        it has not started yet.
        """
        definition = self.catalog.get(reward_id)
        if definition is None or not definition.is_boost:
            return False

        async with self._lock:
            await self._prune_expired()
            reward = self._find_owned(reward_id)
            if reward is None or reward.is_active:
                return False

            uses_left = reward.uses_left
            if definition.uses:
                if uses_left is None:
                    uses_left = definition.uses
                if uses_left <= 0:
                    return False
                uses_left -= 1

            expires_at = reward.expires_at
            if definition.duration_days and expires_at is None:
                expires_at = self.clock() + timedelta(days=definition.duration_days)

            owned: list[OwnedReward] = []
            for r in self._owned:
                if r is reward:
                    r = r.model_copy(update={"is_active": True, "uses_left": uses_left, "expires_at": expires_at})
                elif r.is_active and self._same_effect(r.id, definition):
                    r = r.model_copy(update={"is_active": False})
                owned.append(r)
            await self._save_owned(owned)

        logger.info("Activated boost %s", reward_id)
        return True

    async def deactivate_boost(self, reward_id: str) -> None:
        async with self._lock:
            reward = self._find_owned(reward_id)
            if reward is not None and reward.is_active:
                await self._replace_owned(reward, reward.model_copy(update={"is_active": False}))

    async def active_boosts(self) -> list[OwnedReward]:
        """Active, unexpired boosts."""
        boosts = []
        for reward in await self.owned():
            definition = self.catalog.get(reward.id)
            if definition is not None and definition.is_boost and reward.is_active:
                boosts.append(reward)
        return boosts

    # --- Cosmetics and theming ---

    def equipped(self) -> dict[str, str]:
        return dict(self._equipped)

    async def equip(self, reward_id: str) -> bool:
        """Equip an owned cosmetic into its slot, replacing what was there."""
        definition = self.catalog.get(reward_id)
        if definition is None or definition.effect is None:
            return False
        async with self._lock:
            await self._prune_expired()
            if self._find_owned(reward_id) is None:
                return False
            await self._save_equipped({**self._equipped, self._slot_for(definition, definition.effect): reward_id})
        return True

    async def unequip(self, category: str, effect_type: str, target: str | None = None) -> None:
        async with self._lock:
            await self._unequip_slot(slot_key(category, effect_type, target))

    async def equipped_for_slot(
        self, category: str, effect_type: str, target: str | None = None
    ) -> RewardDefinition | None:
        """The cosmetic currently in a slot, if it is still owned and unexpired."""
        async with self._lock:
            await self._prune_expired()
            reward_id = self._equipped.get(slot_key(category, effect_type, target))
            if reward_id is None or self._find_owned(reward_id) is None:
                return None
            return self.catalog.get(reward_id)

    async def site_theme(self) -> str:
        """The equipped site-wide theme, or ``default``."""
        definition = await self.equipped_for_slot("Site Theme", SITE_THEME)
        if definition is None or definition.effect is None:
            return DEFAULT_THEME
        return str(definition.effect.value)

    async def tab_themes(self) -> dict[str, str]:
        """Page key to theme for every equipped tab theme."""
        themes: dict[str, str] = {}
        for definition in self.catalog.values():
            effect = definition.effect
            if effect is None or effect.type != TAB_THEME or not effect.target:
                continue
            equipped = await self.equipped_for_slot(definition.category, TAB_THEME, effect.target)
            if equipped is not None and equipped.id == definition.id:
                themes[effect.target] = str(effect.value)
        return themes

    # --- Mascot ---

    def mascot_accessories(self) -> list[str]:
        return list(self._mascot.accessories)

    async def add_mascot_accessory(self, reward_id: str) -> bool:
        """Put an owned accessory on the mascot. Returns False if it is not owned."""
        async with self._lock:
            await self._prune_expired()
            if self._find_owned(reward_id) is None:
                return False
            await self._add_mascot_accessory(reward_id)
        return True

    # --- Internals ---

    def _slot_for(self, definition: RewardDefinition, effect: RewardEffect) -> str:
        return slot_key(definition.category, effect.type, effect.target)

    def _same_effect(self, reward_id: str, definition: RewardDefinition) -> bool:
        other = self.catalog.get(reward_id)
        return (
            other is not None
            and other.effect is not None
            and definition.effect is not None
            and other.effect.type == definition.effect.type
            and other.id != definition.id
        )

    def _find_owned(self, reward_id: str) -> OwnedReward | None:
        return next((r for r in self._owned if r.id == reward_id), None)

    async def _prune_expired(self) -> None:
        now = self.clock()
        expired = [r for r in self._owned if r.expires_at is not None and now > r.expires_at]
        if not expired:
            return

        for reward in expired:
            definition = self.catalog.get(reward.id)
            if definition is not None and definition.effect is not None and definition.is_cosmetic:
                slot = self._slot_for(definition, definition.effect)
                if self._equipped.get(slot) == reward.id:
                    await self._unequip_slot(slot)
            logger.info("Reward %s expired", reward.id)

        await self._save_owned([r for r in self._owned if r not in expired])

    async def _unequip_slot(self, slot: str) -> None:
        if slot in self._equipped:
            await self._save_equipped({k: v for k, v in self._equipped.items() if k != slot})

    async def _replace_owned(self, old: OwnedReward, new: OwnedReward) -> None:
        await self._save_owned([new if r is old else r for r in self._owned])

    async def _save_owned(self, owned: list[OwnedReward]) -> None:
        await self.owned_collection.save(owned)
        self._owned = owned

    async def _save_equipped(self, equipped: dict[str, str]) -> None:
        await self.equipped_collection.save(equipped)
        self._equipped = equipped

    async def _add_mascot_accessory(self, reward_id: str) -> None:
        if reward_id in self._mascot.accessories:
            return
        mascot = MascotState(accessories=[*self._mascot.accessories, reward_id])
        await self.mascot_collection.save(mascot)
        self._mascot = mascot
