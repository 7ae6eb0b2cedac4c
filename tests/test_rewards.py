"""Tests for the points balance and the rewards ledger."""

from datetime import datetime, timedelta

import pytest

from backend.rewards.catalog import REWARDS, REWARDS_BY_ID, TAB_THEME, slot_key
from backend.rewards.ledger import RewardsLedger
from backend.rewards.score import ScoreLedger
from backend.storage.kv import MemoryKeyValueStore


class Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 3, 2, 12, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


async def make_ledger(points: int = 0, kv: MemoryKeyValueStore | None = None, clock: Clock | None = None):
    kv = kv or MemoryKeyValueStore()
    score = ScoreLedger(kv)
    await score.load()
    if points:
        await score.add(points)
    ledger = RewardsLedger(kv, score, clock=clock or Clock())
    await ledger.load()
    return ledger, score


class TestScoreLedger:
    @pytest.mark.asyncio
    async def test_add_and_spend(self) -> None:
        score = ScoreLedger(MemoryKeyValueStore())
        assert await score.add(100) == 100
        assert await score.spend(40)
        assert score.score == 60

    @pytest.mark.asyncio
    async def test_cannot_overspend(self) -> None:
        score = ScoreLedger(MemoryKeyValueStore())
        await score.add(10)
        assert not await score.spend(11)
        assert score.score == 10

    @pytest.mark.asyncio
    async def test_never_negative(self) -> None:
        score = ScoreLedger(MemoryKeyValueStore())
        await score.add(10)
        assert await score.add(-50) == 0

    @pytest.mark.asyncio
    async def test_persists(self) -> None:
        kv = MemoryKeyValueStore()
        await ScoreLedger(kv).add(42)
        reloaded = ScoreLedger(kv)
        await reloaded.load()
        assert reloaded.score == 42


class TestCatalog:
    def test_ids_are_unique(self) -> None:
        assert len(REWARDS_BY_ID) == len(REWARDS)

    def test_tab_theme_slots_are_per_page(self) -> None:
        assert slot_key("Tab Theme", TAB_THEME, "tasksPage") != slot_key("Tab Theme", TAB_THEME, "journalPage")

    def test_every_page_has_a_tab_theme(self) -> None:
        targets = {r.effect.target for r in REWARDS if r.effect is not None and r.effect.type == TAB_THEME}
        assert targets == {
            "tasksPage", "journalPage", "reviewPage", "achievementsPage", "rewardsPage", "profilePage"
        }

    def test_store_items_present(self) -> None:
        for reward_id in ("MASCOT_HAT_TINY", "PROFILE_BANNER_BASIC_NATURE", "SOUND_COMPLETE_SPARKLE",
                          "VIRTUAL_PLANT_PROFILE", "WATER_VIRTUAL_PLANT"):
            assert reward_id in REWARDS_BY_ID


class TestPurchase:
    @pytest.mark.asyncio
    async def test_unknown_reward(self) -> None:
        ledger, _ = await make_ledger(1000)
        result = await ledger.purchase("NOPE")
        assert not result.success
        assert result.score == 1000

    @pytest.mark.asyncio
    async def test_insufficient_points(self) -> None:
        ledger, score = await make_ledger(100)
        result = await ledger.purchase("THEME_DARK_MODE_PERMANENT")
        assert not result.success
        assert score.score == 100
        assert await ledger.owned() == []

    @pytest.mark.asyncio
    async def test_purchase_debits_and_equips(self) -> None:
        ledger, score = await make_ledger(600)
        result = await ledger.purchase("THEME_DARK_MODE_PERMANENT")
        assert result.success
        assert result.score == 100
        assert score.score == 100
        assert await ledger.is_owned("THEME_DARK_MODE_PERMANENT")
        assert await ledger.site_theme() == "dark"

    @pytest.mark.asyncio
    async def test_permanent_unlock_bought_once(self) -> None:
        ledger, score = await make_ledger(1200)
        assert (await ledger.purchase("THEME_DARK_MODE_PERMANENT")).success
        result = await ledger.purchase("THEME_DARK_MODE_PERMANENT")
        assert not result.success
        assert score.score == 700

    @pytest.mark.asyncio
    async def test_consumable_ownership_cap(self) -> None:
        ledger, score = await make_ledger(2000)
        assert (await ledger.purchase("STREAK_SHIELD_1USE_WEEKLY")).success
        assert not (await ledger.purchase("STREAK_SHIELD_1USE_WEEKLY")).success
        assert score.score == 1250

    @pytest.mark.asyncio
    async def test_free_reward(self) -> None:
        ledger, _ = await make_ledger()
        assert (await ledger.purchase("FOUNDER_BADGE")).success

    @pytest.mark.asyncio
    async def test_ownership_persists(self) -> None:
        kv = MemoryKeyValueStore()
        ledger, _ = await make_ledger(600, kv=kv)
        await ledger.purchase("THEME_DARK_MODE_PERMANENT")

        reloaded = RewardsLedger(kv, ScoreLedger(kv), clock=Clock())
        await reloaded.load()
        assert await reloaded.is_owned("THEME_DARK_MODE_PERMANENT")
        assert await reloaded.site_theme() == "dark"


class TestExpiry:
    @pytest.mark.asyncio
    async def test_temporary_theme_expires_and_unequips(self) -> None:
        clock = Clock()
        ledger, _ = await make_ledger(100, clock=clock)
        assert (await ledger.purchase("THEME_MINIMALIST_7D")).success
        assert await ledger.site_theme() == "minimalist"

        clock.advance(days=7, seconds=1)

        assert await ledger.owned() == []
        assert await ledger.site_theme() == "default"
        assert ledger.equipped() == {}

    @pytest.mark.asyncio
    async def test_still_owned_before_expiry(self) -> None:
        clock = Clock()
        ledger, _ = await make_ledger(100, clock=clock)
        await ledger.purchase("THEME_MINIMALIST_7D")
        clock.advance(days=6)
        assert await ledger.is_owned("THEME_MINIMALIST_7D")


class TestCosmetics:
    @pytest.mark.asyncio
    async def test_tab_themes_per_page(self) -> None:
        ledger, _ = await make_ledger(400)
        await ledger.purchase("THEME_TASKS_OCEAN")
        await ledger.purchase("THEME_JOURNAL_FOREST")
        assert await ledger.tab_themes() == {"tasksPage": "ocean", "journalPage": "forest"}

        await ledger.unequip("Tab Theme", TAB_THEME, "tasksPage")
        assert await ledger.tab_themes() == {"journalPage": "forest"}

    @pytest.mark.asyncio
    async def test_equip_requires_ownership(self) -> None:
        ledger, _ = await make_ledger()
        assert not await ledger.equip("THEME_DARK_MODE_PERMANENT")

    @pytest.mark.asyncio
    async def test_equip_switches_site_theme(self) -> None:
        ledger, _ = await make_ledger(2000)
        await ledger.purchase("THEME_DARK_MODE_PERMANENT")
        await ledger.purchase("ZEN_MODE_THEME")
        assert await ledger.site_theme() == "zen"

        assert await ledger.equip("THEME_DARK_MODE_PERMANENT")
        assert await ledger.site_theme() == "dark"


class TestBoosts:
    @pytest.mark.asyncio
    async def test_boost_starts_inactive(self) -> None:
        ledger, _ = await make_ledger(250)
        await ledger.purchase("BOOST_FOCUS_1H")
        owned = await ledger.owned()
        assert owned[0].is_active is False
        assert await ledger.active_boosts() == []

    @pytest.mark.asyncio
    async def test_activating_replaces_same_effect(self) -> None:
        ledger, _ = await make_ledger(1250)
        await ledger.purchase("BOOST_FOCUS_1H")
        await ledger.purchase("DOUBLE_POINTS_VOUCHER")

        assert await ledger.activate_boost("BOOST_FOCUS_1H")
        assert [b.id for b in await ledger.active_boosts()] == ["BOOST_FOCUS_1H"]

        assert await ledger.activate_boost("DOUBLE_POINTS_VOUCHER")
        assert [b.id for b in await ledger.active_boosts()] == ["DOUBLE_POINTS_VOUCHER"]

    @pytest.mark.asyncio
    async def test_activation_consumes_a_use(self) -> None:
        ledger, _ = await make_ledger(1000)
        await ledger.purchase("DOUBLE_POINTS_VOUCHER")
        assert await ledger.activate_boost("DOUBLE_POINTS_VOUCHER")
        voucher = (await ledger.active_boosts())[0]
        assert voucher.uses_left == 0

        await ledger.deactivate_boost("DOUBLE_POINTS_VOUCHER")
        assert not await ledger.activate_boost("DOUBLE_POINTS_VOUCHER")

    @pytest.mark.asyncio
    async def test_cannot_activate_unowned_or_cosmetic(self) -> None:
        ledger, _ = await make_ledger(600)
        assert not await ledger.activate_boost("BOOST_FOCUS_1H")
        await ledger.purchase("THEME_DARK_MODE_PERMANENT")
        assert not await ledger.activate_boost("THEME_DARK_MODE_PERMANENT")

    @pytest.mark.asyncio
    async def test_consume_use(self) -> None:
        ledger, _ = await make_ledger(20)
        await ledger.purchase("UNLOCK_JOKE_STUDY")
        assert await ledger.consume_use("UNLOCK_JOKE_STUDY")
        assert not await ledger.consume_use("UNLOCK_JOKE_STUDY")

    @pytest.mark.asyncio
    async def test_plain_consumable_has_no_active_flag(self) -> None:
        ledger, _ = await make_ledger(1020)
        await ledger.purchase("UNLOCK_JOKE_STUDY")
        await ledger.purchase("DOUBLE_POINTS_VOUCHER")
        flags = {r.id: r.is_active for r in await ledger.owned()}
        assert flags == {"UNLOCK_JOKE_STUDY": None, "DOUBLE_POINTS_VOUCHER": False}


class TestMoreCosmetics:
    @pytest.mark.asyncio
    async def test_achievements_page_theme(self) -> None:
        ledger, _ = await make_ledger(200)
        assert (await ledger.purchase("THEME_ACHIEVEMENTS_VOLCANIC")).success
        assert await ledger.tab_themes() == {"achievementsPage": "volcanic"}

    @pytest.mark.asyncio
    async def test_completion_sound_is_equipped(self) -> None:
        ledger, _ = await make_ledger(75)
        await ledger.purchase("SOUND_COMPLETE_SPARKLE")
        equipped = await ledger.equipped_for_slot("Sound & Visual FX", "completion_sound")
        assert equipped is not None
        assert equipped.id == "SOUND_COMPLETE_SPARKLE"

    @pytest.mark.asyncio
    async def test_reward_without_effect_cannot_be_equipped(self) -> None:
        ledger, _ = await make_ledger(10)
        await ledger.purchase("WATER_VIRTUAL_PLANT")
        assert not await ledger.equip("WATER_VIRTUAL_PLANT")
        assert ledger.equipped() == {}


class TestMascot:
    @pytest.mark.asyncio
    async def test_hat_purchase_dresses_mascot(self) -> None:
        ledger, _ = await make_ledger(240)
        assert (await ledger.purchase("MASCOT_HAT_TINY")).success
        assert ledger.mascot_accessories() == ["MASCOT_HAT_TINY"]

        assert (await ledger.purchase("MASCOT_HAT_TINY")).success
        assert ledger.mascot_accessories() == ["MASCOT_HAT_TINY"]

    @pytest.mark.asyncio
    async def test_mascot_state_persists(self) -> None:
        kv = MemoryKeyValueStore()
        ledger, _ = await make_ledger(120, kv=kv)
        await ledger.purchase("MASCOT_HAT_TINY")

        reloaded = RewardsLedger(kv, ScoreLedger(kv), clock=Clock())
        await reloaded.load()
        assert reloaded.mascot_accessories() == ["MASCOT_HAT_TINY"]

    @pytest.mark.asyncio
    async def test_unowned_accessory_rejected(self) -> None:
        ledger, _ = await make_ledger()
        assert not await ledger.add_mascot_accessory("MASCOT_HAT_TINY")
        assert ledger.mascot_accessories() == []

    @pytest.mark.asyncio
    async def test_other_purchases_leave_mascot_alone(self) -> None:
        ledger, _ = await make_ledger(200)
        await ledger.purchase("VIRTUAL_PLANT_PROFILE")
        assert ledger.mascot_accessories() == []
