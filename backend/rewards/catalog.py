"""Rewards store catalog: purchasable cosmetics, themes, boosts and consumables."""

from dataclasses import dataclass
from enum import Enum


class RewardType(str, Enum):
    ONE_TIME_PERMANENT = "one-time-permanent"
    ONE_TIME_CONSUMABLE = "one-time-consumable"
    REBUYABLE_COSMETIC_EQUIP = "rebuyable-cosmetic-equip"
    REBUYABLE_COSMETIC_STACK = "rebuyable-cosmetic-stack"
    TEMPORARY_COSMETIC = "temporary-cosmetic"
    TEMPORARY_BOOST = "temporary-boost"
    SERVICE = "service"


# Effect types that occupy an equip slot on the profile or site.
SITE_THEME = "site_theme"
TAB_THEME = "tab_theme"
POINTS_MULTIPLIER = "points_multiplier"

MASCOT_HAT_TINY = "MASCOT_HAT_TINY"


@dataclass(frozen=True)
class RewardEffect:
    type: str
    value: str | float
    target: str | None = None  # page key, tab themes only


@dataclass(frozen=True)
class RewardDefinition:
    id: str
    name: str
    description: str
    points: int
    category: str
    type: RewardType
    icon: str = ""
    effect: RewardEffect | None = None
    duration_days: float | None = None
    max_ownable: int | None = None
    uses: int | None = None

    @property
    def is_cosmetic(self) -> bool:
        return self.type in (
            RewardType.ONE_TIME_PERMANENT,
            RewardType.REBUYABLE_COSMETIC_EQUIP,
            RewardType.TEMPORARY_COSMETIC,
        )

    @property
    def is_boost(self) -> bool:
        return self.type in (RewardType.TEMPORARY_BOOST, RewardType.ONE_TIME_CONSUMABLE)


REWARDS: tuple[RewardDefinition, ...] = (
    # Site themes
    RewardDefinition(
        "ZEN_MODE_THEME", "Zen Mode Theme", "Ultra-minimalist, distraction-free site theme.",
        1500, "Site Theme", RewardType.ONE_TIME_PERMANENT, "Minimize2", RewardEffect(SITE_THEME, "zen"),
    ),
    RewardDefinition(
        "THEME_MINIMALIST_7D", "Minimalist Theme (7 Days)", "A clean, temporary theme for focused work.",
        100, "Site Theme", RewardType.TEMPORARY_COSMETIC, "MinusSquare", RewardEffect(SITE_THEME, "minimalist"),
        duration_days=7,
    ),
    RewardDefinition(
        "THEME_DARK_MODE_PERMANENT", "Dark Mode Theme", "A sleek permanent dark mode for the site.",
        500, "Site Theme", RewardType.ONE_TIME_PERMANENT, "Moon", RewardEffect(SITE_THEME, "dark"),
    ),
    RewardDefinition(
        "THEME_RETRO_GAME_7D", "Retro Game Theme (7 Days)", "A fun, pixel-art style theme.",
        150, "Site Theme", RewardType.TEMPORARY_COSMETIC, "Gamepad2", RewardEffect(SITE_THEME, "retro"),
        duration_days=7,
    ),
    RewardDefinition(
        "THEME_RAINBOW_1H", "Rainbow Burst Theme (1 Hour)", "A vibrant, temporary splash of color everywhere!",
        50, "Site Theme", RewardType.TEMPORARY_COSMETIC, "Palette", RewardEffect(SITE_THEME, "rainbow"),
        duration_days=1 / 24,
    ),
    # Tab themes
    RewardDefinition(
        "THEME_TASKS_OCEAN", "Tasks: Ocean Depths", "A calming blue/green theme for your Tasks page.",
        200, "Tab Theme", RewardType.REBUYABLE_COSMETIC_EQUIP, "Waves", RewardEffect(TAB_THEME, "ocean", "tasksPage"),
    ),
    RewardDefinition(
        "THEME_JOURNAL_FOREST", "Journal: Forest Retreat", "Earthy tones for your Journal page.",
        200, "Tab Theme", RewardType.REBUYABLE_COSMETIC_EQUIP, "Trees", RewardEffect(TAB_THEME, "forest", "journalPage"),
    ),
    RewardDefinition(
        "THEME_REVIEW_COSMIC", "Review: Cosmic Flow", "Dark blues and purples for Spaced Repetition.",
        200, "Tab Theme", RewardType.REBUYABLE_COSMETIC_EQUIP, "Sparkles", RewardEffect(TAB_THEME, "cosmic", "reviewPage"),
    ),
    RewardDefinition(
        "THEME_ACHIEVEMENTS_VOLCANIC", "Achievements: Volcanic Ash", "Fiery theme for your Achievements page.",
        200, "Tab Theme", RewardType.REBUYABLE_COSMETIC_EQUIP, "Flame",
        RewardEffect(TAB_THEME, "volcanic", "achievementsPage"),
    ),
    RewardDefinition(
        "THEME_REWARDS_TREASURE", "Rewards: Treasure Trove", "Gold and gem theme for the Rewards Store.",
        200, "Tab Theme", RewardType.REBUYABLE_COSMETIC_EQUIP, "Gem", RewardEffect(TAB_THEME, "treasure", "rewardsPage"),
    ),
    RewardDefinition(
        "THEME_PROFILE_SUNSET", "Profile: Sunset Glow", "Warm orange/purple theme for your Profile page.",
        200, "Tab Theme", RewardType.REBUYABLE_COSMETIC_EQUIP, "Sunrise", RewardEffect(TAB_THEME, "sunset", "profilePage"),
    ),
    # Profile decoration
    RewardDefinition(
        "GOLDEN_AVATAR_FRAME", "Golden Avatar Frame", "A unique, prestigious frame for your profile picture.",
        2500, "Profile Decoration", RewardType.ONE_TIME_PERMANENT, "Award", RewardEffect("avatar_frame", "gold"),
    ),
    RewardDefinition(
        "PROFILE_GLOW_7D", "Temporary Profile Glow (7 Days)", "Adds a subtle glow effect around your avatar.",
        100, "Profile Decoration", RewardType.TEMPORARY_COSMETIC, "Sparkles",
        RewardEffect("avatar_frame", "glow_primary"), duration_days=7,
    ),
    RewardDefinition(
        "PROFILE_BG_COLOR_LIGHTPINK", "Profile Background: Light Pink",
        "Set your profile card background to a soft light pink.",
        50, "Profile Decoration", RewardType.REBUYABLE_COSMETIC_EQUIP, "Palette",
        RewardEffect("profile_background", "hsl(340, 100%, 95%)"),
    ),
    RewardDefinition(
        "TITLE_FOCUSED_FOX_30D", "Title: \"Focused Fox\" (30 Days)", "Display this fun title under your name.",
        300, "Title", RewardType.TEMPORARY_COSMETIC, "CaseSensitive", RewardEffect("username_style", "Focused Fox"),
        duration_days=30,
    ),
    RewardDefinition(
        "AVATAR_PACK_STANDARD", "Standard Avatar Pack", "Unlock a pack of 5 new avatar images.",
        150, "Profile Decoration", RewardType.REBUYABLE_COSMETIC_STACK, "UserSquare",
        RewardEffect("virtual_item", "avatar_pack_standard"),
    ),
    # Boosts and consumables
    RewardDefinition(
        "DOUBLE_POINTS_VOUCHER", "\"Double Points\" Voucher (24h)",
        "Activates 2x points for all tasks completed in the next 24 hours.",
        1000, "Points & Boosts", RewardType.ONE_TIME_CONSUMABLE, "Zap", RewardEffect(POINTS_MULTIPLIER, 2),
        duration_days=1, uses=1,
    ),
    RewardDefinition(
        "BOOST_FOCUS_1H", "Focus Boost (1 Hour)", "1.5x points for tasks completed in the next hour.",
        250, "Points & Boosts", RewardType.TEMPORARY_BOOST, "Target", RewardEffect(POINTS_MULTIPLIER, 1.5),
        duration_days=1 / 24,
    ),
    RewardDefinition(
        "STREAK_SHIELD_1USE_WEEKLY", "Streak Shield", "Protects your task streak once if a day is missed.",
        750, "Utility", RewardType.ONE_TIME_CONSUMABLE, "Shield", RewardEffect("streak_protection", 1),
        uses=1, max_ownable=1,
    ),
    RewardDefinition(
        "UNLOCK_JOKE_STUDY", "Unlock a Study Joke", "Displays a study-related joke for you.",
        20, "Fun & Misc", RewardType.ONE_TIME_CONSUMABLE, "Smile", uses=1,
    ),
    RewardDefinition(
        "FOUNDER_BADGE", "\"Founder\" Profile Badge", "A special badge for early adopters or special achievers.",
        0, "Profile Decoration", RewardType.ONE_TIME_PERMANENT, "ShieldCheck", RewardEffect("profile_badge", "Founder"),
    ),
    RewardDefinition(
        "RENAME_POINTS", "Rename Your Points", "Rename \"Points\" to something custom for your account view.",
        5000, "Fun & Misc", RewardType.SERVICE, "Edit3",
    ),
    RewardDefinition(
        "PROFILE_BANNER_BASIC_NATURE", "Basic Profile Banner: Nature", "A calm nature-themed static banner.",
        200, "Profile Decoration", RewardType.REBUYABLE_COSMETIC_EQUIP, "MountainSnow",
        RewardEffect("profile_banner", "https://picsum.photos/seed/naturebanner/1200/250"),
    ),
    RewardDefinition(
        "SOUND_COMPLETE_SPARKLE", "Task Sound: Sparkle", "A delightful sparkle sound on task completion.",
        75, "Sound & Visual FX", RewardType.REBUYABLE_COSMETIC_EQUIP, "Music2",
        RewardEffect("completion_sound", "sparkle.mp3"),
    ),
    RewardDefinition(
        MASCOT_HAT_TINY, "Mascot Accessory: Tiny Hat", "Give your site mascot a dapper tiny hat!",
        120, "Mascot Interaction", RewardType.REBUYABLE_COSMETIC_STACK, "GraduationCap",
        RewardEffect("virtual_item", "mascot_hat_tiny"),
    ),
    RewardDefinition(
        "VIRTUAL_PLANT_PROFILE", "Virtual Desk Plant", "A small digital plant for your profile page.",
        200, "Profile Decoration", RewardType.ONE_TIME_PERMANENT, "Sprout", RewardEffect("virtual_item", "plant_seedling"),
    ),
    RewardDefinition(
        "WATER_VIRTUAL_PLANT", "Water Your Plant", "Help your virtual plant grow!",
        10, "Fun & Misc", RewardType.ONE_TIME_CONSUMABLE, "Droplets", uses=1,
    ),
)

REWARDS_BY_ID: dict[str, RewardDefinition] = {r.id: r for r in REWARDS}


def slot_key(category: str, effect_type: str, target: str | None = None) -> str:
    """Equip slot for a cosmetic. Tab themes get one slot per page."""
    key = f"{category}_{effect_type}"
    if effect_type == TAB_THEME and target:
        key = f"{key}_{target}"
    return key
