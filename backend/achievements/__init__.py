"""Gamification achievements: declarative rules and the evaluator that unlocks them."""

from backend.achievements.definitions import ACHIEVEMENTS, ACHIEVEMENTS_BY_ID, AchievementDefinition
from backend.achievements.evaluator import (
    AchievementEvaluator,
    UnlockedAchievement,
    UserAchievement,
    evaluate,
)
from backend.achievements.snapshot import AchievementSnapshot, JournalEntry, TaskRecord

__all__ = [
    "ACHIEVEMENTS",
    "ACHIEVEMENTS_BY_ID",
    "AchievementDefinition",
    "AchievementEvaluator",
    "AchievementSnapshot",
    "JournalEntry",
    "TaskRecord",
    "UnlockedAchievement",
    "UserAchievement",
    "evaluate",
]
