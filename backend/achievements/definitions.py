"""Achievement definitions: a static table of metadata plus a predicate.

Each predicate is a pure function of an AchievementSnapshot. The evaluator
knows nothing about individual rules, so adding an achievement means adding
a row to ACHIEVEMENTS.
"""

from collections import Counter, defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

from backend.achievements.snapshot import (
    AchievementSnapshot,
    completed_tasks,
    completion_dates,
    completion_time,
    completion_times,
    longest_streak,
    parse_day,
    tracked_seconds,
    week_start,
)

Predicate = Callable[[AchievementSnapshot], bool]

META_ACHIEVER = "META_ACHIEVER"


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    name: str
    description: str
    icon: str
    points: int
    predicate: Predicate
    is_secret: bool = False


# --- Rule builders ---


def completed_at_least(count: int) -> Predicate:
    def check(snapshot: AchievementSnapshot) -> bool:
        return len(completed_tasks(snapshot.tasks)) >= count

    return check


def streak_of(days: int) -> Predicate:
    def check(snapshot: AchievementSnapshot) -> bool:
        return longest_streak(completion_dates(snapshot.tasks)) >= days

    return check


def score_at_least(points: int) -> Predicate:
    def check(snapshot: AchievementSnapshot) -> bool:
        return snapshot.score >= points

    return check


def journal_entries_at_least(count: int) -> Predicate:
    def check(snapshot: AchievementSnapshot) -> bool:
        return len(snapshot.journal_entries) >= count

    return check


def tracked_at_least(seconds: int) -> Predicate:
    def check(snapshot: AchievementSnapshot) -> bool:
        return tracked_seconds(snapshot.tasks) >= seconds

    return check


# --- Rules that need more than a threshold ---


def weekly_warrior(snapshot: AchievementSnapshot) -> bool:
    """Completions on 5 different days within one Monday-start week."""
    days_by_week: dict[date, set[date]] = defaultdict(set)
    for day in completion_dates(snapshot.tasks):
        days_by_week[week_start(day)].add(day)
    return any(len(days) >= 5 for days in days_by_week.values())


def planner_pro(snapshot: AchievementSnapshot) -> bool:
    """Every one of the next seven days (today included) has a scheduled task."""
    scheduled = {
        parse_day(t.scheduled_date, t.id) for t in snapshot.tasks if t.scheduled_date
    }
    if not scheduled:
        return False
    return all(snapshot.today + timedelta(days=i) in scheduled for i in range(7))


def on_fire(snapshot: AchievementSnapshot) -> bool:
    """Five completions on a single day."""
    per_day = Counter(t.date() for t in completion_times(snapshot.tasks))
    return any(count >= 5 for count in per_day.values())


def early_bird(snapshot: AchievementSnapshot) -> bool:
    return any(t.hour < 9 for t in completion_times(snapshot.tasks))


def night_owl(snapshot: AchievementSnapshot) -> bool:
    return any(t.hour >= 21 for t in completion_times(snapshot.tasks))


def perfect_day(snapshot: AchievementSnapshot) -> bool:
    """A day with at least 3 planned tasks, every one completed on that day.

    A task belongs to its scheduled day, or to its completion day when it was
    never scheduled. Tasks with neither are not planned for any day.
    """
    done_days_by_day: dict[date, list[date | None]] = defaultdict(list)
    for task in snapshot.tasks:
        done = completion_time(task)
        done_day = done.date() if done else None
        if task.scheduled_date:
            day = parse_day(task.scheduled_date, task.id)
            if day is None:
                continue
        elif done_day is not None:
            day = done_day
        else:
            continue
        done_days_by_day[day].append(done_day)

    return any(
        len(done_days) >= 3 and all(d == day for d in done_days)
        for day, done_days in done_days_by_day.items()
    )


def flawless_week(snapshot: AchievementSnapshot) -> bool:
    """A week with scheduled tasks on at least 5 days, all completed on schedule."""
    scheduled: dict[date, list[date]] = defaultdict(list)
    on_time: Counter[date] = Counter()
    for task in snapshot.tasks:
        if not task.scheduled_date:
            continue
        day = parse_day(task.scheduled_date, task.id)
        if day is None:
            continue
        week = week_start(day)
        scheduled[week].append(day)
        done = completion_time(task)
        if done is not None and done.date() == day:
            on_time[week] += 1

    return any(
        len(set(days)) >= 5 and len(days) == on_time[week]
        for week, days in scheduled.items()
    )


def subject_savant(snapshot: AchievementSnapshot) -> bool:
    """Ten completed tasks in each of three categories."""
    per_category = Counter(t.category for t in completed_tasks(snapshot.tasks) if t.category)
    return sum(1 for count in per_category.values() if count >= 10) >= 3


def marathoner(snapshot: AchievementSnapshot) -> bool:
    return any(t.estimated_time > 120 for t in completed_tasks(snapshot.tasks))


def comeback_kid(snapshot: AchievementSnapshot) -> bool:
    """Completed today and the day before yesterday, but not yesterday."""
    days = set(completion_dates(snapshot.tasks))
    if len(days) < 2:
        return False
    today = snapshot.today
    return (
        today in days
        and today - timedelta(days=1) not in days
        and today - timedelta(days=2) in days
    )


def meta_achiever(snapshot: AchievementSnapshot) -> bool:
    """Five other achievements unlocked before this evaluation pass."""
    return len(snapshot.unlocked_ids - {META_ACHIEVER}) >= 5


ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        "INITIATE", "Initiate!", "Complete your first task.", "CheckSquare", 5, completed_at_least(1)
    ),
    AchievementDefinition(
        "DAILY_DYNAMO", "Daily Dynamo", "Complete at least one task for 3 days in a row.",
        "Repeat", 10, streak_of(3),
    ),
    AchievementDefinition(
        "WEEKLY_WARRIOR", "Weekly Warrior", "Complete tasks on 5 different days in a single week.",
        "CalendarCheck", 15, weekly_warrior,
    ),
    AchievementDefinition(
        "STREAK_STARTER", "Streak Starter", "Achieve a 7-day task completion streak.",
        "Flame", 20, streak_of(7),
    ),
    AchievementDefinition(
        "PLANNER_PRO", "Planner Pro", "Schedule tasks for a full week ahead.",
        "CalendarRange", 25, planner_pro,
    ),
    AchievementDefinition(
        "TENACIOUS_TEN", "Tenacious Ten", "Complete 10 tasks successfully.",
        "ListChecks", 10, completed_at_least(10),
    ),
    AchievementDefinition(
        "QUARTER_CENTURY_CLUB", "Quarter Century Club", "Complete 25 tasks.", "Gem", 25, completed_at_least(25)
    ),
    AchievementDefinition(
        "FIFTY_FINISHER", "Fifty Finisher", "Complete 50 tasks.", "Medal", 50, completed_at_least(50)
    ),
    AchievementDefinition(
        "CENTURION", "Centurion", "Complete 100 tasks.", "ShieldCheck", 100, completed_at_least(100)
    ),
    AchievementDefinition(
        "TASK_TITAN", "Task Titan", "Complete 250 tasks.", "Crown", 150, completed_at_least(250)
    ),
    AchievementDefinition(
        "POINT_PIONEER", "Point Pioneer", "Earn your first 100 points.", "Star", 10, score_at_least(100)
    ),
    AchievementDefinition(
        "HIGH_ROLLER", "High Roller", "Earn 1,000 points.", "Stars", 25, score_at_least(1000)
    ),
    AchievementDefinition("ON_FIRE", "On Fire!", "Complete 5 tasks in a single day.", "Zap", 20, on_fire),
    AchievementDefinition("EARLY_BIRD", "Early Bird", "Complete a task before 9 AM.", "Sunrise", 10, early_bird),
    AchievementDefinition("NIGHT_OWL", "Night Owl", "Complete a task after 9 PM.", "Moon", 10, night_owl),
    AchievementDefinition(
        "PERFECT_DAY", "Perfect Day", "Complete all planned tasks for a single day (min. 3 tasks).",
        "Award", 50, perfect_day,
    ),
    AchievementDefinition(
        "FLAWLESS_WEEK", "Flawless Week",
        "Complete all scheduled tasks for an entire week (min. 1 task per day, 5 days).",
        "CalendarHeart", 100, flawless_week,
    ),
    AchievementDefinition(
        "SUBJECT_SAVANT", "Subject Savant", "Complete 10 tasks in 3 different self-defined subjects/categories.",
        "Library", 30, subject_savant,
    ),
    AchievementDefinition(
        "MARATHONER", "Marathoner", "Complete a task that you estimated would take over 2 hours.",
        "Waypoints", 25, marathoner,
    ),
    AchievementDefinition(
        "COMEBACK_KID", "Comeback Kid", "Complete a task after missing a day in your streak.",
        "Undo2", 15, comeback_kid,
    ),
    AchievementDefinition(
        META_ACHIEVER, "Meta Achiever", "Unlock 5 other achievements.", "Combine", 30, meta_achiever
    ),
    AchievementDefinition(
        "FIRST_JOURNAL_ENTRY", "Reflective Start", "Write your first journal entry.",
        "BookOpen", 10, journal_entries_at_least(1),
    ),
    AchievementDefinition(
        "FIVE_JOURNAL_ENTRIES", "Consistent Chronicler", "Write 5 journal entries.",
        "NotebookText", 20, journal_entries_at_least(5),
    ),
    AchievementDefinition(
        "TIME_TRACKER_MASTER_LV1", "Time Apprentice", "Track a total of 1 hour across your tasks.",
        "Hourglass", 15, tracked_at_least(3600),
    ),
    AchievementDefinition(
        "TIME_TRACKER_MASTER_LV2", "Time Journeyman", "Track a total of 5 hours across your tasks.",
        "Timer", 30, tracked_at_least(18000),
    ),
)

ACHIEVEMENTS_BY_ID: dict[str, AchievementDefinition] = {a.id: a for a in ACHIEVEMENTS}
