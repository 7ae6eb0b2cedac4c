"""Tests for achievement rules and snapshot helpers."""

from datetime import date, datetime, timedelta

from backend.achievements.definitions import (
    ACHIEVEMENTS,
    ACHIEVEMENTS_BY_ID,
    META_ACHIEVER,
    AchievementDefinition,
)
from backend.achievements.evaluator import evaluate
from backend.achievements.snapshot import (
    AchievementSnapshot,
    JournalEntry,
    TaskRecord,
    completion_dates,
    longest_streak,
    parse_timestamp,
    week_start,
)

# Monday
NOW = datetime(2026, 3, 2, 12, 0)


def done(completed_at: str, **kwargs) -> TaskRecord:
    return TaskRecord(id=completed_at, completed=True, completed_at=completed_at, **kwargs)


def unlocked_by(tasks=(), journal_entries=(), score=0, unlocked_ids=frozenset(), now=NOW) -> set[str]:
    snapshot = AchievementSnapshot(
        tasks=tuple(tasks),
        journal_entries=tuple(journal_entries),
        score=score,
        unlocked_ids=frozenset(unlocked_ids),
        now=now,
    )
    return {d.id for d in evaluate(ACHIEVEMENTS, snapshot)}


class TestCatalog:
    def test_ids_are_unique(self) -> None:
        assert len(ACHIEVEMENTS_BY_ID) == len(ACHIEVEMENTS) == 25

    def test_points_are_positive(self) -> None:
        assert all(a.points > 0 for a in ACHIEVEMENTS)


class TestHelpers:
    def test_parse_timestamp_rejects_garbage(self) -> None:
        assert parse_timestamp("not-a-date") is None

    def test_parse_timestamp_naive_is_local(self) -> None:
        assert parse_timestamp("2026-03-02T08:30:00") == datetime(2026, 3, 2, 8, 30)

    def test_completion_dates_skip_malformed(self) -> None:
        tasks = [done("2026-03-02T10:00:00"), done("yesterday-ish"), TaskRecord(id="open")]
        assert completion_dates(tasks) == [date(2026, 3, 2)]

    def test_longest_streak(self) -> None:
        days = [date(2026, 3, 1), date(2026, 3, 2), date(2026, 3, 4), date(2026, 3, 5), date(2026, 3, 6)]
        assert longest_streak(days) == 3
        assert longest_streak([]) == 0

    def test_week_start_is_monday(self) -> None:
        assert week_start(date(2026, 3, 8)) == date(2026, 3, 2)
        assert week_start(date(2026, 3, 2)) == date(2026, 3, 2)


class TestTaskCounts:
    def test_first_task(self) -> None:
        assert "INITIATE" in unlocked_by([done("2026-03-02T10:00:00")])

    def test_incomplete_tasks_do_not_count(self) -> None:
        assert unlocked_by([TaskRecord(id="a", completed=False)]) == set()

    def test_tenacious_ten_boundary(self) -> None:
        tasks = [done(f"2026-03-02T10:{minute:02d}:00") for minute in range(10)]
        assert "TENACIOUS_TEN" not in unlocked_by(tasks[:9])
        assert "TENACIOUS_TEN" in unlocked_by(tasks)

    def test_subject_savant_needs_three_categories(self) -> None:
        tasks = [
            done(f"2026-03-02T10:{i:02d}:{n:02d}", category=category)
            for n, category in enumerate(["math", "biology", "history"])
            for i in range(10)
        ]
        assert "SUBJECT_SAVANT" in unlocked_by(tasks)
        assert "SUBJECT_SAVANT" not in unlocked_by(tasks[:29])


class TestStreaks:
    def test_three_consecutive_days(self) -> None:
        tasks = [done("2026-03-01T10:00:00"), done("2026-03-02T10:00:00"), done("2026-03-03T10:00:00")]
        assert "DAILY_DYNAMO" in unlocked_by(tasks)

    def test_gap_breaks_streak(self) -> None:
        tasks = [done("2026-03-01T10:00:00"), done("2026-03-02T10:00:00"), done("2026-03-04T10:00:00")]
        assert "DAILY_DYNAMO" not in unlocked_by(tasks)

    def test_same_day_completions_count_once(self) -> None:
        tasks = [done("2026-03-02T10:00:00"), done("2026-03-02T11:00:00"), done("2026-03-03T10:00:00")]
        assert "DAILY_DYNAMO" not in unlocked_by(tasks)

    def test_weekly_warrior_within_one_week(self) -> None:
        tasks = [done(f"2026-03-0{d}T10:00:00") for d in range(2, 7)]
        assert "WEEKLY_WARRIOR" in unlocked_by(tasks)

    def test_weekly_warrior_not_across_weeks(self) -> None:
        # Thursday to Monday spans two Monday-start weeks.
        tasks = [done(f"2026-03-{d:02d}T10:00:00") for d in range(5, 10)]
        assert "WEEKLY_WARRIOR" not in unlocked_by(tasks)

    def test_comeback_kid(self) -> None:
        now = datetime(2026, 3, 4, 12, 0)
        tasks = [done("2026-03-02T10:00:00"), done("2026-03-04T09:30:00")]
        assert "COMEBACK_KID" in unlocked_by(tasks, now=now)

    def test_no_comeback_without_a_missed_day(self) -> None:
        now = datetime(2026, 3, 4, 12, 0)
        tasks = [done("2026-03-02T10:00:00"), done("2026-03-03T10:00:00"), done("2026-03-04T09:30:00")]
        assert "COMEBACK_KID" not in unlocked_by(tasks, now=now)


class TestTimeOfDay:
    def test_early_bird(self) -> None:
        assert "EARLY_BIRD" in unlocked_by([done("2026-03-02T08:59:00")])
        assert "EARLY_BIRD" not in unlocked_by([done("2026-03-02T09:00:00")])

    def test_night_owl(self) -> None:
        assert "NIGHT_OWL" in unlocked_by([done("2026-03-02T21:00:00")])
        assert "NIGHT_OWL" not in unlocked_by([done("2026-03-02T20:59:00")])

    def test_on_fire(self) -> None:
        tasks = [done(f"2026-03-02T1{h}:00:00") for h in range(5)]
        assert "ON_FIRE" in unlocked_by(tasks)
        assert "ON_FIRE" not in unlocked_by(tasks[:4])


class TestPlanning:
    def test_planner_pro_full_week(self) -> None:
        tasks = [
            TaskRecord(id=str(i), scheduled_date=(NOW.date() + timedelta(days=i)).isoformat())
            for i in range(7)
        ]
        assert "PLANNER_PRO" in unlocked_by(tasks)
        assert "PLANNER_PRO" not in unlocked_by(tasks[:6])

    def test_perfect_day(self) -> None:
        tasks = [done(f"2026-03-02T1{h}:00:00", scheduled_date="2026-03-02") for h in range(3)]
        assert "PERFECT_DAY" in unlocked_by(tasks)

    def test_perfect_day_needs_all_planned_tasks_done(self) -> None:
        tasks = [done(f"2026-03-02T1{h}:00:00", scheduled_date="2026-03-02") for h in range(3)]
        tasks.append(TaskRecord(id="open", scheduled_date="2026-03-02"))
        assert "PERFECT_DAY" not in unlocked_by(tasks)

    def test_flawless_week(self) -> None:
        tasks = [done(f"2026-03-0{d}T10:00:00", scheduled_date=f"2026-03-0{d}") for d in range(2, 7)]
        assert "FLAWLESS_WEEK" in unlocked_by(tasks)

    def test_flawless_week_broken_by_late_completion(self) -> None:
        tasks = [done(f"2026-03-0{d}T10:00:00", scheduled_date=f"2026-03-0{d}") for d in range(2, 6)]
        tasks.append(done("2026-03-07T10:00:00", scheduled_date="2026-03-06"))
        assert "FLAWLESS_WEEK" not in unlocked_by(tasks)

    def test_marathoner(self) -> None:
        assert "MARATHONER" in unlocked_by([done("2026-03-02T10:00:00", estimated_time=121)])
        assert "MARATHONER" not in unlocked_by([done("2026-03-02T10:00:00", estimated_time=120)])


class TestOtherSources:
    def test_score_thresholds(self) -> None:
        assert unlocked_by(score=99) == set()
        assert unlocked_by(score=100) == {"POINT_PIONEER"}
        assert unlocked_by(score=1000) == {"POINT_PIONEER", "HIGH_ROLLER"}

    def test_journal_entries(self) -> None:
        entries = [JournalEntry(date=f"2026-03-0{d}") for d in range(1, 6)]
        assert "FIRST_JOURNAL_ENTRY" in unlocked_by(journal_entries=entries[:1])
        assert unlocked_by(journal_entries=entries) >= {"FIRST_JOURNAL_ENTRY", "FIVE_JOURNAL_ENTRIES"}

    def test_tracked_time(self) -> None:
        tasks = [TaskRecord(id="a", actual_time_spent=3600)]
        assert "TIME_TRACKER_MASTER_LV1" in unlocked_by(tasks)
        assert "TIME_TRACKER_MASTER_LV2" not in unlocked_by(tasks)


class TestEvaluate:
    def test_already_unlocked_are_skipped(self) -> None:
        assert "INITIATE" not in unlocked_by([done("2026-03-02T10:00:00")], unlocked_ids={"INITIATE"})

    def test_meta_achiever_needs_five_others(self) -> None:
        four = {"INITIATE", "DAILY_DYNAMO", "EARLY_BIRD", "NIGHT_OWL"}
        assert META_ACHIEVER not in unlocked_by(unlocked_ids=four)
        assert META_ACHIEVER in unlocked_by(unlocked_ids=four | {"ON_FIRE"})

    def test_malformed_timestamp_skips_only_that_record(self) -> None:
        tasks = [done("garbage"), done("2026-03-02T08:00:00")]
        unlocked = unlocked_by(tasks)
        assert {"INITIATE", "EARLY_BIRD"} <= unlocked

    def test_failing_predicate_is_not_satisfied(self) -> None:
        def broken(snapshot: AchievementSnapshot) -> bool:
            raise ValueError("bad data")

        definitions = [
            AchievementDefinition("BROKEN", "Broken", "", "", 1, broken),
            AchievementDefinition("ALWAYS", "Always", "", "", 1, lambda s: True),
        ]
        assert [d.id for d in evaluate(definitions, AchievementSnapshot(now=NOW))] == ["ALWAYS"]
