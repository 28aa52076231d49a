"""Tests for the achievement table and evaluation."""

from datetime import date, datetime

from english_study_tracker.models.progress import UserProgress, WeeklyStats
from english_study_tracker.tracking.achievements import ACHIEVEMENTS, evaluate_achievements

NOW = datetime(2026, 3, 4, 10, 0, 0)


def make_progress(**kwargs) -> UserProgress:
    return UserProgress(weekly_stats=WeeklyStats(week=date(2026, 3, 1)), **kwargs)


def test_table_order_and_points():
    assert [(a.id, a.points) for a in ACHIEVEMENTS] == [
        ("first-word", 10),
        ("word-collector", 50),
        ("word-master", 200),
        ("vocabulary-expert", 500),
        ("streak-starter", 30),
        ("streak-master", 100),
        ("dedicated-learner", 500),
        ("point-collector", 50),
        ("high-achiever", 100),
        ("time-tracker", 100),
    ]


def test_nothing_earned_on_empty_progress():
    progress = make_progress()
    assert evaluate_achievements(progress, NOW) == []
    assert progress.total_points == 0


def test_time_tracker_at_ten_hours():
    progress = make_progress(time_spent=600)
    earned = evaluate_achievements(progress, NOW)
    assert [a.id for a in earned] == ["time-tracker"]
    assert progress.total_points == 100


def test_streak_thresholds():
    progress = make_progress(streak_days=7)
    earned = evaluate_achievements(progress, NOW)
    assert [a.id for a in earned] == ["streak-starter", "streak-master"]
    assert progress.total_points == 130


def test_earned_records_carry_definition_fields():
    progress = make_progress(mastered_words=["a"])
    (earned,) = evaluate_achievements(progress, NOW)
    assert earned.title == "First Word"
    assert earned.description == "Learn your first word"
    assert earned.icon == "🎯"
    assert earned.earned_date == NOW
    assert progress.achievements == [earned]


def test_already_earned_is_skipped():
    progress = make_progress(mastered_words=["a"])
    evaluate_achievements(progress, NOW)
    assert evaluate_achievements(progress, NOW) == []
    assert progress.total_points == 10


def test_high_achiever_cascade_from_point_collector():
    # 950 + 50 from point-collector reaches 1000 within the same pass
    progress = make_progress(total_points=950)
    earned = evaluate_achievements(progress, NOW)
    assert [a.id for a in earned] == ["point-collector", "high-achiever"]
    assert progress.total_points == 1100
