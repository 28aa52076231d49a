"""Read-only summaries derived from progress."""

from datetime import datetime

from english_study_tracker.models.progress import UserProgress
from english_study_tracker.models.statistics import StudyStatistics
from english_study_tracker.tracking.calendar import day_diff


def get_daily_progress(progress: UserProgress, now: datetime) -> float:
    """Percentage of today's study goal reached (0-100).

    Only total time is tracked, not time per day, so the value is the
    remainder of total minutes over the goal.
    """
    if day_diff(progress.last_study_date, now) != 0:
        return 0.0
    today_minutes = progress.time_spent % progress.daily_goal
    return min(today_minutes / progress.daily_goal * 100, 100.0)


def get_study_statistics(progress: UserProgress, now: datetime) -> StudyStatistics:
    return StudyStatistics(
        total_words=len(progress.mastered_words),
        weak_words=len(progress.weak_words),
        total_time=progress.time_spent,
        current_streak=progress.streak_days,
        total_points=progress.total_points,
        achievements_count=len(progress.achievements),
        current_level=progress.current_level,
        daily_goal_progress=get_daily_progress(progress, now),
    )
