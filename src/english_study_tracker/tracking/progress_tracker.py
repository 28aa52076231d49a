"""Progress tracking: state transitions over ``UserProgress``."""

import json
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from english_study_tracker.models.progress import Level, UserProgress, WeeklyStats
from english_study_tracker.models.session import StudySession
from english_study_tracker.models.statistics import StudyStatistics
from english_study_tracker.tracking.achievements import evaluate_achievements
from english_study_tracker.tracking.calendar import calculate_streak, local_date, week_start
from english_study_tracker.tracking.migration import empty_weekly_stats, migrate_progress_data
from english_study_tracker.tracking.statistics import get_daily_progress, get_study_statistics

logger = structlog.get_logger()

MASTERED_WORD_BONUS = 10


def calculate_level(points: int) -> Level:
    return Level.from_points(points)


def update_weekly_stats(
    stats: WeeklyStats, session: StudySession, now: datetime
) -> WeeklyStats:
    """Fold one session into the weekly aggregate.

    Stats from an earlier week are replaced by a fresh aggregate seeded from
    this session alone.
    """
    current_week = week_start(local_date(now))
    lessons = 1 if session.lesson_id else 0
    minutes = session.duration_minutes

    if stats.week != current_week:
        return WeeklyStats(
            week=current_week,
            lessons_completed=lessons,
            words_learned=len(session.words_studied),
            time_spent=minutes,
            accuracy=session.accuracy,
        )

    accuracy = stats.accuracy
    # Sessions without answers (pure review) leave accuracy untouched.
    if session.total_answers > 0:
        accuracy = (stats.accuracy * stats.lessons_completed + session.accuracy) / (
            stats.lessons_completed + 1
        )
    return WeeklyStats(
        week=stats.week,
        lessons_completed=stats.lessons_completed + lessons,
        words_learned=stats.words_learned + len(session.words_studied),
        time_spent=stats.time_spent + minutes,
        accuracy=accuracy,
    )


class ProgressTracker:
    """Stateless service applying learner actions to progress records.

    Every operation takes the caller's current ``UserProgress`` and returns a
    new one; inputs are never mutated. Persisting the result is the caller's job.

    Args:
        clock: Source of the current local time.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def create_default(self) -> UserProgress:
        """Zero-state progress for a new installation."""
        now = self.clock()
        return UserProgress(last_study_date=now, weekly_stats=empty_weekly_stats(now))

    def clear_progress(self) -> UserProgress:
        logger.info("progress_cleared")
        return self.create_default()

    def record_study_session(
        self, progress: UserProgress, session: StudySession
    ) -> UserProgress:
        """Apply a finished study session.

        Updates time, points, mastered words, streak and weekly stats, then
        unlocks achievements and recomputes the level from the final points.

        Args:
            progress: Current progress snapshot.
            session: The session to record.

        Returns:
            Updated progress.
        """
        now = self.clock()
        updated = progress.model_copy(deep=True)

        updated.time_spent += session.duration_minutes
        updated.total_points += session.points_earned

        for word_id in session.words_studied:
            if word_id not in updated.mastered_words:
                updated.mastered_words.append(word_id)

        updated.streak_days = calculate_streak(
            updated.streak_days, updated.last_study_date, now
        )
        updated.last_study_date = session.start_time

        updated.weekly_stats = update_weekly_stats(updated.weekly_stats, session, now)

        earned = evaluate_achievements(updated, now)
        updated.current_level = calculate_level(updated.total_points)

        logger.info(
            "study_session_recorded",
            user_id=updated.user_id,
            session_id=session.id,
            minutes=session.duration_minutes,
            points=session.points_earned,
            achievements_earned=[a.id for a in earned],
            streak_days=updated.streak_days,
        )
        return updated

    def add_mastered_word(self, progress: UserProgress, word_id: str) -> UserProgress:
        """Mark a word as mastered and award the mastery bonus.

        Achievements are not evaluated here; they unlock on the next
        recorded study session.
        """
        if word_id in progress.mastered_words:
            return progress

        updated = progress.model_copy(deep=True)
        updated.mastered_words.append(word_id)
        updated.weak_words = [w for w in updated.weak_words if w != word_id]
        updated.total_points += MASTERED_WORD_BONUS
        updated.current_level = calculate_level(updated.total_points)
        logger.debug("word_mastered", user_id=updated.user_id, word_id=word_id)
        return updated

    def add_weak_word(self, progress: UserProgress, word_id: str) -> UserProgress:
        """Flag a word for extra review.

        Independent of mastery: a mastered word is not removed from
        ``mastered_words``.
        """
        if word_id in progress.weak_words:
            return progress

        updated = progress.model_copy(deep=True)
        updated.weak_words.append(word_id)
        logger.debug("word_marked_weak", user_id=updated.user_id, word_id=word_id)
        return updated

    def complete_lesson(self, progress: UserProgress, lesson_id: str) -> UserProgress:
        if not lesson_id or lesson_id in progress.completed_lessons:
            return progress

        updated = progress.model_copy(deep=True)
        updated.completed_lessons.append(lesson_id)
        logger.debug("lesson_completed", user_id=updated.user_id, lesson_id=lesson_id)
        return updated

    def migrate_progress_data(self, raw: Any) -> UserProgress:
        return migrate_progress_data(raw, now=self.clock())

    def export_progress(self, progress: UserProgress) -> str:
        """Pretty-printed JSON document with camelCase keys in model order."""
        return progress.model_dump_json(by_alias=True, indent=2)

    def import_progress(self, serialized: str | bytes) -> UserProgress | None:
        """Parse and migrate an exported progress document.

        A full backup document is accepted too; its ``progress`` part is used.

        Returns:
            The imported progress, or None when ``serialized`` is not valid
            JSON. The caller keeps its previous progress in that case.
        """
        try:
            data = json.loads(serialized)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("progress_import_failed", error=str(e))
            return None

        if isinstance(data, dict) and "version" in data and isinstance(data.get("progress"), dict):
            data = data["progress"]
        imported = self.migrate_progress_data(data)
        logger.info("progress_imported", user_id=imported.user_id)
        return imported

    def get_daily_progress(self, progress: UserProgress) -> float:
        return get_daily_progress(progress, self.clock())

    def get_study_statistics(self, progress: UserProgress) -> StudyStatistics:
        return get_study_statistics(progress, self.clock())
