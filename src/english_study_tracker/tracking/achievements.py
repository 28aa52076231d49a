"""Achievement definitions and unlock evaluation."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import structlog

from english_study_tracker.models.progress import EarnedAchievement, UserProgress

logger = structlog.get_logger()


@dataclass(frozen=True)
class AchievementDefinition:
    """A one-time bonus unlocked the first time ``condition`` holds."""

    id: str
    title: str
    description: str
    icon: str
    points: int
    condition: Callable[[UserProgress], bool]

    def earn(self, earned_date: datetime) -> EarnedAchievement:
        return EarnedAchievement(
            id=self.id,
            title=self.title,
            description=self.description,
            icon=self.icon,
            earned_date=earned_date,
            points=self.points,
        )


# Evaluation order matters: bonuses are added as each entry unlocks, so the
# points-based entries can fire off bonuses earned earlier in the same pass.
ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        "first-word", "First Word", "Learn your first word", "🎯", 10,
        lambda p: len(p.mastered_words) >= 1,
    ),
    AchievementDefinition(
        "word-collector", "Word Collector", "Learn 10 words", "📚", 50,
        lambda p: len(p.mastered_words) >= 10,
    ),
    AchievementDefinition(
        "word-master", "Word Master", "Learn 50 words", "🏆", 200,
        lambda p: len(p.mastered_words) >= 50,
    ),
    AchievementDefinition(
        "vocabulary-expert", "Vocabulary Expert", "Learn 100 words", "🎓", 500,
        lambda p: len(p.mastered_words) >= 100,
    ),
    AchievementDefinition(
        "streak-starter", "Streak Starter", "Study for 3 days in a row", "🔥", 30,
        lambda p: p.streak_days >= 3,
    ),
    AchievementDefinition(
        "streak-master", "Streak Master", "Study for 7 days in a row", "🌟", 100,
        lambda p: p.streak_days >= 7,
    ),
    AchievementDefinition(
        "dedicated-learner", "Dedicated Learner", "Study for 30 days in a row", "💎", 500,
        lambda p: p.streak_days >= 30,
    ),
    AchievementDefinition(
        "point-collector", "Point Collector", "Earn 500 points", "⭐", 50,
        lambda p: p.total_points >= 500,
    ),
    AchievementDefinition(
        "high-achiever", "High Achiever", "Earn 1000 points", "🏅", 100,
        lambda p: p.total_points >= 1000,
    ),
    AchievementDefinition(
        "time-tracker", "Time Tracker", "Study for 10 hours total", "⏰", 100,
        lambda p: p.time_spent >= 600,
    ),
)


def evaluate_achievements(
    progress: UserProgress,
    now: datetime,
    definitions: tuple[AchievementDefinition, ...] = ACHIEVEMENTS,
) -> list[EarnedAchievement]:
    """Unlock every newly satisfied achievement on ``progress`` in place.

    Each unlocked achievement is appended to ``progress.achievements`` and its
    points are added to ``progress.total_points`` before the next definition
    is tested.

    Args:
        progress: Working copy to update.
        now: Timestamp stamped on newly earned achievements.
        definitions: Ordered achievement table.

    Returns:
        The achievements earned by this call, in table order.
    """
    earned = []
    for definition in definitions:
        if progress.has_achievement(definition.id):
            continue
        if not definition.condition(progress):
            continue
        achievement = definition.earn(now)
        progress.achievements.append(achievement)
        progress.total_points += achievement.points
        earned.append(achievement)
        logger.info(
            "achievement_earned",
            user_id=progress.user_id,
            achievement_id=achievement.id,
            points=achievement.points,
        )
    return earned
