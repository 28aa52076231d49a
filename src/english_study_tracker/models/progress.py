"""User progress data models."""

import uuid
from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_DAILY_GOAL = 30  # minutes


class Level(StrEnum):
    """Learner level, derived from total points."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def from_points(cls, points: int) -> "Level":
        """Determine level from accumulated points."""
        if points < 500:
            return cls.BEGINNER
        elif points < 2000:
            return cls.INTERMEDIATE
        else:
            return cls.ADVANCED


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def generate_user_id() -> str:
    return f"user_{int(datetime.now().timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


class WeeklyStats(CamelModel):
    """Aggregate for one Sunday-based calendar week."""

    week: date
    lessons_completed: int = Field(default=0, ge=0)
    words_learned: int = Field(default=0, ge=0)
    time_spent: int = Field(default=0, ge=0)  # minutes
    accuracy: float = Field(default=0.0, ge=0.0, le=100.0)


class EarnedAchievement(CamelModel):
    id: str
    title: str
    description: str
    icon: str
    earned_date: datetime
    points: int = Field(ge=0)


class UserProgress(CamelModel):
    """Everything the app knows about one learner's progress."""

    user_id: str = Field(default_factory=generate_user_id, min_length=1)
    current_level: Level = Level.BEGINNER
    total_points: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    last_study_date: datetime = Field(default_factory=datetime.now)
    completed_lessons: list[str] = Field(default_factory=list)
    mastered_words: list[str] = Field(default_factory=list)
    weak_words: list[str] = Field(default_factory=list)
    time_spent: int = Field(default=0, ge=0)  # minutes
    achievements: list[EarnedAchievement] = Field(default_factory=list)
    daily_goal: int = Field(default=DEFAULT_DAILY_GOAL, gt=0)  # minutes
    weekly_stats: WeeklyStats

    @field_validator("completed_lessons", "mastered_words", "weak_words")
    @classmethod
    def _drop_duplicate_ids(cls, value: list[str]) -> list[str]:
        return _unique(value)

    @field_validator("achievements")
    @classmethod
    def _drop_duplicate_achievements(
        cls, value: list[EarnedAchievement]
    ) -> list[EarnedAchievement]:
        seen: set[str] = set()
        unique = []
        for achievement in value:
            if achievement.id not in seen:
                seen.add(achievement.id)
                unique.append(achievement)
        return unique

    def has_achievement(self, achievement_id: str) -> bool:
        return any(a.id == achievement_id for a in self.achievements)

    def to_document(self) -> dict:
        """JSON-ready dict with camelCase keys, as stored on disk."""
        return self.model_dump(mode="json", by_alias=True)
