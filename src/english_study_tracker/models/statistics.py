"""Summary statistics shown on the progress view."""

from english_study_tracker.models.progress import CamelModel, Level


class StudyStatistics(CamelModel):
    total_words: int
    weak_words: int
    total_time: int
    current_streak: int
    total_points: int
    achievements_count: int
    current_level: Level
    daily_goal_progress: float
