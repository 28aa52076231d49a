"""Study session input model."""

from datetime import datetime
from typing import Self

from pydantic import Field, model_validator

from english_study_tracker.models.progress import CamelModel


def _to_local_naive(moment: datetime) -> datetime:
    return moment.astimezone().replace(tzinfo=None)


class StudySession(CamelModel):
    """A finished study session reported by the presentation layer.

    Sessions are inputs only; the tracker folds them into ``UserProgress``
    and never stores them.
    """

    id: str
    start_time: datetime
    end_time: datetime | None = None
    lesson_id: str = ""
    words_studied: list[str] = Field(default_factory=list)
    exercises_completed: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    total_answers: int = Field(default=0, ge=0)
    points_earned: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_consistency(self) -> Self:
        # A browser may send one timestamp with "Z" and the other without;
        # compare both as local wall-clock time.
        if self.end_time is not None and (
            (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None)
        ):
            self.start_time = _to_local_naive(self.start_time)
            self.end_time = _to_local_naive(self.end_time)
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("endTime must not be earlier than startTime")
        if self.correct_answers > self.total_answers:
            raise ValueError("correctAnswers must not exceed totalAnswers")
        return self

    @property
    def duration_minutes(self) -> int:
        """Whole minutes between start and end (0 while the session has no end)."""
        if self.end_time is None:
            return 0
        return int((self.end_time - self.start_time).total_seconds() // 60)

    @property
    def accuracy(self) -> float:
        """Percentage of correct answers, 0 when nothing was answered."""
        if self.total_answers == 0:
            return 0.0
        return self.correct_answers / self.total_answers * 100
