"""Application settings document (theme, language, reminders)."""

from enum import StrEnum

from pydantic import Field

from english_study_tracker.models.progress import CamelModel


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class Language(StrEnum):
    EN = "en"
    ZH_CN = "zh-CN"
    ZH_TW = "zh-TW"


class AppSettings(CamelModel):
    """User-facing preferences.

    Persisted next to the progress document; the progress tracker never reads it.
    """

    theme: Theme = Theme.LIGHT
    language: Language = Language.EN
    auto_play: bool = True
    show_translations: bool = True
    daily_reminder: bool = True
    reminder_time: str = Field(default="09:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    sound_enabled: bool = True
    animations_enabled: bool = True
