"""Backup documents bundling progress and settings."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog
from pydantic import ValidationError

from english_study_tracker.models.backup import BackupDocument
from english_study_tracker.models.progress import UserProgress
from english_study_tracker.models.settings import AppSettings

logger = structlog.get_logger()


def backup_filename(now: datetime) -> str:
    return f"english-learning-backup-{now.date().isoformat()}.json"


def create_backup(
    progress: UserProgress, settings: AppSettings, now: datetime | None = None
) -> BackupDocument:
    return BackupDocument(
        timestamp=now or datetime.now(),
        progress=progress.to_document(),
        settings=settings.model_dump(mode="json", by_alias=True),
    )


@dataclass
class RestoredBackup:
    """Raw documents recovered from a backup or a bare progress file.

    ``progress`` still needs migration; ``settings`` is None when the file
    carried none or it was invalid.
    """

    progress: dict[str, Any] | None
    settings: AppSettings | None


def load_settings(raw: Any) -> AppSettings:
    """Settings from a stored document, falling back to defaults when invalid."""
    if raw is None:
        return AppSettings()
    try:
        return AppSettings.model_validate(raw)
    except ValidationError as e:
        logger.warning("settings_document_invalid", error_count=e.error_count())
        return AppSettings()


def restore_backup(raw: Any) -> RestoredBackup | None:
    """Split an imported document into its progress and settings parts.

    Returns None when ``raw`` is not a JSON object at all.
    """
    if not isinstance(raw, dict):
        logger.warning("backup_restore_failed", reason="not_an_object")
        return None

    if "version" in raw:
        progress = raw.get("progress")
        settings = raw.get("settings")
        return RestoredBackup(
            progress=progress if isinstance(progress, dict) else None,
            settings=load_settings(settings) if settings is not None else None,
        )
    return RestoredBackup(progress=raw, settings=None)
