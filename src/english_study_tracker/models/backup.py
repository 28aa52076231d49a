"""Backup document bundling progress and settings."""

from datetime import datetime
from typing import Any

from pydantic import Field

from english_study_tracker.models.progress import CamelModel

BACKUP_VERSION = "1.0"


class BackupDocument(CamelModel):
    version: str = BACKUP_VERSION
    timestamp: datetime = Field(default_factory=datetime.now)
    progress: dict[str, Any]
    settings: dict[str, Any]
