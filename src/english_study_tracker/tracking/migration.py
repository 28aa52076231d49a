"""Conversion of untrusted progress documents into ``UserProgress``.

Progress files come from older app versions, hand edits, and user imports.
Conversion is total: every field that is missing or fails validation falls
back to its default independently, so one bad field never discards the rest.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Annotated, Any

import structlog
from pydantic import TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from pydantic.fields import FieldInfo

from english_study_tracker.models.progress import (
    EarnedAchievement,
    UserProgress,
    WeeklyStats,
)
from english_study_tracker.tracking.calendar import local_date, week_start

logger = structlog.get_logger()

# Untrusted external record: whatever JSON decoding produced.
RawProgress = Mapping[str, Any]


def _field_adapter(info: FieldInfo) -> TypeAdapter:
    if info.metadata:
        return TypeAdapter(Annotated[(info.annotation, *info.metadata)])
    return TypeAdapter(info.annotation)


_FIELD_ADAPTERS: dict[str, tuple[str, TypeAdapter]] = {
    name: (info.alias or to_camel(name), _field_adapter(info))
    for name, info in UserProgress.model_fields.items()
}
_ACHIEVEMENT_ADAPTER = TypeAdapter(EarnedAchievement)


def empty_weekly_stats(now: datetime) -> WeeklyStats:
    """Zeroed stats for the week containing ``now``."""
    return WeeklyStats(week=week_start(local_date(now)))


def _raw_value(raw: RawProgress, name: str, alias: str) -> Any:
    if alias in raw:
        return raw[alias]
    return raw.get(name)


def _valid_achievements(entries: list) -> list[EarnedAchievement]:
    """Earned achievements that validate, dropping only the malformed entries.

    Losing a valid entry would let the next session award its bonus again.
    """
    kept = []
    for entry in entries:
        try:
            kept.append(_ACHIEVEMENT_ADAPTER.validate_python(entry))
        except ValidationError:
            logger.debug("achievement_entry_dropped", entry=entry)
    return kept


def migrate_progress_data(raw: Any, now: datetime | None = None) -> UserProgress:
    """Build a valid ``UserProgress`` from a loosely typed record.

    Args:
        raw: Decoded JSON, normally a dict with camelCase keys. Anything that
            is not a mapping is treated as an empty record.
        now: Clock reading used for defaulted timestamps and weekly stats.

    Returns:
        A progress record; never raises for bad input.
    """
    now = now or datetime.now()
    if not isinstance(raw, Mapping):
        logger.warning("progress_document_not_an_object", type=type(raw).__name__)
        raw = {}

    values: dict[str, Any] = {}
    defaulted = []
    for name, (alias, adapter) in _FIELD_ADAPTERS.items():
        value = _raw_value(raw, name, alias)
        if value is None:
            defaulted.append(name)
            continue
        if name == "achievements" and isinstance(value, list):
            values[name] = _valid_achievements(value)
            continue
        try:
            values[name] = adapter.validate_python(value)
        except ValidationError:
            defaulted.append(name)

    values.setdefault("last_study_date", now)
    values.setdefault("weekly_stats", empty_weekly_stats(now))
    if defaulted:
        logger.debug("progress_fields_defaulted", fields=defaulted)
    return UserProgress(**values)
