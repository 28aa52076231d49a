"""REST API routes the desktop front end calls with learner actions."""

from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel

from english_study_tracker.config import get_settings
from english_study_tracker.models.progress import UserProgress
from english_study_tracker.models.session import StudySession
from english_study_tracker.models.settings import AppSettings
from english_study_tracker.storage.backup import (
    backup_filename,
    create_backup,
    load_settings,
    restore_backup,
)
from english_study_tracker.storage.json_store import (
    PROGRESS_DOCUMENT,
    SETTINGS_DOCUMENT,
    JsonStore,
)
from english_study_tracker.tracking.progress_tracker import ProgressTracker

logger = structlog.get_logger()
router = APIRouter(prefix="/api")

EXPORT_FILENAME = "english-learning-progress.json"


def get_store() -> JsonStore:
    return JsonStore(get_settings().storage_dir)


def get_tracker() -> ProgressTracker:
    return ProgressTracker()


def _load_progress(store: JsonStore, tracker: ProgressTracker) -> UserProgress:
    raw = store.load(PROGRESS_DOCUMENT)
    if raw is None:
        progress = tracker.create_default()
        store.save(PROGRESS_DOCUMENT, progress.to_document())
        logger.info("progress_created", user_id=progress.user_id)
        return progress
    return tracker.migrate_progress_data(raw)


def _save_progress(store: JsonStore, progress: UserProgress) -> dict[str, Any]:
    saved = store.save(PROGRESS_DOCUMENT, progress.to_document())
    return {"saved": saved, "progress": progress.to_document()}


def _attachment(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/progress")
def get_progress(
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    return _load_progress(store, tracker).to_document()


@router.delete("/progress")
def clear_progress(
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    return _save_progress(store, tracker.clear_progress())


@router.post("/progress/sessions")
def record_session(
    session: StudySession,
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    """Record a finished study session."""
    progress = _load_progress(store, tracker)
    return _save_progress(store, tracker.record_study_session(progress, session))


@router.post("/progress/words/{word_id}/mastered")
def master_word(
    word_id: str,
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    progress = _load_progress(store, tracker)
    return _save_progress(store, tracker.add_mastered_word(progress, word_id))


@router.post("/progress/words/{word_id}/weak")
def mark_weak_word(
    word_id: str,
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    progress = _load_progress(store, tracker)
    return _save_progress(store, tracker.add_weak_word(progress, word_id))


@router.post("/progress/lessons/{lesson_id}/completed")
def complete_lesson(
    lesson_id: str,
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    progress = _load_progress(store, tracker)
    return _save_progress(store, tracker.complete_lesson(progress, lesson_id))


@router.get("/progress/statistics")
def get_statistics(
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    progress = _load_progress(store, tracker)
    return tracker.get_study_statistics(progress).model_dump(mode="json", by_alias=True)


@router.get("/progress/export")
def export_progress(
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> Response:
    progress = _load_progress(store, tracker)
    return _attachment(tracker.export_progress(progress), EXPORT_FILENAME)


@router.post("/progress/import")
async def import_progress(
    request: Request,
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    """Replace stored progress with an uploaded progress or backup document."""
    imported = tracker.import_progress(await request.body())
    if imported is None:
        raise HTTPException(status_code=400, detail="Import file is not valid JSON")
    return _save_progress(store, imported)


class FileLocation(BaseModel):
    """A file path chosen in the desktop shell's file dialog."""

    path: Path


@router.post("/progress/export/file")
def export_progress_to_file(
    location: FileLocation,
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    """Write the progress document to a path picked by the user."""
    progress = _load_progress(store, tracker)
    saved = store.export_to(location.path, progress.to_document())
    return {"saved": saved, "path": str(location.path)}


@router.post("/progress/import/file")
def import_progress_from_file(
    location: FileLocation,
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    """Replace stored progress with the document at a path picked by the user."""
    text = store.read_text(location.path)
    if text is None:
        raise HTTPException(status_code=404, detail="Import file could not be read")
    imported = tracker.import_progress(text)
    if imported is None:
        raise HTTPException(status_code=400, detail="Import file is not valid JSON")
    return _save_progress(store, imported)


@router.get("/settings")
def get_app_settings(store: JsonStore = Depends(get_store)) -> dict:
    return load_settings(store.load(SETTINGS_DOCUMENT)).model_dump(mode="json", by_alias=True)


@router.put("/settings")
def update_app_settings(
    settings: AppSettings, store: JsonStore = Depends(get_store)
) -> dict:
    document = settings.model_dump(mode="json", by_alias=True)
    return {"saved": store.save(SETTINGS_DOCUMENT, document), "settings": document}


@router.get("/backup")
def download_backup(
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> Response:
    now = datetime.now()
    backup = create_backup(
        _load_progress(store, tracker), load_settings(store.load(SETTINGS_DOCUMENT)), now
    )
    return _attachment(backup.model_dump_json(by_alias=True, indent=2), backup_filename(now))


@router.post("/backup/restore")
def restore_from_backup(
    document: Any = Body(...),
    store: JsonStore = Depends(get_store),
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    """Restore a backup document, or a bare progress document."""
    restored = restore_backup(document)
    if restored is None:
        raise HTTPException(status_code=400, detail="Backup must be a JSON object")
    if restored.progress is None and restored.settings is None:
        raise HTTPException(status_code=400, detail="Backup contains no progress or settings")

    result: dict[str, Any] = {"saved": True}
    if restored.progress is not None:
        progress = tracker.migrate_progress_data(restored.progress)
        result["saved"] = store.save(PROGRESS_DOCUMENT, progress.to_document())
        result["progress"] = progress.to_document()
    if restored.settings is not None:
        settings = restored.settings.model_dump(mode="json", by_alias=True)
        result["saved"] = store.save(SETTINGS_DOCUMENT, settings) and result["saved"]
        result["settings"] = settings
    logger.info(
        "backup_restored",
        progress=restored.progress is not None,
        settings=restored.settings is not None,
    )
    return result
