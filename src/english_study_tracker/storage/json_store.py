"""Named JSON document persistence (atomic write + fcntl.flock)."""

import fcntl
import json
import os
import tempfile
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()

PROGRESS_DOCUMENT = "progress"
SETTINGS_DOCUMENT = "settings"


def _write_atomic(path: Path, value: Any) -> None:
    text = json.dumps(value, indent=2, ensure_ascii=False)
    with tempfile.NamedTemporaryFile(
        "w", dir=path.parent, delete=False, suffix=".json", encoding="utf-8"
    ) as tmp:
        tmp.write(text)
    os.replace(tmp.name, path)


class JsonStore:
    """Stores each logical document as ``<data_dir>/<name>.json``.

    Every call makes a single attempt. Failures are logged and reported
    through the return value, never raised.

    Args:
        data_dir: Directory holding the documents. Created on first save.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def save(self, name: str, value: Any) -> bool:
        path = self.path_for(name)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            _write_atomic(path, value)
        except (OSError, TypeError, ValueError) as e:
            logger.error("document_save_failed", name=name, path=str(path), error=str(e))
            return False
        logger.debug("document_saved", name=name, path=str(path))
        return True

    def load(self, name: str) -> Any | None:
        """Parsed document, or None when it is absent or unreadable."""
        path = self.path_for(name)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                try:
                    return json.load(f)
                finally:
                    fcntl.flock(f, fcntl.LOCK_UN)
        except (OSError, ValueError) as e:
            logger.error("document_load_failed", name=name, path=str(path), error=str(e))
            return None

    def export_to(self, path: Path, value: Any) -> bool:
        """Write a document to a user-chosen location."""
        path = Path(path)
        try:
            _write_atomic(path, value)
        except (OSError, TypeError, ValueError) as e:
            logger.error("document_export_failed", path=str(path), error=str(e))
            return False
        logger.info("document_exported", path=str(path))
        return True

    def read_text(self, path: Path) -> str | None:
        """Raw contents of a user-chosen import file."""
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("document_import_read_failed", path=str(path), error=str(e))
            return None
