"""Smoke tests for API routes."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from english_study_tracker.api.routes import router
from english_study_tracker.storage.json_store import PROGRESS_DOCUMENT, JsonStore

SESSION = {
    "id": "session-1",
    "startTime": "2026-03-04T10:00:00",
    "endTime": "2026-03-04T10:20:00",
    "lessonId": "lesson-1",
    "wordsStudied": ["w1", "w2"],
    "exercisesCompleted": 4,
    "correctAnswers": 3,
    "totalAnswers": 4,
    "pointsEarned": 20,
}


@pytest.fixture
def mock_settings(tmp_path):
    settings = MagicMock()
    settings.storage_dir = tmp_path / "data"
    settings.storage_dir.mkdir()
    return settings


@pytest.fixture
def store(mock_settings):
    return JsonStore(mock_settings.storage_dir)


@pytest.fixture
def client(mock_settings):
    app = FastAPI()
    app.include_router(router)
    with patch("english_study_tracker.api.routes.get_settings", return_value=mock_settings):
        with TestClient(app) as c:
            yield c


class TestHealthCheck:
    def test_health_returns_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestProgress:
    def test_first_load_creates_default(self, client, store):
        response = client.get("/api/progress")
        assert response.status_code == 200
        data = response.json()
        assert data["totalPoints"] == 0
        assert data["currentLevel"] == "beginner"
        assert store.load(PROGRESS_DOCUMENT)["userId"] == data["userId"]

    def test_load_is_stable(self, client):
        first = client.get("/api/progress").json()
        second = client.get("/api/progress").json()
        assert first["userId"] == second["userId"]

    def test_legacy_document_is_migrated(self, client, store):
        store.save(PROGRESS_DOCUMENT, {"userId": "user_old", "totalPoints": 600})
        data = client.get("/api/progress").json()
        assert data["userId"] == "user_old"
        assert data["totalPoints"] == 600
        assert data["dailyGoal"] == 30

    def test_record_session(self, client, store):
        response = client.post("/api/progress/sessions", json=SESSION)
        assert response.status_code == 200
        body = response.json()
        assert body["saved"] is True
        progress = body["progress"]
        assert progress["masteredWords"] == ["w1", "w2"]
        assert progress["timeSpent"] == 20
        # 20 session points + 10 for first-word
        assert progress["totalPoints"] == 30
        assert [a["id"] for a in progress["achievements"]] == ["first-word"]
        assert store.load(PROGRESS_DOCUMENT) == progress

    def test_invalid_session_rejected(self, client):
        response = client.post(
            "/api/progress/sessions", json={**SESSION, "correctAnswers": 9}
        )
        assert response.status_code == 422

    def test_session_with_mixed_timezones(self, client):
        local_start = datetime(2026, 3, 4, 10, 0, tzinfo=timezone.utc).astimezone()
        end = local_start.replace(tzinfo=None) + timedelta(minutes=20)
        response = client.post(
            "/api/progress/sessions",
            json={**SESSION, "startTime": "2026-03-04T10:00:00Z", "endTime": end.isoformat()},
        )
        assert response.status_code == 200
        assert response.json()["progress"]["timeSpent"] == 20

    def test_master_and_weak_words(self, client):
        client.post("/api/progress/words/apple/weak")
        body = client.post("/api/progress/words/apple/mastered").json()
        assert body["progress"]["masteredWords"] == ["apple"]
        assert body["progress"]["weakWords"] == []
        assert body["progress"]["totalPoints"] == 10
        assert body["progress"]["achievements"] == []

    def test_complete_lesson(self, client):
        body = client.post("/api/progress/lessons/lesson-3/completed").json()
        assert body["progress"]["completedLessons"] == ["lesson-3"]

    def test_statistics(self, client):
        client.post("/api/progress/words/apple/mastered")
        data = client.get("/api/progress/statistics").json()
        assert data["totalWords"] == 1
        assert data["totalPoints"] == 10
        assert data["currentLevel"] == "beginner"

    def test_clear(self, client):
        before = client.post("/api/progress/words/apple/mastered").json()["progress"]
        after = client.delete("/api/progress").json()["progress"]
        assert after["masteredWords"] == []
        assert after["userId"] != before["userId"]


class TestExportImport:
    def test_export_is_attachment(self, client):
        user_id = client.get("/api/progress").json()["userId"]
        response = client.get("/api/progress/export")
        assert response.status_code == 200
        assert "english-learning-progress.json" in response.headers["content-disposition"]
        assert json.loads(response.text)["userId"] == user_id

    def test_import_replaces_progress(self, client):
        exported = client.get("/api/progress/export").text
        document = json.loads(exported)
        document["userId"] = "user_imported"
        response = client.post("/api/progress/import", content=json.dumps(document))
        assert response.status_code == 200
        assert client.get("/api/progress").json()["userId"] == "user_imported"

    def test_malformed_import_keeps_progress(self, client):
        user_id = client.get("/api/progress").json()["userId"]
        response = client.post("/api/progress/import", content="{not json")
        assert response.status_code == 400
        assert client.get("/api/progress").json()["userId"] == user_id

    def test_export_to_file_and_import_back(self, client, tmp_path):
        user_id = client.get("/api/progress").json()["userId"]
        target = tmp_path / "english-learning-progress.json"

        exported = client.post("/api/progress/export/file", json={"path": str(target)}).json()
        assert exported == {"saved": True, "path": str(target)}
        assert json.loads(target.read_text())["userId"] == user_id

        client.delete("/api/progress")
        body = client.post("/api/progress/import/file", json={"path": str(target)}).json()
        assert body["progress"]["userId"] == user_id
        assert client.get("/api/progress").json()["userId"] == user_id

    def test_export_to_unwritable_path_reports_failure(self, client, tmp_path):
        target = tmp_path / "missing-dir" / "progress.json"
        body = client.post("/api/progress/export/file", json={"path": str(target)}).json()
        assert body["saved"] is False

    def test_import_missing_file(self, client, tmp_path):
        response = client.post(
            "/api/progress/import/file", json={"path": str(tmp_path / "missing.json")}
        )
        assert response.status_code == 404

    def test_import_malformed_file_keeps_progress(self, client, tmp_path):
        user_id = client.get("/api/progress").json()["userId"]
        source = tmp_path / "broken.json"
        source.write_text("{not json")
        response = client.post("/api/progress/import/file", json={"path": str(source)})
        assert response.status_code == 400
        assert client.get("/api/progress").json()["userId"] == user_id


class TestSettingsAndBackup:
    def test_settings_default(self, client):
        data = client.get("/api/settings").json()
        assert data["theme"] == "light"
        assert data["reminderTime"] == "09:00"

    def test_update_settings(self, client):
        response = client.put("/api/settings", json={"theme": "dark", "soundEnabled": False})
        assert response.json()["saved"] is True
        data = client.get("/api/settings").json()
        assert data["theme"] == "dark"
        assert data["soundEnabled"] is False

    def test_invalid_settings_rejected(self, client):
        response = client.put("/api/settings", json={"language": "fr"})
        assert response.status_code == 422

    def test_backup_and_restore(self, client):
        client.put("/api/settings", json={"theme": "auto"})
        user_id = client.get("/api/progress").json()["userId"]
        backup = client.get("/api/backup")
        assert "english-learning-backup-" in backup.headers["content-disposition"]
        document = backup.json()
        assert document["version"] == "1.0"

        client.delete("/api/progress")
        client.put("/api/settings", json={"theme": "light"})
        restored = client.post("/api/backup/restore", json=document).json()

        assert restored["saved"] is True
        assert restored["progress"]["userId"] == user_id
        assert client.get("/api/settings").json()["theme"] == "auto"

    def test_restore_bare_progress(self, client):
        restored = client.post(
            "/api/backup/restore", json={"userId": "user_bare", "totalPoints": 40}
        ).json()
        assert restored["progress"]["totalPoints"] == 40
        assert "settings" not in restored

    def test_restore_rejects_non_object(self, client):
        response = client.post("/api/backup/restore", json=[1, 2])
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "document",
        [{"version": "1.0"}, {"version": "1.0", "progress": "not-an-object"}],
    )
    def test_restore_rejects_empty_backup(self, client, store, document):
        response = client.post("/api/backup/restore", json=document)
        assert response.status_code == 400
        assert store.load(PROGRESS_DOCUMENT) is None
