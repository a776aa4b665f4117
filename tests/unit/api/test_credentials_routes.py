# tests/unit/api/test_credentials_routes.py
"""Tests for the credential API routes."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from agent_credentials.api.app import create_app
from agent_credentials.config.settings import Settings
from agent_credentials.config.storage import CredentialStorageSettings
from agent_credentials.exceptions import CredentialsStorageError
from agent_credentials.models.credentials import Provider
from agent_credentials.services.credentials import CredentialService


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary home directory."""
    return Settings(storage=CredentialStorageSettings(home_dir=tmp_path))


@pytest.fixture
def client(settings: Settings) -> TestClient:
    """Test client for an app backed by real files."""
    return TestClient(create_app(settings))


class TestStatusRoute:
    """Tests for GET /api/credentials/{provider}/status."""

    @pytest.mark.parametrize("provider", ["claude", "codex"])
    def test_not_authenticated(self, client: TestClient, provider: str) -> None:
        """Test status for a provider without credentials."""
        response = client.get(f"/api/credentials/{provider}/status")

        assert response.status_code == 200
        body = response.json()
        assert body["authenticated"] is False
        assert body["message"] == "Not authenticated"
        assert body["provider"] == provider

    def test_unknown_provider(self, client: TestClient) -> None:
        """Test that unsupported providers are rejected by path validation."""
        response = client.get("/api/credentials/gemini/status")

        assert response.status_code == 422


class TestJsonRoute:
    """Tests for POST /api/credentials/{provider}/json."""

    def test_save_api_key(self, client: TestClient, settings: Settings) -> None:
        """Test saving a Codex API key from pasted JSON."""
        response = client.post(
            "/api/credentials/codex/json",
            json={"json": '{"OPENAI_API_KEY": "sk-abc123"}'},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"]["key_preview"] == "sk-a...123"
        assert "sk-abc123" not in response.text
        assert settings.storage.credentials_file(Provider.CODEX).exists()

    def test_malformed_json(self, client: TestClient, settings: Settings) -> None:
        """Test that malformed JSON yields a 422 with its kind."""
        response = client.post("/api/credentials/claude/json", json={"json": "{not json"})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error_kind"] == "malformed_json"
        assert not settings.storage.credentials_file(Provider.CLAUDE).exists()

    def test_missing_body_field(self, client: TestClient) -> None:
        """Test that the json field is required."""
        response = client.post("/api/credentials/claude/json", json={})

        assert response.status_code == 422


class TestUploadRoute:
    """Tests for POST /api/credentials/{provider}/upload."""

    def test_upload_claude_file(self, client: TestClient) -> None:
        """Test uploading a Claude credentials file."""
        response = client.post(
            "/api/credentials/claude/upload",
            files={
                "credentials": (
                    ".credentials.json",
                    b'{"claudeAiOauth": {"accessToken": "T", "scopes": ["a"]}}',
                    "application/json",
                )
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Credentials uploaded successfully."
        assert body["status"]["authenticated"] is True
        assert body["status"]["scopes"] == ["a"]

    def test_upload_oversized_file(self, client: TestClient) -> None:
        """Test that files over the limit are rejected."""
        content = b'{"claudeAiOauth": {"accessToken": "' + b"x" * 20000 + b'"}}'

        response = client.post(
            "/api/credentials/claude/upload",
            files={"credentials": ("big.json", content, "application/json")},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error_kind"] == "oversized_payload"
        assert body["message"] == (
            "File is larger than the maximum allowed size of 10240 bytes."
        )

    def test_upload_wrong_extension(self, client: TestClient) -> None:
        """Test that non-.json files are rejected."""
        response = client.post(
            "/api/credentials/codex/upload",
            files={"credentials": ("auth.txt", b"{}", "text/plain")},
        )

        assert response.status_code == 422
        assert response.json()["error_kind"] == "invalid_upload"


class TestLogoutRoute:
    """Tests for POST /api/credentials/{provider}/logout."""

    def test_logout_twice(self, client: TestClient) -> None:
        """Test that logout is idempotent over HTTP."""
        client.post(
            "/api/credentials/claude/json",
            json={"json": '{"claudeAiOauth": {"accessToken": "T"}}'},
        )

        for _ in range(2):
            response = client.post("/api/credentials/claude/logout")
            assert response.status_code == 200
            assert response.json()["success"] is True
            status = client.get("/api/credentials/claude/status").json()
            assert status["authenticated"] is False

    def test_logout_storage_failure(self, tmp_path: Path) -> None:
        """Test that storage failures map to a 500 result."""
        service = CredentialService.from_settings(
            Settings(storage=CredentialStorageSettings(home_dir=tmp_path))
        )
        store = MagicMock()
        store.clear.side_effect = CredentialsStorageError("Failed to clear credentials")
        service.manager(Provider.CODEX).store = store
        client = TestClient(create_app(service=service))

        response = client.post("/api/credentials/codex/logout")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error_kind"] == "storage_io_failure"
