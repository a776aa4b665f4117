# tests/unit/storage/test_json_file_storage.py
"""Tests for the JSON file credential store."""

import os
import stat
import threading
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import orjson
import pytest

from agent_credentials.core.normalizer import normalize
from agent_credentials.exceptions import CredentialsStorageError
from agent_credentials.models.credentials import (
    AuthMethod,
    CredentialRecord,
    Provider,
)
from agent_credentials.storage import JsonFileCredentialStore


def claude_record(token: str = "T", **kwargs: object) -> CredentialRecord:
    return CredentialRecord(
        provider=Provider.CLAUDE,
        auth_method=AuthMethod.SUBSCRIPTION,
        access_token=token,
        subscription_type="pro",
        **kwargs,  # type: ignore[arg-type]
    )


class TestJsonFileCredentialStore:
    """Tests for load/save/clear on a single provider file."""

    @pytest.fixture
    def claude_store(self, tmp_path: Path) -> JsonFileCredentialStore:
        """Create a Claude store inside a temporary home."""
        return JsonFileCredentialStore(
            Provider.CLAUDE, tmp_path / ".claude" / ".credentials.json"
        )

    @pytest.fixture
    def codex_store(self, tmp_path: Path) -> JsonFileCredentialStore:
        """Create a Codex store inside a temporary home."""
        return JsonFileCredentialStore(Provider.CODEX, tmp_path / ".codex" / "auth.json")

    def test_load_missing_file(self, claude_store: JsonFileCredentialStore) -> None:
        """Test that a missing file loads as absent."""
        assert claude_store.load() is None
        assert claude_store.exists() is False

    @pytest.mark.parametrize(
        "content",
        [b"{not json", b"", b"[]", b'{"claudeAiOauth": {"refreshToken": "R"}}'],
    )
    def test_load_corrupt_file_is_absent(
        self, claude_store: JsonFileCredentialStore, content: bytes
    ) -> None:
        """Test that corrupt files degrade to absent instead of raising."""
        claude_store.file_path.parent.mkdir(parents=True)
        claude_store.file_path.write_bytes(content)

        assert claude_store.load() is None

    def test_load_unreadable_file_is_absent(
        self, claude_store: JsonFileCredentialStore
    ) -> None:
        """Test that read errors degrade to absent."""
        claude_store.save(claude_record())

        with patch.object(Path, "read_bytes", side_effect=PermissionError("denied")):
            assert claude_store.load() is None

    def test_load_inaccessible_directory_is_absent(
        self, claude_store: JsonFileCredentialStore
    ) -> None:
        """Test that a permission error on the parent directory degrades to absent."""
        with (
            patch.object(Path, "exists", side_effect=PermissionError("denied")),
            patch.object(Path, "read_bytes", side_effect=PermissionError("denied")),
        ):
            assert claude_store.load() is None

    def test_save_writes_canonical_claude_document(
        self, claude_store: JsonFileCredentialStore
    ) -> None:
        """Test the exact document the claude CLI will read."""
        record = claude_record(
            refresh_token="R",
            expires_at=datetime(2026, 1, 1, tzinfo=UTC),
            scopes=["user:inference"],
        )

        claude_store.save(record)

        data = orjson.loads(claude_store.file_path.read_bytes())
        assert data == {
            "claudeAiOauth": {
                "accessToken": "T",
                "refreshToken": "R",
                "expiresAt": 1767225600000,
                "scopes": ["user:inference"],
                "subscriptionType": "pro",
            }
        }

    def test_save_sets_owner_only_permissions(
        self, claude_store: JsonFileCredentialStore
    ) -> None:
        """Test that the credentials file is readable by its owner only."""
        claude_store.save(claude_record())

        mode = stat.S_IMODE(claude_store.file_path.stat().st_mode)
        assert mode == 0o600

    def test_save_leaves_no_temp_files(
        self, claude_store: JsonFileCredentialStore
    ) -> None:
        """Test that the temporary file is renamed away."""
        claude_store.save(claude_record())
        claude_store.save(claude_record("T2"))

        assert os.listdir(claude_store.file_path.parent) == [".credentials.json"]

    def test_save_replaces_whole_document(
        self, codex_store: JsonFileCredentialStore
    ) -> None:
        """Test that switching auth method leaves no stale secrets behind."""
        codex_store.save(
            normalize(
                Provider.CODEX,
                '{"tokens": {"access_token": "A", "refresh_token": "R"}}',
            )
        )
        codex_store.save(normalize(Provider.CODEX, '{"OPENAI_API_KEY": "sk-abc123"}'))

        data = orjson.loads(codex_store.file_path.read_bytes())
        assert data == {"OPENAI_API_KEY": "sk-abc123"}

    def test_save_rejects_other_provider(
        self, codex_store: JsonFileCredentialStore
    ) -> None:
        """Test that a store only accepts its own provider's records."""
        with pytest.raises(ValueError):
            codex_store.save(claude_record())

    def test_save_failure_raises_storage_error(
        self, claude_store: JsonFileCredentialStore
    ) -> None:
        """Test that OS errors surface as CredentialsStorageError."""
        claude_store.save(claude_record("original"))

        with patch("os.replace", side_effect=OSError(28, "No space left on device")):
            with pytest.raises(CredentialsStorageError) as exc_info:
                claude_store.save(claude_record("new"))

        assert "No space left on device" in exc_info.value.message
        assert exc_info.value.details["path"] == str(claude_store.file_path)
        loaded = claude_store.load()
        assert loaded is not None
        assert loaded.access_token == "original"
        assert os.listdir(claude_store.file_path.parent) == [".credentials.json"]

    def test_clear(self, claude_store: JsonFileCredentialStore) -> None:
        """Test that clear removes the file."""
        claude_store.save(claude_record())

        assert claude_store.clear() is True
        assert claude_store.exists() is False
        assert claude_store.load() is None

    def test_clear_missing_file_is_noop(
        self, claude_store: JsonFileCredentialStore
    ) -> None:
        """Test that clearing twice succeeds both times."""
        assert claude_store.clear() is False
        assert claude_store.clear() is False

    def test_clear_failure_raises_storage_error(
        self, claude_store: JsonFileCredentialStore
    ) -> None:
        """Test that unlink errors other than missing file are surfaced."""
        claude_store.save(claude_record())

        with patch.object(Path, "unlink", side_effect=PermissionError(13, "denied")):
            with pytest.raises(CredentialsStorageError):
                claude_store.clear()

    def test_get_location(self, claude_store: JsonFileCredentialStore) -> None:
        """Test that the location is the canonical path."""
        assert claude_store.get_location() == str(claude_store.file_path)


class TestRoundTrip:
    """Normalize, save and load yield the same record."""

    @pytest.mark.parametrize(
        ("provider", "filename", "payload"),
        [
            (
                Provider.CLAUDE,
                ".credentials.json",
                '{"claudeAiOauth": {"accessToken": "T", "refreshToken": "",'
                ' "expiresAt": 1767225600123, "scopes": ["a", "b"],'
                ' "subscriptionType": "max"}}',
            ),
            (Provider.CLAUDE, ".credentials.json", '{"claudeAiOauth": {"accessToken": "T"}}'),
            (Provider.CODEX, "auth.json", '{"OPENAI_API_KEY": "sk-abc123"}'),
            (
                Provider.CODEX,
                "auth.json",
                '{"tokens": {"id_token": "I", "access_token": "A",'
                ' "refresh_token": "R", "account_id": "X"},'
                ' "expiresAt": "2026-02-03T04:05:06.789+02:00",'
                ' "last_refresh": "2026-10-01T12:00:00.000000Z"}',
            ),
            (Provider.CODEX, "auth.json", '{"accessToken": "A"}'),
        ],
    )
    def test_round_trip(
        self, tmp_path: Path, provider: Provider, filename: str, payload: str
    ) -> None:
        """Test that loading returns the record that was saved."""
        store = JsonFileCredentialStore(provider, tmp_path / filename)
        record = normalize(provider, payload)

        store.save(record)

        assert store.load() == record


class TestConcurrentSaves:
    """Concurrent writers never produce a mixed document."""

    def test_last_writer_wins_without_mixing(self, tmp_path: Path) -> None:
        """Test that the final file is exactly one of the written records."""
        store = JsonFileCredentialStore(Provider.CODEX, tmp_path / "auth.json")
        first = normalize(
            Provider.CODEX,
            '{"tokens": {"access_token": "A1", "refresh_token": "R1"},'
            ' "expiresAt": 1767225600000}',
        )
        second = normalize(Provider.CODEX, '{"OPENAI_API_KEY": "sk-second-key"}')
        barrier = threading.Barrier(2)
        errors: list[Exception] = []

        def writer(record: CredentialRecord) -> None:
            try:
                barrier.wait()
                for _ in range(25):
                    store.save(record)
            except Exception as e:  # noqa: BLE001 - surfaced via assertion below
                errors.append(e)

        threads = [
            threading.Thread(target=writer, args=(first,)),
            threading.Thread(target=writer, args=(second,)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert store.load() in (first, second)
        assert os.listdir(tmp_path) == ["auth.json"]
