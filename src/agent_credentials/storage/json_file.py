"""JSON file storage for a provider's canonical credentials."""

import contextlib
import os
import tempfile
from pathlib import Path

import orjson
from structlog import get_logger

from agent_credentials.core.normalizer import parse_credential
from agent_credentials.exceptions import (
    CredentialsStorageError,
    CredentialValidationError,
)
from agent_credentials.models.credentials import CredentialRecord, Provider
from agent_credentials.storage.base import CredentialStore


logger = get_logger(__name__)

FILE_MODE = 0o600
DIR_MODE = 0o700


class JsonFileCredentialStore(CredentialStore):
    """Single JSON document per provider, replaced atomically on every write."""

    def __init__(self, provider: Provider, file_path: Path) -> None:
        """Initialize storage with file path.

        Args:
            provider: Provider whose credentials live in the file
            file_path: Canonical path the provider's CLI reads

        """
        self.provider = provider
        self.file_path = Path(file_path).expanduser()

    def load(self) -> CredentialRecord | None:
        try:
            data = orjson.loads(self.file_path.read_bytes())
            return parse_credential(self.provider, data).to_record()
        except FileNotFoundError:
            return None
        except orjson.JSONDecodeError:
            logger.warning(
                "credentials_json_decode_error",
                provider=self.provider.value,
                path=str(self.file_path),
            )
            return None
        except CredentialValidationError as e:
            logger.warning(
                "credentials_file_invalid",
                provider=self.provider.value,
                path=str(self.file_path),
                error_kind=e.error_type.value,
            )
            return None
        except ValueError:
            logger.warning(
                "credentials_file_invalid",
                provider=self.provider.value,
                path=str(self.file_path),
            )
            return None
        except OSError:
            logger.exception(
                "credentials_file_read_error",
                provider=self.provider.value,
                path=str(self.file_path),
            )
            return None

    def save(self, record: CredentialRecord) -> None:
        if record.provider is not self.provider:
            raise ValueError(
                f"Cannot store {record.provider.value} credentials "
                f"in the {self.provider.value} store"
            )

        payload = orjson.dumps(record.to_canonical(), option=orjson.OPT_INDENT_2)
        directory = self.file_path.parent
        temp_name: str | None = None

        try:
            directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            # mkstemp creates the file with mode 0600 and a unique name per writer
            fd, temp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self.file_path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_name, FILE_MODE)
            os.replace(temp_name, self.file_path)
            temp_name = None
        except OSError as e:
            logger.error(
                "credentials_save_failed",
                provider=self.provider.value,
                path=str(self.file_path),
                error=str(e),
            )
            raise CredentialsStorageError(
                f"Failed to save credentials: {e.strerror or e}",
                path=str(self.file_path),
            ) from e
        finally:
            if temp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(temp_name)

        logger.info(
            "credentials_saved",
            provider=self.provider.value,
            auth_method=record.auth_method.value,
            path=str(self.file_path),
        )

    def clear(self) -> bool:
        try:
            self.file_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(
                "credentials_clear_failed",
                provider=self.provider.value,
                path=str(self.file_path),
                error=str(e),
            )
            raise CredentialsStorageError(
                f"Failed to clear credentials: {e.strerror or e}",
                path=str(self.file_path),
            ) from e

        logger.info(
            "credentials_cleared",
            provider=self.provider.value,
            path=str(self.file_path),
        )
        return True

    def exists(self) -> bool:
        return self.file_path.is_file()

    def get_location(self) -> str:
        return str(self.file_path)
