"""Durable client credential storage.

Two named string slots: the session token and the client identity. The file
store keeps both in one JSON document, replaced atomically on every write.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SESSION_TOKEN_SLOT = "session_token"
CLIENT_ID_SLOT = "client_id"

CREDENTIALS_FILENAME = "credentials.json"


class CredentialStore(Protocol):
    """Key/value storage for client credentials."""

    def get(self, slot: str) -> str | None: ...

    def set(self, slot: str, value: str) -> None: ...

    def delete(self, slot: str) -> None: ...


class MemoryCredentialStore:
    """In-process store. Nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._slots: dict[str, str] = dict(initial or {})

    def get(self, slot: str) -> str | None:
        return self._slots.get(slot)

    def set(self, slot: str, value: str) -> None:
        self._slots[slot] = value

    def delete(self, slot: str) -> None:
        self._slots.pop(slot, None)


class FileCredentialStore:
    """JSON file store under a per-user directory.

    Args:
        directory: Directory for credentials.json, created on first write.

    Note: An unreadable or corrupt file reads as empty; the next write
    replaces it.
    """

    def __init__(self, directory: Path) -> None:
        self._path = Path(directory) / CREDENTIALS_FILENAME

    @property
    def path(self) -> Path:
        """Location of the credentials file."""
        return self._path

    def get(self, slot: str) -> str | None:
        value = self._load().get(slot)
        return value if isinstance(value, str) else None

    def set(self, slot: str, value: str) -> None:
        slots = self._load()
        slots[slot] = value
        self._save(slots)

    def delete(self, slot: str) -> None:
        slots = self._load()
        if slots.pop(slot, None) is not None:
            self._save(slots)

    def _load(self) -> dict[str, object]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable credentials file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, slots: dict[str, object]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=".credentials-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(slots, f)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
