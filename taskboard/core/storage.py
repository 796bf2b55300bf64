"""Persistent key/value storage for client state.

The session token is the only value the client keeps across runs. It lives in
a small JSON document on disk, keyed the same way a browser's local storage
would be.
"""

import json
import logging
import os
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

TOKEN_FILE_MODE = 0o600


class KeyValueStorage(Protocol):
    """String-to-string storage surviving process restarts."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage, used in tests and for throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class FileStorage:
    """Storage backed by a JSON object on disk.

    The file is re-read on every access so that a token removed by another
    process (or by hand) is noticed on the next request.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable storage file {self.path}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring storage file {self.path}: not a JSON object")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        # Owner-only: the file holds the bearer token
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, TOKEN_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(json.dumps(data, indent=2))
        os.chmod(tmp_path, TOKEN_FILE_MODE)
        tmp_path.replace(self.path)

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class TokenStore:
    """Reads and writes the bearer token under its fixed storage key."""

    def __init__(self, storage: KeyValueStorage, key: str = "token"):
        self.storage = storage
        self.key = key

    def get(self) -> str | None:
        return self.storage.get_item(self.key) or None

    def set(self, token: str) -> None:
        self.storage.set_item(self.key, token)

    def clear(self) -> None:
        self.storage.remove_item(self.key)

    def has_token(self) -> bool:
        return self.get() is not None
