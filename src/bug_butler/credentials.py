# credentials.py
# The single API credential and the local key-value store it lives in.
#
# The store is a port: the holder only ever calls get/set/remove on it,
# so tests swap in MemoryStore and the CLI uses JsonFileStore.

import json
import os
from pathlib import Path
from typing import Protocol

from loguru import logger

from bug_butler.errors import CredentialFormatError

STORAGE_KEY = "openai_api_key"
API_KEY_PREFIX = "sk-"
API_KEY_MIN_LENGTH = 20


class CredentialStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """In-process store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """
    Key-value store backed by a single JSON object on disk.

    The file is re-read on every access and rewritten on every change.
    A missing or unreadable file reads as an empty store and is replaced
    on the next write. The file is only ever readable by its owner.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, encoding="utf-8") as fh:
                data = json.load(fh)
        except ValueError as exc:
            logger.warning("credential store {} is unreadable, treating it as empty: {}", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("credential store {} does not hold a JSON object, treating it as empty", self._path)
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        os.makedirs(self._path.parent, exist_ok=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # O_CREAT only applies the mode to new files.
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def validate_api_key(value: str) -> None:
    """Raise CredentialFormatError unless value looks like an OpenAI key."""
    if not value.startswith(API_KEY_PREFIX):
        raise CredentialFormatError(f'API key must start with "{API_KEY_PREFIX}"')
    if len(value) < API_KEY_MIN_LENGTH:
        raise CredentialFormatError("API key seems too short")


class CredentialHolder:
    """
    Owns the session's API key.

    Loaded from the store once at construction; every set/clear is written
    straight back. An empty value means "not configured".
    """

    def __init__(self, store: CredentialStore, key: str = STORAGE_KEY) -> None:
        self._store = store
        self._key = key
        self._value = store.get(key) or ""

    @property
    def value(self) -> str:
        return self._value

    @property
    def is_set(self) -> bool:
        return bool(self._value)

    @property
    def masked(self) -> str:
        if not self._value:
            return ""
        return f"{self._value[:len(API_KEY_PREFIX)]}…{self._value[-4:]}"

    def set(self, value: str) -> None:
        """Validate and persist a new key. An empty value clears it instead."""
        value = value.strip()
        if not value:
            self.clear()
            return
        validate_api_key(value)
        self._store.set(self._key, value)
        self._value = value
        logger.info("API key updated ({})", self.masked)

    def clear(self) -> None:
        self._store.remove(self._key)
        self._value = ""
        logger.info("API key cleared")
