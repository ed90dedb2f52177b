"""Credential store backed by a flat JSON file.

Passwords are stored and compared in plaintext and a successful login returns
a constant placeholder token. Both are insecure and kept only because clients
depend on the stored format and the login response.
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock

from .errors import AlreadyExists, InvalidCredentials, MissingFields, StoreUnavailable
from .models import CredentialRecord

logger = logging.getLogger(__name__)

_locks_guard = Lock()
_file_locks: dict[Path, Lock] = {}


def _lock_for(path: Path) -> Lock:
    """Return the process-wide lock serializing writers of ``path``."""
    key = path.resolve()
    with _locks_guard:
        lock = _file_locks.get(key)
        if lock is None:
            lock = _file_locks[key] = Lock()
        return lock


class CredentialStore(ABC):
    """Persistence interface used by registration and login."""

    @abstractmethod
    def find(self, email: str) -> CredentialRecord | None:
        """Return the record stored under ``email``, if any."""

    @abstractmethod
    def append(self, record: CredentialRecord) -> None:
        """Persist ``record``; raise AlreadyExists if its email is taken."""


class JsonFileCredentialStore(CredentialStore):
    """Stores all records as one JSON array, rewritten on every append.

    Appends are serialized per file inside this process. Writers in other
    processes are not coordinated and can still lose updates.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = _lock_for(path)

    def records(self) -> list[CredentialRecord]:
        if not self.path.exists():
            raise StoreUnavailable()
        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else []
            if not data:
                return []
            if not isinstance(data, list):
                raise StoreUnavailable(reason="user database is not a JSON array")
            return [CredentialRecord.model_validate(item) for item in data]
        except (OSError, ValueError) as exc:
            raise StoreUnavailable(reason=str(exc)) from exc

    def find(self, email: str) -> CredentialRecord | None:
        for record in self.records():
            if record.email == email:
                return record
        return None

    def append(self, record: CredentialRecord) -> None:
        with self._lock:
            existing = self.records() if self.path.exists() else []
            if any(item.email == record.email for item in existing):
                raise AlreadyExists()
            existing.append(record)
            self._write(existing)

    def _write(self, records: list[CredentialRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_name(f"{self.path.name}.tmp")
        payload = json.dumps([record.model_dump() for record in records], indent=2, ensure_ascii=False)
        temp_path.write_text(payload, encoding="utf-8")
        os.replace(temp_path, self.path)


def register(store: CredentialStore, email: str, password: str) -> CredentialRecord:
    """Validate and store a new user."""
    if not email or not password:
        raise MissingFields()
    record = CredentialRecord(email=email, password=password)
    store.append(record)
    logger.info("Registered user", extra={"email": email})
    return record


def authenticate(store: CredentialStore, email: str, password: str, token: str) -> str:
    """Return ``token`` when email and password match a stored record exactly."""
    record = store.find(email)
    if record is None or record.password != password:
        raise InvalidCredentials()
    return token
