"""
Key-value stores holding the raw JSON documents.

Every backend maps a fixed key (``users``, ``orders``...) to a string. There
is no locking across processes: concurrent writers race and the last write
wins.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from sqlalchemy import delete

from guestpost.core.config import Settings, get_settings
from guestpost.db.models import StorageEntry
from guestpost.db.session import Base, get_engine, get_session


class StorageError(Exception):
    """Base class for storage-layer failures."""


class StorageCorruptedError(StorageError):
    """Raised when a stored document cannot be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Stored value for {key!r} is not valid JSON: {reason}")
        self.key = key


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store, used by tests and the ``memory`` backend."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """
    Store persisted as a single JSON object on disk ({key: raw string}).

    Each write rewrites the whole file through a temporary file and an atomic
    replace, so readers never observe a partial document.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise StorageCorruptedError(str(self.path), exc.msg) from exc
        if not isinstance(data, dict):
            raise StorageCorruptedError(str(self.path), "expected a JSON object")
        return data

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".guestpost-", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class SQLStore:
    """Store backed by the ``storage_entries`` table (one row per key)."""

    def __init__(self, create_tables: bool = True) -> None:
        if create_tables:
            Base.metadata.create_all(bind=get_engine())

    def get(self, key: str) -> Optional[str]:
        with get_session() as session:
            entry = session.get(StorageEntry, key)
            return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        with get_session() as session:
            entry = session.get(StorageEntry, key)
            if entry:
                entry.value = value
            else:
                session.add(StorageEntry(key=key, value=value))
            session.commit()

    def remove(self, key: str) -> None:
        with get_session() as session:
            session.execute(delete(StorageEntry).where(StorageEntry.key == key))
            session.commit()


def build_store(settings: Settings | None = None) -> KeyValueStore:
    """Instantiate the backend selected by ``STORAGE_BACKEND``."""
    settings = settings or get_settings()
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryStore()
    if backend == "json":
        return JsonFileStore(settings.data_file)
    if backend == "sql":
        return SQLStore()
    raise RuntimeError(f"Unknown STORAGE_BACKEND: {backend!r}")
