from __future__ import annotations

import copy
import re
import threading
from pathlib import Path
from typing import Any

from .interfaces import KeyValueStore
from .json_store import atomic_write_json, read_json

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")

# One lock per resolved file, shared by every DiskKeyValueStore in the process.
_FILE_LOCKS: dict[str, threading.Lock] = {}
_FILE_LOCKS_GUARD = threading.Lock()


def _file_lock(path: Path) -> threading.Lock:
    with _FILE_LOCKS_GUARD:
        return _FILE_LOCKS.setdefault(str(path.resolve()), threading.Lock())


class DiskKeyValueStore(KeyValueStore):
    """
    Stores each key as its own JSON document under a base directory:

    - <base>/rasa_db.json
    - <base>/rasa_db_backups.json

    Writes are atomic, so a crash mid-write leaves the previous document intact.
    """

    def __init__(self, base_dir: Path):
        self._base = base_dir

    @property
    def base_dir(self) -> Path:
        return self._base

    def path_for(self, key: str) -> Path:
        safe = _SAFE_KEY.sub("_", key.strip()) or "default"
        return self._base / f"{safe}.json"

    def get(self, key: str) -> Any | None:
        path = self.path_for(key)
        with _file_lock(path):
            return read_json(path)

    def set(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        with _file_lock(path):
            atomic_write_json(path, value)


class MemoryKeyValueStore(KeyValueStore):
    """
    Process-local storage for tests and for deployments without a writable disk.
    Values are cloned on the way in and out, so callers never share references
    with what is "persisted".
    """

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def keys(self) -> list[str]:
        return list(self._data)
