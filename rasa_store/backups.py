from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from .interfaces import KeyValueStore
from .json_store import format_kb, serialized_size
from .models import BackupEntry, new_id

if TYPE_CHECKING:
    from .local_store import LocalStore

logger = logging.getLogger(__name__)

BACKUP_LIMIT = 10


class BackupManager:
    """
    Point-in-time snapshots of a LocalStore.

    History is newest first, capped at ``limit`` entries and persisted under
    its own key, separately from the live blob. Every operation holds the
    store's lock so a snapshot never captures a half-applied mutation.
    """

    def __init__(self, store: "LocalStore", storage: KeyValueStore, *, key: str, limit: int = BACKUP_LIMIT):
        self._store = store
        self._storage = storage
        self._key = key
        self._limit = limit
        self._history = self._load()

    def _load(self) -> list[BackupEntry]:
        raw = self._storage.get(self._key)
        if not isinstance(raw, list):
            return []
        history: list[BackupEntry] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                history.append(BackupEntry.model_validate(item))
            except PydanticValidationError as e:
                logger.warning("BACKUP: skipping unreadable history entry: %r", e)
        return history[: self._limit]

    def _persist(self, history: list[BackupEntry]) -> None:
        self._storage.set(self._key, [e.model_dump(mode="json") for e in history])
        self._history = history

    def _now_iso(self) -> str:
        return datetime.fromtimestamp(self._store.clock(), tz=timezone.utc).isoformat()

    def create_backup(self, description: str = "Manual Snapshot") -> BackupEntry:
        with self._store.lock:
            snapshot = self._store.export_state()
            entry = BackupEntry(
                id=new_id(),
                timestamp=self._now_iso(),
                size=format_kb(serialized_size(snapshot)),
                description=description,
                snapshot=snapshot,
            )
            self._persist([entry, *self._history][: self._limit])
            self._store.append_log(f"System Backup Created: {description}")
            logger.info("BACKUP: created %s (%s): %s", entry.id, entry.size, description)
            return entry.model_copy(deep=True)

    def list_backups(self) -> list[BackupEntry]:
        with self._store.lock:
            return [e.model_copy(deep=True) for e in self._history]

    def get_backup(self, backup_id: str) -> BackupEntry | None:
        with self._store.lock:
            for entry in self._history:
                if entry.id == backup_id:
                    return entry.model_copy(deep=True)
            return None

    def restore(self, backup_id: str) -> bool:
        """
        Replace the live state with the snapshot of ``backup_id``.

        Returns False and leaves the live state untouched when no backup matches.
        """
        with self._store.lock:
            entry = next((e for e in self._history if e.id == backup_id), None)
            if entry is None:
                logger.warning("BACKUP: restore requested for unknown backup %r", backup_id)
                return False
            self._store.replace_state(
                entry.snapshot,
                reason="restore",
                action=f"System Restored from Backup: {entry.id}",
            )
            logger.info("BACKUP: restored live state from %s", entry.id)
            return True

    def reset(self) -> BackupEntry:
        """Archive the current state, then return the store to its seed dataset."""
        with self._store.lock:
            archived = self.create_backup("Pre-reset archival snapshot")
            self._store.replace_state(self._store.seed_state(), reason="reset")
            logger.info("BACKUP: store reset to the initial dataset (archived as %s)", archived.id)
            return archived
