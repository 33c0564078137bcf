from __future__ import annotations

import copy
import logging
import secrets
import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from .backups import BackupManager
from .errors import DuplicateIdError, UnknownCollectionError
from .interfaces import KeyValueStore
from .json_store import format_kb, serialized_size
from .models import (
    HealthSnapshot,
    LogEntry,
    OTPRecord,
    OTPVerification,
    Record,
    StorePhase,
    StoreState,
    new_id,
)
from .seed import LOGS, initial_dataset

logger = logging.getLogger(__name__)

STORE_VERSION = "2.4.0-stable"
LOG_LIMIT = 50
OTP_TTL_S = 10 * 60
OTP_INVALID = "Invalid or expired OTP"

ReloadListener = Callable[[str], None]


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _strip_secret(record: Mapping[str, Any]) -> Record:
    out = copy.deepcopy(dict(record))
    out.pop("password", None)
    return out


class LocalStore:
    """
    Embedded, collection-oriented store persisted as a single blob in a
    ``KeyValueStore``.

    Keyed collections are ordered newest first (inserts prepend). Singleton
    documents are only ever merge-patched. Every public mutation runs under
    one re-entrant lock, is applied to a staged copy of the state and only
    becomes visible once that copy has been written to storage. The same
    lock serializes backup, restore and reset against mutations.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        store_key: str = "rasa_db",
        backup_key: str = "rasa_db_backups",
        seed: Callable[[], Mapping[str, Any]] | None = None,
        clock: Callable[[], float] = time.time,
        otp_ttl_s: float = OTP_TTL_S,
    ):
        self._phase: StorePhase = "uninitialized"
        self._storage = storage
        self._store_key = store_key
        self._seed = seed or initial_dataset
        self._clock = clock
        self._otp_ttl_s = otp_ttl_s
        self._lock = threading.RLock()
        self._listeners: list[ReloadListener] = []
        self._state = self._load()
        self._phase = "seeded"
        self.backups = BackupManager(self, storage, key=backup_key)

    # ------------------------------------------------------------------
    # Load / persist
    # ------------------------------------------------------------------
    def _seed_state(self) -> StoreState:
        return StoreState.from_disk_doc(copy.deepcopy(dict(self._seed())))

    def _load(self) -> StoreState:
        raw = self._storage.get(self._store_key)
        if not isinstance(raw, dict):
            if raw is not None:
                logger.warning("LOCAL STORE: discarding unreadable blob under %r", self._store_key)
            state = self._seed_state()
            self._storage.set(self._store_key, state.to_disk_doc())
            logger.info("LOCAL STORE: seeded %r with the initial dataset", self._store_key)
            return state

        state = StoreState.from_disk_doc(raw)
        changed = self._backfill(state)
        if state.drop_expired_otps(self._clock()):
            changed = True
        if changed:
            self._storage.set(self._store_key, state.to_disk_doc())
        return state

    def _backfill(self, state: StoreState) -> bool:
        """Add any collection or singleton the seed knows about but ``state`` lacks."""
        seeded = self._seed_state()
        changed = False
        for name, records in seeded.collections.items():
            if name not in state.collections:
                state.collections[name] = records
                changed = True
        for name, doc in seeded.singletons.items():
            if name not in state.singletons:
                state.singletons[name] = doc
                changed = True
        return changed

    def _stage(self) -> StoreState:
        return self._state.model_copy(deep=True)

    def _commit(self, staged: StoreState) -> None:
        # The live state only changes once the write has succeeded.
        self._storage.set(self._store_key, staged.to_disk_doc())
        self._state = staged
        self._phase = "active"

    def _now_iso(self) -> str:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat()

    def _log(self, state: StoreState, action: str) -> None:
        state.logs.insert(0, LogEntry(id=new_id(), action=action, timestamp=self._now_iso()))
        del state.logs[LOG_LIMIT:]
        logger.debug("LOCAL STORE: %s", action)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def phase(self) -> StorePhase:
        return self._phase

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    def _keyed(self, name: str, state: StoreState | None = None) -> list[Record]:
        state = self._state if state is None else state
        records = state.collections.get(name)
        if records is None:
            reason = "not a keyed collection" if name in state.singletons else "unknown collection"
            raise UnknownCollectionError(name, reason)
        return records

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_collection(self, name: str) -> list[Record] | Record:
        """Read-only snapshot: a list for keyed collections and logs, a dict for singletons."""
        with self._lock:
            if name == LOGS:
                return [e.model_dump(mode="json") for e in self._state.logs]
            if name in self._state.singletons:
                return copy.deepcopy(self._state.singletons[name])
            return copy.deepcopy(self._keyed(name))

    def get(self, name: str, record_id: str) -> Record | None:
        with self._lock:
            for rec in self._keyed(name):
                if rec.get("id") == record_id:
                    return copy.deepcopy(rec)
            return None

    def logs(self) -> list[LogEntry]:
        with self._lock:
            return [e.model_copy() for e in self._state.logs]

    def find_by_email(self, name: str, email: str) -> Record | None:
        target = _normalize_email(email)
        with self._lock:
            for rec in self._keyed(name):
                if _normalize_email(str(rec.get("email", ""))) == target:
                    return _strip_secret(rec)
            return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def insert(self, name: str, record: Mapping[str, Any]) -> Record:
        with self._lock:
            staged = self._stage()
            records = self._keyed(name, staged)
            item = copy.deepcopy(dict(record))
            record_id = str(item.get("id") or new_id())
            item["id"] = record_id
            if any(r.get("id") == record_id for r in records):
                raise DuplicateIdError(name, record_id)
            records.insert(0, item)
            self._log(staged, f"Inserted into {name}")
            self._commit(staged)
            return copy.deepcopy(item)

    def update_singleton(self, name: str, patch: Mapping[str, Any]) -> Record:
        with self._lock:
            if name not in self._state.singletons:
                raise UnknownCollectionError(name, "not a singleton document")
            staged = self._stage()
            doc = staged.singletons[name]
            doc.update(copy.deepcopy(dict(patch)))
            self._commit(staged)
            return copy.deepcopy(doc)

    def _apply_patch(self, name: str, index: int, patch: Mapping[str, Any]) -> None:
        staged = self._stage()
        records = self._keyed(name, staged)
        changes = {k: v for k, v in copy.deepcopy(dict(patch)).items() if k != "id"}
        records[index] = {**records[index], **changes}
        self._log(staged, f"Updated {name} ID {records[index]['id']}")
        self._commit(staged)

    def update_by_id(self, name: str, record_id: str, patch: Mapping[str, Any]) -> bool:
        """
        Shallow-merge ``patch`` into the record with ``record_id``.

        Returns False (and writes nothing) when no such record exists.
        """
        with self._lock:
            for i, rec in enumerate(self._keyed(name)):
                if rec.get("id") == record_id:
                    self._apply_patch(name, i, patch)
                    return True
            logger.debug("LOCAL STORE: update miss in %s for id %r", name, record_id)
            return False

    def update_by_email(self, name: str, email: str, patch: Mapping[str, Any]) -> bool:
        target = _normalize_email(email)
        with self._lock:
            for i, rec in enumerate(self._keyed(name)):
                if _normalize_email(str(rec.get("email", ""))) == target:
                    self._apply_patch(name, i, patch)
                    return True
            logger.debug("LOCAL STORE: update miss in %s for email %r", name, target)
            return False

    def delete(self, name: str, record_id: str) -> bool:
        """
        Remove a record. A backup is always taken first, even when nothing matches.
        """
        with self._lock:
            self._keyed(name)
            self.backups.create_backup(f"Auto-backup before deletion in {name}")
            staged = self._stage()
            records = self._keyed(name, staged)
            for i, rec in enumerate(records):
                if rec.get("id") == record_id:
                    del records[i]
                    self._log(staged, f"Deleted from {name} ID {record_id}")
                    self._commit(staged)
                    return True
            return False

    def mark_all_read(self, name: str = "contacts") -> int:
        with self._lock:
            staged = self._stage()
            records = self._keyed(name, staged)
            for rec in records:
                rec["isRead"] = True
            self._log(staged, f"Marked all {name} as read")
            self._commit(staged)
            return len(records)

    def append_log(self, action: str) -> None:
        with self._lock:
            staged = self._stage()
            self._log(staged, action)
            self._commit(staged)

    # ------------------------------------------------------------------
    # Credentials / OTP
    # ------------------------------------------------------------------
    def verify_credential(self, email: str, secret: str) -> Record | None:
        target = _normalize_email(email)
        with self._lock:
            for rec in self._keyed("members"):
                if _normalize_email(str(rec.get("email", ""))) == target and rec.get("password") == secret:
                    return _strip_secret(rec)
            return None

    def generate_otp(self, email: str) -> OTPRecord:
        target = _normalize_email(email)
        code = f"{secrets.randbelow(900_000) + 100_000}"
        with self._lock:
            now = self._clock()
            record = OTPRecord(email=target, code=code, expires_at=now + self._otp_ttl_s)
            staged = self._stage()
            staged.otps = [o for o in staged.otps if o.email != target and not o.is_expired(now)]
            staged.otps.append(record)
            self._commit(staged)
            return record.model_copy()

    def verify_otp(self, email: str, code: str) -> OTPVerification:
        target = _normalize_email(email)
        code = str(code).strip()
        with self._lock:
            now = self._clock()
            match = next((o for o in self._state.otps if o.email == target and o.code == code), None)
            if match is None:
                return OTPVerification(success=False, error=OTP_INVALID)
            staged = self._stage()
            if match.is_expired(now):
                staged.otps = [o for o in staged.otps if not (o.email == target and o.code == code)]
                self._commit(staged)
                return OTPVerification(success=False, error=OTP_INVALID)
            staged.otps = [o for o in staged.otps if o.email != target]
            self._commit(staged)
            return OTPVerification(success=True)

    # ------------------------------------------------------------------
    # Health / whole-state access
    # ------------------------------------------------------------------
    def health(self) -> HealthSnapshot:
        with self._lock:
            doc = self._state.to_disk_doc()
            counts = {name: len(records) for name, records in self._state.collections.items()}
            counts.update({name: 1 for name in self._state.singletons})
            counts[LOGS] = len(self._state.logs)
        size_bytes = serialized_size(doc)
        return HealthSnapshot(
            status="Online",
            size=format_kb(size_bytes),
            size_bytes=size_bytes,
            collections=counts,
            timestamp=self._now_iso(),
            version=STORE_VERSION,
        )

    def export_state(self) -> dict[str, Any]:
        """Structural clone of the full live state."""
        with self._lock:
            return copy.deepcopy(self._state.to_disk_doc())

    def replace_state(self, doc: Mapping[str, Any], *, reason: str, action: str | None = None) -> None:
        """
        Overwrite the entire live state with ``doc``.

        ``doc`` is validated into a staged state and persisted before the live
        reference is swapped, so a bad snapshot or a failed write leaves the
        current state untouched.
        """
        with self._lock:
            staged = StoreState.from_disk_doc(copy.deepcopy(dict(doc)))
            self._backfill(staged)
            if action:
                self._log(staged, action)
            self._commit(staged)
        self._notify(reason)

    def seed_state(self) -> dict[str, Any]:
        return self._seed_state().to_disk_doc()

    # ------------------------------------------------------------------
    # Reload notifications
    # ------------------------------------------------------------------
    def add_reload_listener(self, listener: ReloadListener) -> Callable[[], None]:
        """Register ``listener(reason)``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self, reason: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(reason)
            except Exception as e:
                logger.warning("LOCAL STORE: reload listener %r failed: %r", listener, e)
