from __future__ import annotations

from .accounts import AccountService, RegistrationForm
from .backups import BackupManager
from .errors import (
    DuplicateIdError,
    NetworkError,
    NotFoundError,
    RemoteError,
    ServerError,
    StoreError,
    UnknownCollectionError,
    ValidationError,
)
from .kv_store import DiskKeyValueStore, MemoryKeyValueStore
from .local_store import LocalStore
from .models import BackupEntry, HealthSnapshot, LogEntry, OTPRecord, OTPVerification
from .remote import CallResult, RemoteFirstAccessor
from .resources import ResourceAPI
from .services import Services, create_services

__all__ = [
    "AccountService",
    "RegistrationForm",
    "BackupManager",
    "DuplicateIdError",
    "NetworkError",
    "NotFoundError",
    "RemoteError",
    "ServerError",
    "StoreError",
    "UnknownCollectionError",
    "ValidationError",
    "DiskKeyValueStore",
    "MemoryKeyValueStore",
    "LocalStore",
    "BackupEntry",
    "HealthSnapshot",
    "LogEntry",
    "OTPRecord",
    "OTPVerification",
    "CallResult",
    "RemoteFirstAccessor",
    "ResourceAPI",
    "Services",
    "create_services",
]
