from __future__ import annotations

import logging
from dataclasses import dataclass

from dotenv import load_dotenv

from .accounts import AccountService
from .interfaces import KeyValueStore
from .kv_store import DiskKeyValueStore, MemoryKeyValueStore
from .local_store import LocalStore
from .paths import store_dir
from .remote import RemoteFirstAccessor
from .resources import ResourceAPI
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    store: LocalStore
    accessor: RemoteFirstAccessor
    api: ResourceAPI
    accounts: AccountService


def create_storage(settings: Settings) -> KeyValueStore:
    if not settings.persist_to_disk:
        return MemoryKeyValueStore()
    return DiskKeyValueStore(store_dir(settings.data_dir))


def create_services(settings: Settings | None = None, *, storage: KeyValueStore | None = None) -> Services:
    """
    Build the data layer once per process and hand the same store to every
    consumer.
    """
    if settings is None:
        load_dotenv("local.env")
        settings = get_settings()

    storage = storage if storage is not None else create_storage(settings)
    store = LocalStore(storage, store_key=settings.store_key, backup_key=settings.backup_key)
    accessor = RemoteFirstAccessor(settings.api_base_url, timeout_s=settings.api_timeout_s)
    api = ResourceAPI(accessor, store)
    accounts = AccountService(store, api, debug_log_otps=settings.debug_log_otps)

    logger.info(
        "SERVICES: api=%s timeout=%ss persist_to_disk=%s",
        settings.api_base_url,
        settings.api_timeout_s,
        settings.persist_to_disk,
    )
    return Services(settings=settings, store=store, accessor=accessor, api=api, accounts=accounts)
