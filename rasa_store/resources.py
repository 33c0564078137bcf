from __future__ import annotations

from typing import Any, Mapping

from .errors import NotFoundError
from .local_store import LocalStore
from .models import Record
from .remote import CallResult, RemoteFirstAccessor


class CollectionResource:
    """
    get/create/update/delete for one keyed collection.

    Remote routes: ``GET/POST /{endpoint}`` and ``PUT/DELETE /{endpoint}/{id}``.
    Each method makes one accessor call whose fallback runs against the
    local store.
    """

    def __init__(self, accessor: RemoteFirstAccessor, store: LocalStore, *, name: str, endpoint: str):
        self._accessor = accessor
        self._store = store
        self.name = name
        self.endpoint = endpoint.strip("/")

    def _item_path(self, record_id: str, *suffix: str) -> str:
        return "/".join([self.endpoint, str(record_id), *suffix])

    def _local_list(self) -> list[Record]:
        return self._store.get_collection(self.name)

    def _local_insert(self, item: Mapping[str, Any]) -> Record:
        return self._store.insert(self.name, item)

    def _local_update(self, record_id: str, patch: Mapping[str, Any]) -> Record:
        with self._store.lock:
            if not self._store.update_by_id(self.name, record_id, patch):
                raise NotFoundError(self.name, record_id)
            return self._store.get(self.name, record_id) or {}

    def _local_delete(self, record_id: str) -> bool:
        if not self._store.delete(self.name, record_id):
            raise NotFoundError(self.name, record_id)
        return True

    def get_all(self) -> CallResult[Any]:
        return self._accessor.call(self.endpoint, "GET", fallback=self._local_list)

    def create(self, item: Mapping[str, Any]) -> CallResult[Any]:
        body = dict(item)
        return self._accessor.call(self.endpoint, "POST", body, fallback=lambda: self._local_insert(body))

    def update(self, record_id: str, patch: Mapping[str, Any]) -> CallResult[Any]:
        body = dict(patch)
        return self._accessor.call(
            self._item_path(record_id),
            "PUT",
            body,
            fallback=lambda: self._local_update(record_id, body),
        )

    def delete(self, record_id: str) -> CallResult[Any]:
        return self._accessor.call(
            self._item_path(record_id),
            "DELETE",
            fallback=lambda: self._local_delete(record_id),
        )

    def _patch_field(self, record_id: str, action: str, field: str, value: Any) -> CallResult[Any]:
        """``PATCH /{endpoint}/{id}/{action}`` with ``{field: value}``."""
        body = {field: value}
        return self._accessor.call(
            self._item_path(record_id, action),
            "PATCH",
            body,
            fallback=lambda: self._local_update(record_id, body),
        )


class MembersResource(CollectionResource):
    def _local_list(self) -> list[Record]:
        # Local member records carry passwords; never hand them to callers.
        members = self._store.get_collection(self.name)
        for m in members:
            m.pop("password", None)
        return members

    def _local_insert(self, item: Mapping[str, Any]) -> Record:
        created = super()._local_insert(item)
        created.pop("password", None)
        return created

    def _local_update(self, record_id: str, patch: Mapping[str, Any]) -> Record:
        updated = super()._local_update(record_id, patch)
        updated.pop("password", None)
        return updated

    def update_role(self, record_id: str, role: str) -> CallResult[Any]:
        return self._patch_field(record_id, "role", "role", role)


class DonationsResource(CollectionResource):
    def update_status(self, record_id: str, status: str) -> CallResult[Any]:
        return self._patch_field(record_id, "status", "status", status)


class ContactsResource(CollectionResource):
    def mark_read(self, record_id: str) -> CallResult[Any]:
        return self._accessor.call(
            self._item_path(record_id, "read"),
            "PATCH",
            fallback=lambda: self._local_update(record_id, {"isRead": True}),
        )

    def mark_all_read(self) -> CallResult[Any]:
        def _local() -> dict[str, Any]:
            return {"success": True, "updated": self._store.mark_all_read(self.name)}

        return self._accessor.call(f"{self.endpoint}/read-all", "PATCH", fallback=_local)


class DepartmentsResource(CollectionResource):
    interests_name = "department_interests"

    def submit_interest(self, item: Mapping[str, Any]) -> CallResult[Any]:
        body = dict(item)
        return self._accessor.call(
            f"{self.endpoint}/interest",
            "POST",
            body,
            fallback=lambda: self._store.insert(self.interests_name, body),
        )

    def get_interests(self) -> CallResult[Any]:
        return self._accessor.call(
            f"{self.endpoint}/interests",
            "GET",
            fallback=lambda: self._store.get_collection(self.interests_name),
        )

    def update_interest_status(self, record_id: str, status: str) -> CallResult[Any]:
        body = {"status": status}

        def _local() -> Record:
            if not self._store.update_by_id(self.interests_name, record_id, body):
                raise NotFoundError(self.interests_name, record_id)
            return self._store.get(self.interests_name, record_id) or {}

        return self._accessor.call(f"{self.endpoint}/interests/{record_id}/status", "PATCH", body, fallback=_local)


class VersesResource(CollectionResource):
    def get_daily(self) -> CallResult[Any]:
        def _local() -> Record | None:
            return next((v for v in self._store.get_collection(self.name) if v.get("isActive")), None)

        return self._accessor.call(f"{self.endpoint}/daily", "GET", fallback=_local)


class QuizzesResource(CollectionResource):
    def get_active(self) -> CallResult[Any]:
        def _local() -> list[Record]:
            return [q for q in self._store.get_collection(self.name) if q.get("isActive")]

        return self._accessor.call(f"{self.endpoint}/active", "GET", fallback=_local)


class ConfigResource:
    """A singleton configuration document: ``GET/PUT /config/{key}``."""

    def __init__(self, accessor: RemoteFirstAccessor, store: LocalStore, *, name: str, endpoint: str):
        self._accessor = accessor
        self._store = store
        self.name = name
        self.endpoint = endpoint.strip("/")

    def get(self) -> CallResult[Any]:
        return self._accessor.call(self.endpoint, "GET", fallback=lambda: self._store.get_collection(self.name))

    def update(self, patch: Mapping[str, Any]) -> CallResult[Any]:
        body = dict(patch)
        return self._accessor.call(
            self.endpoint,
            "PUT",
            body,
            fallback=lambda: self._store.update_singleton(self.name, body),
        )


class SystemResource:
    """Health, activity log and backup operations under ``/system``."""

    def __init__(self, accessor: RemoteFirstAccessor, store: LocalStore):
        self._accessor = accessor
        self._store = store

    def health(self) -> CallResult[Any]:
        return self._accessor.call(
            "system/health",
            "GET",
            fallback=lambda: self._store.health().model_dump(mode="json"),
        )

    def logs(self) -> CallResult[Any]:
        return self._accessor.call("system/logs", "GET", fallback=lambda: self._store.get_collection("logs"))

    def backups(self) -> CallResult[Any]:
        return self._accessor.call(
            "system/backups",
            "GET",
            fallback=lambda: [e.model_dump(mode="json") for e in self._store.backups.list_backups()],
        )

    def create_backup(self, description: str) -> CallResult[Any]:
        return self._accessor.call(
            "system/backups",
            "POST",
            {"description": description},
            fallback=lambda: self._store.backups.create_backup(description).model_dump(mode="json"),
        )

    def restore_backup(self, backup_id: str) -> CallResult[Any]:
        def _local() -> bool:
            if not self._store.backups.restore(backup_id):
                raise NotFoundError("backups", backup_id)
            return True

        return self._accessor.call(f"system/backups/{backup_id}/restore", "POST", fallback=_local)

    def reset(self) -> CallResult[Any]:
        def _local() -> dict[str, Any]:
            archived = self._store.backups.reset()
            return {"success": True, "archivedBackupId": archived.id}

        return self._accessor.call("system/reset", "POST", fallback=_local)


class ResourceAPI:
    """
    One entry point per domain resource, all sharing a single accessor and
    a single injected LocalStore.
    """

    def __init__(self, accessor: RemoteFirstAccessor, store: LocalStore):
        self.accessor = accessor
        self.store = store

        def keyed(cls: type[CollectionResource], name: str, endpoint: str) -> Any:
            return cls(accessor, store, name=name, endpoint=endpoint)

        self.members: MembersResource = keyed(MembersResource, "members", "members")
        self.roles = keyed(CollectionResource, "roles", "roles")
        self.news = keyed(CollectionResource, "news", "news")
        self.leaders = keyed(CollectionResource, "leaders", "leaders")
        self.announcements = keyed(CollectionResource, "announcements", "announcements")
        self.departments: DepartmentsResource = keyed(DepartmentsResource, "departments", "departments")
        self.donations: DonationsResource = keyed(DonationsResource, "donations", "donations")
        self.donation_projects = keyed(CollectionResource, "donation_projects", "donation-projects")
        self.contacts: ContactsResource = keyed(ContactsResource, "contacts", "contacts")
        self.verses: VersesResource = keyed(VersesResource, "verses", "spiritual/verses")
        self.reflections = keyed(CollectionResource, "reflections", "spiritual/reflections")
        self.quizzes: QuizzesResource = keyed(QuizzesResource, "quizzes", "spiritual/quizzes")
        self.quiz_results = keyed(CollectionResource, "quiz_results", "spiritual/quiz-results")

        self.home = ConfigResource(accessor, store, name="home_config", endpoint="config/home")
        self.about = ConfigResource(accessor, store, name="about_config", endpoint="config/about")
        self.footer = ConfigResource(accessor, store, name="footer_config", endpoint="config/footer")

        self.system = SystemResource(accessor, store)
