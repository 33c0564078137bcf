from __future__ import annotations

import json

import pytest
import responses

from conftest import API_BASE
from rasa_store.errors import NotFoundError

# Unregistered URLs make `responses` raise ConnectionError, i.e. the API is offline.


@responses.activate
def test_offline_create_goes_to_local_store(api, store):
    result = api.news.create({"id": "n2", "title": "Offline post"})

    assert result.degraded is True
    assert result.data["id"] == "n2"
    assert store.get_collection("news")[0]["id"] == "n2"
    assert len(responses.calls) == 1


@responses.activate
def test_online_create_does_not_touch_local_store(api, store):
    responses.add(responses.POST, f"{API_BASE}/news", json={"id": "n2"}, status=201)
    before = store.export_state()

    result = api.news.create({"id": "n2", "title": "Online post"})

    assert result.source == "remote"
    assert store.export_state() == before
    assert json.loads(responses.calls[0].request.body) == {"id": "n2", "title": "Online post"}


@responses.activate
def test_offline_update_and_miss(api, store):
    result = api.leaders.update("l1", {"position": "Chair"})
    assert result.data["position"] == "Chair"
    assert store.get("leaders", "l1")["position"] == "Chair"

    with pytest.raises(NotFoundError):
        api.leaders.update("ghost", {"position": "x"})


@responses.activate
def test_offline_delete_backs_up_and_signals_miss(api, store):
    assert api.announcements.delete("a1").data is True
    assert store.get_collection("announcements") == []

    with pytest.raises(NotFoundError):
        api.announcements.delete("a1")
    assert len(store.backups.list_backups()) == 2


@responses.activate
def test_members_fallback_never_exposes_passwords(api):
    members = api.members.get_all().data
    assert members and all("password" not in m for m in members)

    updated = api.members.update_role("u3", "secretary").data
    assert updated["role"] == "secretary"
    assert "password" not in updated


@responses.activate
def test_update_role_uses_patch_route_when_online(api, store):
    responses.add(responses.PATCH, f"{API_BASE}/members/u3/role", json={"ok": True}, status=200)

    result = api.members.update_role("u3", "admin")

    assert result.source == "remote"
    assert json.loads(responses.calls[0].request.body) == {"role": "admin"}
    assert store.get("members", "u3")["role"] == "member"


@responses.activate
def test_donation_status_offline(api, store):
    api.donations.update_status("d1", "Pending")
    assert store.get("donations", "d1")["status"] == "Pending"


@responses.activate
def test_contacts_read_flags_offline(api, store):
    store.insert("contacts", {"id": "c1", "isRead": False})
    store.insert("contacts", {"id": "c2", "isRead": False})

    assert api.contacts.mark_read("c1").data["isRead"] is True
    assert api.contacts.mark_all_read().data == {"success": True, "updated": 2}
    assert all(c["isRead"] for c in store.get_collection("contacts"))


@responses.activate
def test_department_interests_offline(api, store):
    created = api.departments.submit_interest({"id": "i1", "departmentId": "1", "status": "Pending"}).data
    assert created["id"] == "i1"
    assert [i["id"] for i in api.departments.get_interests().data] == ["i1"]

    api.departments.update_interest_status("i1", "Approved")
    assert store.get("department_interests", "i1")["status"] == "Approved"
    with pytest.raises(NotFoundError):
        api.departments.update_interest_status("nope", "Approved")


@responses.activate
def test_spiritual_filters_offline(api, store):
    assert api.verses.get_daily().data is None
    store.insert("verses", {"id": "v1", "text": "John 3:16", "isActive": True})
    store.insert("quizzes", {"id": "q1", "isActive": False})
    store.insert("quizzes", {"id": "q2", "isActive": True})

    assert api.verses.get_daily().data["id"] == "v1"
    assert [q["id"] for q in api.quizzes.get_active().data] == ["q2"]


@responses.activate
def test_config_singletons(api, store):
    responses.add(responses.GET, f"{API_BASE}/config/home", json={"heroTitle": "Remote"}, status=200)

    assert api.home.get().data == {"heroTitle": "Remote"}
    assert api.about.get().data["heroTitle"] == "Our Eternal Genesis"

    merged = api.footer.update({"email": "hello@rasa.test"}).data
    assert merged["email"] == "hello@rasa.test"
    assert store.get_collection("footer_config")["address"] == "UR Nyarugenge Campus, Kigali"


@responses.activate
def test_system_operations_offline(api, store):
    assert api.system.health().data["status"] == "Online"

    created = api.system.create_backup("Manual System Snapshot").data
    listed = api.system.backups().data
    assert [b["id"] for b in listed] == [created["id"]]
    assert api.system.logs().data[0]["action"] == "System Backup Created: Manual System Snapshot"

    store.insert("news", {"id": "n2"})
    assert api.system.restore_backup(created["id"]).data is True
    assert [n["id"] for n in store.get_collection("news")] == ["1"]

    with pytest.raises(NotFoundError):
        api.system.restore_backup("missing")

    reset = api.system.reset().data
    assert reset["success"] is True
    assert store.backups.list_backups()[0].id == reset["archivedBackupId"]


@responses.activate
def test_system_backup_online(api, store):
    responses.add(responses.POST, f"{API_BASE}/system/backups", json={"id": "remote-1"}, status=201)

    result = api.system.create_backup("nightly")

    assert result.data == {"id": "remote-1"}
    assert json.loads(responses.calls[0].request.body) == {"description": "nightly"}
    assert store.backups.list_backups() == []


@responses.activate
def test_members_offline_create_hides_password(api, store):
    created = api.members.create({"id": "m9", "email": "x@test.com", "password": "secret"}).data

    assert created == {"id": "m9", "email": "x@test.com"}
    assert store.verify_credential("x@test.com", "secret")["id"] == "m9"
