from __future__ import annotations

import asyncio

from geo_attendance.storage.json_file_storage import JsonFileStorage
from geo_attendance.storage.memory_storage import InMemoryStorage
from geo_attendance.storage.session_store import SessionStore
from geo_attendance.users.model import UserProfile


def test_json_storage_survives_reopen(tmp_path):
    path = tmp_path / "session" / "store.json"

    async def write():
        store = JsonFileStorage(path)
        await store.multi_set([("authToken", "tok-1"), ("userName", "Asha")])
        await store.remove_item("userName")

    asyncio.run(write())

    reopened = JsonFileStorage(path)
    assert asyncio.run(reopened.get_item("authToken")) == "tok-1"
    assert asyncio.run(reopened.multi_get(["authToken", "userName"])) == {"authToken": "tok-1", "userName": None}


def test_json_storage_treats_corrupt_file_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStorage(path)

    assert asyncio.run(store.get_item("authToken")) is None
    asyncio.run(store.set_item("authToken", "tok-2"))
    assert asyncio.run(store.get_item("authToken")) == "tok-2"


def test_session_store_defaults():
    session = SessionStore(InMemoryStorage({"authToken": ""}))

    assert asyncio.run(session.get_token()) is None
    assert asyncio.run(session.get_user_name()) == "User"


def test_clear_removes_session_keys():
    storage = InMemoryStorage()
    session = SessionStore(storage)
    profile = UserProfile(user_id="u-1", name="Asha", email="asha@example.com", role="employee")

    async def run():
        await session.save_login("tok-1", profile)
        assert await session.get_token() == "tok-1"
        await session.clear()

    asyncio.run(run())

    assert storage.snapshot() == {}
