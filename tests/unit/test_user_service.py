"""Unit tests for user_service and the profile cache."""

import asyncio

import pytest

from src.core.cache_client import ProfileCache, profile_cache
from src.core.config import constants
from src.services import user_service


@pytest.mark.unit
class TestCreateOrUpdateUser:
    """Tests for create_or_update_user."""

    async def test_creates_user_on_first_sign_in(self, patched_db):
        """Unknown emails create a user."""
        user = await user_service.create_or_update_user(email="Kim@Example.com", name="Kim")

        assert user["email"] == "kim@example.com"
        assert user["name"] == "Kim"
        assert user["created_at"] == user["last_login_at"]

    async def test_existing_user_is_updated(self, patched_db):
        """A second sign-in refreshes last_login_at and keeps the same record."""
        first = await user_service.create_or_update_user(email="kim@example.com", name="Kim")

        second = await user_service.create_or_update_user(email="KIM@example.com", photo_url="https://img/k.png")

        assert second["id"] == first["id"]
        assert second["name"] == "Kim"
        assert second["photo_url"] == "https://img/k.png"
        assert len(patched_db.all("users")) == 1

    async def test_update_invalidates_cached_profile(self, patched_db):
        """Profile changes are visible through the cache immediately."""
        user = await user_service.create_or_update_user(email="kim@example.com", name="Kim")
        await user_service.get_user_profile(user_id=user["id"])

        await user_service.create_or_update_user(email="kim@example.com", user_id=user["id"], name="Kimberly")
        profile = await user_service.get_user_profile(user_id=user["id"])

        assert profile["name"] == "Kimberly"

    async def test_name_too_long_rejected(self, patched_db):
        """Display names are bounded."""
        with pytest.raises(ValueError, match="Name too long"):
            await user_service.create_or_update_user(email="kim@example.com", name="x" * 51)


@pytest.mark.unit
class TestUserLookups:
    """Tests for get_users_by_ids and get_user_profile."""

    async def test_get_users_by_ids_chunks(self, patched_db, monkeypatch):
        """Lookups are split into fixed-size chunks and duplicates are ignored."""
        monkeypatch.setattr(constants, "USER_LOOKUP_CHUNK_SIZE", 2)
        users = [await user_service.create_or_update_user(email=f"user{i}@example.com") for i in range(5)]
        ids = [u["id"] for u in users]

        calls = []
        original_list = patched_db.list_records

        async def _counting_list(**kwargs):
            calls.append(kwargs["filter_query"])
            return await original_list(**kwargs)

        monkeypatch.setattr("src.core.db_client.list_records", _counting_list)

        result = await user_service.get_users_by_ids(user_ids=[*ids, ids[0], "404"])

        assert {u["id"] for u in result} == set(ids)
        assert len(calls) == 3

    async def test_get_user_profile_unknown(self, patched_db):
        """Unknown users return None and are not cached."""
        assert await user_service.get_user_profile(user_id="404") is None
        assert profile_cache.peek("404") is None

    async def test_get_user_profile_hits_cache(self, patched_db, monkeypatch):
        """A second lookup is served from memory."""
        user = await user_service.create_or_update_user(email="kim@example.com")
        await user_service.get_user_profile(user_id=user["id"])

        async def _fail(**kwargs):
            raise AssertionError("store should not be queried")

        monkeypatch.setattr("src.core.db_client.get_record", _fail)

        profile = await user_service.get_user_profile(user_id=user["id"])
        assert profile["email"] == "kim@example.com"


@pytest.mark.unit
class TestProfileCache:
    """Tests for ProfileCache."""

    async def test_concurrent_misses_share_one_lookup(self):
        """Concurrent requests for the same key load once."""
        cache = ProfileCache()
        calls = 0
        release = asyncio.Event()

        async def _loader(key):
            nonlocal calls
            calls += 1
            await release.wait()
            return {"id": key}

        tasks = [asyncio.create_task(cache.get_or_load("u1", _loader)) for _ in range(3)]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*tasks)

        assert calls == 1
        assert results == [{"id": "u1"}] * 3
        assert cache.get_health_status()["misses"] == 1

    async def test_loader_failure_reaches_all_waiters(self):
        """A failed lookup fails every waiter and caches nothing."""
        cache = ProfileCache()
        release = asyncio.Event()

        async def _loader(key):
            await release.wait()
            raise RuntimeError("store down")

        tasks = [asyncio.create_task(cache.get_or_load("u1", _loader)) for _ in range(2)]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert all(isinstance(r, RuntimeError) for r in results)
        assert cache.peek("u1") is None

    async def test_invalidate_drops_entry(self):
        """Invalidated keys are loaded again."""
        cache = ProfileCache()
        cache.set("u1", {"id": "u1"})

        cache.invalidate("u1")

        assert cache.peek("u1") is None

    async def test_invalidate_during_lookup_discards_result(self):
        """A lookup that overlaps an invalidation does not cache its older result."""
        cache = ProfileCache()
        release = asyncio.Event()
        names = iter(["old", "new"])

        async def _loader(key):
            name = next(names)
            if name == "old":
                await release.wait()
            return {"id": key, "name": name}

        stale_lookup = asyncio.create_task(cache.get_or_load("u1", _loader))
        await asyncio.sleep(0)
        cache.invalidate("u1")
        release.set()
        await stale_lookup

        assert cache.peek("u1") is None
        assert (await cache.get_or_load("u1", _loader))["name"] == "new"
        assert cache.peek("u1") == {"id": "u1", "name": "new"}

    async def test_cancelled_starter_does_not_cancel_waiters(self):
        """Waiters retry the lookup when the caller that started it is cancelled."""
        cache = ProfileCache()
        first_call = asyncio.Event()
        calls = 0

        async def _loader(key):
            nonlocal calls
            calls += 1
            if calls == 1:
                first_call.set()
                await asyncio.Event().wait()
            return {"id": key}

        starter = asyncio.create_task(cache.get_or_load("u1", _loader))
        await first_call.wait()
        waiter = asyncio.create_task(cache.get_or_load("u1", _loader))
        await asyncio.sleep(0)

        starter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await starter

        assert await waiter == {"id": "u1"}
        assert calls == 2
        assert cache.peek("u1") == {"id": "u1"}
