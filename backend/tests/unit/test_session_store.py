"""
Unit tests for the in-memory login session store.
"""

import asyncio

import pytest

from fitcoach.infrastructure.auth.session_store import InMemorySessionStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemorySessionStore(ttl_seconds=60, clock=clock)


class TestInMemorySessionStore:

    @pytest.mark.asyncio
    async def test_create_and_resolve(self, store):
        session_id = await store.create(7)
        assert await store.get_user_id(session_id) == 7

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, store):
        first = await store.create(1)
        second = await store.create(1)
        assert first != second
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_unknown_id(self, store):
        assert await store.get_user_id("nope") is None

    @pytest.mark.asyncio
    async def test_expired_session_is_dropped_on_lookup(self, store, clock):
        session_id = await store.create(7)
        clock.now += 60

        assert await store.get_user_id(session_id) is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delete(self, store):
        session_id = await store.create(7)
        await store.delete(session_id)
        await store.delete(session_id)
        assert await store.get_user_id(session_id) is None

    @pytest.mark.asyncio
    async def test_purge_expired(self, store, clock):
        await store.create(1)
        clock.now += 30
        keep = await store.create(2)
        clock.now += 31

        assert store.purge_expired() == 1
        assert len(store) == 1
        assert await store.get_user_id(keep) == 2

    @pytest.mark.asyncio
    async def test_sweeper_runs_periodically(self, clock):
        store = InMemorySessionStore(ttl_seconds=1, sweep_interval_seconds=0.01, clock=clock)
        await store.create(1)
        clock.now += 5

        await store.start()
        try:
            for _ in range(100):
                if len(store) == 0:
                    break
                await asyncio.sleep(0.01)
        finally:
            await store.close()

        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_close_without_start(self, store):
        await store.close()
