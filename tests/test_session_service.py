import asyncio

import pytest

from jobbot.services.session_service import UserLockRegistry


@pytest.mark.asyncio
async def test_same_user_runs_one_at_a_time():
    registry = UserLockRegistry()
    order = []

    async def worker(name):
        async with registry.lock("42"):
            order.append(f"{name}-start")
            await asyncio.sleep(0.01)
            order.append(f"{name}-end")

    await asyncio.gather(worker("a"), worker("b"))

    assert order == ["a-start", "a-end", "b-start", "b-end"]


@pytest.mark.asyncio
async def test_different_users_run_concurrently():
    registry = UserLockRegistry()
    both_inside = asyncio.Event()
    inside = set()

    async def worker(user_id):
        async with registry.lock(user_id):
            inside.add(user_id)
            if len(inside) == 2:
                both_inside.set()
            await asyncio.wait_for(both_inside.wait(), timeout=1)

    await asyncio.gather(worker("1"), worker("2"))

    assert inside == {"1", "2"}


@pytest.mark.asyncio
async def test_locks_are_released_and_discarded():
    registry = UserLockRegistry()

    async with registry.lock(7):
        assert registry.is_locked("7")
        assert len(registry) == 1

    assert not registry.is_locked(7)
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_lock_released_when_body_raises():
    registry = UserLockRegistry()

    with pytest.raises(RuntimeError):
        async with registry.lock("1"):
            raise RuntimeError("boom")

    assert len(registry) == 0
