"""Tests for the lock-guarded session cache."""

from __future__ import annotations

import asyncio

import pytest

from bsky_widget.auth.cache import SessionCache
from bsky_widget.auth.models import Session
from bsky_widget.errors import SessionError

_SESSION = Session(access_jwt="A1", refresh_jwt="R1", did="u1")


async def test_starts_with_initial_session() -> None:
    cache = SessionCache(_SESSION)
    async with cache.exclusive() as slot:
        assert slot.session == _SESSION


async def test_starts_empty_by_default() -> None:
    async with SessionCache().exclusive() as slot:
        assert slot.session is None


async def test_write_is_visible_to_next_holder() -> None:
    cache = SessionCache()
    async with cache.exclusive() as slot:
        slot.session = _SESSION
    async with cache.exclusive() as slot:
        assert slot.session == _SESSION


async def test_slot_unusable_after_exit() -> None:
    cache = SessionCache(_SESSION)
    async with cache.exclusive() as slot:
        pass
    with pytest.raises(SessionError):
        _ = slot.session
    with pytest.raises(SessionError):
        slot.session = None


async def test_holders_are_serialized() -> None:
    cache = SessionCache()
    order: list[str] = []

    async def holder(name: str) -> None:
        async with cache.exclusive():
            order.append(f"{name}-in")
            await asyncio.sleep(0.01)
            order.append(f"{name}-out")

    await asyncio.gather(holder("a"), holder("b"))
    assert order == ["a-in", "a-out", "b-in", "b-out"]


async def test_lock_released_on_error() -> None:
    cache = SessionCache()
    with pytest.raises(RuntimeError):
        async with cache.exclusive():
            raise RuntimeError("boom")
    assert cache.locked is False


async def test_lock_released_on_cancellation() -> None:
    cache = SessionCache()
    entered = asyncio.Event()

    async def hold_forever() -> None:
        async with cache.exclusive():
            entered.set()
            await asyncio.Event().wait()

    task = asyncio.create_task(hold_forever())
    await entered.wait()
    assert cache.locked is True
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert cache.locked is False
