"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import aiohttp
import pytest
from aiohttp.test_utils import TestServer

from tests.fakes import FakeBluesky


@pytest.fixture
def tmp_widget_home(tmp_path: Path) -> Path:
    """Temporary ~/.bsky_widget equivalent."""
    home = tmp_path / ".bsky_widget"
    home.mkdir()
    return home


@pytest.fixture
async def fake_bsky() -> AsyncIterator[FakeBluesky]:
    """A running fake Bluesky API; ``base_url`` points at it."""
    fake = FakeBluesky()
    server = TestServer(fake.build_app())
    await server.start_server()
    fake.base_url = str(server.make_url("")).rstrip("/")
    yield fake
    await server.close()


@pytest.fixture
async def http() -> AsyncIterator[aiohttp.ClientSession]:
    async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=5)) as session:
        yield session
