"""Process-wide holder of the current session, guarded by one lock."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from bsky_widget.auth.models import Session
from bsky_widget.errors import SessionError

logger = logging.getLogger(__name__)


class CacheSlot:
    """Handle to the cached session, valid only inside ``SessionCache.exclusive()``."""

    __slots__ = ("_cache", "_open")

    def __init__(self, cache: SessionCache) -> None:
        self._cache = cache
        self._open = True

    def _check_open(self) -> None:
        if not self._open:
            msg = "Session cache accessed outside its critical section"
            raise SessionError(msg)

    @property
    def session(self) -> Session | None:
        self._check_open()
        return self._cache._session

    @session.setter
    def session(self, value: Session | None) -> None:
        self._check_open()
        self._cache._session = value

    def close(self) -> None:
        self._open = False


class SessionCache:
    """Zero-or-one `Session`, readable and writable only under the lock.

    Built once at startup (usually from `SessionStore.load`) and shared by
    reference with every request handler. Entries never expire on their
    own; validity is checked on demand by the token manager.
    """

    def __init__(self, initial: Session | None = None) -> None:
        self._session = initial
        self._lock = asyncio.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[CacheSlot]:
        """Hold the cache lock for the duration of the block.

        The lock is released on every exit path, including cancellation.
        """
        async with self._lock:
            slot = CacheSlot(self)
            try:
                yield slot
            finally:
                slot.close()
