"""Token resolution: reuse, refresh or log in, one resolution at a time.

`TokenManager.ensure_token` is the only code that mutates the session cache.
Resolution runs inside the cache's critical section, so at most one
probe/refresh/login round-trip is outstanding process-wide. Concurrent
callers do not queue up to repeat that work: they join the resolution
already in flight and receive its result.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from bsky_widget.errors import AuthError, ConfigError, OperationError, RefreshFailedError

if TYPE_CHECKING:
    from bsky_widget.auth.cache import SessionCache
    from bsky_widget.auth.probe import ValidityProber
    from bsky_widget.auth.transport import AuthClient
    from bsky_widget.config import Credentials

logger = logging.getLogger(__name__)

T = TypeVar("T")

CredentialSource = Callable[[], "Credentials"]


class TokenManager:
    """Produces a usable access token and couples it to downstream retries."""

    def __init__(
        self,
        cache: SessionCache,
        client: AuthClient,
        prober: ValidityProber,
        credentials: CredentialSource,
    ) -> None:
        self._cache = cache
        self._client = client
        self._prober = prober
        self._credentials = credentials
        # keyed by the ``force`` flag of the resolution
        self._inflight: dict[bool, asyncio.Task[str]] = {}

    async def ensure_token(self, *, force: bool = False) -> str:
        """Return a usable access JWT.

        Order: cached token if the probe accepts it (skipped when *force*),
        then refresh of the cached session, then a fresh login.

        Raises:
            LoginFailedError: Login was needed and failed. The cache is unchanged.
            MissingConfigError: Login was needed but credentials are not set.
        """
        task = self._joinable(force)
        if task is None:
            task = asyncio.create_task(self._resolve(force=force), name=f"ensure-token-{force}")
            self._inflight[force] = task
            task.add_done_callback(functools.partial(self._forget, force))
        else:
            logger.debug("Joining in-flight token resolution (force=%s)", force)
        # shield: a cancelled request must not cancel a resolution others await
        return await asyncio.shield(task)

    async def call_with_retry(self, op: Callable[[str], Awaitable[T]]) -> T:
        """Run *op* with a token; on failure re-authenticate once and retry once.

        Auth errors from the first resolution propagate without calling *op*.
        If the forced re-authentication fails, the first op error is raised.
        """
        token = await self.ensure_token()
        try:
            return await op(token)
        except OperationError as exc:
            first_error = exc
            logger.warning("Operation failed (%s), forcing re-authentication", exc)

        try:
            token = await self.ensure_token(force=True)
        except (AuthError, ConfigError) as auth_exc:
            logger.warning("Re-authentication failed: %s", auth_exc)
            raise first_error from auth_exc

        return await op(token)

    def _joinable(self, force: bool) -> asyncio.Task[str] | None:
        # A forced caller needs a resolution that skipped the probe; a lazy
        # caller is satisfied by either kind.
        for key in (True,) if force else (False, True):
            task = self._inflight.get(key)
            if task is not None and not task.done():
                return task
        return None

    def _forget(self, force: bool, task: asyncio.Task[str]) -> None:
        if self._inflight.get(force) is task:
            del self._inflight[force]
        if not task.cancelled():
            # mark retrieved; every waiter already got it through shield()
            task.exception()

    async def _resolve(self, *, force: bool) -> str:
        async with self._cache.exclusive() as slot:
            current = slot.session

            if current is not None and not force:
                if await self._prober.is_valid(current.access_jwt):
                    logger.debug("Reusing cached session did=%s", current.did)
                    return current.access_jwt
                logger.info("Cached access token rejected, refreshing")

            if current is not None:
                try:
                    renewed = await self._client.refresh(current.refresh_jwt)
                except RefreshFailedError as exc:
                    logger.info("Refresh failed (%s), falling back to login", exc)
                else:
                    slot.session = renewed
                    return renewed.access_jwt

            fresh = await self._client.login(self._credentials())
            slot.session = fresh
            return fresh.access_jwt
