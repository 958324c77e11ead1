"""Stateless session calls against the AT Protocol server API.

``login`` and ``refresh`` each return a brand-new `Session` and persist it.
Neither touches the in-memory cache; the caller decides what to keep.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from bsky_widget.auth.models import Session
from bsky_widget.config import normalize_base_url
from bsky_widget.errors import LoginFailedError, PersistError, RefreshFailedError

if TYPE_CHECKING:
    from bsky_widget.auth.store import SessionStore
    from bsky_widget.config import Credentials

logger = logging.getLogger(__name__)

CREATE_SESSION_PATH = "/xrpc/com.atproto.server.createSession"
REFRESH_SESSION_PATH = "/xrpc/com.atproto.server.refreshSession"

_MAX_DETAIL_CHARS = 200


async def _error_detail(resp: aiohttp.ClientResponse) -> str:
    """Describe a failed response: status plus the XRPC error message if present."""
    detail = f"HTTP {resp.status}"
    try:
        body: Any = await resp.json(content_type=None)
    except (aiohttp.ClientError, ValueError):
        return detail
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            detail = f"{detail}: {str(message)[:_MAX_DETAIL_CHARS]}"
    return detail


class AuthClient:
    """Performs createSession/refreshSession calls and persists the result."""

    def __init__(
        self,
        http: aiohttp.ClientSession,
        store: SessionStore,
        base_url: str,
    ) -> None:
        self._http = http
        self._store = store
        self._base_url = normalize_base_url(base_url)

    async def login(self, credentials: Credentials) -> Session:
        """Create a new session from identifier and password.

        Raises:
            LoginFailedError: Non-2xx status, network failure or malformed body.
        """
        url = f"{self._base_url}{CREATE_SESSION_PATH}"
        payload = {"identifier": credentials.identifier, "password": credentials.password}
        logger.info("Logging in to Bluesky as %s", credentials.identifier)
        try:
            async with self._http.post(url, json=payload) as resp:
                if resp.status >= 300:
                    detail = await _error_detail(resp)
                    raise LoginFailedError(detail)
                body = await resp.json(content_type=None)
            session = Session.from_api(body)
        except LoginFailedError as exc:
            logger.warning("Login rejected: %s", exc)
            raise
        except (aiohttp.ClientError, TimeoutError, ValueError) as exc:
            logger.warning("Login failed: %s", exc)
            msg = f"login request failed: {exc or type(exc).__name__}"
            raise LoginFailedError(msg) from exc

        logger.info("Login succeeded did=%s", session.did)
        await self._persist(session)
        return session

    async def refresh(self, refresh_jwt: str) -> Session:
        """Exchange the refresh token for a renewed session.

        Raises:
            RefreshFailedError: Non-2xx status, network failure or malformed body.
        """
        url = f"{self._base_url}{REFRESH_SESSION_PATH}"
        headers = {"Authorization": f"Bearer {refresh_jwt}"}
        logger.info("Refreshing Bluesky session")
        try:
            async with self._http.post(url, headers=headers) as resp:
                if resp.status >= 300:
                    detail = await _error_detail(resp)
                    raise RefreshFailedError(detail)
                body = await resp.json(content_type=None)
            session = Session.from_api(body)
        except RefreshFailedError as exc:
            logger.warning("Refresh rejected: %s", exc)
            raise
        except (aiohttp.ClientError, TimeoutError, ValueError) as exc:
            logger.warning("Refresh failed: %s", exc)
            msg = f"refresh request failed: {exc or type(exc).__name__}"
            raise RefreshFailedError(msg) from exc

        logger.info("Refresh succeeded did=%s", session.did)
        await self._persist(session)
        return session

    async def _persist(self, session: Session) -> None:
        try:
            await asyncio.to_thread(self._store.save, session)
        except PersistError:
            logger.exception("Could not persist session; keeping it in memory only")
