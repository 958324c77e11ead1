"""Service wiring: one HTTP client, one session cache, one token manager."""

from __future__ import annotations

import asyncio
import functools
import logging

import aiohttp

from bsky_widget.auth.cache import SessionCache
from bsky_widget.auth.manager import TokenManager
from bsky_widget.auth.probe import ValidityProber
from bsky_widget.auth.store import SessionStore
from bsky_widget.auth.transport import AuthClient
from bsky_widget.config import WidgetConfig, get_credentials
from bsky_widget.paths import resolve_paths
from bsky_widget.server import WidgetServer

logger = logging.getLogger(__name__)


def build_token_manager(
    config: WidgetConfig,
    http: aiohttp.ClientSession,
    store: SessionStore,
) -> TokenManager:
    """Assemble the auth stack, seeding the cache from the persisted session."""
    base_url = config.bluesky.base_url
    return TokenManager(
        cache=SessionCache(store.load()),
        client=AuthClient(http, store, base_url),
        prober=ValidityProber(http, base_url),
        credentials=functools.partial(get_credentials, config.bluesky),
    )


async def run_server(config: WidgetConfig) -> None:
    """Serve until cancelled (Ctrl+C / SIGTERM)."""
    paths = resolve_paths(config)
    store = SessionStore(paths.session_path)
    logger.info("Session file: %s", store.path)
    timeout = aiohttp.ClientTimeout(total=config.bluesky.request_timeout_seconds)

    async with aiohttp.ClientSession(timeout=timeout) as http:
        tokens = build_token_manager(config, http, store)
        server = WidgetServer(config, tokens, http)
        await server.start()
        try:
            await asyncio.Event().wait()
        finally:
            await server.stop()
