"""Cheap authenticated call used to decide whether an access token still works."""

from __future__ import annotations

import logging

import aiohttp

from bsky_widget.config import normalize_base_url

logger = logging.getLogger(__name__)

PROBE_PATH = "/xrpc/com.atproto.server.getSession"

# Only these statuses mark a token invalid. Everything else (5xx, rate
# limits, unrelated 4xx) keeps the token, so an upstream hiccup does not
# trigger a refresh/login round.
INVALID_TOKEN_STATUSES: frozenset[int] = frozenset({401})


class ValidityProber:
    """Classifies an access token as valid or invalid via ``getSession``."""

    def __init__(self, http: aiohttp.ClientSession, base_url: str) -> None:
        self._http = http
        self._url = f"{normalize_base_url(base_url)}{PROBE_PATH}"

    async def is_valid(self, access_jwt: str) -> bool:
        headers = {"Authorization": f"Bearer {access_jwt}"}
        try:
            async with self._http.get(self._url, headers=headers) as resp:
                status = resp.status
        except (aiohttp.ClientError, TimeoutError):
            logger.info("Token probe failed, treating token as invalid", exc_info=True)
            return False

        if status in INVALID_TOKEN_STATUSES:
            logger.info("Token probe: invalid (HTTP %d)", status)
            return False
        logger.debug("Token probe: valid (HTTP %d)", status)
        return True
