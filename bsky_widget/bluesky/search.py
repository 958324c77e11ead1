"""Hashtag search against ``app.bsky.feed.searchPosts``."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

import aiohttp
from pydantic import ValidationError

from bsky_widget.bluesky.models import Post, SearchPostsResponse
from bsky_widget.config import normalize_base_url
from bsky_widget.errors import SearchError

logger = logging.getLogger(__name__)

SEARCH_POSTS_PATH = "/xrpc/app.bsky.feed.searchPosts"
MAX_LIMIT = 50


def build_query(tags: Sequence[str], since: datetime | None = None) -> str:
    """Join tags as ``#a #b``, optionally prefixed by ``since:<RFC 3339>``."""
    query = " ".join(f"#{tag}" for tag in tags)
    if since is not None:
        return f"since:{since.isoformat()} {query}"
    return query


async def search_posts(  # noqa: PLR0913
    http: aiohttp.ClientSession,
    token: str,
    *,
    base_url: str,
    tags: Sequence[str],
    limit: int = 10,
    since: datetime | None = None,
    sort: str = "latest",
) -> list[Post]:
    """Search posts for *tags*, newest ``indexedAt`` first.

    Raises:
        SearchError: Non-2xx status (``status`` set), network failure or bad payload.
    """
    url = f"{normalize_base_url(base_url)}{SEARCH_POSTS_PATH}"
    params = {
        "q": build_query(tags, since),
        "limit": str(min(limit, MAX_LIMIT)),
        "sort": sort,
    }
    headers = {"Authorization": f"Bearer {token}"}
    logger.debug("Searching posts q=%r limit=%s sort=%s", params["q"], params["limit"], sort)
    try:
        async with http.get(url, params=params, headers=headers) as resp:
            if resp.status >= 300:
                msg = f"HTTP {resp.status} {resp.reason or ''}".rstrip()
                raise SearchError(msg, status=resp.status)
            raw = await resp.read()
        result = SearchPostsResponse.model_validate_json(raw)
    except (aiohttp.ClientError, TimeoutError) as exc:
        msg = f"search request failed: {exc or type(exc).__name__}"
        raise SearchError(msg) from exc
    except ValidationError as exc:
        msg = f"unexpected search response: {exc.error_count()} validation error(s)"
        raise SearchError(msg) from exc
    except UnicodeDecodeError as exc:
        msg = "unexpected search response: body is not valid UTF-8"
        raise SearchError(msg) from exc

    posts = sorted(result.posts, key=lambda p: p.indexed_at, reverse=True)
    logger.info("Search returned %d posts", len(posts))
    return posts
