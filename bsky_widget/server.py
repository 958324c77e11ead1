"""Widget HTTP server: aiohttp app serving the rendered hashtag feed."""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING

from aiohttp import web

from bsky_widget.bluesky.search import search_posts
from bsky_widget.errors import AuthError, ConfigError, OperationError
from bsky_widget.log_context import set_log_context
from bsky_widget.widget.params import parse_params
from bsky_widget.widget.render import (
    NO_TAGS_HINT,
    render_debug,
    render_header,
    render_message,
    render_posts,
)

if TYPE_CHECKING:
    import aiohttp

    from bsky_widget.auth.manager import TokenManager
    from bsky_widget.bluesky.models import Post
    from bsky_widget.config import WidgetConfig
    from bsky_widget.widget.params import WidgetParams

logger = logging.getLogger(__name__)


def widget_response(body: str, title: str) -> web.Response:
    """HTML response carrying the Glance extension headers."""
    return web.Response(
        text=body,
        content_type="text/html",
        headers={"Widget-Title": title, "Widget-Content-Type": "html"},
    )


class WidgetServer:
    """HTTP server rendering Bluesky hashtag search results.

    Routes:
    - ``GET /``       -- Rendered widget; options come from the query string.
    - ``GET /health`` -- Health check.
    """

    def __init__(
        self,
        config: WidgetConfig,
        tokens: TokenManager,
        http: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._tokens = tokens
        self._http = http
        self._runner: web.AppRunner | None = None

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self._handle_widget)
        app.router.add_get("/health", self._handle_health)
        return app

    async def start(self) -> None:
        """Create the aiohttp app and start listening."""
        host, port = self._config.server.host, self._config.server.port
        self._runner = web.AppRunner(self.build_app(), access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, host, port)
        await site.start()
        logger.info("Widget server listening on %s:%d", host, port)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        logger.info("Widget server stopped")

    # -- Handlers --

    async def _handle_health(self, _request: web.Request) -> web.Response:
        return web.json_response({"status": "ok"})

    async def _handle_widget(self, request: web.Request) -> web.Response:
        set_log_context(operation="req", request_id=secrets.token_hex(4))
        params = parse_params(request.query)
        logger.info("Widget request tags=%s limit=%d", ",".join(params.tags), params.limit)

        parts = [render_header(params)]
        if params.debug:
            parts.append(render_debug(request.query.items()))

        if not params.tags:
            parts.append(render_message(NO_TAGS_HINT))
            return widget_response("".join(parts), params.title)

        try:
            posts = await self._tokens.call_with_retry(
                lambda token: self._search(token, params),
            )
        except (AuthError, ConfigError) as exc:
            logger.warning("Bluesky login failed: %s", exc)
            parts.append(render_message(f"Error logging into Bluesky: {exc}"))
        except OperationError as exc:
            logger.warning("Post search failed: %s", exc)
            parts.append(render_message(f"Error searching posts: {exc}"))
        else:
            parts.append(render_posts(posts, params.collapse_after))

        return widget_response("".join(parts), params.title)

    async def _search(self, token: str, params: WidgetParams) -> list[Post]:
        return await search_posts(
            self._http,
            token,
            base_url=self._config.bluesky.base_url,
            tags=params.tags,
            limit=params.limit,
            since=params.since,
            sort=params.sort,
        )
