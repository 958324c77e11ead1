"""In-process stand-in for the Bluesky XRPC endpoints used by the widget."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any

from aiohttp import web

LOGIN_BODY: dict[str, Any] = {"accessJwt": "A1", "refreshJwt": "R1", "did": "u1"}
REFRESH_BODY: dict[str, Any] = {"accessJwt": "A2", "refreshJwt": "R2", "did": "u1"}


@dataclass
class Recorded:
    endpoint: str
    authorization: str
    body: Any = None
    query: dict[str, str] = field(default_factory=dict)


@dataclass
class FakeBluesky:
    """Configurable responses plus a log of every request received."""

    base_url: str = ""
    requests: list[Recorded] = field(default_factory=list)
    login_status: int = 200
    login_body: Any = field(default_factory=lambda: dict(LOGIN_BODY))
    refresh_status: int = 200
    refresh_body: Any = field(default_factory=lambda: dict(REFRESH_BODY))
    probe_status: int = 200
    # consumed one per search call; 200 once empty
    search_statuses: deque[int] = field(default_factory=deque)
    search_body: Any = field(default_factory=lambda: {"posts": []})

    def count(self, endpoint: str) -> int:
        return sum(1 for r in self.requests if r.endpoint == endpoint)

    def endpoints(self) -> list[str]:
        return [r.endpoint for r in self.requests]

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/xrpc/com.atproto.server.createSession", self._login)
        app.router.add_post("/xrpc/com.atproto.server.refreshSession", self._refresh)
        app.router.add_get("/xrpc/com.atproto.server.getSession", self._probe)
        app.router.add_get("/xrpc/app.bsky.feed.searchPosts", self._search)
        return app

    def _record(self, endpoint: str, request: web.Request, body: Any = None) -> None:
        self.requests.append(
            Recorded(
                endpoint=endpoint,
                authorization=request.headers.get("Authorization", ""),
                body=body,
                query=dict(request.query),
            )
        )

    @staticmethod
    def _reply(status: int, body: Any) -> web.Response:
        if isinstance(body, bytes):
            return web.Response(body=body, status=status, content_type="application/json")
        if isinstance(body, str):
            return web.Response(text=body, status=status)
        return web.json_response(body, status=status)

    async def _login(self, request: web.Request) -> web.Response:
        self._record("login", request, await request.json())
        if self.login_status != 200:
            return web.json_response(
                {"error": "AuthenticationRequired", "message": "Invalid identifier or password"},
                status=self.login_status,
            )
        return self._reply(200, self.login_body)

    async def _refresh(self, request: web.Request) -> web.Response:
        self._record("refresh", request)
        if self.refresh_status != 200:
            return web.json_response(
                {"error": "ExpiredToken", "message": "Token has expired"},
                status=self.refresh_status,
            )
        return self._reply(200, self.refresh_body)

    async def _probe(self, request: web.Request) -> web.Response:
        self._record("probe", request)
        return web.json_response({"did": "u1"}, status=self.probe_status)

    async def _search(self, request: web.Request) -> web.Response:
        self._record("search", request)
        status = self.search_statuses.popleft() if self.search_statuses else 200
        if status != 200:
            return web.json_response({"error": "ExpiredToken"}, status=status)
        return self._reply(200, self.search_body)
