from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from skydeck.infra.http import HttpClient


@dataclass(frozen=True, slots=True)
class Recorded:
    method: str
    path: str
    query: dict[str, str]
    body: Any


@dataclass
class FakeBackend:
    """Console backend double: canned JSON per (method, path), every request recorded."""

    routes: dict[tuple[str, str], tuple[int, Any, float]] = field(default_factory=dict)
    requests: list[Recorded] = field(default_factory=list)

    def reply(
        self, method: str, path: str, body: Any = None, *, status: int = 200, delay: float = 0.0,
    ) -> None:
        self.routes[(method, path)] = (status, body, delay)

    def calls(self, path: str) -> list[Recorded]:
        return [r for r in self.requests if r.path == path]

    async def _handle(self, request: web.Request) -> web.Response:
        body = await request.json() if request.can_read_body else None
        self.requests.append(Recorded(request.method, request.path, dict(request.query), body))
        route = self.routes.get((request.method, request.path))
        if route is None:
            return web.json_response({"error": f"no route for {request.path}"}, status=404)
        status, payload, delay = route
        if delay:
            await asyncio.sleep(delay)
        return web.json_response(payload, status=status)

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._handle)
        return app


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def server(backend: FakeBackend):
    srv = TestServer(backend.app())
    await srv.start_server()
    yield srv
    await srv.close()


@pytest.fixture
def base_url(server: TestServer) -> str:
    return f"http://{server.host}:{server.port}"


@pytest.fixture
async def http(base_url: str):
    client = HttpClient(base_url)
    yield client
    await client.close()
