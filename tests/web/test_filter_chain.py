# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for WebFilterChainMiddleware — ordering, short-circuit, conditional skip."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from edgecsrf.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from edgecsrf.web.adapters.starlette.filters.csrf_filter import CsrfFilter
from edgecsrf.web.filters import OncePerRequestFilter
from edgecsrf.web.ordering import HIGHEST_PRECEDENCE, get_order, order


# ---------------------------------------------------------------------------
# Test filters
# ---------------------------------------------------------------------------

@order(HIGHEST_PRECEDENCE + 10)
class HeaderFilter(OncePerRequestFilter):
    """Adds X-Filter-A header to every response."""

    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Filter-A"] = "applied"
        return response


@order(100)
class TraceFilter(OncePerRequestFilter):
    """Records the header values seen on the way out."""

    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Filter-B"] = response.headers.get("X-Filter-A", "unset")
        return response


@order(5)
class CountingFilter(OncePerRequestFilter):
    """Counts invocations; never touches health checks."""

    ignored_paths = ("/health", "/health/*")

    def __init__(self) -> None:
        self.calls = 0

    async def do_filter(self, request, call_next):
        self.calls += 1
        response = await call_next(request)
        response.headers["X-Counted"] = str(self.calls)
        return response


@order(10)
class ShortCircuitFilter(OncePerRequestFilter):
    """Returns 429 without calling next."""

    async def do_filter(self, request, call_next):
        return JSONResponse({"error": "blocked"}, status_code=429)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _ok_handler(request: Request) -> PlainTextResponse:
    return PlainTextResponse("OK")


def _make_app(*filters) -> Starlette:
    return Starlette(
        routes=[
            Route("/test", _ok_handler),
            Route("/api/data", _ok_handler, methods=["GET", "POST"]),
            Route("/health", _ok_handler),
        ],
        middleware=[Middleware(WebFilterChainMiddleware, filters=list(filters))],
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestFilterChainOrdering:
    def test_filters_sorted_by_order(self):
        middleware = WebFilterChainMiddleware(_make_app(), filters=[TraceFilter(), HeaderFilter()])
        assert [type(f) for f in middleware.filters] == [HeaderFilter, TraceFilter]

    def test_outer_filter_sees_inner_headers(self):
        """TraceFilter is inner (higher order) and runs first on the way out."""
        client = TestClient(_make_app(TraceFilter(), HeaderFilter()))
        resp = client.get("/test")
        assert resp.headers["X-Filter-A"] == "applied"
        assert resp.headers["X-Filter-B"] == "unset"

    def test_csrf_filter_runs_before_default_filters(self):
        assert get_order(CsrfFilter) < get_order(TraceFilter)


class TestFilterChainConditionalSkip:
    def test_filter_applies_to_other_paths(self):
        client = TestClient(_make_app(CountingFilter()))
        assert client.get("/api/data").headers.get("X-Counted") == "1"

    def test_ignored_path_skips_filter(self):
        counting = CountingFilter()
        client = TestClient(_make_app(counting))
        assert "X-Counted" not in client.get("/health").headers
        assert counting.calls == 0

    def test_filter_runs_once_when_chain_installed_twice(self):
        counting = CountingFilter()
        app = _make_app(counting)
        app.add_middleware(WebFilterChainMiddleware, filters=[counting])
        client = TestClient(app)

        assert client.get("/api/data").headers["X-Counted"] == "1"
        assert counting.calls == 1


class TestFilterChainShortCircuit:
    def test_short_circuit_returns_early(self):
        client = TestClient(_make_app(ShortCircuitFilter()))
        resp = client.get("/test")
        assert resp.status_code == 429
        assert resp.json() == {"error": "blocked"}

    def test_csrf_rejection_skips_inner_filters(self):
        client = TestClient(_make_app(CsrfFilter(), TraceFilter()))
        resp = client.post("/api/data")
        assert resp.status_code == 403
        assert "X-Filter-B" not in resp.headers


class TestFilterChainEmpty:
    def test_no_filters_passes_through(self):
        client = TestClient(_make_app())
        resp = client.get("/test")
        assert resp.status_code == 200
        assert resp.text == "OK"
