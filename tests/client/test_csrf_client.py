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
"""Tests for client-side CSRF helpers and the httpx CsrfAuth flow."""

from __future__ import annotations

import httpx
import pytest

from edgecsrf.client.adapters.httpx_auth import CsrfAuth
from edgecsrf.client.csrf import get_csrf_headers, get_csrf_token, method_requires_csrf


class TestHelpers:
    def test_get_token_from_cookie_header(self) -> None:
        assert get_csrf_token("a=1; csrf_token=tok.sig") == "tok.sig"

    @pytest.mark.parametrize("header", [None, "", "a=1", "csrf_token="])
    def test_missing_token(self, header) -> None:
        assert get_csrf_token(header) is None

    def test_headers(self) -> None:
        assert get_csrf_headers("csrf_token=tok.sig") == {"X-CSRF-Token": "tok.sig"}

    def test_headers_empty_without_token(self) -> None:
        assert get_csrf_headers(None) == {}

    def test_custom_names(self) -> None:
        assert get_csrf_headers("xsrf=v", cookie_name="xsrf", header_name="X-XSRF") == {"X-XSRF": "v"}

    @pytest.mark.parametrize(("method", "expected"), [("post", True), ("DELETE", True), ("GET", False)])
    def test_method_requires_csrf(self, method: str, expected: bool) -> None:
        assert method_requires_csrf(method) is expected


def _echo_transport(seen: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    return httpx.MockTransport(handler)


class TestCsrfAuth:
    def test_adds_header_for_unsafe_method(self) -> None:
        seen: list[httpx.Request] = []
        client = httpx.Client(
            transport=_echo_transport(seen),
            base_url="https://app.example.com",
            cookies={"csrf_token": "tok.sig"},
            auth=CsrfAuth(),
        )

        client.post("/api/deals")

        assert seen[0].headers["X-CSRF-Token"] == "tok.sig"

    def test_leaves_safe_methods_alone(self) -> None:
        seen: list[httpx.Request] = []
        client = httpx.Client(
            transport=_echo_transport(seen),
            base_url="https://app.example.com",
            cookies={"csrf_token": "tok.sig"},
            auth=CsrfAuth(),
        )

        client.get("/api/deals")

        assert "X-CSRF-Token" not in seen[0].headers

    def test_missing_cookie_sends_request_without_header(self) -> None:
        seen: list[httpx.Request] = []
        client = httpx.Client(transport=_echo_transport(seen), auth=CsrfAuth())

        response = client.delete("https://app.example.com/api/deals/1")

        assert response.status_code == 200
        assert "X-CSRF-Token" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_async_client(self) -> None:
        seen: list[httpx.Request] = []
        async with httpx.AsyncClient(
            transport=_echo_transport(seen),
            base_url="https://app.example.com",
            cookies={"csrf_token": "tok.sig"},
            auth=CsrfAuth(),
        ) as client:
            await client.put("/api/deals/1")

        assert seen[0].headers["X-CSRF-Token"] == "tok.sig"
