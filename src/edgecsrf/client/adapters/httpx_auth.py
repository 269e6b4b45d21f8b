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
"""CsrfAuth — httpx authentication hook that submits the CSRF header."""

from __future__ import annotations

from collections.abc import Generator, Iterable

import httpx
import structlog

from edgecsrf.client.csrf import (
    DEFAULT_HEADER_NAME,
    DEFAULT_TOKEN_COOKIE,
    get_csrf_token,
    method_requires_csrf,
)
from edgecsrf.security.policy import DEFAULT_UNSAFE_METHODS

logger = structlog.get_logger("edgecsrf.client")


class CsrfAuth(httpx.Auth):
    """Add ``X-CSRF-Token`` to unsafe-method requests sent through httpx.

    The token is read from the request's ``Cookie`` header, which httpx fills
    from the client's cookie jar, so the flow works with both ``httpx.Client``
    and ``httpx.AsyncClient`` (and Starlette's ``TestClient``)::

        client = httpx.Client(base_url=url, auth=CsrfAuth())
        client.get("/dashboard")             # receives csrf cookies
        client.post("/api/deals", json=...)  # header added automatically

    Args:
        cookie_name: Cookie carrying the signed token.
        header_name: Header the server expects.
        unsafe_methods: Methods that need the header.
        skip: Disable header injection (the request is sent as-is).
    """

    def __init__(
        self,
        cookie_name: str = DEFAULT_TOKEN_COOKIE,
        header_name: str = DEFAULT_HEADER_NAME,
        unsafe_methods: Iterable[str] = DEFAULT_UNSAFE_METHODS,
        skip: bool = False,
    ) -> None:
        self.cookie_name = cookie_name
        self.header_name = header_name
        self.unsafe_methods = frozenset(m.upper() for m in unsafe_methods)
        self.skip = skip

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if not self.skip and method_requires_csrf(request.method, self.unsafe_methods):
            token = get_csrf_token(request.headers.get("cookie"), self.cookie_name)
            if token:
                request.headers[self.header_name] = token
            else:
                logger.warning(
                    "csrf_token_missing",
                    url=str(request.url),
                    method=request.method,
                )
        yield request
