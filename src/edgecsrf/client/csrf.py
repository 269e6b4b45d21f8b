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
"""Client-side helpers — echo the CSRF cookie back as a request header.

Python callers (scripts, service-to-service clients, end-to-end tests) need
the same behaviour a browser front end implements: read ``csrf_token`` from
the cookies received on a safe-method response and copy it verbatim into
``X-CSRF-Token`` on every state-changing request.
"""

from __future__ import annotations

from collections.abc import Iterable

from edgecsrf.security.cookies import parse_cookies
from edgecsrf.security.policy import DEFAULT_UNSAFE_METHODS

DEFAULT_TOKEN_COOKIE = "csrf_token"
DEFAULT_HEADER_NAME = "X-CSRF-Token"


def method_requires_csrf(method: str, unsafe_methods: Iterable[str] = DEFAULT_UNSAFE_METHODS) -> bool:
    return method.upper() in {m.upper() for m in unsafe_methods}


def get_csrf_token(cookie_header: str | None, cookie_name: str = DEFAULT_TOKEN_COOKIE) -> str | None:
    """Return the signed token from a ``Cookie`` header, or ``None``."""
    return parse_cookies(cookie_header).get(cookie_name) or None


def get_csrf_headers(
    cookie_header: str | None,
    cookie_name: str = DEFAULT_TOKEN_COOKIE,
    header_name: str = DEFAULT_HEADER_NAME,
) -> dict[str, str]:
    """Headers to merge into a state-changing request; empty when no token."""
    token = get_csrf_token(cookie_header, cookie_name)
    if not token:
        return {}
    return {header_name: token}
