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
"""Cookie codec — parse ``Cookie`` headers and build ``Set-Cookie`` values.

Kept free of any web-framework import so the CSRF core can run on any
request abstraction that exposes raw header strings.
"""

from __future__ import annotations

from dataclasses import dataclass

PRODUCTION_ENVIRONMENTS: frozenset[str] = frozenset({"production", "prod"})

ONE_DAY_SECONDS: int = 60 * 60 * 24


@dataclass(frozen=True)
class CookieOptions:
    """Attributes applied to an outgoing cookie."""

    path: str = "/"
    same_site: str = "Strict"
    secure: bool = False
    http_only: bool = False
    max_age: int = ONE_DAY_SECONDS


def is_production(environment: str | None) -> bool:
    """Return ``True`` when *environment* names a production deployment."""
    return (environment or "").strip().lower() in PRODUCTION_ENVIRONMENTS


def parse_cookies(header: str | None) -> dict[str, str]:
    """Parse a ``Cookie`` request header into a name/value mapping.

    Each pair is split on its *first* ``=`` only, so values may contain ``=``
    (base64 padding, for instance). Later duplicates overwrite earlier ones.
    """
    if not header:
        return {}

    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        name, _, value = pair.strip().partition("=")
        if name:
            cookies[name] = value
    return cookies


def serialize_cookie(
    name: str,
    value: str,
    options: CookieOptions | None = None,
    *,
    production: bool = False,
) -> str:
    """Build a ``Set-Cookie`` header value.

    Directive order is fixed: ``name=value``, ``Path``, ``SameSite``,
    ``Max-Age``, then ``Secure`` and ``HttpOnly`` when enabled. In production
    ``Secure`` is always emitted, whatever *options* says.
    """
    opts = options or CookieOptions()
    parts = [
        f"{name}={value}",
        f"Path={opts.path}",
        f"SameSite={opts.same_site}",
        f"Max-Age={opts.max_age}",
    ]
    if opts.secure or production:
        parts.append("Secure")
    if opts.http_only:
        parts.append("HttpOnly")
    return "; ".join(parts)
