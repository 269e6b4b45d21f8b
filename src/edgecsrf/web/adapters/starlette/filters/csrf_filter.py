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
"""CsrfFilter — signed double-submit cookie CSRF protection.

Every request lands in one of three states:

* **Safe method** (anything outside the unsafe set): the request passes
  through and the response carries two cookies: ``csrf_token`` with the
  signed token (readable by JavaScript) and ``__Host-csrf_secret`` with the
  signing secret (``HttpOnly``).
* **Unsafe, exempt or out of scope**: webhook callbacks and paths outside
  the protected prefixes pass through untouched.
* **Unsafe, protected**: the ``X-CSRF-Token`` header must hold a signed
  token whose HMAC verifies under the secret cookie. Anything else is a
  403 with a generic body; the route handler never runs.

Paths matching ``ignored-paths`` (health checks and the like) bypass the
filter entirely. No server-side state is kept; a single filter instance
serves all requests.
"""

from __future__ import annotations

from typing import Any

import structlog
from starlette.responses import JSONResponse

from edgecsrf.config.properties.csrf import CsrfProperties, RotationPolicy
from edgecsrf.kernel.exceptions import CsrfConfigurationException
from edgecsrf.security.cookies import CookieOptions, is_production, parse_cookies, serialize_cookie
from edgecsrf.security.crypto import ensure_signing_available
from edgecsrf.security.policy import CsrfRequestPolicy
from edgecsrf.security.tokens import CsrfTokenManager, InvalidReason, TokenPair, ValidationResult
from edgecsrf.web.filters import OncePerRequestFilter
from edgecsrf.web.ordering import order
from edgecsrf.web.ports.filter import CallNext

logger = structlog.get_logger("edgecsrf.security.csrf")

HOST_COOKIE_PREFIX = "__Host-"
ALLOWED_SAME_SITE = frozenset({"Strict", "Lax"})
MIN_TOKEN_LENGTH = 16

REJECTION_BODY: dict[str, str] = {"error": "Forbidden", "message": "Invalid CSRF token"}


def _validate_properties(properties: CsrfProperties) -> None:
    """Refuse to build a filter that would silently weaken protection."""
    problems: list[str] = []
    if not properties.header_name:
        problems.append("header-name must not be empty")
    if not properties.token_cookie_name or not properties.secret_cookie_name:
        problems.append("cookie names must not be empty")
    elif properties.token_cookie_name == properties.secret_cookie_name:
        problems.append("token and secret cookies must have different names")
    if properties.secret_cookie_name.startswith(HOST_COOKIE_PREFIX) and properties.cookie_path != "/":
        problems.append(f"'{HOST_COOKIE_PREFIX}' cookies require cookie-path '/'")
    if properties.same_site not in ALLOWED_SAME_SITE:
        problems.append(f"same-site must be one of {sorted(ALLOWED_SAME_SITE)}, got '{properties.same_site}'")
    if properties.max_age <= 0:
        problems.append("max-age must be positive")
    if properties.token_length < MIN_TOKEN_LENGTH:
        problems.append(f"token-length must be at least {MIN_TOKEN_LENGTH} bytes")
    if not isinstance(properties.rotation, RotationPolicy):
        problems.append(f"unknown rotation policy '{properties.rotation}'")

    if problems:
        raise CsrfConfigurationException(
            "Invalid CSRF configuration: " + "; ".join(problems),
            code="CSRF_BAD_CONFIG",
            context={"problems": problems},
        )


@order(-50)
class CsrfFilter(OncePerRequestFilter):
    """Signed double-submit cookie CSRF filter.

    Ordering: runs early so that a forged request is rejected before any
    authentication or business filter sees it.

    Raises:
        CsrfConfigurationException: At construction, if the properties are
            unusable or HMAC-SHA256 is unavailable.
    """

    def __init__(
        self,
        properties: CsrfProperties | None = None,
        token_manager: CsrfTokenManager | None = None,
    ) -> None:
        props = properties or CsrfProperties()
        ensure_signing_available()
        _validate_properties(props)

        self._properties = props
        self.ignored_paths = tuple(props.ignored_paths)
        self._policy = CsrfRequestPolicy.from_properties(props)
        self._tokens = token_manager or CsrfTokenManager(props.token_length)
        self._production = is_production(props.environment)
        self._token_cookie = CookieOptions(
            path=props.cookie_path,
            same_site=props.same_site,
            secure=self._production,
            http_only=False,
            max_age=props.max_age,
        )
        # browsers drop __Host- cookies that lack Secure, in every environment
        self._secret_cookie = CookieOptions(
            path=props.cookie_path,
            same_site=props.same_site,
            secure=self._production or props.secret_cookie_name.startswith(HOST_COOKIE_PREFIX),
            http_only=True,
            max_age=props.max_age,
        )

    @property
    def policy(self) -> CsrfRequestPolicy:
        return self._policy

    @property
    def properties(self) -> CsrfProperties:
        return self._properties

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        method: str = request.method.upper()
        path: str = request.url.path

        if not self._policy.is_unsafe_method(method):
            cookies = parse_cookies(request.headers.get("cookie"))
            pair = self._pair_for_response(cookies)
            response = await call_next(request)
            self._attach_cookies(response, pair)
            return response

        if not self._policy.requires_protection(method, path):
            return await call_next(request)

        cookies = parse_cookies(request.headers.get("cookie"))
        result = self._tokens.validate(
            request.headers.get(self._properties.header_name),
            cookies.get(self._properties.secret_cookie_name),
        )
        if not result.valid:
            self._log_rejection(result, method, path)
            return JSONResponse(REJECTION_BODY, status_code=403)

        return await call_next(request)

    def _pair_for_response(self, cookies: dict[str, str]) -> TokenPair:
        """Return the pair to send back on a safe-method response."""
        if self._properties.rotation is RotationPolicy.PRESERVE:
            signed_token = cookies.get(self._properties.token_cookie_name)
            secret = cookies.get(self._properties.secret_cookie_name)
            existing = self._tokens.validate(signed_token, secret)
            if existing.valid and signed_token and secret:
                return TokenPair(token=existing.token or "", signed_token=signed_token, secret=secret)
        return self._tokens.create_pair()

    def _attach_cookies(self, response: Any, pair: TokenPair) -> None:
        props = self._properties
        response.headers.append(
            "set-cookie",
            serialize_cookie(props.token_cookie_name, pair.signed_token, self._token_cookie, production=self._production),
        )
        response.headers.append(
            "set-cookie",
            serialize_cookie(props.secret_cookie_name, pair.secret, self._secret_cookie, production=self._production),
        )

    def _log_rejection(self, result: ValidationResult, method: str, path: str) -> None:
        reason = result.reason.value if result.reason is not None else "unknown"
        if result.reason is InvalidReason.SIGNATURE_MISMATCH:
            logger.warning("csrf_rejected", reason=reason, method=method, path=path, suspected_forgery=True)
        else:
            logger.info("csrf_rejected", reason=reason, method=method, path=path)
