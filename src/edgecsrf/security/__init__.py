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
"""edgecsrf security — stateless CSRF primitives (no web framework imports)."""

from edgecsrf.security.cookies import CookieOptions, is_production, parse_cookies, serialize_cookie
from edgecsrf.security.crypto import (
    constant_time_equals,
    ensure_signing_available,
    generate_random_token,
    sign,
    verify,
)
from edgecsrf.security.policy import CsrfRequestPolicy
from edgecsrf.security.tokens import (
    CsrfTokenManager,
    InvalidReason,
    TokenPair,
    ValidationResult,
    create_csrf_token,
    validate_csrf_token,
)

__all__ = [
    "CookieOptions",
    "CsrfRequestPolicy",
    "CsrfTokenManager",
    "InvalidReason",
    "TokenPair",
    "ValidationResult",
    "constant_time_equals",
    "create_csrf_token",
    "ensure_signing_available",
    "generate_random_token",
    "is_production",
    "parse_cookies",
    "serialize_cookie",
    "sign",
    "validate_csrf_token",
    "verify",
]
