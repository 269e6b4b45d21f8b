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
"""Crypto primitives — random tokens, HMAC-SHA256 signing, constant-time checks.

Every function here is pure apart from the single CSPRNG draw in
:func:`generate_random_token`, and is safe to call concurrently.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets

from edgecsrf.kernel.exceptions import (
    CsrfConfigurationException,
    RandomSourceUnavailableException,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_TOKEN_LENGTH: int = 32
"""Number of random bytes drawn for tokens and secrets."""

SIGNATURE_ALGORITHM: str = "sha256"
"""Digest used inside the HMAC construction."""


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------
def generate_random_token(length_bytes: int = DEFAULT_TOKEN_LENGTH) -> str:
    """Generate a cryptographically-secure random token.

    Args:
        length_bytes: Number of random bytes to draw.

    Returns:
        The bytes hex-encoded, two lowercase characters per byte.

    Raises:
        ValueError: If *length_bytes* is not positive.
        RandomSourceUnavailableException: If the OS random source cannot be
            read. There is no fallback to a weaker generator.
    """
    if length_bytes < 1:
        raise ValueError(f"length_bytes must be positive, got {length_bytes}")
    try:
        raw = secrets.token_bytes(length_bytes)
    except NotImplementedError as exc:
        raise RandomSourceUnavailableException(
            "No cryptographic random source available",
            code="CSPRNG_UNAVAILABLE",
        ) from exc
    return raw.hex()


def sign(message: str, secret: str) -> str:
    """Return the hex HMAC-SHA256 of *message* keyed by *secret* (both UTF-8)."""
    mac = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256)
    return mac.hexdigest()


def constant_time_equals(left: str, right: str) -> bool:
    """Compare two strings without an early exit on the first difference.

    A length mismatch returns ``False`` immediately; signature length is fixed
    and public, so nothing is leaked. For equal lengths every position is
    XOR-accumulated before the result is inspected.
    """
    if len(left) != len(right):
        return False

    result = 0
    for x, y in zip(left, right):
        result |= ord(x) ^ ord(y)
    return result == 0


def verify(message: str, signature: str, secret: str) -> bool:
    """Check *signature* against a freshly computed ``sign(message, secret)``."""
    expected = sign(message, secret)
    return constant_time_equals(signature, expected)


def ensure_signing_available() -> None:
    """Fail fast when HMAC-SHA256 cannot be computed on this interpreter.

    Raises:
        CsrfConfigurationException: If ``sha256`` is missing from hashlib.
    """
    if SIGNATURE_ALGORITHM not in hashlib.algorithms_available:
        raise CsrfConfigurationException(
            "HMAC-SHA256 is not available; refusing to start without CSRF signing",
            code="CSRF_SIGNING_UNAVAILABLE",
        )
