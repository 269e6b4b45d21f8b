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
"""CSRF token lifecycle — signed token/secret pairs and their validation.

A pair is two independent random values: the *token*, which client code may
read, and the *secret*, which only ever travels in an HttpOnly cookie. The
client echoes ``token.signature`` back in a header; validity is recomputed
from that header and the secret cookie alone, so nothing is stored server-side.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from edgecsrf.kernel.exceptions import CsrfValidationException
from edgecsrf.security.crypto import DEFAULT_TOKEN_LENGTH, generate_random_token, sign, verify

SEPARATOR: str = "."


class InvalidReason(str, Enum):
    """Why a submitted signed token was rejected."""

    MISSING_INPUT = "missing-input"
    MALFORMED_SIGNED_TOKEN = "malformed-signed-token"
    SIGNATURE_MISMATCH = "signature-mismatch"


@dataclass(frozen=True)
class TokenPair:
    """A freshly minted CSRF credential."""

    token: str
    signed_token: str
    secret: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :meth:`CsrfTokenManager.validate`.

    Exactly one of ``token`` (when valid) or ``reason`` (when invalid) is set.
    """

    valid: bool
    token: str | None = None
    reason: InvalidReason | None = None

    @classmethod
    def ok(cls, token: str) -> ValidationResult:
        return cls(valid=True, token=token)

    @classmethod
    def invalid(cls, reason: InvalidReason) -> ValidationResult:
        return cls(valid=False, reason=reason)

    def raise_for_invalid(self) -> str:
        """Return the validated token, or raise :class:`CsrfValidationException`."""
        if not self.valid:
            reason = self.reason.value if self.reason is not None else "unknown"
            raise CsrfValidationException(reason)
        return self.token  # type: ignore[return-value]


class CsrfTokenManager:
    """Creates and validates signed CSRF token pairs.

    Holds no state besides the configured token length, so a single instance
    can serve every request concurrently.
    """

    def __init__(self, token_length: int = DEFAULT_TOKEN_LENGTH) -> None:
        if token_length < 1:
            raise ValueError(f"token_length must be positive, got {token_length}")
        self._token_length = token_length

    @property
    def token_length(self) -> int:
        return self._token_length

    def create_pair(self) -> TokenPair:
        """Mint a token and an independent secret, then sign the token."""
        token = generate_random_token(self._token_length)
        secret = generate_random_token(self._token_length)
        signature = sign(token, secret)
        return TokenPair(token=token, signed_token=f"{token}{SEPARATOR}{signature}", secret=secret)

    def validate(self, signed_token: str | None, secret: str | None) -> ValidationResult:
        """Check *signed_token* against the *secret* that should have produced it.

        Never raises for string input; every failure is reported as an
        ``invalid`` result carrying an :class:`InvalidReason`.
        """
        if not signed_token or not secret:
            return ValidationResult.invalid(InvalidReason.MISSING_INPUT)

        parts = signed_token.split(SEPARATOR)
        if len(parts) != 2:
            return ValidationResult.invalid(InvalidReason.MALFORMED_SIGNED_TOKEN)

        token, signature = parts
        if not token or not signature:
            return ValidationResult.invalid(InvalidReason.MALFORMED_SIGNED_TOKEN)

        try:
            matches = verify(token, signature, secret)
        except UnicodeEncodeError:
            # lone surrogates have no UTF-8 form, so nothing could have signed them
            return ValidationResult.invalid(InvalidReason.MALFORMED_SIGNED_TOKEN)
        if not matches:
            return ValidationResult.invalid(InvalidReason.SIGNATURE_MISMATCH)

        return ValidationResult.ok(token)


_default_manager = CsrfTokenManager()


def create_csrf_token() -> TokenPair:
    """Create a pair with the default 32-byte length."""
    return _default_manager.create_pair()


def validate_csrf_token(signed_token: str | None, secret: str | None) -> ValidationResult:
    """Validate with the default manager."""
    return _default_manager.validate(signed_token, secret)
