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
"""Request policy gate — which method/path combinations need a CSRF check."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from edgecsrf.kernel.exceptions import CsrfConfigurationException

if TYPE_CHECKING:
    from edgecsrf.config.properties.csrf import CsrfProperties

DEFAULT_UNSAFE_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH", "DELETE"})
"""HTTP methods that change state and therefore require validation."""

ALWAYS_SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS"})
"""Methods that may never be configured as unsafe."""

DEFAULT_EXEMPT_PATHS: tuple[str, ...] = ("/api/webhooks/stripe", "/api/webhooks/")
DEFAULT_PROTECTED_PATHS: tuple[str, ...] = ("/api/",)


def _normalize_methods(methods: Iterable[str]) -> frozenset[str]:
    normalized = frozenset(m.strip().upper() for m in methods if m and m.strip())
    forbidden = normalized & ALWAYS_SAFE_METHODS
    if forbidden:
        raise CsrfConfigurationException(
            f"Safe methods cannot require CSRF protection: {sorted(forbidden)}",
            code="CSRF_BAD_METHODS",
        )
    if not normalized:
        raise CsrfConfigurationException(
            "At least one unsafe HTTP method must be configured",
            code="CSRF_BAD_METHODS",
        )
    return normalized


@dataclass(frozen=True)
class CsrfRequestPolicy:
    """Immutable gate built once at startup and shared by every request.

    Attributes:
        unsafe_methods: Upper-cased methods that require validation.
        exempt_paths: Literal paths or prefixes that skip validation, such as
            webhook callbacks authenticated by their own signature header.
        protected_paths: Prefixes in scope for enforcement (typically the API).
    """

    unsafe_methods: frozenset[str] = DEFAULT_UNSAFE_METHODS
    exempt_paths: tuple[str, ...] = DEFAULT_EXEMPT_PATHS
    protected_paths: tuple[str, ...] = DEFAULT_PROTECTED_PATHS

    def __post_init__(self) -> None:
        object.__setattr__(self, "unsafe_methods", _normalize_methods(self.unsafe_methods))
        object.__setattr__(self, "exempt_paths", tuple(p for p in self.exempt_paths if p))
        object.__setattr__(self, "protected_paths", tuple(p for p in self.protected_paths if p))

    @classmethod
    def from_properties(cls, properties: CsrfProperties) -> CsrfRequestPolicy:
        return cls(
            unsafe_methods=frozenset(properties.unsafe_methods),
            exempt_paths=tuple(properties.exempt_paths),
            protected_paths=tuple(properties.protected_paths),
        )

    def is_unsafe_method(self, method: str) -> bool:
        return method.upper() in self.unsafe_methods

    def is_exempt(self, path: str) -> bool:
        """Return ``True`` if *path* equals or starts with an exempt entry."""
        return any(path == exempt or path.startswith(exempt) for exempt in self.exempt_paths)

    def is_protected_path(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.protected_paths)

    def requires_protection(self, method: str, path: str) -> bool:
        """Decide whether a request must carry a valid CSRF token."""
        if not self.is_unsafe_method(method):
            return False
        if self.is_exempt(path):
            return False
        return self.is_protected_path(path)
