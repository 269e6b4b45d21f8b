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
"""CSRF configuration properties."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from edgecsrf.core.config import config_properties
from edgecsrf.security.cookies import ONE_DAY_SECONDS
from edgecsrf.security.crypto import DEFAULT_TOKEN_LENGTH
from edgecsrf.security.policy import (
    DEFAULT_EXEMPT_PATHS,
    DEFAULT_PROTECTED_PATHS,
    DEFAULT_UNSAFE_METHODS,
)


class RotationPolicy(str, Enum):
    """When safe-method requests receive a new token pair."""

    EVERY_REQUEST = "every-request"
    PRESERVE = "preserve"


@config_properties(prefix="edgecsrf.csrf")
@dataclass(frozen=True)
class CsrfProperties:
    """Configuration for CSRF protection (edgecsrf.csrf.*).

    Bound once at process start and read-only afterwards.
    """

    environment: str = "development"
    token_length: int = DEFAULT_TOKEN_LENGTH
    header_name: str = "X-CSRF-Token"
    token_cookie_name: str = "csrf_token"
    secret_cookie_name: str = "__Host-csrf_secret"
    cookie_path: str = "/"
    same_site: str = "Strict"
    max_age: int = ONE_DAY_SECONDS
    rotation: RotationPolicy = RotationPolicy.EVERY_REQUEST
    unsafe_methods: tuple[str, ...] = tuple(sorted(DEFAULT_UNSAFE_METHODS))
    exempt_paths: tuple[str, ...] = DEFAULT_EXEMPT_PATHS
    protected_paths: tuple[str, ...] = DEFAULT_PROTECTED_PATHS
    ignored_paths: tuple[str, ...] = ()
