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
"""StructlogAdapter — structlog setup for CSRF security events.

The CSRF filter emits ``csrf_rejected`` events with a ``reason`` and never
passes token material to the logger. The adapter still installs a
redaction processor so that application code sharing the same structlog
pipeline cannot leak a signed token or secret by logging request headers
or cookies.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, MutableMapping
from typing import Any

import structlog

from edgecsrf.core.config import Config

REDACTED = "***FILTERED***"

DEFAULT_SENSITIVE_KEYS: frozenset[str] = frozenset({
    "cookie",
    "cookies",
    "secret",
    "signed_token",
    "token",
})


def _normalize_key(key: str) -> str:
    return key.strip().lower().replace("-", "_")


class CsrfRedactor:
    """structlog processor that masks CSRF tokens, secrets and cookie headers.

    Keys are matched case-insensitively with ``-`` and ``_`` treated alike,
    so ``X-CSRF-Token`` and ``x_csrf_token`` are the same key. Nested dicts
    (a ``headers`` mapping, say) are redacted too.
    """

    def __init__(self, keys: Iterable[str] = DEFAULT_SENSITIVE_KEYS) -> None:
        self.keys = frozenset(_normalize_key(k) for k in keys if k)

    def __call__(self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        for key, value in list(event_dict.items()):
            event_dict[key] = self._redact(key, value)
        return event_dict

    def _redact(self, key: Any, value: Any) -> Any:
        if isinstance(key, str) and _normalize_key(key) in self.keys:
            return REDACTED
        if isinstance(value, dict):
            return {k: self._redact(k, v) for k, v in value.items()}
        return value


class StructlogAdapter:
    """Configures structlog from the ``edgecsrf.logging`` config section.

    The configured CSRF header and cookie names are added to the redacted
    keys, so renaming them in config keeps them out of the logs as well.
    """

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}
        self._redactor = CsrfRedactor()

    @property
    def redactor(self) -> CsrfRedactor:
        return self._redactor

    def configure(self, config: Config) -> None:
        level_section = dict(config.get_section("edgecsrf.logging.level"))
        self._root_level = str(level_section.pop("root", "INFO")).upper()
        self._module_levels = {k: str(v).upper() for k, v in level_section.items()}
        self._format = str(config.get("edgecsrf.logging.format", "console")).lower()

        configured_names = (
            config.get("edgecsrf.csrf.header-name"),
            config.get("edgecsrf.csrf.token-cookie-name"),
            config.get("edgecsrf.csrf.secret-cookie-name"),
        )
        self._redactor = CsrfRedactor(
            [*DEFAULT_SENSITIVE_KEYS, "x-csrf-token", "csrf_token", *(str(n) for n in configured_names if n)]
        )

        self._setup_structlog()
        for module, level in self._module_levels.items():
            logging.getLogger(module).setLevel(getattr(logging, level, logging.INFO))

    def _setup_structlog(self) -> None:
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            self._redactor,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.UnicodeDecoder(),
        ]
        if self._format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
