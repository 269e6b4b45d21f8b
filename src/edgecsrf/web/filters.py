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
"""OncePerRequestFilter — base class for filters that must run at most once.

A filter chain can end up installed twice on the same app (``create_app``
followed by ``install_csrf_protection``, or a sub-application mounted under
a protected one). Running the CSRF filter twice would mint two token pairs
per response, so the base class records every filter class that has already
handled a request in the ASGI scope and skips repeats.
"""

from __future__ import annotations

import abc
from fnmatch import fnmatch
from typing import Any

from edgecsrf.web.ports.filter import CallNext

FILTERED_SCOPE_KEY = "edgecsrf.filtered"


class OncePerRequestFilter(abc.ABC):
    """Abstract base class for :class:`WebFilter` implementations.

    Attributes:
        ignored_paths: Glob patterns for paths this filter never handles,
            such as load-balancer health checks.
    """

    ignored_paths: tuple[str, ...] = ()

    def should_not_filter(self, request: Any) -> bool:
        if any(fnmatch(request.url.path, pattern) for pattern in self.ignored_paths):
            return True

        scope = getattr(request, "scope", None)
        if scope is None:
            return False
        filtered: set[str] = scope.setdefault(FILTERED_SCOPE_KEY, set())
        marker = type(self).__qualname__
        if marker in filtered:
            return True
        filtered.add(marker)
        return False

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Execute the filter logic.  Must call ``await call_next(request)`` to proceed."""
        ...
