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
"""Starlette wiring — build or retrofit an app with CSRF protection."""

from __future__ import annotations

from collections.abc import Sequence

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from edgecsrf.config.properties.csrf import CsrfProperties
from edgecsrf.core.config import Config
from edgecsrf.kernel.exceptions import CsrfConfigurationException
from edgecsrf.logging.structlog_adapter import StructlogAdapter
from edgecsrf.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from edgecsrf.web.adapters.starlette.filters.csrf_filter import CsrfFilter
from edgecsrf.web.ports.filter import WebFilter


def create_csrf_filter(config: Config) -> CsrfFilter:
    """Bind ``edgecsrf.csrf.*`` from *config* and build the filter.

    Raises:
        CsrfConfigurationException: If binding or validation fails. The
            process is expected to stop rather than run unprotected.
    """
    try:
        properties = config.bind(CsrfProperties)
    except ValueError as exc:
        raise CsrfConfigurationException(str(exc), code="CSRF_BAD_CONFIG") from exc
    return CsrfFilter(properties)


def install_csrf_protection(
    app: Starlette,
    properties: CsrfProperties | None = None,
    *,
    extra_filters: Sequence[WebFilter] = (),
) -> CsrfFilter:
    """Add a filter chain holding a :class:`CsrfFilter` to an existing app.

    Must be called before the app starts serving requests.
    """
    csrf_filter = CsrfFilter(properties)
    app.add_middleware(WebFilterChainMiddleware, filters=[csrf_filter, *extra_filters])
    return csrf_filter


def create_app(
    routes: Sequence[BaseRoute] = (),
    *,
    config: Config | None = None,
    extra_filters: Sequence[WebFilter] = (),
    configure_logging: bool = False,
    debug: bool = False,
) -> Starlette:
    """Create a Starlette application guarded by CSRF protection.

    Includes:
    - WebFilter chain (CSRF filter + user filters, sorted by ``@order``)
    - structlog configuration from ``edgecsrf.logging.*`` (when configure_logging)
    """
    config = config or Config.from_sources(".")
    if configure_logging:
        StructlogAdapter().configure(config)

    filters: list[WebFilter] = [create_csrf_filter(config), *extra_filters]

    return Starlette(
        debug=debug,
        routes=list(routes),
        middleware=[Middleware(WebFilterChainMiddleware, filters=filters)],
    )
