"""edgecsrf web — framework-agnostic filter types.

The Starlette adapter lives in :mod:`edgecsrf.web.adapters.starlette`.
"""

from edgecsrf.web.filters import OncePerRequestFilter
from edgecsrf.web.ordering import HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE, get_order, order
from edgecsrf.web.ports.filter import CallNext, WebFilter

__all__ = [
    "HIGHEST_PRECEDENCE",
    "LOWEST_PRECEDENCE",
    "CallNext",
    "OncePerRequestFilter",
    "WebFilter",
    "get_order",
    "order",
]
