"""edgecsrf client — helpers for callers of CSRF-protected endpoints."""

from edgecsrf.client.csrf import get_csrf_headers, get_csrf_token, method_requires_csrf

__all__ = ["get_csrf_headers", "get_csrf_token", "method_requires_csrf"]
