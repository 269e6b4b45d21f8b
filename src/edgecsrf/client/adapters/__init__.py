"""HTTP client adapters."""

from edgecsrf.client.adapters.httpx_auth import CsrfAuth

__all__ = ["CsrfAuth"]
