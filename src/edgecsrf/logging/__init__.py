"""edgecsrf logging — structlog configuration and CSRF redaction."""

from edgecsrf.logging.structlog_adapter import CsrfRedactor, StructlogAdapter

__all__ = ["CsrfRedactor", "StructlogAdapter"]
