"""Unified exception hierarchy for edgecsrf.

All library exceptions inherit from EdgeCsrfException, enabling unified
error handling across modules.

Categories:
- SecurityException: CSRF validation failures surfaced as exceptions
- ConfigurationException: invalid or unusable setup detected at startup
- InfrastructureException: the host platform cannot provide a primitive
  (e.g. no OS random source)

Per-request CSRF outcomes are *values* (see ``ValidationResult``); these
exceptions are raised only where a caller opts in, or where the process
must refuse to run.
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class EdgeCsrfException(Exception):
    """Base exception for all edgecsrf errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CSRF_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(EdgeCsrfException):
    """Request integrity and authorization errors."""


class CsrfValidationException(SecurityException):
    """A submitted CSRF token did not validate.

    The ``reason`` attribute is for logs and diagnostics only; it must never
    be echoed back to the HTTP client.
    """

    def __init__(self, reason: str, context: dict | None = None) -> None:
        super().__init__("CSRF validation failed", code="CSRF_INVALID", context=context)
        self.reason = reason


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(EdgeCsrfException):
    """The library was configured in a way it cannot honour."""


class CsrfConfigurationException(ConfigurationException):
    """CSRF protection cannot be enabled safely with the given settings."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(EdgeCsrfException):
    """The host platform failed to provide a required capability."""


class RandomSourceUnavailableException(InfrastructureException):
    """The operating system's cryptographic random source is unavailable."""
