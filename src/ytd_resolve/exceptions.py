"""Custom exception hierarchy for ytd-resolve.

All exceptions that cross layer boundaries must inherit from
:class:`ResolverError`.  Raw third-party exceptions (e.g. from httpx or
yt-dlp) must NEVER propagate beyond the infrastructure layer — they must
be caught and re-raised as a typed subclass defined here.

Hierarchy
---------
ResolverError
├── InvalidInputError
├── IdentifierNotFoundError
├── BackendError
├── SyntheticGenerationError
├── ConfigurationError
└── EnvironmentError
"""

from __future__ import annotations


class ResolverError(Exception):
    """Base exception for all ytd-resolve errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Input validation ------------------------------------------------------

class InvalidInputError(ResolverError):
    """Raised when the URL is empty or fails the host allowlist."""

    reason: str = "invalid_url"


class IdentifierNotFoundError(ResolverError):
    """Raised when no extraction rule matches an accepted URL."""

    reason: str = "identifier_not_found"


# --- Backends --------------------------------------------------------------

class BackendError(ResolverError):
    """A single backend failed to produce a link.

    Recovered inside the fallback orchestrator and never surfaced to
    callers of the resolution service.
    """

    def __init__(
        self,
        message: str,
        *,
        backend: str,
        category: str = "unknown",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.backend: str = backend
        self.category: str = category
        """One of ``timeout``, ``network``, ``http_status``, ``malformed``,
        ``rejected``, ``environment`` or ``unknown``."""


# --- Synthetic fallback ----------------------------------------------------

class SyntheticGenerationError(ResolverError):
    """Raised when the clock or random source cannot be used."""


# --- Configuration / environment -------------------------------------------

class ConfigurationError(ResolverError):
    """Raised when a configuration file is missing or malformed."""


class EnvironmentError(ResolverError):
    """Raised when a required runtime dependency is not available."""
