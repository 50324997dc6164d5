"""Domain models for ytd-resolve.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and rendering.  They carry zero I/O, zero
dependencies on external packages, and live for a single resolution
call (configuration descriptors excepted).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Provenance(str, Enum):
    """Where the chosen link came from."""

    BACKEND = "backend"
    SYNTHETIC = "synthetic"


class BodyEncoding(str, Enum):
    """How a backend expects its request body to be encoded."""

    FORM = "form"
    JSON = "json"


# ---------------------------------------------------------------------------
# Format request
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FormatRequest:
    """A human-supplied format label and its resolved format code."""

    label: str
    """Label as supplied by the caller (e.g. ``mp3``, ``1080p``)."""

    code: str
    """Backend-specific numeric format code (e.g. ``140``)."""


# ---------------------------------------------------------------------------
# Backend configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BackendDescriptor:
    """Static configuration for one third-party backend.

    The ordered tuple of descriptors held by the configuration defines
    fallback priority, first to last.
    """

    name: str
    """Unique, human-readable backend name (used in logs and outcomes)."""

    kind: str
    """Response grammar / adapter variant (``mates``, ``direct_link``,
    ``link_list`` or ``ytdlp``)."""

    endpoint: str = ""
    """Request URL.  Empty for local backends."""

    method: str = "POST"

    encoding: BodyEncoding = BodyEncoding.FORM

    fields: tuple[tuple[str, str], ...] = ()
    """Request fields as ``(name, template)`` pairs.  Templates may use
    ``{url}``, ``{video_id}`` and ``{format_code}``; they are sent as the
    body for ``POST`` and as query parameters for ``GET``."""

    headers: tuple[tuple[str, str], ...] = ()
    """Extra headers merged over the browser defaults."""

    timeout: float = 20.0
    """Per-call timeout in seconds."""


@dataclass(frozen=True, slots=True)
class BackendQuery:
    """Input handed to a backend adapter for one call."""

    original_url: str
    video_id: str
    format_code: str


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class NormalizedLinkResult:
    """Backend-agnostic link result produced by an adapter."""

    backend: str
    primary_link: str
    alternative_links: tuple[str, ...] = ()
    title: str | None = None
    author: str | None = None

    def __bool__(self) -> bool:
        return bool(self.primary_link)


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    """Final, externally visible result of one resolution call."""

    status: str
    """``success`` or ``error``."""

    resolved_at: datetime
    video_id: str | None = None
    format_code: str | None = None
    primary_link: str | None = None
    alternative_links: tuple[str, ...] = ()
    provenance: Provenance | None = None
    backend: str | None = None
    title: str | None = None
    author: str | None = None
    reason: str | None = None
    """Error reason (``invalid_url`` / ``identifier_not_found``)."""

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict[str, Any]:
        """Render the outcome in its wire shape."""
        if not self.ok:
            return {"status": self.status, "reason": self.reason}

        result: dict[str, Any] = {
            "status": self.status,
            "video_id": self.video_id,
            "format_code": self.format_code,
            "primary_link": self.primary_link,
            "alternative_links": list(self.alternative_links),
            "provenance": self.provenance.value if self.provenance else None,
            "resolved_at": self.resolved_at.isoformat(),
        }
        if self.backend:
            result["backend"] = self.backend
        if self.title:
            result["title"] = self.title
        if self.author:
            result["author"] = self.author
        return result
