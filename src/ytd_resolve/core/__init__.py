"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O; backends are reached only through the
  :class:`~ytd_resolve.core.protocols.BackendAdapter` protocol.
* No imports from ``cli`` or ``infra``.
* Clock and randomness are injected, never read from globals.
"""

from ytd_resolve.core.formats import FormatCatalog
from ytd_resolve.core.identifier import extract_video_id, is_allowed_host
from ytd_resolve.core.models import (
    BackendDescriptor,
    BackendQuery,
    BodyEncoding,
    FormatRequest,
    NormalizedLinkResult,
    Provenance,
    ResolutionOutcome,
)
from ytd_resolve.core.orchestrator import FallbackOrchestrator
from ytd_resolve.core.protocols import BackendAdapter
from ytd_resolve.core.resolution_service import ResolutionService
from ytd_resolve.core.synthetic import SyntheticLinkGenerator

__all__: list[str] = [
    "BackendAdapter",
    "BackendDescriptor",
    "BackendQuery",
    "BodyEncoding",
    "FallbackOrchestrator",
    "FormatCatalog",
    "FormatRequest",
    "NormalizedLinkResult",
    "Provenance",
    "ResolutionOutcome",
    "ResolutionService",
    "SyntheticLinkGenerator",
    "extract_video_id",
    "is_allowed_host",
]
