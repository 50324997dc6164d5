"""Core resolution service — the single entry point callers use.

Pipeline
--------
1. Validate the URL (non-empty, ``http(s)``, accepted host).
2. Extract the video identifier.
3. Resolve the format label to a format code.
4. Ask the :class:`~ytd_resolve.core.orchestrator.FallbackOrchestrator`.
5. Fall back to :class:`~ytd_resolve.core.synthetic.SyntheticLinkGenerator`.

Guarantees
----------
* Only input validation produces an error outcome.
* Backend failures never surface; at worst the outcome is ``synthetic``.
* :class:`~ytd_resolve.exceptions.SyntheticGenerationError` is the only
  exception that escapes :meth:`ResolutionService.resolve`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from ytd_resolve.core.formats import DEFAULT_FORMAT_LABEL, FormatCatalog
from ytd_resolve.core.identifier import (
    ACCEPTED_HOSTS,
    extract_video_id,
    is_allowed_host,
    is_valid_video_id,
)
from ytd_resolve.core.models import BackendQuery, Provenance, ResolutionOutcome
from ytd_resolve.core.orchestrator import FallbackOrchestrator
from ytd_resolve.core.synthetic import SyntheticLinkGenerator
from ytd_resolve.exceptions import IdentifierNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResolutionService:
    """Stateless service turning a page URL into a direct link outcome.

    Parameters
    ----------
    orchestrator:
        Backend fallback chain.
    generator:
        Synthetic link fabricator used when every backend fails.
    catalog:
        Format-label lookup table.
    accepted_hosts:
        Host allowlist; subdomains of each entry are accepted too.
    default_format:
        Label used when the caller supplies none.
    now:
        Timestamp source for outcomes.
    """

    def __init__(
        self,
        orchestrator: FallbackOrchestrator,
        generator: SyntheticLinkGenerator | None = None,
        catalog: FormatCatalog | None = None,
        *,
        accepted_hosts: tuple[str, ...] = ACCEPTED_HOSTS,
        default_format: str = DEFAULT_FORMAT_LABEL,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._orchestrator = orchestrator
        self._generator = generator if generator is not None else SyntheticLinkGenerator()
        self._catalog = catalog if catalog is not None else FormatCatalog()
        self._accepted_hosts = accepted_hosts
        self._default_format = default_format
        self._now = now

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(
        self,
        raw_url: str,
        format_label: str | None = None,
        *,
        deadline: float | None = None,
    ) -> ResolutionOutcome:
        """Resolve *raw_url* and return an outcome (never an input exception).

        Input failures become ``status="error"`` outcomes carrying the
        ``invalid_url`` or ``identifier_not_found`` reason.
        """
        try:
            return self.resolve_or_raise(raw_url, format_label, deadline=deadline)
        except (InvalidInputError, IdentifierNotFoundError) as exc:
            logger.info("Rejected %r: %s", raw_url, exc)
            return ResolutionOutcome(
                status="error",
                reason=exc.reason,
                resolved_at=self._now(),
            )

    def resolve_or_raise(
        self,
        raw_url: str,
        format_label: str | None = None,
        *,
        deadline: float | None = None,
    ) -> ResolutionOutcome:
        """Like :meth:`resolve` but raise on invalid input.

        Raises
        ------
        InvalidInputError
            If the URL is empty, not ``http(s)``, or on a foreign host.
        IdentifierNotFoundError
            If no extraction rule matches.
        SyntheticGenerationError
            If fallback link fabrication is impossible.
        """
        url = self._validate_url(raw_url)
        video_id = self._extract(url)
        format_code = self._catalog.resolve(format_label or self._default_format)

        query = BackendQuery(original_url=url, video_id=video_id, format_code=format_code)
        result = self._orchestrator.resolve(query, deadline=deadline)

        if result is not None:
            return ResolutionOutcome(
                status="success",
                video_id=video_id,
                format_code=format_code,
                primary_link=result.primary_link,
                alternative_links=result.alternative_links,
                provenance=Provenance.BACKEND,
                backend=result.backend,
                title=result.title,
                author=result.author,
                resolved_at=self._now(),
            )

        logger.info("All backends failed for %s; fabricating links", video_id)
        links = self._generator.generate(video_id, format_code)
        return ResolutionOutcome(
            status="success",
            video_id=video_id,
            format_code=format_code,
            primary_link=links[0],
            alternative_links=links[1:],
            provenance=Provenance.SYNTHETIC,
            resolved_at=self._now(),
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_url(self, raw_url: str | None) -> str:
        """Return the stripped URL or raise :class:`InvalidInputError`."""
        url = (raw_url or "").strip()
        if not url:
            raise InvalidInputError("URL must not be empty.")
        if not is_allowed_host(url, self._accepted_hosts):
            raise InvalidInputError(
                f"Unsupported URL: {url}",
                hint="Only YouTube watch, shorts, embed and youtu.be links are accepted.",
            )
        return url

    @staticmethod
    def _extract(url: str) -> str:
        video_id = extract_video_id(url)
        if video_id is None or not is_valid_video_id(video_id):
            raise IdentifierNotFoundError(
                f"Could not extract a video ID from {url}",
            )
        return video_id
