"""Tests for ResolutionService (core/resolution_service.py).

Backends are faked at the protocol boundary; clock and randomness are
pinned.  Covers input validation, the backend path, the synthetic
fallback and three end-to-end scenarios.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from ytd_resolve.core.formats import FormatCatalog
from ytd_resolve.core.models import BackendQuery, NormalizedLinkResult, Provenance
from ytd_resolve.core.orchestrator import FallbackOrchestrator
from ytd_resolve.core.resolution_service import ResolutionService
from ytd_resolve.core.synthetic import SyntheticLinkGenerator
from ytd_resolve.exceptions import (
    BackendError,
    IdentifierNotFoundError,
    InvalidInputError,
    SyntheticGenerationError,
)

_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _adapter(name: str, link: str | None) -> MagicMock:
    """Fake adapter: returns *link*, or fails when *link* is ``None``."""
    adapter = MagicMock()
    adapter.name = name
    adapter.timeout = 5.0
    if link is None:
        adapter.call.side_effect = BackendError("down", backend=name, category="network")
    else:
        adapter.call.return_value = NormalizedLinkResult(
            backend=name,
            primary_link=link,
            alternative_links=(f"{link}?alt=1",),
            title="Title",
            author="Author",
        )
    return adapter


def _service(*adapters: MagicMock, **kwargs: object) -> ResolutionService:
    generator = SyntheticLinkGenerator(clock=lambda: 1_700_000_000.0, rng=random.Random(3))
    return ResolutionService(
        FallbackOrchestrator(adapters),
        generator,
        FormatCatalog(),
        now=lambda: _NOW,
        **kwargs,  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------

class TestScenarios:
    def test_all_backends_fail_yields_synthetic(self) -> None:
        backends = [_adapter("A", None), _adapter("B", None), _adapter("C", None)]
        outcome = _service(*backends).resolve("https://youtu.be/dQw4w9WgXcQ", "mp4")

        assert outcome.ok
        assert outcome.provenance is Provenance.SYNTHETIC
        assert outcome.video_id == "dQw4w9WgXcQ"
        assert outcome.format_code == "18"
        assert outcome.primary_link and "id=o-dQw4w9WgXcQ" in outcome.primary_link
        assert len(outcome.alternative_links) == 3
        assert outcome.backend is None
        assert outcome.to_dict()["provenance"] == "synthetic"

    def test_first_backend_success(self) -> None:
        a = _adapter("A", "https://a.example/audio.m4a")
        outcome = _service(a, _adapter("B", "https://b.example/x")).resolve(
            "https://www.youtube.com/watch?v=abc12345678", "mp3",
        )

        assert outcome.provenance is Provenance.BACKEND
        assert outcome.format_code == "140"
        assert outcome.primary_link == "https://a.example/audio.m4a"
        assert outcome.backend == "A"
        assert outcome.title == "Title"
        assert outcome.author == "Author"
        query: BackendQuery = a.call.call_args.args[0]
        assert query.video_id == "abc12345678"
        assert query.format_code == "140"
        assert query.original_url == "https://www.youtube.com/watch?v=abc12345678"

    def test_foreign_host_is_rejected_without_backend_calls(self) -> None:
        a = _adapter("A", "https://a.example/x")
        outcome = _service(a).resolve("https://example.com/not-a-video")

        assert outcome.to_dict() == {"status": "error", "reason": "invalid_url"}
        a.call.assert_not_called()


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

class TestValidation:
    @pytest.mark.parametrize("url", ["", "   ", "ftp://youtube.com/watch?v=x"])
    def test_invalid_url(self, url: str) -> None:
        outcome = _service(_adapter("A", "x")).resolve(url)
        assert outcome.status == "error"
        assert outcome.reason == "invalid_url"
        assert outcome.resolved_at == _NOW

    def test_identifier_not_found(self) -> None:
        a = _adapter("A", "https://a.example/x")
        outcome = _service(a).resolve("https://www.youtube.com/channel/UC123")

        assert outcome.to_dict() == {"status": "error", "reason": "identifier_not_found"}
        a.call.assert_not_called()

    def test_resolve_or_raise_raises_invalid_input(self) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            _service().resolve_or_raise("https://vimeo.com/123")
        assert exc_info.value.hint

    def test_resolve_or_raise_raises_identifier_not_found(self) -> None:
        with pytest.raises(IdentifierNotFoundError):
            _service().resolve_or_raise("https://youtu.be/")

    def test_custom_allowlist(self) -> None:
        svc = _service(accepted_hosts=("youtu.be",))
        assert svc.resolve("https://www.youtube.com/watch?v=abc").reason == "invalid_url"
        assert svc.resolve("https://youtu.be/abc").ok


# ---------------------------------------------------------------------------
# Format handling
# ---------------------------------------------------------------------------

class TestFormats:
    def test_missing_label_uses_default_format(self) -> None:
        outcome = _service().resolve("https://youtu.be/abc")
        assert outcome.format_code == "18"

    def test_unknown_label_uses_default_code(self) -> None:
        outcome = _service().resolve("https://youtu.be/abc", "flac")
        assert outcome.format_code == "18"

    def test_configured_default_label(self) -> None:
        outcome = _service(default_format="720p").resolve("https://youtu.be/abc")
        assert outcome.format_code == "22"


# ---------------------------------------------------------------------------
# Fallback behaviour
# ---------------------------------------------------------------------------

class TestFallback:
    def test_no_backends_configured_yields_synthetic(self) -> None:
        outcome = _service().resolve("https://youtu.be/abc", "mp3")
        assert outcome.provenance is Provenance.SYNTHETIC
        assert outcome.primary_link and "mime=audio%2Fmp4" in outcome.primary_link

    def test_backend_outcome_never_mixes_synthetic_links(self) -> None:
        outcome = _service(_adapter("A", "https://a.example/x")).resolve("https://youtu.be/abc")
        assert outcome.alternative_links == ("https://a.example/x?alt=1",)
        assert all("googlevideo" not in link for link in outcome.alternative_links)

    def test_synthetic_failure_propagates(self) -> None:
        generator = MagicMock()
        generator.generate.side_effect = SyntheticGenerationError("no entropy")
        svc = ResolutionService(FallbackOrchestrator([]), generator)

        with pytest.raises(SyntheticGenerationError):
            svc.resolve("https://youtu.be/abc")

    def test_deadline_is_forwarded(self) -> None:
        orchestrator = MagicMock()
        orchestrator.resolve.return_value = None
        svc = ResolutionService(orchestrator, SyntheticLinkGenerator())

        svc.resolve("https://youtu.be/abc", deadline=42.0)

        assert orchestrator.resolve.call_args.kwargs["deadline"] == 42.0
