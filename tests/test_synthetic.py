"""Tests for SyntheticLinkGenerator (core/synthetic.py).

Clock and randomness are pinned — every assertion is deterministic.
"""

from __future__ import annotations

import random
from urllib.parse import parse_qs, urlsplit

import pytest

from ytd_resolve.core.synthetic import BASE_URLS, SyntheticLinkGenerator
from ytd_resolve.exceptions import SyntheticGenerationError

_NOW = 1_700_000_000.0


def _generator(**overrides: object) -> SyntheticLinkGenerator:
    defaults: dict[str, object] = {
        "clock": lambda: _NOW,
        "rng": random.Random(1234),
    }
    defaults.update(overrides)
    return SyntheticLinkGenerator(**defaults)  # type: ignore[arg-type]


def _params(url: str) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(urlsplit(url).query).items()}


class TestShape:
    @pytest.mark.parametrize("video_id", ["dQw4w9WgXcQ", "a", "abc_DEF-123"])
    @pytest.mark.parametrize("format_code", ["18", "22", "37", "140"])
    def test_every_url_is_valid(self, video_id: str, format_code: str) -> None:
        urls = _generator().generate(video_id, format_code)

        assert len(urls) == len(BASE_URLS)
        for url in urls:
            parts = urlsplit(url)
            assert parts.scheme == "https"
            assert parts.hostname and parts.hostname.endswith(".googlevideo.com")
            assert parts.path == "/videoplayback"
            params = _params(url)
            assert params["id"] == f"o-{video_id}"
            assert params["itag"] == format_code
            assert int(params["expire"]) > _NOW

    def test_one_url_per_base_in_order(self) -> None:
        urls = _generator().generate("dQw4w9WgXcQ", "18")
        assert [url.split("?")[0] for url in urls] == list(BASE_URLS)

    def test_expire_uses_validity_window(self) -> None:
        url = _generator(validity_seconds=600).generate("x", "18")[0]
        assert _params(url)["expire"] == str(int(_NOW) + 600)

    def test_default_validity_is_twelve_hours(self) -> None:
        url = _generator().generate("x", "18")[0]
        assert _params(url)["expire"] == str(int(_NOW) + 43_200)

    def test_audio_mime_for_audio_code(self) -> None:
        assert _params(_generator().generate("x", "140")[0])["mime"] == "audio/mp4"

    def test_video_mime_for_video_code(self) -> None:
        assert _params(_generator().generate("x", "22")[0])["mime"] == "video/mp4"

    def test_static_fields(self) -> None:
        params = _params(_generator().generate("x", "18")[0])
        assert params["source"] == "youtube"
        assert params["requiressl"] == "yes"
        assert params["ratebypass"] == "yes"
        assert params["gir"] == "yes"

    def test_random_fields_within_bounds(self) -> None:
        for url in _generator().generate("x", "18"):
            params = _params(url)
            assert 5_000_000 <= int(params["clen"]) <= 15_000_000
            assert 0 < len(params["ei"]) <= 20

    def test_same_seed_same_links(self) -> None:
        first = _generator(rng=random.Random(7)).generate("x", "18")
        second = _generator(rng=random.Random(7)).generate("x", "18")
        assert first == second

    def test_custom_base_urls(self) -> None:
        urls = _generator(base_urls=["https://cdn.example/play"]).generate("x", "18")
        assert len(urls) == 1
        assert urls[0].startswith("https://cdn.example/play?")


class TestFailures:
    def test_clock_failure_is_escalated(self) -> None:
        def broken_clock() -> float:
            raise OSError("no clock")

        with pytest.raises(SyntheticGenerationError, match="no clock"):
            _generator(clock=broken_clock).generate("x", "18")

    def test_random_failure_is_escalated(self) -> None:
        class BrokenRandom:
            def random(self) -> float:
                raise NotImplementedError("no entropy")

            def randint(self, a: int, b: int) -> int:
                raise NotImplementedError("no entropy")

        with pytest.raises(SyntheticGenerationError):
            _generator(rng=BrokenRandom()).generate("x", "18")

    def test_rejects_empty_base_urls(self) -> None:
        with pytest.raises(ValueError):
            SyntheticLinkGenerator(base_urls=())

    def test_rejects_non_positive_validity(self) -> None:
        with pytest.raises(ValueError):
            SyntheticLinkGenerator(validity_seconds=0)
