"""Tests for the format catalog (core/formats.py)."""

from __future__ import annotations

import pytest

from ytd_resolve.core.formats import (
    DEFAULT_FORMAT_CODE,
    FormatCatalog,
    container_for,
    is_audio,
    quality_for,
)
from ytd_resolve.core.models import FormatRequest


class TestFormatCatalogResolve:
    @pytest.mark.parametrize(
        ("label", "code"),
        [
            ("mp3", "140"),
            ("mp4", "18"),
            ("720p", "22"),
            ("1080p", "37"),
            ("m4a", "140"),
        ],
    )
    def test_known_labels(self, label: str, code: str) -> None:
        assert FormatCatalog().resolve(label) == code

    def test_case_insensitive(self) -> None:
        catalog = FormatCatalog()
        assert catalog.resolve("MP3") == catalog.resolve("mp3") == "140"
        assert catalog.resolve("1080P") == "37"

    def test_surrounding_whitespace_ignored(self) -> None:
        assert FormatCatalog().resolve("  720p ") == "22"

    @pytest.mark.parametrize("label", [None, "", "   ", "flac", "4k", "mp3?"])
    def test_unknown_or_absent_falls_back_to_default(self, label: str | None) -> None:
        assert FormatCatalog().resolve(label) == DEFAULT_FORMAT_CODE

    def test_custom_table_and_default(self) -> None:
        catalog = FormatCatalog({"Opus": "251"}, default_code="22")
        assert catalog.resolve("opus") == "251"
        assert catalog.resolve("mp3") == "22"
        assert catalog.default_code == "22"
        assert catalog.labels == ("opus",)

    def test_table_is_read_only(self) -> None:
        source = {"mp3": "140"}
        catalog = FormatCatalog(source)
        source["mp3"] = "999"
        assert catalog.resolve("mp3") == "140"

    def test_request_builds_format_request(self) -> None:
        assert FormatCatalog().request("MP3") == FormatRequest(label="MP3", code="140")
        assert FormatCatalog().request(None) == FormatRequest(label="", code="18")


class TestCodeHelpers:
    def test_audio_detection(self) -> None:
        assert is_audio("140")
        assert not is_audio("18")

    def test_container(self) -> None:
        assert container_for("140") == "mp3"
        assert container_for("22") == "mp4"

    def test_quality(self) -> None:
        assert quality_for("22") == "720p"
        assert quality_for("37") == "1080p"
        assert quality_for("999") is None
