"""Shared pytest fixtures and configuration for the ytd-resolve test suite.

Guidelines
----------
* No internet access in any test.
* Backends are faked at the protocol boundary, or their HTTP traffic is
  intercepted with ``respx``.
* yt-dlp must be mocked at the infra boundary.
* Core tests must be pure — clock and randomness are pinned.
"""

from __future__ import annotations

import pytest

from ytd_resolve.infra.config import CONFIG_ENV_VAR


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's ``YTD_RESOLVE_CONFIG`` out of CLI tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
