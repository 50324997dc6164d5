"""Resolver configuration loader.

Priority (highest to lowest):

1. Explicit path (``--config``)
2. Environment variable (``YTD_RESOLVE_CONFIG``)
3. Built-in defaults

Config files are YAML::

    max_concurrency: 1
    default_format: mp4
    default_format_code: "18"
    synthetic_validity_seconds: 43200
    formats:
      mp3: "140"
      720p: "22"
    backends:
      - name: y2mate-v1
        kind: mates
        endpoint: https://www.y2mate.com/mates/analyzeV2/ajax
        method: POST
        encoding: form
        timeout: 20
        fields:
          k_query: "{url}"
          k_page: home

A ``formats`` mapping replaces the built-in table; a ``backends`` list
replaces the built-in backend order.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from ytd_resolve.core.formats import (
    DEFAULT_FORMAT_CODE,
    DEFAULT_FORMAT_LABEL,
    DEFAULT_FORMAT_TABLE,
)
from ytd_resolve.core.models import BackendDescriptor, BodyEncoding
from ytd_resolve.core.synthetic import DEFAULT_VALIDITY_SECONDS
from ytd_resolve.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "YTD_RESOLVE_CONFIG"

DEFAULT_BACKENDS: tuple[BackendDescriptor, ...] = (
    BackendDescriptor(
        name="y2mate-v1",
        kind="mates",
        endpoint="https://www.y2mate.com/mates/analyzeV2/ajax",
        fields=(("k_query", "{url}"), ("k_page", "home"), ("hl", "en"), ("q_auto", "0")),
    ),
    BackendDescriptor(
        name="sfrom-v1",
        kind="mates",
        endpoint="https://sfrom.net/mates/en/analyze/ajax",
        fields=(("url", "{url}"),),
    ),
    BackendDescriptor(
        name="yt1s-v1",
        kind="mates",
        endpoint="https://yt1s.com/api/ajaxSearch/index",
        fields=(("q", "{url}"), ("vt", "home")),
    ),
    BackendDescriptor(
        name="yt-dlp",
        kind="ytdlp",
        timeout=30.0,
    ),
)


class ConfigSource(Enum):
    """Source of the configuration."""

    CLI = "cli"
    ENV = "env"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolverConfig:
    """Resolved, read-only resolver configuration."""

    backends: tuple[BackendDescriptor, ...] = DEFAULT_BACKENDS
    formats: Mapping[str, str] = field(default_factory=lambda: DEFAULT_FORMAT_TABLE)
    default_format_code: str = DEFAULT_FORMAT_CODE
    default_format: str = DEFAULT_FORMAT_LABEL
    synthetic_validity_seconds: int = DEFAULT_VALIDITY_SECONDS
    max_concurrency: int = 1
    source: ConfigSource = ConfigSource.DEFAULT

    def __repr__(self) -> str:
        names = ", ".join(b.name for b in self.backends)
        return f"ResolverConfig(backends=[{names}], source={self.source.value!r})"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from *path*."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} is not a YAML mapping")
    return data


def _pairs(raw: Any, what: str) -> tuple[tuple[str, str], ...]:
    if raw is None:
        return ()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{what} must be a mapping")
    return tuple((str(key), str(value)) for key, value in raw.items())


def _parse_backend(raw: Any, index: int) -> BackendDescriptor:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"backends[{index}] must be a mapping")

    name = raw.get("name")
    kind = raw.get("kind")
    if not name or not kind:
        raise ConfigurationError(f"backends[{index}] needs both 'name' and 'kind'")

    encoding_raw = str(raw.get("encoding", BodyEncoding.FORM.value)).lower()
    try:
        encoding = BodyEncoding(encoding_raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"backends[{index}].encoding must be 'form' or 'json', got {encoding_raw!r}",
        ) from exc

    try:
        timeout = float(raw.get("timeout", 20.0))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"backends[{index}].timeout must be a number") from exc
    if timeout <= 0:
        raise ConfigurationError(f"backends[{index}].timeout must be positive")

    return BackendDescriptor(
        name=str(name),
        kind=str(kind),
        endpoint=str(raw.get("endpoint", "")),
        method=str(raw.get("method", "POST")).upper(),
        encoding=encoding,
        fields=_pairs(raw.get("fields"), f"backends[{index}].fields"),
        headers=_pairs(raw.get("headers"), f"backends[{index}].headers"),
        timeout=timeout,
    )


def _positive_int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{key} must be a positive integer")
    return value


def parse_config(data: dict[str, Any], source: ConfigSource) -> ResolverConfig:
    """Build a :class:`ResolverConfig` from a decoded mapping."""
    backends = DEFAULT_BACKENDS
    if "backends" in data:
        raw_backends = data["backends"]
        if not isinstance(raw_backends, list):
            raise ConfigurationError("backends must be a list")
        backends = tuple(_parse_backend(raw, i) for i, raw in enumerate(raw_backends))
        names = [b.name for b in backends]
        if len(set(names)) != len(names):
            raise ConfigurationError("backend names must be unique")

    formats: Mapping[str, str] = DEFAULT_FORMAT_TABLE
    if "formats" in data:
        formats = dict(_pairs(data["formats"], "formats"))

    return ResolverConfig(
        backends=backends,
        formats=formats,
        default_format_code=str(data.get("default_format_code", DEFAULT_FORMAT_CODE)),
        default_format=str(data.get("default_format", DEFAULT_FORMAT_LABEL)),
        synthetic_validity_seconds=_positive_int(
            data, "synthetic_validity_seconds", DEFAULT_VALIDITY_SECONDS,
        ),
        max_concurrency=_positive_int(data, "max_concurrency", 1),
        source=source,
    )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def load_config(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ResolverConfig:
    """Resolve configuration from *path*, the environment, or defaults.

    Raises
    ------
    ConfigurationError
        If the selected file cannot be read or is invalid.
    """
    env = os.environ if environ is None else environ

    if path is not None:
        source, config_path = ConfigSource.CLI, Path(path)
    elif env.get(CONFIG_ENV_VAR):
        source, config_path = ConfigSource.ENV, Path(env[CONFIG_ENV_VAR])
    else:
        logger.debug("Using built-in configuration")
        return ResolverConfig()

    logger.debug("Loading configuration from %s (%s)", config_path, source.value)
    return parse_config(_load_yaml(config_path.expanduser()), source)
