"""Host allowlist and video-ID extraction.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic.

Extraction rules are tried in strict first-match order:

1. ``watch?v=<id>`` query parameter.
2. ``/shorts/<id>``, ``/embed/<id>``, ``/v/<id>``, ``/live/<id>`` paths.
3. ``youtu.be/<id>`` short host.

URLs that ``urllib.parse`` rejects fall back to raw regular-expression
matching against the same shapes instead of being refused outright.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlsplit

ACCEPTED_HOSTS: tuple[str, ...] = (
    "youtube.com",
    "youtu.be",
    "youtube-nocookie.com",
)
"""Hosts (and their subdomains) whose URLs may be resolved."""

SHORT_HOSTS: tuple[str, ...] = ("youtu.be",)

_ID_CHARS = r"[A-Za-z0-9_-]+"
_ID_RE = re.compile(_ID_CHARS)

_PATH_PREFIXES: tuple[str, ...] = ("shorts", "embed", "v", "live")

# Raw fallbacks, same order as the structured rules.
_RAW_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"[?&]v=({_ID_CHARS})"),
    *(re.compile(rf"/{prefix}/({_ID_CHARS})") for prefix in _PATH_PREFIXES),
    re.compile(rf"youtu\.be/({_ID_CHARS})"),
)

_RAW_HOST_RE = re.compile(
    r"^https?://(?:[^@/?#]*@)?\[?([^/?#:\[\]]+)", re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Host allowlist
# ---------------------------------------------------------------------------

def _host_matches(host: str, accepted: tuple[str, ...]) -> bool:
    host = host.lower().rstrip(".")
    return any(host == name or host.endswith("." + name) for name in accepted)


def extract_host(url: str) -> str | None:
    """Return the lower-cased host of an ``http(s)`` URL, or ``None``."""
    stripped = url.strip()
    try:
        parts = urlsplit(stripped)
    except ValueError:
        match = _RAW_HOST_RE.match(stripped)
        return match.group(1).lower() if match else None

    if parts.scheme.lower() not in ("http", "https"):
        return None
    try:
        host = parts.hostname
    except ValueError:
        host = None
    return host or None


def is_allowed_host(
    url: str,
    accepted: tuple[str, ...] = ACCEPTED_HOSTS,
) -> bool:
    """Return ``True`` when *url*'s host equals or is a subdomain of an
    accepted host."""
    host = extract_host(url)
    if host is None:
        return False
    return _host_matches(host, accepted)


# ---------------------------------------------------------------------------
# Identifier extraction
# ---------------------------------------------------------------------------

def is_valid_video_id(value: str) -> bool:
    """Check that *value* is non-empty and uses only identifier characters."""
    return _ID_RE.fullmatch(value) is not None


def _leading_id(segment: str) -> str | None:
    match = _ID_RE.match(segment)
    return match.group(0) if match else None


def _extract_structured(url: str) -> str | None:
    """Apply the rules to a parsed URL.  May raise ``ValueError``."""
    parts = urlsplit(url.strip())

    for value in parse_qs(parts.query).get("v", []):
        candidate = _leading_id(value)
        if candidate:
            return candidate

    segments = [seg for seg in parts.path.split("/") if seg]
    if len(segments) >= 2 and segments[0] in _PATH_PREFIXES:
        candidate = _leading_id(segments[1])
        if candidate:
            return candidate

    host = parts.hostname or ""
    if segments and _host_matches(host, SHORT_HOSTS):
        return _leading_id(segments[0])

    return None


def _extract_raw(url: str) -> str | None:
    for pattern in _RAW_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def extract_video_id(url: str) -> str | None:
    """Extract the video identifier from *url*.

    Returns
    -------
    str | None
        The exact identifier substring, or ``None`` when no rule matches.
    """
    try:
        return _extract_structured(url)
    except ValueError:
        return _extract_raw(url)
