"""httpx-backed link resolver adapters.

Each adapter satisfies :class:`~ytd_resolve.core.protocols.BackendAdapter`
structurally.  :class:`HttpBackendAdapter` owns the request/response
plumbing; subclasses only implement :meth:`HttpBackendAdapter.parse_response`
for their backend's response grammar.

This module is the **only** place in the codebase that imports ``httpx``.
Every httpx exception, HTTP error status and unexpected payload shape is
re-raised as :class:`~ytd_resolve.exceptions.BackendError`.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from typing import Any, ClassVar

import httpx

from ytd_resolve.core.formats import container_for, quality_for
from ytd_resolve.core.models import (
    BackendDescriptor,
    BackendQuery,
    BodyEncoding,
    NormalizedLinkResult,
)
from ytd_resolve.exceptions import BackendError

logger = logging.getLogger(__name__)

BROWSER_HEADERS: Mapping[str, str] = {
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Referer": "https://www.youtube.com/",
    "Origin": "https://www.youtube.com",
}

_CONTENT_TYPES: Mapping[BodyEncoding, str] = {
    BodyEncoding.FORM: "application/x-www-form-urlencoded; charset=UTF-8",
    BodyEncoding.JSON: "application/json",
}

_OK_STATUSES: frozenset[str] = frozenset({"ok", "success"})


# ---------------------------------------------------------------------------
# Loose-document helpers
# ---------------------------------------------------------------------------

def _dig(document: Any, *path: str | int) -> Any:
    """Follow *path* through nested dicts/lists, returning ``None`` on any miss."""
    node = document
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, list) or not -len(node) <= key < len(node):
                return None
            node = node[key]
        else:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
    return node


def _text(value: Any) -> str | None:
    """Return a stripped non-empty string, or ``None``."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _strings(values: Any) -> tuple[str, ...]:
    if not isinstance(values, list):
        return ()
    return tuple(text for text in (_text(v) for v in values) if text)


# ---------------------------------------------------------------------------
# Base adapter
# ---------------------------------------------------------------------------

class HttpBackendAdapter:
    """Template for one HTTP backend: build request → send → parse.

    Parameters
    ----------
    descriptor:
        Static backend configuration.
    client:
        Shared ``httpx.Client``; owned by the caller.
    """

    kind: ClassVar[str] = ""

    def __init__(self, descriptor: BackendDescriptor, client: httpx.Client) -> None:
        self._descriptor: BackendDescriptor = descriptor
        self._client: httpx.Client = client

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def timeout(self) -> float:
        return self._descriptor.timeout

    @property
    def descriptor(self) -> BackendDescriptor:
        return self._descriptor

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def call(self, query: BackendQuery, timeout: float) -> NormalizedLinkResult:
        """Send the backend request and normalise its response.

        *timeout* bounds the whole call, body included, not only each read.

        Raises
        ------
        BackendError
            On timeout, transport failure, HTTP error status, non-JSON
            body, explicit error field, missing link, or a request that
            cannot be built from the descriptor.
        """
        try:
            request = self.build_request(query, timeout)
        except (httpx.InvalidURL, KeyError, IndexError, ValueError) as exc:
            raise BackendError(
                f"Cannot build request: {exc!r}",
                backend=self.name,
                category="malformed",
            ) from exc

        deadline = time.monotonic() + timeout
        try:
            response = self._client.send(request, stream=True)
            try:
                if response.is_error:
                    raise BackendError(
                        f"HTTP {response.status_code}",
                        backend=self.name,
                        category="http_status",
                    )
                body = self._read_body(response, deadline, timeout)
            finally:
                response.close()
        except httpx.TimeoutException as exc:
            raise BackendError(
                f"Timed out after {timeout:.1f}s",
                backend=self.name,
                category="timeout",
            ) from exc
        except httpx.HTTPError as exc:
            raise BackendError(
                f"Request failed: {exc}",
                backend=self.name,
                category="network",
            ) from exc

        try:
            payload: Any = json.loads(body)
        except ValueError as exc:
            raise BackendError(
                "Response body is not JSON",
                backend=self.name,
                category="malformed",
            ) from exc

        result = self.parse_response(payload, query)
        logger.debug("%s returned %s", self.name, result.primary_link)
        return result

    def _read_body(self, response: httpx.Response, deadline: float, timeout: float) -> bytes:
        chunks: list[bytes] = []
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise BackendError(
                    f"Timed out after {timeout:.1f}s",
                    backend=self.name,
                    category="timeout",
                )
        return b"".join(chunks)

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def build_request(self, query: BackendQuery, timeout: float) -> httpx.Request:
        """Build the provider-specific request for *query*."""
        descriptor = self._descriptor
        fields = self.render_fields(query)
        headers = dict(BROWSER_HEADERS)
        method = descriptor.method.upper()

        kwargs: dict[str, Any] = {}
        if method == "GET":
            kwargs["params"] = fields
        elif descriptor.encoding is BodyEncoding.JSON:
            headers["Content-Type"] = _CONTENT_TYPES[BodyEncoding.JSON]
            kwargs["json"] = fields
        else:
            headers["Content-Type"] = _CONTENT_TYPES[BodyEncoding.FORM]
            kwargs["data"] = fields

        headers.update(dict(descriptor.headers))
        return self._client.build_request(
            method,
            descriptor.endpoint,
            headers=headers,
            timeout=timeout,
            **kwargs,
        )

    def render_fields(self, query: BackendQuery) -> dict[str, str]:
        """Substitute query values into the descriptor's field templates."""
        values = {
            "url": query.original_url,
            "video_id": query.video_id,
            "format_code": query.format_code,
        }
        return {name: template.format(**values) for name, template in self._descriptor.fields}

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    def parse_response(self, payload: Any, query: BackendQuery) -> NormalizedLinkResult:
        """Normalise a decoded JSON *payload*.  Subclasses must override."""
        raise NotImplementedError

    def _fail(self, message: str, category: str = "malformed") -> BackendError:
        return BackendError(message, backend=self.name, category=category)

    def _check_error_fields(self, document: dict[str, Any]) -> None:
        """Raise when the payload carries an explicit error marker."""
        error = document.get("error")
        if error:
            raise self._fail(f"Backend reported error: {error}", "rejected")
        status = document.get("status")
        if isinstance(status, str) and status.lower() not in _OK_STATUSES:
            detail = _text(document.get("mess")) or _text(document.get("message")) or status
            raise self._fail(f"Backend reported status {detail!r}", "rejected")


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

class MatesBackendAdapter(HttpBackendAdapter):
    """``links.<mp4|mp3>.<key>.k`` grammar (y2mate, sfrom, yt1s).

    Within the container group the entry whose ``q`` matches the format's
    quality label wins, then the first whose ``f`` matches the container,
    then the first entry.
    """

    kind = "mates"

    def parse_response(self, payload: Any, query: BackendQuery) -> NormalizedLinkResult:
        if not isinstance(payload, dict):
            raise self._fail("Expected a JSON object")
        self._check_error_fields(payload)

        container = container_for(query.format_code)
        group = _dig(payload, "links", container)
        if not isinstance(group, dict) or not group:
            raise self._fail(f"No {container} links in response")

        entries = [entry for entry in group.values() if isinstance(entry, dict)]
        quality = quality_for(query.format_code)
        chosen = (
            next((e for e in entries if quality and e.get("q") == quality), None)
            or next((e for e in entries if e.get("f") == container), None)
            or (entries[0] if entries else None)
        )
        link = _text(_dig(chosen, "k"))
        if link is None:
            raise self._fail("Selected entry has no link")

        return NormalizedLinkResult(
            backend=self.name,
            primary_link=link,
            title=_text(payload.get("title")),
            author=_text(payload.get("a")),
        )


class DirectLinkBackendAdapter(HttpBackendAdapter):
    """``response.direct_link`` grammar, with optional ``response.alternatives``."""

    kind = "direct_link"

    def parse_response(self, payload: Any, query: BackendQuery) -> NormalizedLinkResult:
        if not isinstance(payload, dict):
            raise self._fail("Expected a JSON object")
        self._check_error_fields(payload)

        body = payload.get("response")
        link = _text(_dig(body, "direct_link"))
        if link is None:
            raise self._fail("response.direct_link missing")

        return NormalizedLinkResult(
            backend=self.name,
            primary_link=link,
            alternative_links=_strings(_dig(body, "alternatives")),
            title=_text(_dig(body, "title")),
            author=_text(_dig(body, "author")),
        )


class LinkListBackendAdapter(HttpBackendAdapter):
    """``links[i].url`` grammar.

    The entry whose ``itag`` equals the format code is primary, otherwise
    ``links[0]``; every other URL becomes an alternative.
    """

    kind = "link_list"

    def parse_response(self, payload: Any, query: BackendQuery) -> NormalizedLinkResult:
        if not isinstance(payload, dict):
            raise self._fail("Expected a JSON object")
        self._check_error_fields(payload)

        raw_links = payload.get("links")
        if not isinstance(raw_links, list):
            raise self._fail("links is not a list")

        urls: list[tuple[str, str]] = []
        for entry in raw_links:
            url = _text(_dig(entry, "url"))
            if url:
                urls.append((str(_dig(entry, "itag") or ""), url))
        if not urls:
            raise self._fail("links[0].url missing")

        primary_index = next(
            (i for i, (itag, _) in enumerate(urls) if itag == query.format_code),
            0,
        )
        primary = urls[primary_index][1]
        alternatives = tuple(url for i, (_, url) in enumerate(urls) if i != primary_index)

        return NormalizedLinkResult(
            backend=self.name,
            primary_link=primary,
            alternative_links=alternatives,
            title=_text(payload.get("title")),
            author=_text(payload.get("author")),
        )
