"""yt-dlp backed :class:`~ytd_resolve.core.protocols.BackendAdapter`.

Runs a local, metadata-only extraction and returns the stream URL whose
``format_id`` equals the requested format code.  yt-dlp is an optional
dependency: when it is missing every call fails with a ``BackendError``
of category ``environment`` and the orchestrator moves on.

This module is the **only** place in the codebase that imports ``yt_dlp``.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

from ytd_resolve.core.models import BackendDescriptor, BackendQuery, NormalizedLinkResult
from ytd_resolve.exceptions import BackendError


class YtDlpBackendAdapter:
    """Local extraction backend.

    The optional *client* argument is accepted (and ignored) so the
    registry can build every adapter kind the same way.
    """

    kind = "ytdlp"

    # Substrings in yt-dlp error messages that indicate the video itself
    # is unavailable (as opposed to a transient or extraction error).
    _UNAVAILABLE_SIGNALS: tuple[str, ...] = (
        "unavailable",
        "private video",
        "removed",
        "not available",
        "sign in to confirm your age",
    )

    def __init__(self, descriptor: BackendDescriptor, client: object | None = None) -> None:
        self._descriptor: BackendDescriptor = descriptor

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def timeout(self) -> float:
        return self._descriptor.timeout

    @staticmethod
    def _build_opts(timeout: float) -> dict[str, Any]:
        """Return yt-dlp options suitable for metadata-only extraction."""
        return {
            "quiet": True,
            "no_warnings": True,
            "no_color": True,
            "skip_download": True,
            "noplaylist": True,
            "socket_timeout": timeout,
        }

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def call(self, query: BackendQuery, timeout: float) -> NormalizedLinkResult:
        """Extract stream URLs for *query* without downloading.

        Extraction runs in a worker thread so *timeout* bounds the whole
        call, not only each socket read.

        Raises
        ------
        BackendError
            When yt-dlp is missing, extraction fails or overruns, or no
            stream matches the format code.
        """
        try:
            import yt_dlp
            import yt_dlp.utils
        except ModuleNotFoundError as exc:
            raise BackendError(
                "yt-dlp is not installed. Install with: pip install yt-dlp",
                backend=self.name,
                category="environment",
            ) from exc

        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ytdlp")
        try:
            future = pool.submit(self._extract, yt_dlp, query.original_url, timeout)
            info: Any = future.result(timeout=timeout)
        except FutureTimeoutError as exc:
            raise BackendError(
                f"Timed out after {timeout:.1f}s",
                backend=self.name,
                category="timeout",
            ) from exc
        except yt_dlp.utils.DownloadError as exc:
            raise self._mapped(exc) from exc
        except Exception as exc:
            raise BackendError(
                f"Unexpected yt-dlp error: {exc}",
                backend=self.name,
            ) from exc
        finally:
            # An extraction that overran keeps running in the worker; its
            # result is discarded.
            pool.shutdown(wait=False, cancel_futures=True)

        if not isinstance(info, dict):
            raise BackendError(
                "yt-dlp returned no metadata for the given URL.",
                backend=self.name,
                category="malformed",
            )

        return self._select(info, query.format_code)

    def _extract(self, yt_dlp: Any, url: str, timeout: float) -> Any:
        with yt_dlp.YoutubeDL(self._build_opts(timeout)) as ydl:
            return ydl.extract_info(url, download=False)

    # ------------------------------------------------------------------
    # Info-dict → result
    # ------------------------------------------------------------------

    def _select(self, info: dict[str, Any], format_code: str) -> NormalizedLinkResult:
        formats = info.get("formats")
        if not isinstance(formats, list):
            formats = []

        link = next(
            (
                fmt.get("url")
                for fmt in formats
                if isinstance(fmt, dict)
                and str(fmt.get("format_id", "")) == format_code
                and isinstance(fmt.get("url"), str)
                and fmt.get("url")
            ),
            None,
        )
        if not link:
            raise BackendError(
                f"No stream with format {format_code}",
                backend=self.name,
                category="rejected",
            )

        title = info.get("title")
        uploader = info.get("uploader")
        return NormalizedLinkResult(
            backend=self.name,
            primary_link=link,
            title=str(title) if title else None,
            author=str(uploader) if uploader else None,
        )

    def _mapped(self, exc: Exception) -> BackendError:
        """Translate a yt-dlp ``DownloadError`` into a ``BackendError``."""
        msg_lower = str(exc).lower()
        category = (
            "rejected"
            if any(signal in msg_lower for signal in self._UNAVAILABLE_SIGNALS)
            else "network"
        )
        return BackendError(str(exc), backend=self.name, category=category)
