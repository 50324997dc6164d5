"""Ordered multi-backend fallback.

Backends are tried strictly in priority order; the first one returning a
non-empty primary link wins and no later backend is consulted.  Backend
failures are logged and swallowed here — a ``None`` return is the signal
to fall through to synthetic link generation, not an error.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from ytd_resolve.core.models import BackendQuery, NormalizedLinkResult
from ytd_resolve.core.protocols import BackendAdapter, Clock
from ytd_resolve.exceptions import BackendError

logger = logging.getLogger(__name__)


class FallbackOrchestrator:
    """Run backend adapters in priority order until one succeeds.

    Parameters
    ----------
    adapters:
        Adapters ordered from highest to lowest priority.
    max_concurrency:
        ``1`` (default) calls adapters one at a time.  Larger values run a
        window of that many adapters in a thread pool; results are still
        consumed in priority order, so the highest-priority success wins.
    clock:
        Monotonic clock used to honour caller deadlines.
    """

    def __init__(
        self,
        adapters: Sequence[BackendAdapter],
        *,
        max_concurrency: int = 1,
        clock: Clock = time.monotonic,
    ) -> None:
        self._adapters: tuple[BackendAdapter, ...] = tuple(adapters)
        self._max_concurrency: int = max(1, max_concurrency)
        self._clock: Clock = clock

    @property
    def adapters(self) -> tuple[BackendAdapter, ...]:
        return self._adapters

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(
        self,
        query: BackendQuery,
        *,
        deadline: float | None = None,
    ) -> NormalizedLinkResult | None:
        """Return the first successful backend result, or ``None``.

        *deadline* is an absolute value of the orchestrator's clock.  Each
        backend's timeout is shrunk so no call outlives it, and no new
        backend is started once it has passed.
        """
        if not self._adapters:
            logger.debug("No backends configured for %s", query.video_id)
            return None

        if self._max_concurrency == 1:
            return self._resolve_sequential(query, deadline)
        return self._resolve_windowed(query, deadline)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _resolve_sequential(
        self,
        query: BackendQuery,
        deadline: float | None,
    ) -> NormalizedLinkResult | None:
        for adapter in self._adapters:
            result = self._attempt(adapter, query, deadline)
            if result is not None:
                return result
        return None

    def _resolve_windowed(
        self,
        query: BackendQuery,
        deadline: float | None,
    ) -> NormalizedLinkResult | None:
        workers = min(self._max_concurrency, len(self._adapters))
        pool = ThreadPoolExecutor(max_workers=workers)
        try:
            futures: list[Future[NormalizedLinkResult | None]] = [
                pool.submit(self._attempt, adapter, query, deadline)
                for adapter in self._adapters
            ]
            for future in futures:
                winner = future.result()
                if winner is not None:
                    return winner
            return None
        finally:
            # Queued attempts never start. Running lower-priority attempts
            # are not waited for; they end within their own timeout.
            pool.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _timeout_for(
        self,
        adapter: BackendAdapter,
        deadline: float | None,
    ) -> float | None:
        """Adapter timeout clipped to the deadline; ``None`` once it passed."""
        if deadline is None:
            return adapter.timeout
        remaining = deadline - self._clock()
        if remaining <= 0:
            return None
        return min(adapter.timeout, remaining)

    def _attempt(
        self,
        adapter: BackendAdapter,
        query: BackendQuery,
        deadline: float | None,
    ) -> NormalizedLinkResult | None:
        """Call one adapter, turning every failure into ``None``."""
        timeout = self._timeout_for(adapter, deadline)
        if timeout is None:
            logger.info("Deadline passed, skipping backend %s", adapter.name)
            return None

        logger.debug("Trying backend %s for %s", adapter.name, query.video_id)
        try:
            result = adapter.call(query, timeout)
        except BackendError as exc:
            logger.warning(
                "Backend %s failed (%s): %s", adapter.name, exc.category, exc,
            )
            return None
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Backend %s raised unexpectedly: %s: %s",
                adapter.name, type(exc).__name__, exc,
            )
            return None

        if result is None or not result.primary_link:
            logger.warning("Backend %s returned no primary link", adapter.name)
            return None

        logger.debug("Backend %s resolved %s", adapter.name, query.video_id)
        return result
