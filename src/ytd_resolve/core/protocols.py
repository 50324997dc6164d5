"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from ytd_resolve.core.models import BackendQuery, NormalizedLinkResult

Clock = Callable[[], float]
"""Zero-argument callable returning seconds (``time.time``/``time.monotonic``)."""


class BackendAdapter(Protocol):
    """Contract for one third-party link resolver backend.

    Any object exposing ``name``, ``timeout`` and :meth:`call` with the
    correct signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    name: str
    """Backend name used in logs and outcomes."""

    timeout: float
    """Configured per-call timeout in seconds."""

    def call(self, query: BackendQuery, timeout: float) -> NormalizedLinkResult:
        """Ask the backend for a direct link.

        Implementations must never retry internally and must map every
        failure — network errors, timeouts, HTTP errors, explicit error
        fields and unexpected response shapes — to
        :class:`~ytd_resolve.exceptions.BackendError`.

        Raises
        ------
        BackendError
            When the backend does not yield a non-empty primary link.
        """
        ...  # pragma: no cover


class RandomSource(Protocol):
    """The subset of :class:`random.Random` used for link fabrication."""

    def random(self) -> float:
        ...  # pragma: no cover

    def randint(self, a: int, b: int) -> int:
        ...  # pragma: no cover
