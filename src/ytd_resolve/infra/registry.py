"""Adapter registry and service wiring.

Maps each descriptor ``kind`` to its adapter class, owns the shared
``httpx.Client`` and assembles a ready-to-use
:class:`~ytd_resolve.core.resolution_service.ResolutionService`.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from types import TracebackType
from typing import TYPE_CHECKING, Any

import httpx

from ytd_resolve.core.formats import FormatCatalog
from ytd_resolve.core.models import BackendDescriptor
from ytd_resolve.core.orchestrator import FallbackOrchestrator
from ytd_resolve.core.protocols import BackendAdapter
from ytd_resolve.core.resolution_service import ResolutionService
from ytd_resolve.core.synthetic import SyntheticLinkGenerator
from ytd_resolve.exceptions import ConfigurationError
from ytd_resolve.infra.backends import (
    DirectLinkBackendAdapter,
    LinkListBackendAdapter,
    MatesBackendAdapter,
)
from ytd_resolve.infra.ytdlp_backend import YtDlpBackendAdapter

if TYPE_CHECKING:
    from ytd_resolve.infra.config import ResolverConfig

ADAPTER_TYPES: dict[str, Any] = {
    adapter.kind: adapter
    for adapter in (
        MatesBackendAdapter,
        DirectLinkBackendAdapter,
        LinkListBackendAdapter,
        YtDlpBackendAdapter,
    )
}


def adapter_type_for(descriptor: BackendDescriptor) -> Any:
    """Return the adapter class registered for ``descriptor.kind``."""
    adapter_type = ADAPTER_TYPES.get(descriptor.kind)
    if adapter_type is None:
        raise ConfigurationError(
            f"Unknown backend kind {descriptor.kind!r} for {descriptor.name!r}",
            hint=f"Known kinds: {', '.join(sorted(ADAPTER_TYPES))}",
        )
    return adapter_type


def build_adapter(descriptor: BackendDescriptor, client: httpx.Client) -> BackendAdapter:
    """Instantiate the adapter registered for ``descriptor.kind``."""
    adapter: BackendAdapter = adapter_type_for(descriptor)(descriptor, client)
    return adapter


class BackendRegistry:
    """Priority-ordered adapters sharing one HTTP client.

    Use as a context manager; a client created here is closed on exit,
    an injected client is left to its owner.
    """

    def __init__(
        self,
        descriptors: Sequence[BackendDescriptor],
        *,
        client: httpx.Client | None = None,
    ) -> None:
        # Reject unknown kinds before a client is opened.
        for descriptor in descriptors:
            adapter_type_for(descriptor)
        self._owns_client: bool = client is None
        self._client: httpx.Client = (
            client if client is not None else httpx.Client(follow_redirects=True)
        )
        self._adapters: tuple[BackendAdapter, ...] = tuple(
            build_adapter(descriptor, self._client) for descriptor in descriptors
        )

    @property
    def adapters(self) -> tuple[BackendAdapter, ...]:
        return self._adapters

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> BackendRegistry:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


@contextmanager
def open_service(
    config: ResolverConfig,
    *,
    client: httpx.Client | None = None,
) -> Iterator[ResolutionService]:
    """Yield a :class:`ResolutionService` wired from *config*."""
    with BackendRegistry(config.backends, client=client) as registry:
        orchestrator = FallbackOrchestrator(
            registry.adapters,
            max_concurrency=config.max_concurrency,
        )
        yield ResolutionService(
            orchestrator,
            SyntheticLinkGenerator(validity_seconds=config.synthetic_validity_seconds),
            FormatCatalog(config.formats, config.default_format_code),
            default_format=config.default_format,
        )
