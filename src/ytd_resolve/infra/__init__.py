"""Infrastructure layer — external system integration.

This layer wraps all interaction with third-party backends (via httpx),
yt-dlp, configuration files, and the environment.  Every raw
third-party exception must be caught here and re-raised as a
:class:`~ytd_resolve.exceptions.ResolverError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from ytd_resolve.infra.backends import (
    DirectLinkBackendAdapter,
    HttpBackendAdapter,
    LinkListBackendAdapter,
    MatesBackendAdapter,
)
from ytd_resolve.infra.config import ResolverConfig, load_config
from ytd_resolve.infra.registry import BackendRegistry, open_service
from ytd_resolve.infra.ytdlp_backend import YtDlpBackendAdapter

__all__: list[str] = [
    "BackendRegistry",
    "DirectLinkBackendAdapter",
    "HttpBackendAdapter",
    "LinkListBackendAdapter",
    "MatesBackendAdapter",
    "ResolverConfig",
    "YtDlpBackendAdapter",
    "load_config",
    "open_service",
]
