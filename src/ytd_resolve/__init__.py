"""ytd-resolve — resolve a video page URL into a direct media link.

Queries third-party link resolver backends in priority order and falls
back to synthetic media URLs when every backend fails.
"""

from ytd_resolve.version import __version__

__all__: list[str] = ["__version__"]
