"""Format-label → format-code catalog.

The catalog is a **total** function: any label, including ``None``,
empty and unknown strings, maps to a code.  Unknown labels fall back to
the configured default (medium-quality muxed mp4).
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from ytd_resolve.core.models import FormatRequest

DEFAULT_FORMAT_LABEL: str = "mp4"

DEFAULT_FORMAT_CODE: str = "18"
"""Medium quality (360p muxed mp4)."""

DEFAULT_FORMAT_TABLE: Mapping[str, str] = MappingProxyType(
    {
        "mp3": "140",
        "m4a": "140",
        "mp4": "18",
        "360p": "18",
        "720p": "22",
        "1080p": "37",
    }
)

AUDIO_CODES: frozenset[str] = frozenset({"139", "140", "141", "171", "249", "250", "251"})

# Quality labels used by backends that key their link tables by resolution.
_QUALITY_BY_CODE: Mapping[str, str] = MappingProxyType(
    {
        "18": "360p",
        "22": "720p",
        "37": "1080p",
        "140": "128kbps",
    }
)


def is_audio(code: str) -> bool:
    """Return ``True`` when *code* denotes an audio-only stream."""
    return code in AUDIO_CODES


def container_for(code: str) -> str:
    """Return the container group (``mp3`` or ``mp4``) backends file *code* under."""
    return "mp3" if is_audio(code) else "mp4"


def quality_for(code: str) -> str | None:
    """Return the quality label for *code*, or ``None`` when unknown."""
    return _QUALITY_BY_CODE.get(code)


class FormatCatalog:
    """Case-insensitive, read-only lookup table of format labels.

    Parameters
    ----------
    table:
        Label → code mapping.  Keys are normalised to lower case.
    default_code:
        Code returned for unknown or absent labels.
    """

    def __init__(
        self,
        table: Mapping[str, str] = DEFAULT_FORMAT_TABLE,
        default_code: str = DEFAULT_FORMAT_CODE,
    ) -> None:
        self._table: Mapping[str, str] = MappingProxyType(
            {label.strip().lower(): str(code) for label, code in table.items()}
        )
        self._default_code: str = str(default_code)

    @property
    def default_code(self) -> str:
        return self._default_code

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self._table)

    def resolve(self, label: str | None) -> str:
        """Return the format code for *label*.  Never raises."""
        if not label:
            return self._default_code
        return self._table.get(label.strip().lower(), self._default_code)

    def request(self, label: str | None) -> FormatRequest:
        """Build a :class:`FormatRequest` for *label*."""
        return FormatRequest(label=label or "", code=self.resolve(label))
