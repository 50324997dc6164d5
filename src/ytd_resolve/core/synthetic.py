"""Last-resort synthetic media URLs.

When no backend yields a link, :class:`SyntheticLinkGenerator` fabricates
URLs that follow the platform's ``videoplayback`` query grammar.  They
are structurally valid but **never verified** — outcomes built from them
carry the ``synthetic`` provenance tag.

The clock and random source are injected so tests can pin both.
"""

from __future__ import annotations

import base64
import random
import string
import time
from collections.abc import Sequence
from urllib.parse import urlencode

from ytd_resolve.core.formats import is_audio
from ytd_resolve.core.protocols import Clock, RandomSource
from ytd_resolve.exceptions import SyntheticGenerationError

BASE_URLS: tuple[str, ...] = (
    "https://rr1---sn-oj5hn5-55.googlevideo.com/videoplayback",
    "https://rr2---sn-oj5hn5-55.googlevideo.com/videoplayback",
    "https://rr3---sn-oj5hn5-55.googlevideo.com/videoplayback",
    "https://rr4---sn-oj5hn5-55.googlevideo.com/videoplayback",
)

DEFAULT_VALIDITY_SECONDS: int = 12 * 60 * 60

_TOKEN_ALPHABET = string.digits + string.ascii_lowercase
_CLEN_RANGE: tuple[int, int] = (5_000_000, 15_000_000)


class SyntheticLinkGenerator:
    """Fabricate ``videoplayback`` URLs for an identifier and format code.

    Parameters
    ----------
    clock:
        Wall-clock source in epoch seconds.
    rng:
        Non-cryptographic random source.
    base_urls:
        Endpoint templates; one URL is produced per template, in order.
    validity_seconds:
        Offset added to the current time for the ``expire`` field.
    """

    def __init__(
        self,
        *,
        clock: Clock = time.time,
        rng: RandomSource | None = None,
        base_urls: Sequence[str] = BASE_URLS,
        validity_seconds: int = DEFAULT_VALIDITY_SECONDS,
    ) -> None:
        if not base_urls:
            raise ValueError("At least one base URL is required.")
        if validity_seconds <= 0:
            raise ValueError("validity_seconds must be positive.")
        self._clock: Clock = clock
        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._base_urls: tuple[str, ...] = tuple(base_urls)
        self._validity: int = validity_seconds

    def generate(self, video_id: str, format_code: str) -> tuple[str, ...]:
        """Return one fabricated URL per base template.

        Raises
        ------
        SyntheticGenerationError
            When the clock or random source fails.
        """
        try:
            expire = int(self._clock()) + self._validity
            return tuple(
                f"{base}?{urlencode(self._params(video_id, format_code, expire))}"
                for base in self._base_urls
            )
        except Exception as exc:
            raise SyntheticGenerationError(
                f"Could not fabricate fallback links: {exc}",
            ) from exc

    # ------------------------------------------------------------------
    # Query-string fields
    # ------------------------------------------------------------------

    def _params(self, video_id: str, format_code: str, expire: int) -> dict[str, str]:
        return {
            "expire": str(expire),
            "ei": self._session_token(),
            "ip": "127.0.0.1",
            "id": f"o-{video_id}",
            "itag": format_code,
            "source": "youtube",
            "requiressl": "yes",
            "mime": "audio/mp4" if is_audio(format_code) else "video/mp4",
            "ratebypass": "yes",
            "clen": str(self._rng.randint(*_CLEN_RANGE)),
            "gir": "yes",
        }

    def _session_token(self) -> str:
        """Base64 of a random base-36 string, cut to 20 characters."""
        value = int(self._rng.random() * 36**13)
        digits = []
        while value:
            value, rem = divmod(value, 36)
            digits.append(_TOKEN_ALPHABET[rem])
        raw = "".join(reversed(digits)) or "0"
        return base64.b64encode(raw.encode("ascii")).decode("ascii")[:20]
