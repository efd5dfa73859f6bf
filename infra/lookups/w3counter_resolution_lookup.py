"""Top screen resolutions scraped from the W3Counter global stats page.

Uses ``urllib.request`` in a worker thread, matching the HTTP pattern used
elsewhere in the codebase.
"""

from __future__ import annotations

import asyncio
import re
import urllib.request

from domain.utils import unique

_SECTION_MARKER = re.compile(r"screen\s+resolutions?", re.IGNORECASE)
_RESOLUTION = re.compile(r"\b(\d{3,4})\s*x\s*(\d{3,4})\b")


class W3CounterResolutionLookup:
    """Implements ``ResolutionLookupPort``."""

    def __init__(
        self,
        *,
        url: str = "https://www.w3counter.com/globalstats.php",
        limit: int = 10,
        timeout: int = 30,
    ) -> None:
        self._url = url
        self._limit = limit
        self._timeout = timeout

    async def fetch_top_resolutions(self) -> list[str]:
        html = await asyncio.to_thread(self._get, self._url)
        return self.parse(html, self._limit)

    @staticmethod
    def parse(html: str, limit: int = 10) -> list[str]:
        marker = _SECTION_MARKER.search(html)
        section = html[marker.end():] if marker else html
        sizes = unique(f"{w}x{h}" for w, h in _RESOLUTION.findall(section))
        if not sizes:
            raise ValueError("No screen resolutions found in W3Counter response")
        return sizes[:limit]

    def _get(self, url: str) -> str:
        req = urllib.request.Request(url, method="GET")
        req.add_header("User-Agent", "multishot")
        with urllib.request.urlopen(req, timeout=self._timeout) as resp:
            return resp.read().decode("utf-8", errors="replace")
