from __future__ import annotations

import asyncio
import json
import urllib.request
from pathlib import Path
from typing import Any, Sequence

BUNDLED_VIEWPORTS_URL = Path(__file__).with_name("viewports.json").as_uri()


class HttpViewportLookup:
    """
    Implements ``ViewportLookupPort`` on top of a JSON device list.

    The list is a JSON array of ``{"name": ..., "size": "WxH"}`` objects
    (``width``/``height`` keys are accepted as well) fetched from any URL
    ``urllib`` understands, ``file://`` included. Names match keywords
    case-insensitively; unknown keywords yield nothing.
    """

    def __init__(self, *, url: str | None = None, timeout: int = 30) -> None:
        self._url = url or BUNDLED_VIEWPORTS_URL
        self._timeout = timeout

    async def fetch_viewport_sizes(self, keywords: Sequence[str]) -> list[str]:
        entries = await asyncio.to_thread(self._load)
        wanted = {kw.strip().lower() for kw in keywords}
        sizes: list[str] = []
        for entry in entries:
            if str(entry.get("name", "")).strip().lower() not in wanted:
                continue
            size = self._size_of(entry)
            if size:
                sizes.append(size)
        return sizes

    def _load(self) -> list[dict[str, Any]]:
        with urllib.request.urlopen(self._url, timeout=self._timeout) as resp:
            payload = json.loads(resp.read().decode("utf-8"))
        if not isinstance(payload, list):
            raise ValueError(f"Viewport list at {self._url} is not a JSON array")
        return [item for item in payload if isinstance(item, dict)]

    @staticmethod
    def _size_of(entry: dict[str, Any]) -> str | None:
        if entry.get("size"):
            return str(entry["size"]).strip().lower()
        if entry.get("width") and entry.get("height"):
            return f"{int(entry['width'])}x{int(entry['height'])}"
        return None
