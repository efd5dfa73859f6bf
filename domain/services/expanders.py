from __future__ import annotations

from typing import Sequence

from domain.errors import LookupFailure
from domain.models import CaptureJob, CaptureOptions
from domain.ports import LoggerPort, ResolutionLookupPort, ViewportLookupPort
from domain.services.cache import LookupCache
from domain.services.sizes import is_literal_size
from domain.utils import unique

_TOP_RESOLUTIONS_KEY = "top-resolutions"


class ResolutionExpander:
    """Expands the popular-resolutions keyword into one job per resolution."""

    def __init__(self, *, lookup: ResolutionLookupPort, cache: LookupCache) -> None:
        self._lookup = lookup
        self._cache = cache

    async def expand(self, url: str, options: CaptureOptions) -> list[CaptureJob]:
        try:
            sizes = await self._cache.get_or_fetch(
                _TOP_RESOLUTIONS_KEY,
                self._lookup.fetch_top_resolutions,
            )
        except LookupFailure:
            raise
        except Exception as exc:
            raise LookupFailure(f"Top resolutions lookup failed: {exc}") from exc
        return [CaptureJob(url=url, size=size, options=options) for size in unique(sizes)]


class ViewportExpander:
    """
    Resolves device/browser keywords to viewport sizes.

    The looked-up sizes are merged with the literal sizes of the same
    source; the union is deduplicated with literal sizes first.
    """

    def __init__(
        self,
        *,
        lookup: ViewportLookupPort,
        cache: LookupCache,
        logger: LoggerPort,
    ) -> None:
        self._lookup = lookup
        self._cache = cache
        self._logger = logger

    async def expand(
        self,
        url: str,
        literal_sizes: Sequence[str],
        keywords: Sequence[str],
        options: CaptureOptions,
    ) -> list[CaptureJob]:
        key = tuple(keywords)

        async def fetch() -> Sequence[str]:
            return await self._lookup.fetch_viewport_sizes(list(key))

        try:
            looked_up = await self._cache.get_or_fetch(key, fetch)
        except LookupFailure:
            raise
        except Exception as exc:
            raise LookupFailure(
                f"Viewport lookup failed for {', '.join(keywords)}: {exc}",
            ) from exc

        sizes = [size.lower() for size in looked_up if is_literal_size(size)]
        if not sizes:
            self._logger.warning(
                "unmatched_viewport_keywords",
                url=url,
                keywords=list(keywords),
            )
        return [
            CaptureJob(url=url, size=size, options=options)
            for size in unique([*literal_sizes, *sizes])
        ]
