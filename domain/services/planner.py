from __future__ import annotations

from typing import Sequence

from domain.errors import InvalidSourceError
from domain.models import CaptureJob, CaptureOptions, Source
from domain.services.expanders import ResolutionExpander, ViewportExpander
from domain.services.sizes import POPULAR_RESOLUTIONS_KEYWORD, classify_sizes
from domain.utils import gather_or_cancel


class JobPlanner:
    """Turns sources into the flat list of concrete capture jobs."""

    def __init__(
        self,
        *,
        resolution_expander: ResolutionExpander,
        viewport_expander: ViewportExpander,
    ) -> None:
        self._resolutions = resolution_expander
        self._viewports = viewport_expander

    async def plan_all(
        self,
        sources: Sequence[Source],
        defaults: CaptureOptions,
    ) -> list[CaptureJob]:
        planned = await gather_or_cancel(self.plan(src, defaults) for src in sources)
        return [job for jobs in planned for job in jobs]

    async def plan(self, source: Source, defaults: CaptureOptions) -> list[CaptureJob]:
        if not source.url:
            raise InvalidSourceError("URL required")

        options = defaults.merge(source.options)
        specs = classify_sizes(source.sizes)

        if not specs.literal_sizes and POPULAR_RESOLUTIONS_KEYWORD in specs.keywords:
            return await self._resolutions.expand(source.url, options)

        # Next to literal sizes the popular-resolutions keyword is ignored.
        keywords = [kw for kw in specs.keywords if kw != POPULAR_RESOLUTIONS_KEYWORD]
        if keywords:
            return await self._viewports.expand(
                source.url,
                specs.literal_sizes,
                keywords,
                options,
            )

        return [
            CaptureJob(url=source.url, size=size, options=options)
            for size in specs.literal_sizes
        ]
