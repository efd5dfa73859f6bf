from __future__ import annotations

from typing import Any, Callable, Sequence

from domain.models import CaptureJob, CaptureOptions, CaptureResult, RunStats, Source
from domain.ports import (
    CaptureServicePort,
    ClockPort,
    LoggerPort,
    ResolutionLookupPort,
    ScreenshotPersisterPort,
    ViewportLookupPort,
)
from domain.services.expanders import ResolutionExpander, ViewportExpander
from domain.services.naming import (
    DEFAULT_FILENAME_TEMPLATE,
    DEFAULT_FORMAT,
    render_filename,
)
from domain.services.planner import JobPlanner
from domain.services.state import ProcessState
from domain.utils import unique

_UNSET: Any = object()

WarningListener = Callable[[CaptureJob, str], None]


class CaptureOrchestrator:
    """
    Batch-captures screenshots of many URLs at many sizes.

    Sources are collected with :meth:`add_source`, an optional output
    directory with :meth:`set_destination`, and :meth:`run` plans, captures
    and (when a destination is set) persists everything in one concurrent
    batch. A run either fully succeeds or raises.
    """

    def __init__(
        self,
        *,
        capture_service: CaptureServicePort,
        resolution_lookup: ResolutionLookupPort,
        viewport_lookup: ViewportLookupPort,
        clock: ClockPort,
        logger: LoggerPort,
        state: ProcessState,
        persister: ScreenshotPersisterPort | None = None,
        defaults: CaptureOptions | None = None,
    ) -> None:
        base = CaptureOptions(filename=DEFAULT_FILENAME_TEMPLATE, format=DEFAULT_FORMAT)
        self.options = base.merge(defaults)
        self.stats: RunStats | None = None

        self._capture_service = capture_service
        self._clock = clock
        self._logger = logger
        self._persister = persister
        self._planner = JobPlanner(
            resolution_expander=ResolutionExpander(
                lookup=resolution_lookup,
                cache=state.resolution_cache,
            ),
            viewport_expander=ViewportExpander(
                lookup=viewport_lookup,
                cache=state.viewport_cache,
                logger=logger,
            ),
        )
        self._sources: list[Source] = []
        self._destination: str | None = None
        self._warning_listeners: list[WarningListener] = []

    def add_source(
        self,
        url: str | None = _UNSET,
        sizes: Sequence[str] = (),
        options: CaptureOptions | None = None,
    ) -> CaptureOrchestrator | tuple[Source, ...]:
        """Add a page to capture, or return the stored sources when called bare."""
        if url is _UNSET:
            return tuple(self._sources)
        self._sources.append(
            Source(url=url, sizes=sizes, options=options or CaptureOptions()),
        )
        return self

    def set_destination(self, path: str | None = _UNSET) -> CaptureOrchestrator | str | None:
        """Set the output directory, or return the current one when called bare."""
        if path is _UNSET:
            return self._destination
        self._destination = path
        return self

    def on_warning(self, listener: WarningListener) -> None:
        self._warning_listeners.append(listener)

    async def run(self) -> list[CaptureResult]:
        self.stats = None
        jobs = await self._planner.plan_all(self._sources, self.options)

        self.stats = RunStats(
            url_count=len(unique(src.url for src in self._sources)),
            size_count=len(unique(job.size for job in jobs)),
            screenshot_count=len(jobs),
        )
        self._logger.info(
            "run_planned",
            urls=self.stats.url_count,
            sizes=self.stats.size_count,
            screenshots=self.stats.screenshot_count,
        )

        results = [self._create(job) for job in jobs]
        if not self._destination:
            return results

        if self._persister is None:
            raise RuntimeError("A destination is set but no persister was configured.")
        await self._persister.save(results, self._destination)
        self._logger.info(
            "run_completed",
            destination=self._destination,
            screenshots=len(results),
        )
        return results

    def _create(self, job: CaptureJob) -> CaptureResult:
        filename = render_filename(job, self._clock.now())

        def warn(message: str) -> None:
            self._emit_warning(job, message)

        stream = self._capture_service.capture(job, on_warning=warn)
        return CaptureResult(filename=filename, stream=stream, job=job)

    def _emit_warning(self, job: CaptureJob, message: str) -> None:
        self._logger.warning("capture_warning", url=job.url, size=job.size, detail=message)
        for listener in self._warning_listeners:
            listener(job, message)
