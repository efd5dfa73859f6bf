from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from domain.errors import CaptureFailure, ScreenshotRunError
from domain.models import CaptureOptions, CaptureResult, RunStats, Source
from domain.ports import (
    CaptureServicePort,
    ClockPort,
    ConfigProviderPort,
    InterruptHookPort,
    LoggerPort,
    ResolutionLookupPort,
    ViewportLookupPort,
)
from domain.services import CaptureOrchestrator, ProcessState
from domain.utils import gather_or_cancel
from infra.lookups import HttpViewportLookup, W3CounterResolutionLookup
from infra.storage import AtomicPersister


@dataclass(frozen=True)
class CaptureSummary:
    stats: RunStats
    filenames: Sequence[str]
    destination: str | None


class CaptureFacade:
    """
    UI-facing entry point: wires config, lookups and persistence around
    a ``CaptureOrchestrator`` and runs one batch.
    """

    def __init__(
        self,
        *,
        config_provider: ConfigProviderPort,
        capture_service: CaptureServicePort,
        interrupt_hook: InterruptHookPort,
        clock: ClockPort,
        logger: LoggerPort,
        state: ProcessState,
        resolution_lookup: ResolutionLookupPort | None = None,
        viewport_lookup: ViewportLookupPort | None = None,
    ) -> None:
        self._config_provider = config_provider
        self._capture_service = capture_service
        self._interrupt_hook = interrupt_hook
        self._clock = clock
        self._logger = logger
        self._state = state
        self._resolution_lookup = resolution_lookup
        self._viewport_lookup = viewport_lookup

    def build_orchestrator(
        self,
        overrides: CaptureOptions | None = None,
    ) -> CaptureOrchestrator:
        config = self._config_provider.get_config()
        orchestrator = CaptureOrchestrator(
            capture_service=self._capture_service,
            resolution_lookup=self._resolution_lookup
            or W3CounterResolutionLookup(url=config.resolutions_url),
            viewport_lookup=self._viewport_lookup
            or HttpViewportLookup(url=config.viewports_url),
            clock=self._clock,
            logger=self._logger,
            state=self._state,
            persister=AtomicPersister(
                state=self._state,
                interrupt_hook=self._interrupt_hook,
                logger=self._logger,
            ),
            defaults=config.defaults.merge(overrides),
        )
        if config.destination:
            orchestrator.set_destination(config.destination)
        return orchestrator

    async def capture(
        self,
        sources: Sequence[Source],
        *,
        destination: str | None = None,
        overrides: CaptureOptions | None = None,
    ) -> CaptureSummary:
        orchestrator = self.build_orchestrator(overrides)
        for src in sources:
            orchestrator.add_source(src.url, src.sizes, src.options)
        if destination:
            orchestrator.set_destination(destination)

        results = await orchestrator.run()
        if not orchestrator.set_destination():
            # Nothing persists the streams without a destination; drain them
            # so the captures actually happen.
            await gather_or_cancel(_read(result) for result in results)

        assert orchestrator.stats is not None
        return CaptureSummary(
            stats=orchestrator.stats,
            filenames=[result.filename for result in results],
            destination=orchestrator.set_destination(),
        )


async def _read(result: CaptureResult) -> bytes:
    try:
        return await result.read()
    except ScreenshotRunError:
        raise
    except Exception as exc:
        raise CaptureFailure(
            f"Capturing {result.job.url} at {result.job.size} failed: {exc}",
        ) from exc


def format_summary(stats: RunStats) -> str:
    return (
        f"Generated {stats.screenshot_count} {_plural('screenshot', stats.screenshot_count)}"
        f" from {stats.url_count} {_plural('url', stats.url_count)}"
        f" and {stats.size_count} {_plural('size', stats.size_count)}"
    )


def _plural(word: str, count: int) -> str:
    return word if count == 1 else f"{word}s"
