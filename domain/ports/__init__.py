from __future__ import annotations

from datetime import datetime
from typing import Any, AsyncIterator, Callable, Protocol, Sequence, runtime_checkable

from domain.models import AppConfig, CaptureJob, CaptureResult

WarningCallback = Callable[[str], None]


@runtime_checkable
class CaptureServicePort(Protocol):
    """
    Renders one job into a stream of image bytes.

    The concrete implementation is expected to wrap a headless browser
    such as Playwright. Nothing is rendered until the stream is iterated;
    render errors surface while iterating. Non-fatal problems are reported
    through ``on_warning``.
    """

    def capture(
        self,
        job: CaptureJob,
        *,
        on_warning: WarningCallback | None = None,
    ) -> AsyncIterator[bytes]:
        ...


@runtime_checkable
class ResolutionLookupPort(Protocol):
    """Ranked list of the most common screen resolutions."""

    async def fetch_top_resolutions(self) -> Sequence[str]:
        ...


@runtime_checkable
class ViewportLookupPort(Protocol):
    """Device/browser name to viewport size lookup."""

    async def fetch_viewport_sizes(self, keywords: Sequence[str]) -> Sequence[str]:
        ...


@runtime_checkable
class ScreenshotPersisterPort(Protocol):
    """Writes capture results into a destination directory."""

    async def save(
        self,
        results: Sequence[CaptureResult],
        destination: str,
    ) -> Sequence[str]:
        ...


@runtime_checkable
class InterruptHookPort(Protocol):
    """Registers a callback to run when the process is interrupted."""

    def install(self, callback: Callable[[], None]) -> None:
        ...


@runtime_checkable
class ConfigProviderPort(Protocol):
    def get_config(self) -> AppConfig:
        ...

    def validate(self) -> list[str]:
        ...


@runtime_checkable
class ClockPort(Protocol):
    """Time source for deterministic and easily testable code."""

    def now(self) -> datetime:
        ...


@runtime_checkable
class LoggerPort(Protocol):
    """Structured, testable logging abstraction."""

    def info(self, message: str, **fields: Any) -> None:
        ...

    def warning(self, message: str, **fields: Any) -> None:
        ...

    def error(self, message: str, **fields: Any) -> None:
        ...


__all__ = [
    "WarningCallback",
    "CaptureServicePort",
    "ResolutionLookupPort",
    "ViewportLookupPort",
    "ScreenshotPersisterPort",
    "InterruptHookPort",
    "ConfigProviderPort",
    "ClockPort",
    "LoggerPort",
]
