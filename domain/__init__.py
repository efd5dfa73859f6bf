"""
Domain layer package.

This package contains the capture planning and orchestration logic plus
the ports it depends on. It is independent of any specific browser,
lookup service or filesystem layout.
"""

from .errors import (  # noqa: F401
    CaptureFailure,
    InvalidSourceError,
    InvalidTemplateError,
    LookupFailure,
    PersistFailure,
    ScreenshotRunError,
)
from .models import (  # noqa: F401
    AppConfig,
    CaptureJob,
    CaptureOptions,
    CaptureResult,
    RunStats,
    SizeSpecs,
    Source,
)
from .ports import (  # noqa: F401
    CaptureServicePort,
    ClockPort,
    ConfigProviderPort,
    InterruptHookPort,
    LoggerPort,
    ResolutionLookupPort,
    ScreenshotPersisterPort,
    ViewportLookupPort,
)

__all__ = [
    # Models
    "AppConfig",
    "CaptureOptions",
    "Source",
    "SizeSpecs",
    "CaptureJob",
    "CaptureResult",
    "RunStats",
    # Errors
    "ScreenshotRunError",
    "InvalidSourceError",
    "LookupFailure",
    "CaptureFailure",
    "PersistFailure",
    "InvalidTemplateError",
    # Ports
    "CaptureServicePort",
    "ResolutionLookupPort",
    "ViewportLookupPort",
    "ScreenshotPersisterPort",
    "InterruptHookPort",
    "ConfigProviderPort",
    "ClockPort",
    "LoggerPort",
]
