from __future__ import annotations


class ScreenshotRunError(RuntimeError):
    """Base class for failures that abort a capture run."""


class InvalidSourceError(ScreenshotRunError):
    pass


class LookupFailure(ScreenshotRunError):
    pass


class CaptureFailure(ScreenshotRunError):
    pass


class PersistFailure(ScreenshotRunError):
    pass


class InvalidTemplateError(ScreenshotRunError):
    pass


__all__ = [
    "ScreenshotRunError",
    "InvalidSourceError",
    "LookupFailure",
    "CaptureFailure",
    "PersistFailure",
    "InvalidTemplateError",
]
