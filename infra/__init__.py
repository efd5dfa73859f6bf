"""Infrastructure adapters – concrete implementations of domain ports."""

from .browser import PlaywrightCaptureService
from .config import FileSystemConfigProvider
from .lookups import HttpViewportLookup, W3CounterResolutionLookup
from .runtime import SignalInterruptHook, StructuredLogger, SystemClock
from .storage import AtomicPersister

__all__ = [
    "PlaywrightCaptureService",
    "FileSystemConfigProvider",
    "HttpViewportLookup",
    "W3CounterResolutionLookup",
    "AtomicPersister",
    "SignalInterruptHook",
    "StructuredLogger",
    "SystemClock",
]
