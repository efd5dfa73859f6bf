"""
Reusable fakes and in-memory implementations for tests.
"""

from .fake_capture_service import FakeCaptureService
from .fake_config_provider import InMemoryConfigProvider
from .fake_lookups import FakeResolutionLookup, FakeViewportLookup
from .fake_runtime import FakeInterruptHook, FixedClock, InMemoryLogger

__all__ = [
    "FakeCaptureService",
    "FakeResolutionLookup",
    "FakeViewportLookup",
    "FakeInterruptHook",
    "InMemoryConfigProvider",
    "FixedClock",
    "InMemoryLogger",
]
