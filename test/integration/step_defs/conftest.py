"""Shared fixtures and context for BDD step definitions."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import pytest

from domain.models import CaptureOptions, CaptureResult, Source
from domain.services import CaptureOrchestrator, ProcessState
from infra.storage import AtomicPersister
from test.mocks import (
    FakeCaptureService,
    FakeInterruptHook,
    FakeResolutionLookup,
    FakeViewportLookup,
    FixedClock,
    InMemoryLogger,
)


@dataclass
class CaptureContext:
    """Mutable state threaded through the steps of one scenario."""

    tmp_path: Path
    destination: Path | None = None
    sources: list[Source] = field(default_factory=list)
    defaults: CaptureOptions = field(default_factory=CaptureOptions)
    failures: dict[tuple[str, str], Exception] = field(default_factory=dict)
    gates: dict[tuple[str, str], asyncio.Event] = field(default_factory=dict)
    state: ProcessState = field(default_factory=ProcessState)
    logger: InMemoryLogger = field(default_factory=InMemoryLogger)
    resolutions: FakeResolutionLookup = field(
        default_factory=lambda: FakeResolutionLookup(["1920x1080", "1366x768"]),
    )
    capture: FakeCaptureService | None = None
    orchestrator: CaptureOrchestrator | None = None
    results: list[CaptureResult] = field(default_factory=list)
    error: Exception | None = None

    def build_orchestrator(self) -> CaptureOrchestrator:
        self.capture = FakeCaptureService(failures=self.failures, gates=self.gates)
        orchestrator = CaptureOrchestrator(
            capture_service=self.capture,
            resolution_lookup=self.resolutions,
            viewport_lookup=FakeViewportLookup(),
            clock=FixedClock(datetime(2025, 6, 1, 12, 30, 0)),
            logger=self.logger,
            state=self.state,
            persister=AtomicPersister(
                state=self.state,
                interrupt_hook=FakeInterruptHook(),
                logger=self.logger,
            ),
            defaults=self.defaults,
        )
        for src in self.sources:
            orchestrator.add_source(src.url, src.sizes, src.options)
        if self.destination is not None:
            orchestrator.set_destination(str(self.destination))
        self.orchestrator = orchestrator
        return orchestrator


@pytest.fixture()
def capture_ctx(tmp_path: Path) -> CaptureContext:
    return CaptureContext(tmp_path=tmp_path)
