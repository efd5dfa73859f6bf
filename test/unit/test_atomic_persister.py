"""Unit tests for AtomicPersister.

Streams come from FakeCaptureService; gated streams let a test hold a
write open while it inspects or interrupts the save.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import AsyncIterator

import pytest

from domain.errors import CaptureFailure, PersistFailure
from domain.models import CaptureJob, CaptureOptions, CaptureResult
from domain.services import ProcessState
from infra.storage import AtomicPersister
from test.mocks import FakeCaptureService, FakeInterruptHook, InMemoryLogger


def _result(capture: FakeCaptureService, url: str, size: str = "800x600") -> CaptureResult:
    job = CaptureJob(url=url, size=size, options=CaptureOptions())
    return CaptureResult(filename=f"{url}-{size}.png", stream=capture.capture(job), job=job)


def _build() -> tuple[AtomicPersister, ProcessState, FakeInterruptHook, InMemoryLogger]:
    state = ProcessState()
    hook = FakeInterruptHook()
    logger = InMemoryLogger()
    return AtomicPersister(state=state, interrupt_hook=hook, logger=logger), state, hook, logger


def _temp_files(directory: Path) -> list[Path]:
    return [p for p in directory.iterdir() if p.name.endswith(".tmp")]


async def _wait_until(condition, timeout: float = 2.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not condition():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


def test_writes_every_stream_and_creates_destination(tmp_path: Path) -> None:
    persister, state, _, _ = _build()
    capture = FakeCaptureService()
    dest = tmp_path / "nested" / "out"

    paths = asyncio.run(persister.save([_result(capture, "a"), _result(capture, "b")], str(dest)))

    assert paths == [str(dest / "a-800x600.png"), str(dest / "b-800x600.png")]
    assert (dest / "a-800x600.png").read_bytes() == b"image:a@800x600"
    assert _temp_files(dest) == []
    assert state.temp_files == set()


def test_installs_interrupt_handler_once(tmp_path: Path) -> None:
    persister, state, hook, logger = _build()
    capture = FakeCaptureService()

    asyncio.run(persister.save([_result(capture, "a")], str(tmp_path)))
    asyncio.run(persister.save([_result(capture, "b")], str(tmp_path)))
    other = AtomicPersister(state=state, interrupt_hook=hook, logger=logger)
    asyncio.run(other.save([_result(capture, "c")], str(tmp_path)))

    assert len(hook.callbacks) == 1
    assert state.interrupt_installed is True


def test_stream_error_removes_all_temp_files_then_raises(tmp_path: Path) -> None:
    persister, state, _, _ = _build()
    gate = asyncio.Event()
    capture = FakeCaptureService(
        failures={("bad", "800x600"): RuntimeError("page crashed")},
        gates={("slow", "800x600"): gate},
    )
    results = [_result(capture, "slow"), _result(capture, "bad")]

    with pytest.raises(CaptureFailure, match="page crashed"):
        asyncio.run(persister.save(results, str(tmp_path)))

    assert _temp_files(tmp_path) == []
    assert list(tmp_path.iterdir()) == []
    assert state.temp_files == set()


def test_write_error_is_persist_failure(tmp_path: Path) -> None:
    persister, _, _, logger = _build()
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(PersistFailure):
        asyncio.run(persister.save([_result(FakeCaptureService(), "a")], str(blocker / "out")))
    assert "persist_failed" in logger.messages("error")


def test_interrupt_removes_unpromoted_temp_files_only(tmp_path: Path) -> None:
    persister, state, hook, _ = _build()
    gate = asyncio.Event()
    capture = FakeCaptureService(
        gates={("slow1", "800x600"): gate, ("slow2", "800x600"): gate},
    )
    results = [_result(capture, "done"), _result(capture, "slow1"), _result(capture, "slow2")]

    async def run() -> None:
        save = asyncio.ensure_future(persister.save(results, str(tmp_path)))
        await _wait_until(
            lambda: (tmp_path / "done-800x600.png").exists() and len(state.temp_files) == 2,
        )
        assert len(_temp_files(tmp_path)) == 2

        hook.fire()

        assert _temp_files(tmp_path) == []
        assert (tmp_path / "done-800x600.png").read_bytes() == b"image:done@800x600"
        save.cancel()
        with pytest.raises(asyncio.CancelledError):
            await save

    asyncio.run(run())
    assert state.temp_files == set()
    assert [p.name for p in tmp_path.iterdir()] == ["done-800x600.png"]


def test_cleanup_errors_are_suppressed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    persister, state, _, logger = _build()
    state.track_temp_file(str(tmp_path / ".x.tmp"))

    def boom(self: Path, missing_ok: bool = False) -> None:
        raise PermissionError("read-only")

    monkeypatch.setattr(Path, "unlink", boom)
    persister.remove_temp_files()

    assert state.temp_files == set()
    assert "temp_cleanup_failed" in logger.messages("warning")


def test_partial_file_never_reaches_final_path(tmp_path: Path) -> None:
    persister, _, _, _ = _build()
    observed: list[bool] = []

    async def stream() -> AsyncIterator[bytes]:
        yield b"first-half"
        observed.append((tmp_path / "page.png").exists())
        yield b"second-half"

    job = CaptureJob(url="page", size="800x600", options=CaptureOptions())
    result = CaptureResult(filename="page.png", stream=stream(), job=job)

    asyncio.run(persister.save([result], str(tmp_path)))

    assert observed == [False]
    assert (tmp_path / "page.png").read_bytes() == b"first-halfsecond-half"
