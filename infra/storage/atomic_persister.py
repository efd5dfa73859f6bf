from __future__ import annotations

import asyncio
import os
import uuid
from pathlib import Path
from typing import BinaryIO, Sequence

from domain.errors import CaptureFailure, PersistFailure
from domain.models import CaptureResult
from domain.ports import InterruptHookPort, LoggerPort
from domain.services.state import ProcessState
from domain.utils import gather_or_cancel


class AtomicPersister:
    """
    Implements ``ScreenshotPersisterPort`` with write-to-temp-then-rename.

    Every stream is drained into a hidden temporary file next to its final
    path and promoted with ``os.replace`` once fully written, so a final
    path never holds a partial screenshot. Temporary files are tracked in
    the shared ``ProcessState`` from the moment they are opened; on any
    failure or on interrupt all tracked files are removed.
    """

    def __init__(
        self,
        *,
        state: ProcessState,
        interrupt_hook: InterruptHookPort,
        logger: LoggerPort,
    ) -> None:
        self._state = state
        self._interrupt_hook = interrupt_hook
        self._logger = logger

    async def save(
        self,
        results: Sequence[CaptureResult],
        destination: str,
    ) -> list[str]:
        self._install_interrupt_handler()
        dest_dir = Path(destination)
        try:
            return await gather_or_cancel(
                self._persist(result, dest_dir) for result in results
            )
        except BaseException as exc:
            self._logger.error("persist_failed", destination=destination, error=str(exc))
            self.remove_temp_files()
            raise

    def remove_temp_files(self) -> None:
        """Best-effort removal of every temporary file still being written."""
        for path in self._state.drain_temp_files():
            try:
                Path(path).unlink(missing_ok=True)
            except OSError as exc:
                self._logger.warning("temp_cleanup_failed", path=path, error=str(exc))

    def _install_interrupt_handler(self) -> None:
        if self._state.interrupt_installed:
            return
        self._interrupt_hook.install(self.remove_temp_files)
        self._state.interrupt_installed = True

    async def _persist(self, result: CaptureResult, dest_dir: Path) -> str:
        try:
            await asyncio.to_thread(dest_dir.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistFailure(f"Cannot create {dest_dir}: {exc}") from exc

        final_path = dest_dir / result.filename
        temp_path = final_path.with_name(f".{final_path.name}.{uuid.uuid4().hex[:12]}.tmp")
        try:
            handle = open(temp_path, "wb")
        except OSError as exc:
            raise PersistFailure(f"Cannot open {temp_path}: {exc}") from exc
        self._state.track_temp_file(str(temp_path))

        try:
            await self._drain(result, handle)
        finally:
            handle.close()

        try:
            await asyncio.to_thread(os.replace, temp_path, final_path)
        except OSError as exc:
            raise PersistFailure(f"Cannot write {final_path}: {exc}") from exc
        self._state.release_temp_file(str(temp_path))

        self._logger.info(
            "screenshot_saved",
            url=result.job.url,
            size=result.job.size,
            path=str(final_path),
        )
        return str(final_path)

    @staticmethod
    async def _drain(result: CaptureResult, handle: BinaryIO) -> None:
        stream = result.stream.__aiter__()
        while True:
            try:
                chunk = await stream.__anext__()
            except StopAsyncIteration:
                return
            except CaptureFailure:
                raise
            except Exception as exc:
                raise CaptureFailure(
                    f"Capturing {result.job.url} at {result.job.size} failed: {exc}",
                ) from exc
            try:
                await asyncio.to_thread(handle.write, chunk)
            except OSError as exc:
                raise PersistFailure(f"Cannot write {result.filename}: {exc}") from exc
