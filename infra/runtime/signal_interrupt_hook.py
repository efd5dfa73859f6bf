from __future__ import annotations

import signal
from typing import Any, Callable


class SignalInterruptHook:
    """Runs a callback on SIGINT, then exits the process with status 1."""

    def __init__(self, signum: int = signal.SIGINT, exit_code: int = 1) -> None:
        self._signum = signum
        self._exit_code = exit_code

    def install(self, callback: Callable[[], None]) -> None:
        def handler(signum: int, frame: Any) -> None:
            callback()
            raise SystemExit(self._exit_code)

        signal.signal(self._signum, handler)
