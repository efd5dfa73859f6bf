from __future__ import annotations

from datetime import datetime


class SystemClock:
    def now(self) -> datetime:
        # Local time; it ends up in screenshot filenames.
        return datetime.now().astimezone()
