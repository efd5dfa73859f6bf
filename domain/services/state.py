from __future__ import annotations

from dataclasses import dataclass, field

from domain.services.cache import LookupCache


@dataclass
class ProcessState:
    """
    Process-scoped state shared by every run of an orchestrator.

    Holds the memoized lookup results, the registry of temporary files
    that are currently being written and whether the interrupt handler
    has been installed. Production code builds one per process; tests
    build a fresh one per test.
    """

    resolution_cache: LookupCache = field(default_factory=LookupCache)
    viewport_cache: LookupCache = field(default_factory=LookupCache)
    temp_files: set[str] = field(default_factory=set)
    interrupt_installed: bool = False

    def track_temp_file(self, path: str) -> None:
        self.temp_files.add(path)

    def release_temp_file(self, path: str) -> None:
        self.temp_files.discard(path)

    def drain_temp_files(self) -> list[str]:
        paths = sorted(self.temp_files)
        self.temp_files.clear()
        return paths
