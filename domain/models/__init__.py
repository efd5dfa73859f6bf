from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import AsyncIterator, Mapping, Sequence


@dataclass(frozen=True)
class CaptureOptions:
    """
    Capture parameters shared by the jobs of a run.

    ``None`` means "not set" so that per-source options can be layered
    over run-level defaults with :meth:`merge`. Arbitrary request headers
    live in the ``headers`` extension map.
    """

    delay: float | None = None
    timeout: float | None = None
    crop: bool | None = None
    css: str | None = None
    cookies: Sequence[str] | None = None
    filename: str | None = None
    selector: str | None = None
    hide: Sequence[str] | None = None
    username: str | None = None
    password: str | None = None
    scale: float | None = None
    format: str | None = None
    user_agent: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        if self.cookies is not None:
            object.__setattr__(self, "cookies", tuple(self.cookies))
        if self.hide is not None:
            object.__setattr__(self, "hide", tuple(self.hide))

    def merge(self, overrides: CaptureOptions | None) -> CaptureOptions:
        """Shallow merge: every field set on ``overrides`` wins."""
        if overrides is None:
            return self
        changes: dict[str, object] = {}
        for item in fields(self):
            if item.name == "headers":
                continue
            value = getattr(overrides, item.name)
            if value is not None:
                changes[item.name] = value
        changes["headers"] = {**self.headers, **overrides.headers}
        return replace(self, **changes)


@dataclass(frozen=True)
class Source:
    """One URL plus its size specifiers and per-URL option overrides."""

    url: str | None
    sizes: Sequence[str] = field(default_factory=tuple)
    options: CaptureOptions = field(default_factory=CaptureOptions)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sizes", tuple(self.sizes))


@dataclass(frozen=True)
class SizeSpecs:
    literal_sizes: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class CaptureJob:
    """A single (url, literal size, merged options) unit of capture work."""

    url: str
    size: str
    options: CaptureOptions

    @property
    def width(self) -> int:
        return int(self.size.split("x")[0])

    @property
    def height(self) -> int:
        return int(self.size.split("x")[1])


@dataclass(frozen=True)
class CaptureResult:
    """Target filename paired with the byte stream produced for one job."""

    filename: str
    stream: AsyncIterator[bytes]
    job: CaptureJob

    async def read(self) -> bytes:
        chunks = [chunk async for chunk in self.stream]
        return b"".join(chunks)


@dataclass(frozen=True)
class RunStats:
    url_count: int
    size_count: int
    screenshot_count: int


@dataclass(frozen=True)
class AppConfig:
    """Application-level configuration loaded from config.json."""

    destination: str | None = None
    headless: bool = True
    resolutions_url: str = "https://www.w3counter.com/globalstats.php"
    viewports_url: str | None = None
    defaults: CaptureOptions = field(default_factory=CaptureOptions)


__all__ = [
    "AppConfig",
    "CaptureOptions",
    "Source",
    "SizeSpecs",
    "CaptureJob",
    "CaptureResult",
    "RunStats",
]
