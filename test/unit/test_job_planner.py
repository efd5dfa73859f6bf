from __future__ import annotations

import asyncio

import pytest

from domain.errors import InvalidSourceError, LookupFailure
from domain.models import CaptureOptions, Source
from domain.services import (
    JobPlanner,
    LookupCache,
    ResolutionExpander,
    ViewportExpander,
)
from test.mocks import FakeResolutionLookup, FakeViewportLookup, InMemoryLogger


def _build(
    resolutions: FakeResolutionLookup | None = None,
    viewports: FakeViewportLookup | None = None,
) -> tuple[JobPlanner, FakeResolutionLookup, FakeViewportLookup]:
    resolutions = resolutions or FakeResolutionLookup(["1920x1080", "1366x768"])
    viewports = viewports or FakeViewportLookup({"iphone 5s": "320x568", "ipad": "1024x768"})
    planner = JobPlanner(
        resolution_expander=ResolutionExpander(lookup=resolutions, cache=LookupCache()),
        viewport_expander=ViewportExpander(
            lookup=viewports,
            cache=LookupCache(),
            logger=InMemoryLogger(),
        ),
    )
    return planner, resolutions, viewports


def test_literal_only_source_emits_one_job_per_distinct_size() -> None:
    planner, resolutions, viewports = _build()
    source = Source(url="example.com", sizes=["1024x768", "800x600", "1024x768"])

    jobs = asyncio.run(planner.plan(source, CaptureOptions()))

    assert [job.size for job in jobs] == ["1024x768", "800x600"]
    assert resolutions.calls == 0
    assert viewports.calls == []


def test_popular_keyword_alone_uses_resolution_lookup_only() -> None:
    planner, resolutions, viewports = _build()

    jobs = asyncio.run(planner.plan(Source(url="a.com", sizes=["w3counter"]), CaptureOptions()))

    assert [job.size for job in jobs] == ["1920x1080", "1366x768"]
    assert resolutions.calls == 1
    assert viewports.calls == []


def test_literal_sizes_with_device_keyword_are_merged_once() -> None:
    planner, resolutions, viewports = _build()
    source = Source(url="a.com", sizes=["1024x768", "1024x768", "ipad"])

    jobs = asyncio.run(planner.plan(source, CaptureOptions()))

    # "ipad" also resolves to 1024x768.
    assert [job.size for job in jobs] == ["1024x768"]
    assert viewports.calls == [["ipad"]]
    assert resolutions.calls == 0


def test_popular_keyword_next_to_literal_sizes_is_ignored() -> None:
    planner, resolutions, viewports = _build()
    source = Source(url="a.com", sizes=["800x600", "w3counter"])

    jobs = asyncio.run(planner.plan(source, CaptureOptions()))

    assert [job.size for job in jobs] == ["800x600"]
    assert resolutions.calls == 0
    assert viewports.calls == []


def test_popular_keyword_wins_over_device_keywords_without_literals() -> None:
    planner, resolutions, viewports = _build()
    source = Source(url="a.com", sizes=["w3counter", "ipad"])

    jobs = asyncio.run(planner.plan(source, CaptureOptions()))

    assert [job.size for job in jobs] == ["1920x1080", "1366x768"]
    assert viewports.calls == []


def test_device_keywords_and_literal_sizes_exclude_popular_keyword() -> None:
    planner, _, viewports = _build()
    source = Source(url="a.com", sizes=["800x600", "w3counter", "iphone 5s"])

    jobs = asyncio.run(planner.plan(source, CaptureOptions()))

    assert [job.size for job in jobs] == ["800x600", "320x568"]
    assert viewports.calls == [["iphone 5s"]]


def test_source_options_override_defaults() -> None:
    planner, _, _ = _build()
    defaults = CaptureOptions(delay=1, crop=False, format="png", headers={"X-A": "1", "X-B": "2"})
    source = Source(
        url="a.com",
        sizes=["800x600"],
        options=CaptureOptions(crop=True, headers={"X-B": "override"}),
    )

    [job] = asyncio.run(planner.plan(source, defaults))

    assert job.options.delay == 1
    assert job.options.crop is True
    assert job.options.format == "png"
    assert dict(job.options.headers) == {"X-A": "1", "X-B": "override"}


@pytest.mark.parametrize("url", [None, ""])
def test_missing_url_is_invalid_source(url: str | None) -> None:
    planner, _, _ = _build()

    with pytest.raises(InvalidSourceError, match="URL required"):
        asyncio.run(planner.plan(Source(url=url, sizes=["800x600"]), CaptureOptions()))


def test_plan_all_flattens_every_source() -> None:
    planner, _, _ = _build()
    sources = [
        Source(url="a.com", sizes=["800x600", "1024x768"]),
        Source(url="a.com", sizes=["800x600"]),
        Source(url="b.com", sizes=["ipad"]),
    ]

    jobs = asyncio.run(planner.plan_all(sources, CaptureOptions()))

    assert [(job.url, job.size) for job in jobs] == [
        ("a.com", "800x600"),
        ("a.com", "1024x768"),
        ("a.com", "800x600"),
        ("b.com", "1024x768"),
    ]


def test_plan_all_fails_as_a_whole_on_invalid_source() -> None:
    planner, _, _ = _build()
    sources = [Source(url="a.com", sizes=["ipad"]), Source(url=None, sizes=["800x600"])]

    with pytest.raises(InvalidSourceError):
        asyncio.run(planner.plan_all(sources, CaptureOptions()))


def test_plan_all_propagates_lookup_failure() -> None:
    planner, _, _ = _build(resolutions=FakeResolutionLookup(error=OSError("offline")))
    sources = [Source(url="a.com", sizes=["800x600"]), Source(url="b.com", sizes=["w3counter"])]

    with pytest.raises(LookupFailure):
        asyncio.run(planner.plan_all(sources, CaptureOptions()))
