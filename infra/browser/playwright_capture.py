from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path
from typing import Any, AsyncIterator

from domain.models import CaptureJob, CaptureOptions
from domain.ports import WarningCallback

_HAS_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_DEFAULT_TIMEOUT_SECONDS = 60


def protocolify(url: str) -> str:
    """Add a scheme to bare hosts and turn local paths into file URLs."""
    if _HAS_SCHEME.match(url):
        return url
    if os.path.exists(url):
        return Path(url).resolve().as_uri()
    return f"http://{url}"


def parse_cookie(raw: str, page_url: str) -> dict[str, Any]:
    """Parse ``name=value; Domain=...; Path=...`` into a Playwright cookie."""
    parts = [part.strip() for part in raw.split(";") if part.strip()]
    if not parts or "=" not in parts[0]:
        raise ValueError(f"Invalid cookie: {raw!r}")
    name, value = parts[0].split("=", 1)
    cookie: dict[str, Any] = {"name": name.strip(), "value": value.strip()}
    for attr in parts[1:]:
        key, _, val = attr.partition("=")
        key = key.strip().lower()
        if key == "domain":
            cookie["domain"] = val.strip()
        elif key == "path":
            cookie["path"] = val.strip()
        elif key == "secure":
            cookie["secure"] = True
        elif key == "httponly":
            cookie["httpOnly"] = True
    if "domain" in cookie:
        cookie.setdefault("path", "/")
    else:
        cookie["url"] = page_url
    return cookie


class PlaywrightCaptureService:
    """
    Playwright-backed implementation of CaptureServicePort.

    Requires ``playwright`` to be installed and browsers set up via
    ``playwright install chromium``.

    One Chromium instance is shared by all captures; every job gets its
    own browser context so options never leak between jobs. Call
    ``launch()`` before capturing and ``close()`` when finished, or use
    the service as an async context manager.
    """

    def __init__(self, *, headless: bool = True, browser: Any = None) -> None:
        self._headless = headless
        self._playwright: Any = None
        self._browser: Any = browser

    async def launch(self) -> None:
        from playwright.async_api import async_playwright

        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self._headless)

    async def close(self) -> None:
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()

    async def __aenter__(self) -> "PlaywrightCaptureService":
        await self.launch()
        return self

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> None:
        await self.close()

    def _ensure_browser(self) -> Any:
        if self._browser is None:
            raise RuntimeError("Browser not launched. Call launch() first.")
        return self._browser

    async def capture(
        self,
        job: CaptureJob,
        *,
        on_warning: WarningCallback | None = None,
    ) -> AsyncIterator[bytes]:
        browser = self._ensure_browser()
        options = job.options
        url = protocolify(job.url)
        timeout_ms = (options.timeout or _DEFAULT_TIMEOUT_SECONDS) * 1000

        context = await browser.new_context(**self._context_args(job))
        try:
            if options.cookies:
                await context.add_cookies([parse_cookie(raw, url) for raw in options.cookies])

            page = await context.new_page()
            if on_warning is not None:
                page.on("pageerror", lambda err: on_warning(f"Page error: {err}"))
                page.on(
                    "requestfailed",
                    lambda req: on_warning(f"Request failed: {req.url} ({req.failure})"),
                )

            await page.goto(url, wait_until="load", timeout=timeout_ms)
            if options.css:
                await page.add_style_tag(content=options.css)
            if options.hide:
                hidden = ", ".join(options.hide)
                await page.add_style_tag(content=f"{hidden} {{ visibility: hidden !important; }}")
            if options.delay:
                await asyncio.sleep(options.delay)

            image_type = self._image_type(options)
            if options.selector:
                element = page.locator(options.selector).first
                data = await element.screenshot(type=image_type, timeout=timeout_ms)
            else:
                data = await page.screenshot(
                    type=image_type,
                    full_page=not options.crop,
                    timeout=timeout_ms,
                )
        finally:
            await context.close()

        yield data

    # -- internal helpers ---------------------------------------------------

    @staticmethod
    def _context_args(job: CaptureJob) -> dict[str, Any]:
        options = job.options
        args: dict[str, Any] = {
            "viewport": {"width": job.width, "height": job.height},
            "device_scale_factor": options.scale or 1,
        }
        if options.user_agent:
            args["user_agent"] = options.user_agent
        if options.headers:
            args["extra_http_headers"] = dict(options.headers)
        if options.username:
            args["http_credentials"] = {
                "username": options.username,
                "password": options.password or "",
            }
        return args

    @staticmethod
    def _image_type(options: CaptureOptions) -> str:
        fmt = (options.format or "png").lower()
        return "jpeg" if fmt in ("jpg", "jpeg") else "png"
