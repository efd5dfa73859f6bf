from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from app import CaptureFacade, format_summary
from domain.errors import ScreenshotRunError
from domain.models import CaptureOptions, Source
from domain.services import ProcessState
from domain.utils import split_csv
from infra.browser import PlaywrightCaptureService
from infra.config import FileSystemConfigProvider
from infra.runtime import SignalInterruptHook, StructuredLogger, SystemClock


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="multishot")
    sub = parser.add_subparsers(dest="command", required=True)

    capture_p = sub.add_parser("capture", help="Capture screenshots of one or more pages")
    capture_p.add_argument("--config-dir", default="./config", help="Path to config folder")
    capture_p.add_argument(
        "--source",
        dest="sources",
        action="append",
        nargs="+",
        required=True,
        metavar="URL_OR_SIZE",
        help="A URL followed by sizes (1024x768), device names or 'w3counter'",
    )
    capture_p.add_argument("--dest", help="Output directory (default: config or cwd)")
    capture_p.add_argument("--delay", type=float, help="Seconds to wait before capturing")
    capture_p.add_argument("--timeout", type=float, help="Seconds before giving up on a page")
    capture_p.add_argument("--crop", action="store_true", default=None, help="Crop to the viewport")
    capture_p.add_argument("--css", help="CSS to inject into the page")
    capture_p.add_argument("--cookie", dest="cookies", action="append", help="name=value; Domain=...")
    capture_p.add_argument("--header", dest="headers", action="append", help="Name: value")
    capture_p.add_argument("--hide", help="Comma-separated selectors to hide")
    capture_p.add_argument("--selector", help="Capture only this element")
    capture_p.add_argument("--username")
    capture_p.add_argument("--password")
    capture_p.add_argument("--scale", type=float, help="Device scale factor")
    capture_p.add_argument("--format", choices=["png", "jpg", "jpeg"])
    capture_p.add_argument("--user-agent")
    capture_p.add_argument("--filename", help="Template, e.g. '{date} - {url}-{size}'")
    capture_p.add_argument("--headless", action="store_true", default=None)
    capture_p.add_argument("--no-headless", dest="headless", action="store_false")

    validate_p = sub.add_parser("validate-config")
    validate_p.add_argument("--config-dir", default="./config", help="Path to config folder")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config_provider = FileSystemConfigProvider(args.config_dir)

    errors = config_provider.validate()
    if errors:
        print("Config validation failed:")
        for err in errors:
            print(f"  - {err}")
        return 1

    if args.command == "validate-config":
        print(f"Config OK: {config_provider.config_path}")
        return 0

    if args.command == "capture":
        try:
            overrides = options_from_args(args)
        except ValueError as exc:
            parser.error(str(exc))
        sources = [Source(url=group[0], sizes=group[1:]) for group in args.sources]
        return _handle_capture(args, config_provider, sources, overrides)

    raise SystemExit(f"Unsupported command: {args.command}")


def options_from_args(args: argparse.Namespace) -> CaptureOptions:
    headers: dict[str, str] = {}
    for raw in args.headers or []:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"Invalid header {raw!r}, expected 'Name: value'")
        headers[name.strip()] = value.strip()

    return CaptureOptions(
        delay=args.delay,
        timeout=args.timeout,
        crop=args.crop,
        css=args.css,
        cookies=args.cookies,
        filename=args.filename,
        selector=args.selector,
        hide=split_csv(args.hide) if args.hide else None,
        username=args.username,
        password=args.password,
        scale=args.scale,
        format=args.format,
        user_agent=args.user_agent,
        headers=headers,
    )


def _handle_capture(
    args: argparse.Namespace,
    config_provider: FileSystemConfigProvider,
    sources: list[Source],
    overrides: CaptureOptions,
) -> int:
    cfg = config_provider.get_config()
    headless = cfg.headless if args.headless is None else args.headless
    destination = args.dest or cfg.destination or "."
    logger = StructuredLogger()

    async def _run() -> int:
        async with PlaywrightCaptureService(headless=headless) as capture_service:
            facade = CaptureFacade(
                config_provider=config_provider,
                capture_service=capture_service,
                interrupt_hook=SignalInterruptHook(),
                clock=SystemClock(),
                logger=logger,
                state=ProcessState(),
            )
            summary = await facade.capture(
                sources,
                destination=destination,
                overrides=overrides,
            )
        print(format_summary(summary.stats))
        return 0

    try:
        return asyncio.run(_run())
    except ScreenshotRunError as exc:
        logger.error("run_failed", error=str(exc))
        print(f"Capture failed: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
