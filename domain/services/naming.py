from __future__ import annotations

import os
import re
from datetime import datetime

from domain.errors import InvalidTemplateError
from domain.models import CaptureJob

DEFAULT_FILENAME_TEMPLATE = "{url}-{size}{crop}"
DEFAULT_FORMAT = "png"

_SCHEME = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//", re.IGNORECASE)
_RESERVED = re.compile(r'[<>:"/\\|?*\x00-\x1f]+')
_REPEATED_REPLACEMENT = re.compile(r"!{2,}")


def filenamify_url(url: str) -> str:
    """Humanize a URL and make it safe to use as part of a filename."""
    humanized = _SCHEME.sub("", url.strip())
    if humanized.lower().startswith("www."):
        humanized = humanized[4:]
    humanized = humanized.rstrip("/")
    safe = _REPEATED_REPLACEMENT.sub("!", _RESERVED.sub("!", humanized))
    return safe.strip(". ") or "page"


def render_filename(job: CaptureJob, captured_at: datetime) -> str:
    options = job.options
    template = f"{options.filename or DEFAULT_FILENAME_TEMPLATE}.{options.format or DEFAULT_FORMAT}"

    url = job.url
    if os.path.isabs(url):
        url = os.path.basename(url)

    values = {
        "url": filenamify_url(url),
        "size": job.size,
        "width": str(job.width),
        "height": str(job.height),
        "crop": "-cropped" if options.crop else "",
        "date": captured_at.strftime("%Y-%m-%d"),
        "time": captured_at.strftime("%H-%M-%S"),
    }
    try:
        return template.format_map(values)
    except (AttributeError, KeyError, IndexError, ValueError) as exc:
        raise InvalidTemplateError(f"Invalid filename template {template!r}: {exc}") from exc
