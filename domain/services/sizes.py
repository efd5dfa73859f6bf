from __future__ import annotations

import re
from typing import Iterable

from domain.models import SizeSpecs
from domain.utils import unique

POPULAR_RESOLUTIONS_KEYWORD = "w3counter"

_LITERAL_SIZE = re.compile(r"^\d{2,4}x\d{2,4}$", re.IGNORECASE)


def is_literal_size(specifier: str) -> bool:
    return bool(_LITERAL_SIZE.match(specifier))


def classify_sizes(specifiers: Iterable[str]) -> SizeSpecs:
    """
    Split size specifiers into literal ``WIDTHxHEIGHT`` sizes and keywords.

    Literal sizes are normalised to a lowercase ``x``. Keywords are whatever
    did not match, in original order. Both sequences are deduplicated.
    """
    specifiers = list(specifiers)
    literal = [spec for spec in specifiers if is_literal_size(spec)]
    keywords = [spec for spec in specifiers if spec not in literal]
    return SizeSpecs(
        literal_sizes=tuple(unique(spec.lower() for spec in literal)),
        keywords=tuple(unique(keywords)),
    )
