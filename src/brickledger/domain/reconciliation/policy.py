"""Fallback policies applied when a vendor id has no cross-reference.

Parts pass through unchanged: an unmapped vendor part id is treated as the
canonical part id. Colors default to ``integer_color_fallback``, which reuses
a numeric vendor color id as the canonical color id. Such an id can collide
with an unrelated canonical color that happens to share the number;
``no_color_fallback`` is the strict alternative that leaves the item unmapped.
"""

from __future__ import annotations

import re
from collections.abc import Callable

type PartFallback = Callable[[str], str | None]
type ColorFallback = Callable[[str], int | None]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(value: str | int | None) -> int | None:
    """Parse the integer prefix of ``value`` (``"3pcs"`` -> 3, ``"abc"`` -> None)."""

    if value is None:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def passthrough_part_fallback(vendor_part_id: str) -> str | None:
    return vendor_part_id.strip() or None


def integer_color_fallback(vendor_color_id: str) -> int | None:
    return parse_leading_int(vendor_color_id)


def no_color_fallback(vendor_color_id: str) -> int | None:  # noqa: ARG001
    return None


COLOR_FALLBACKS: dict[str, ColorFallback] = {
    "integer": integer_color_fallback,
    "none": no_color_fallback,
}
