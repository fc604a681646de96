from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from vidsections.models import UNPARSED

MAX_SECONDS = 2**31 - 1

_DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_ISO_DURATION_PATTERN = re.compile(
    r"^PT"
    r"(?:(?P<hours>[+-]?\d+)H)?"
    r"(?:(?P<minutes>[+-]?\d+)M)?"
    r"(?:(?P<seconds>[+-]?\d+)(?:[.,](?P<fraction>\d{0,9}))?S)?$",
    re.IGNORECASE,
)

BoundaryExtractor = Callable[[Any], int]


def parse_seconds(value: Any) -> int:
    """Normalize one heterogeneous time value to whole seconds.

    Accepts non-negative ints, finite non-negative floats (floored), and
    strings holding a decimal number, ``"<n>ms"`` or an ISO-8601 ``PT``
    duration. Returns ``UNPARSED`` for anything else.
    """

    if value is None or isinstance(value, bool):
        return UNPARSED
    if isinstance(value, int):
        return value if value >= 0 else UNPARSED
    if isinstance(value, float):
        return _floor_non_negative(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return UNPARSED
        if text.endswith("ms"):
            return parse_milliseconds(text[:-2])
        if text.startswith("PT"):
            return parse_iso_duration(text)
        number = _to_float(text)
        return _floor_non_negative(number) if number is not None else UNPARSED
    return UNPARSED


def parse_milliseconds(value: Any) -> int:
    """Normalize a millisecond value (number or numeric string) to whole seconds."""

    if value is None or isinstance(value, bool):
        return UNPARSED
    if isinstance(value, int):
        return value // 1000 if value >= 0 else UNPARSED
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return UNPARSED
        return math.floor(value / 1000.0)
    if isinstance(value, str):
        number = _to_float(value.strip())
        if number is None or not math.isfinite(number) or number < 0:
            return UNPARSED
        return math.floor(number / 1000.0)
    return UNPARSED


def parse_iso_duration(text: str | None) -> int:
    """Parse an ISO-8601 time duration (``PT1H2M3.5S``) into whole seconds.

    Negative durations fail; values beyond ``MAX_SECONDS`` saturate.
    """

    if text is None:
        return UNPARSED
    match = _ISO_DURATION_PATTERN.match(text.strip())
    if match is None:
        return UNPARSED

    hours, minutes, seconds = match.group("hours"), match.group("minutes"), match.group("seconds")
    if hours is None and minutes is None and seconds is None:
        return UNPARSED

    whole_seconds = int(hours or 0) * 3600 + int(minutes or 0) * 60 + int(seconds or 0)
    nanos = whole_seconds * 1_000_000_000
    fraction = match.group("fraction")
    if fraction:
        fraction_nanos = int(fraction.ljust(9, "0"))
        nanos += -fraction_nanos if seconds.startswith("-") else fraction_nanos

    if nanos < 0:
        return UNPARSED
    return min(nanos // 1_000_000_000, MAX_SECONDS)


def first_parsed(extractors: Iterable[BoundaryExtractor], value: Any) -> int:
    """Try extractors in order and return the first non-negative result."""

    for extractor in extractors:
        parsed = extractor(value)
        if parsed >= 0:
            return parsed
    return UNPARSED


def field_extractor(name: str, parser: BoundaryExtractor) -> BoundaryExtractor:
    """Build an extractor that applies ``parser`` to ``node[name]``."""

    def extract(node: Any) -> int:
        if not isinstance(node, Mapping):
            return UNPARSED
        return parser(node.get(name))

    return extract


BOUNDARY_EXTRACTORS: tuple[BoundaryExtractor, ...] = (
    parse_seconds,
    parse_milliseconds,
    field_extractor("seconds", parse_seconds),
    field_extractor("offsetSeconds", parse_seconds),
    field_extractor("offsetMs", parse_milliseconds),
    field_extractor("ms", parse_milliseconds),
)


def parse_boundary(node: Any) -> int:
    """Resolve a chapter boundary that may be a scalar or a node with unit-specific fields."""

    if node is None:
        return UNPARSED
    return first_parsed(BOUNDARY_EXTRACTORS, node)


def _to_float(text: str) -> float | None:
    if not _DECIMAL_PATTERN.match(text):
        return None
    return float(text)


def _floor_non_negative(value: float) -> int:
    if not math.isfinite(value) or value < 0:
        return UNPARSED
    return math.floor(value)
