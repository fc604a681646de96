from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from vidsections.models import CaptionLine

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")
_INTEGER_PATTERN = re.compile(r"^\d+$")
_NUMBER_PATTERN = re.compile(r"^\d+(?:\.\d*)?$")


def decode_captions(payload: str | None) -> list[CaptionLine]:
    """Decode a caption payload into caption lines sorted by start offset.

    Two encodings are accepted:
    1) a JSON array of ``{"start"|"offset": n, "text"|"content": str}`` objects,
       used whenever the payload starts with ``[``
    2) plain text, one ``<seconds>|<text>`` caption per line

    A payload that starts with ``[`` but is not valid JSON decodes to no lines.
    Malformed entries are skipped; this never raises.
    """

    if payload is None:
        return []
    trimmed = payload.strip()
    if not trimmed:
        return []

    if trimmed.startswith("["):
        lines = _decode_json_array(trimmed)
    else:
        lines = _decode_plain_text(trimmed)

    return sorted(lines, key=lambda line: line.start_seconds)


def _decode_json_array(payload: str) -> list[CaptionLine]:
    try:
        nodes = json.loads(payload)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.debug("Caption payload is not valid JSON (%s); no caption lines decoded.", exc)
        return []

    if not isinstance(nodes, list):
        return []

    lines: list[CaptionLine] = []
    for node in nodes:
        if not isinstance(node, dict):
            continue
        start_value = node.get("start")
        if start_value is None:
            start_value = node.get("offset")
        start = _coerce_start(start_value)
        if start is None:
            continue

        text_value = node.get("text")
        if text_value is None:
            text_value = node.get("content")
        text = "" if text_value is None else str(text_value)
        lines.append(CaptionLine(start_seconds=start, text=text))

    return lines


def _decode_plain_text(payload: str) -> list[CaptionLine]:
    lines: list[CaptionLine] = []
    for raw_line in _LINE_SPLIT.split(payload):
        start_part, separator, text_part = raw_line.partition("|")
        if not separator or not text_part:
            continue
        start_text = start_part.strip()
        if not _INTEGER_PATTERN.match(start_text):
            continue
        lines.append(CaptionLine(start_seconds=int(start_text), text=text_part.strip()))
    return lines


def _coerce_start(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return None
        return math.floor(value)
    if isinstance(value, str) and _NUMBER_PATTERN.match(value.strip()):
        return math.floor(float(value.strip()))
    return None
