from __future__ import annotations

import re

from vidsections.models import Candidate

# A single stray timestamp in prose is not a chapter list.
MIN_CHAPTER_CANDIDATES = 2

TIMESTAMP_LINE_PATTERN = re.compile(
    r"^(?:(?:\d+\s*[.)-]\s*)|(?:\d+\s+)|(?:[-•*]\s*))?"
    r"(?:(?P<hours>\d{1,2}):)?(?P<minutes>\d{1,2}):(?P<seconds>\d{2})"
    r"\s*-?\s*(?P<label>.*)$"
)
_LINE_SPLIT = re.compile(r"\r?\n")


def scan_timestamp_lines(text: str | None) -> list[Candidate]:
    """Collect ``[bullet] [H:]MM:SS [-] label`` lines in order of appearance.

    Lines that do not match are skipped. Labels are trimmed but may be empty;
    placeholders are the caller's concern.
    """

    if not text:
        return []

    candidates: list[Candidate] = []
    for raw_line in _LINE_SPLIT.split(text):
        candidate = parse_timestamp_line(raw_line)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def parse_timestamp_line(line: str) -> Candidate | None:
    trimmed = line.strip()
    if not trimmed:
        return None

    match = TIMESTAMP_LINE_PATTERN.match(trimmed)
    if match is None:
        return None

    hours = int(match.group("hours")) if match.group("hours") is not None else 0
    minutes = int(match.group("minutes"))
    seconds = int(match.group("seconds"))
    label = (match.group("label") or "").strip()
    return Candidate(start_seconds=hours * 3600 + minutes * 60 + seconds, label=label)
