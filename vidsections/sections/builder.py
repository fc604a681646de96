from __future__ import annotations

from collections.abc import Sequence

from vidsections.models import Candidate, Section, SectionSource
from vidsections.parse.timestamp_lines import MIN_CHAPTER_CANDIDATES

DEFAULT_SECTION_LENGTH_SECONDS = 45
MIN_SECTION_LENGTH_SECONDS = 5
MAX_TITLE_LENGTH = 120
PLACEHOLDER_TITLE = "Track"


def build_sections(
    candidates: Sequence[Candidate],
    source: SectionSource,
    duration_seconds: int | None = None,
    *,
    default_length_seconds: int = DEFAULT_SECTION_LENGTH_SECONDS,
    min_length_seconds: int = MIN_SECTION_LENGTH_SECONDS,
    min_candidates: int = MIN_CHAPTER_CANDIDATES,
    placeholder_title: str = PLACEHOLDER_TITLE,
    max_title_length: int = MAX_TITLE_LENGTH,
) -> list[Section]:
    """Turn scanned candidates into finished sections.

    Pipeline:
    1) reject lists shorter than ``min_candidates``
    2) stable sort by start
    3) end = next start (when later) or start + default length
    4) clamp end to the known duration
    5) floor end at start + minimum length

    Step 5 runs after step 4, so a section near the end of a video can end
    past ``duration_seconds``.
    """

    if len(candidates) < max(min_candidates, 1):
        return []

    ordered = sorted(candidates, key=lambda candidate: candidate.start_seconds)
    sections: list[Section] = []
    for index, current in enumerate(ordered):
        next_start = ordered[index + 1].start_seconds if index + 1 < len(ordered) else None
        end = bound_end(
            current.start_seconds,
            next_start,
            duration_seconds,
            default_length_seconds=default_length_seconds,
            min_length_seconds=min_length_seconds,
        )
        sections.append(
            Section(
                title=normalize_label(current.label, placeholder=placeholder_title, max_length=max_title_length),
                start_seconds=current.start_seconds,
                end_seconds=end,
                source=source,
            )
        )

    return sections


def bound_end(
    start_seconds: int,
    proposed_end: int | None,
    duration_seconds: int | None,
    *,
    default_length_seconds: int,
    min_length_seconds: int,
) -> int:
    """Clamp-then-floor end resolution shared by every section source."""

    if proposed_end is None or proposed_end <= start_seconds:
        end = start_seconds + default_length_seconds
    else:
        end = proposed_end
    if duration_seconds is not None:
        end = min(end, duration_seconds)
    return max(end, start_seconds + min_length_seconds)


def normalize_label(
    label: str | None,
    *,
    placeholder: str = PLACEHOLDER_TITLE,
    max_length: int = MAX_TITLE_LENGTH,
) -> str:
    trimmed = (label or "").strip()
    if not trimmed:
        return placeholder
    return trimmed[:max_length]
