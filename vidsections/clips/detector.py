from __future__ import annotations

import logging
from enum import Enum

from vidsections.config import ClipSettings
from vidsections.models import ClipCandidate
from vidsections.parse.captions import decode_captions
from vidsections.parse.timestamp_lines import scan_timestamp_lines
from vidsections.scoring.keyword_score import score_label

logger = logging.getLogger(__name__)


class ClipMode(str, Enum):
    CHAPTERS = "chapters"
    CAPTIONS = "captions"
    COMBINED = "combined"


def resolve_mode(raw_mode: str | ClipMode | None) -> ClipMode:
    """Map a caller-supplied mode string to a mode; unknown values mean chapters."""

    if isinstance(raw_mode, ClipMode):
        return raw_mode
    normalized = (raw_mode or "").strip().lower()
    try:
        return ClipMode(normalized)
    except ValueError:
        logger.debug("Unknown clip detection mode %r; using chapters.", raw_mode)
        return ClipMode.CHAPTERS


def detect_clip_candidates(
    description: str | None,
    captions_payload: str | None,
    duration_seconds: int | None,
    mode: str | ClipMode | None = ClipMode.CHAPTERS,
    *,
    settings: ClipSettings | None = None,
) -> list[ClipCandidate]:
    """Suggest highlight clips from description chapters, caption keywords, or both.

    Combined mode concatenates both lists and sorts by start; overlapping
    suggestions are kept as-is.
    """

    resolved_settings = settings or ClipSettings()
    resolved_mode = resolve_mode(mode)

    if resolved_mode is ClipMode.CAPTIONS:
        return detect_from_captions(captions_payload, duration_seconds, settings=resolved_settings)
    if resolved_mode is ClipMode.COMBINED:
        combined = [
            *detect_from_description(description, duration_seconds, settings=resolved_settings),
            *detect_from_captions(captions_payload, duration_seconds, settings=resolved_settings),
        ]
        return sorted(combined, key=lambda candidate: candidate.start_seconds)
    return detect_from_description(description, duration_seconds, settings=resolved_settings)


def detect_from_description(
    description: str | None,
    duration_seconds: int | None,
    *,
    settings: ClipSettings | None = None,
) -> list[ClipCandidate]:
    resolved_settings = settings or ClipSettings()
    if not description or not description.strip():
        return []

    # No minimum-count gate: one chapter line is still a usable suggestion.
    chapters = sorted(scan_timestamp_lines(description), key=lambda chapter: chapter.start_seconds)

    candidates: list[ClipCandidate] = []
    for index, chapter in enumerate(chapters):
        start = chapter.start_seconds
        if index + 1 < len(chapters):
            end = chapters[index + 1].start_seconds
        else:
            end = start + resolved_settings.chapter_length_seconds
        if duration_seconds is not None:
            end = min(end, duration_seconds)
        end = max(end, start + resolved_settings.min_length_seconds)

        label = chapter.label or resolved_settings.placeholder_label
        details = score_label(
            label,
            base_score=resolved_settings.chapter_base_confidence,
            hit_score=resolved_settings.chapter_keyword_confidence,
            keywords=resolved_settings.keywords,
        )
        candidates.append(
            ClipCandidate(start_seconds=start, end_seconds=end, confidence_score=details.score, label=label)
        )

    return candidates


def detect_from_captions(
    captions_payload: str | None,
    duration_seconds: int | None,
    *,
    settings: ClipSettings | None = None,
) -> list[ClipCandidate]:
    resolved_settings = settings or ClipSettings()
    lines = decode_captions(captions_payload)
    if not lines:
        return []

    candidates: list[ClipCandidate] = []
    for line in lines:
        details = score_label(
            line.text,
            base_score=0.0,
            hit_score=resolved_settings.caption_keyword_confidence,
            keywords=resolved_settings.keywords,
        )
        if not details.hit:
            continue
        candidates.append(
            ClipCandidate(
                start_seconds=line.start_seconds,
                end_seconds=_clamp_end(
                    line.start_seconds + resolved_settings.caption_length_seconds,
                    duration_seconds,
                ),
                confidence_score=details.score,
                label=line.text,
            )
        )
    if candidates:
        return candidates

    logger.debug("No caption keyword hits; using the first %d lines.", resolved_settings.fallback_line_count)
    return [
        ClipCandidate(
            start_seconds=line.start_seconds,
            end_seconds=_clamp_end(line.start_seconds + resolved_settings.fallback_window_seconds, duration_seconds),
            confidence_score=resolved_settings.fallback_confidence,
            label=truncate_label(line.text, resolved_settings.fallback_label_length),
        )
        for line in lines[: max(resolved_settings.fallback_line_count, 0)]
    ]


def truncate_label(text: str, max_length: int = 40) -> str:
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."


def _clamp_end(end: int, duration_seconds: int | None) -> int:
    if duration_seconds is None:
        return end
    return min(end, duration_seconds)
