from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from vidsections.models import Section, SectionSource
from vidsections.parse.time_values import field_extractor, first_parsed, parse_boundary
from vidsections.sections.builder import (
    DEFAULT_SECTION_LENGTH_SECONDS,
    MAX_TITLE_LENGTH,
    MIN_SECTION_LENGTH_SECONDS,
    PLACEHOLDER_TITLE,
    bound_end,
    normalize_label,
)

logger = logging.getLogger(__name__)

START_EXTRACTORS = (
    field_extractor("startTime", parse_boundary),
    field_extractor("start_time", parse_boundary),
    field_extractor("start", parse_boundary),
)
END_EXTRACTORS = (
    field_extractor("endTime", parse_boundary),
    field_extractor("end_time", parse_boundary),
    field_extractor("end", parse_boundary),
)


def _bare_list(payload: Any) -> list[Any] | None:
    return payload if isinstance(payload, list) else None


def _chapters_list(payload: Any) -> list[Any] | None:
    if isinstance(payload, dict) and isinstance(payload.get("chapters"), list):
        return payload["chapters"]
    return None


def _nested_chapters(payload: Any) -> list[Any] | None:
    if isinstance(payload, dict):
        return _chapters_list(payload.get("chapters"))
    return None


def _provider_response(payload: Any) -> list[Any] | None:
    if not isinstance(payload, dict):
        return None
    items = payload.get("items")
    if not isinstance(items, list) or not items:
        return None
    return _nested_chapters(items[0])


PAYLOAD_SHAPES: tuple[Callable[[Any], list[Any] | None], ...] = (
    _bare_list,
    _chapters_list,
    _nested_chapters,
    _provider_response,
)


def chapter_entries(payload: Any) -> list[Any]:
    """Locate the chapter entry list inside a provider payload of unknown shape."""

    for shape in PAYLOAD_SHAPES:
        entries = shape(payload)
        if entries is not None:
            return entries
    return []


def parse_official_chapters(
    payload: Any,
    duration_seconds: int | None = None,
    *,
    default_length_seconds: int = DEFAULT_SECTION_LENGTH_SECONDS,
    min_length_seconds: int = MIN_SECTION_LENGTH_SECONDS,
    placeholder_title: str = PLACEHOLDER_TITLE,
    max_title_length: int = MAX_TITLE_LENGTH,
) -> list[Section]:
    """Normalize an already-fetched official chapter payload into sections.

    Entries keep payload order. Entries without a parseable start are dropped;
    a missing or non-increasing end falls back to start + default length.
    """

    if payload is None:
        return []

    sections: list[Section] = []
    dropped = 0
    for entry in chapter_entries(payload):
        if not isinstance(entry, dict):
            dropped += 1
            continue
        start = first_parsed(START_EXTRACTORS, entry)
        if start < 0:
            dropped += 1
            continue
        end = first_parsed(END_EXTRACTORS, entry)
        title = entry.get("title")
        sections.append(
            Section(
                title=normalize_label(
                    "" if title is None else str(title),
                    placeholder=placeholder_title,
                    max_length=max_title_length,
                ),
                start_seconds=start,
                end_seconds=bound_end(
                    start,
                    end if end >= 0 else None,
                    duration_seconds,
                    default_length_seconds=default_length_seconds,
                    min_length_seconds=min_length_seconds,
                ),
                source=SectionSource.OFFICIAL_CHAPTER,
            )
        )

    if dropped:
        logger.debug("Dropped %d official chapter entries without a parseable start.", dropped)
    return sections
