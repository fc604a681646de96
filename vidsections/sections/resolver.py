from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from vidsections.config import SectionSettings
from vidsections.models import Section, SectionResolution, SectionSource, VideoMaterials
from vidsections.parse.timestamp_lines import scan_timestamp_lines
from vidsections.sections.builder import build_sections
from vidsections.sections.official import parse_official_chapters

logger = logging.getLogger(__name__)

SectionStrategy = Callable[[VideoMaterials, SectionSettings], list[Section]]


def from_official_chapters(materials: VideoMaterials, settings: SectionSettings) -> list[Section]:
    return parse_official_chapters(
        materials.official_chapters,
        materials.duration_seconds,
        default_length_seconds=settings.default_length_seconds,
        min_length_seconds=settings.min_length_seconds,
        placeholder_title=settings.placeholder_title,
        max_title_length=settings.max_title_length,
    )


def from_comments(materials: VideoMaterials, settings: SectionSettings) -> list[Section]:
    """Pick the first comment (in caller-supplied relevance order) that reads as a chapter list."""

    for index, body in enumerate(materials.comment_bodies):
        if not body or not body.strip():
            continue
        sections = _sections_from_text(body, SectionSource.COMMENT, materials.duration_seconds, settings)
        if len(sections) >= max(settings.min_candidates, 2):
            logger.debug("Comment #%d yielded %d sections.", index, len(sections))
            return sections
    return []


def from_description(materials: VideoMaterials, settings: SectionSettings) -> list[Section]:
    return _sections_from_text(
        materials.description,
        SectionSource.DESCRIPTION,
        materials.duration_seconds,
        settings,
    )


SECTION_STRATEGIES: tuple[tuple[SectionSource, SectionStrategy], ...] = (
    (SectionSource.OFFICIAL_CHAPTER, from_official_chapters),
    (SectionSource.COMMENT, from_comments),
    (SectionSource.DESCRIPTION, from_description),
)


def resolve_materials(
    materials: VideoMaterials,
    settings: SectionSettings | None = None,
    *,
    strategies: Iterable[tuple[SectionSource, SectionStrategy]] = SECTION_STRATEGIES,
) -> SectionResolution:
    """Run the source strategies in priority order; the first non-empty result wins."""

    resolved_settings = settings or SectionSettings()
    for source, strategy in strategies:
        sections = strategy(materials, resolved_settings)
        if sections:
            logger.debug("Resolved %d sections from %s.", len(sections), source.value)
            return SectionResolution(sections=tuple(sections), source=source)

    logger.debug("No section source produced results.")
    return SectionResolution()


def resolve_sections(
    *,
    official_chapters: Any = None,
    comment_bodies: Iterable[str] | None = None,
    description: str | None = None,
    duration_seconds: int | None = None,
    settings: SectionSettings | None = None,
) -> SectionResolution:
    materials = VideoMaterials(
        description=description,
        duration_seconds=duration_seconds,
        official_chapters=official_chapters,
        comment_bodies=tuple(comment_bodies or ()),
    )
    return resolve_materials(materials, settings)


def _sections_from_text(
    text: str | None,
    source: SectionSource,
    duration_seconds: int | None,
    settings: SectionSettings,
) -> list[Section]:
    if not text or not text.strip():
        return []
    return build_sections(
        scan_timestamp_lines(text),
        source,
        duration_seconds,
        default_length_seconds=settings.default_length_seconds,
        min_length_seconds=settings.min_length_seconds,
        min_candidates=settings.min_candidates,
        placeholder_title=settings.placeholder_title,
        max_title_length=settings.max_title_length,
    )
