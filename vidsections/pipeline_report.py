from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from vidsections.clips.detector import ClipMode, detect_clip_candidates, resolve_mode
from vidsections.config import Settings
from vidsections.models import ClipCandidate, SectionResolution, VideoMaterials
from vidsections.sections.resolver import resolve_materials


@dataclass(frozen=True, slots=True)
class VideoReport:
    """Sections and clip suggestions derived from one video's materials."""

    resolution: SectionResolution
    clip_candidates: tuple[ClipCandidate, ...]
    mode: ClipMode

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.resolution.to_dict(),
            "mode": self.mode.value,
            "clip_candidates": [candidate.to_dict() for candidate in self.clip_candidates],
        }


def build_video_report(
    materials: VideoMaterials,
    *,
    mode: str | ClipMode | None = ClipMode.COMBINED,
    settings: Settings | None = None,
) -> VideoReport:
    resolved_settings = settings or Settings()
    resolved_mode = resolve_mode(mode)

    resolution = resolve_materials(materials, resolved_settings.sections)
    clip_candidates = detect_clip_candidates(
        materials.description,
        materials.captions_payload,
        materials.duration_seconds,
        resolved_mode,
        settings=resolved_settings.clips,
    )
    return VideoReport(
        resolution=resolution,
        clip_candidates=tuple(clip_candidates),
        mode=resolved_mode,
    )
