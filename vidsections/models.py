from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

UNPARSED = -1


class SectionSource(str, Enum):
    """Origin of a section list."""

    OFFICIAL_CHAPTER = "OFFICIAL_CHAPTER"
    COMMENT = "COMMENT"
    DESCRIPTION = "DESCRIPTION"


@dataclass(frozen=True, slots=True)
class Candidate:
    """Raw (offset, label) pair found by the timestamp line scanner."""

    start_seconds: int
    label: str


@dataclass(frozen=True, slots=True)
class CaptionLine:
    start_seconds: int
    text: str


@dataclass(frozen=True, slots=True)
class Section:
    """Finished, labeled interval considered authoritative chapter data."""

    title: str
    start_seconds: int
    end_seconds: int
    source: SectionSource

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "start_seconds": self.start_seconds,
            "end_seconds": self.end_seconds,
            "source": self.source.value,
        }


@dataclass(frozen=True, slots=True)
class ClipCandidate:
    """Scored highlight suggestion."""

    start_seconds: int
    end_seconds: int
    confidence_score: float
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_seconds": self.start_seconds,
            "end_seconds": self.end_seconds,
            "confidence_score": self.confidence_score,
            "label": self.label,
        }


@dataclass(frozen=True, slots=True)
class SectionResolution:
    """Section list for one video plus the source that produced it."""

    sections: tuple[Section, ...] = ()
    source: SectionSource | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source.value if self.source is not None else None,
            "sections": [section.to_dict() for section in self.sections],
        }


@dataclass(frozen=True, slots=True)
class VideoMaterials:
    """Already-fetched raw text associated with one video."""

    description: str | None = None
    captions_payload: str | None = None
    duration_seconds: int | None = None
    official_chapters: Any = None
    comment_bodies: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VideoMaterials":
        """Build materials from a decoded JSON object; wrongly typed fields raise ``ValueError``."""

        return cls(
            description=_optional_text(data, "description"),
            captions_payload=_optional_text(data, "captions"),
            duration_seconds=_optional_duration(data.get("duration_seconds")),
            official_chapters=data.get("official_chapters"),
            comment_bodies=_comment_bodies(data.get("comments")),
        )


def _optional_text(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{key} must be a string.")
    return value


def _optional_duration(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"duration_seconds must be a whole number of seconds, got {value!r}.")


def _comment_bodies(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        raise ValueError("comments must be a list of strings.")
    return tuple(str(body) for body in value if body is not None)
