from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# Music-structure words that mark a likely highlight.
DEFAULT_KEYWORDS = ("chorus", "hook", "verse", "intro", "outro")


@dataclass(slots=True)
class KeywordScoreDetails:
    """Explainable output for keyword-based confidence scoring."""

    score: float
    matched_keywords: list[str]
    base_score: float
    hit_score: float

    @property
    def hit(self) -> bool:
        return bool(self.matched_keywords)


def matched_keywords(text: str | None, keywords: Sequence[str] | None = None) -> list[str]:
    """Return the keywords found in ``text`` (case-insensitive substring match), in keyword order."""

    if not text:
        return []
    lowered = text.lower()
    active = DEFAULT_KEYWORDS if keywords is None else keywords
    return [keyword for keyword in active if keyword and keyword.lower() in lowered]


def contains_keyword(text: str | None, keywords: Sequence[str] | None = None) -> bool:
    return bool(matched_keywords(text, keywords))


def score_label(
    text: str | None,
    *,
    base_score: float,
    hit_score: float,
    keywords: Sequence[str] | None = None,
) -> KeywordScoreDetails:
    """Score a label: ``hit_score`` when any keyword occurs, ``base_score`` otherwise."""

    matches = matched_keywords(text, keywords)
    score = hit_score if matches else base_score
    return KeywordScoreDetails(
        score=_clamp(score),
        matched_keywords=matches,
        base_score=_clamp(base_score),
        hit_score=_clamp(hit_score),
    )


def _clamp(value: float, minimum: float = 0.0, maximum: float = 1.0) -> float:
    return max(minimum, min(maximum, value))
