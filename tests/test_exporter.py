from __future__ import annotations

import csv
import json

import pytest

from vidsections.clips.detector import ClipMode
from vidsections.export.exporter import (
    confidence_label,
    export_clip_candidates,
    export_report,
    export_sections,
    load_clip_candidates,
    load_sections,
)
from vidsections.models import ClipCandidate, Section, SectionResolution, SectionSource
from vidsections.pipeline_report import VideoReport


def _sample_sections() -> list[Section]:
    return [
        Section("Intro", 0, 90, SectionSource.DESCRIPTION),
        Section("Verse", 90, 190, SectionSource.DESCRIPTION),
    ]


def _sample_clips() -> list[ClipCandidate]:
    return [
        ClipCandidate(start_seconds=0, end_seconds=30, confidence_score=0.9, label="Intro"),
        ClipCandidate(start_seconds=40, end_seconds=85, confidence_score=0.4, label="hello"),
    ]


def test_export_sections_json_contract_roundtrip(tmp_path) -> None:
    out = export_sections(_sample_sections(), tmp_path / "nested" / "sections.json")

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload[0] == {"title": "Intro", "start_seconds": 0, "end_seconds": 90, "source": "DESCRIPTION"}
    assert load_sections(out) == _sample_sections()


def test_export_clip_candidates_csv_contains_confidence_label(tmp_path) -> None:
    out = export_clip_candidates(_sample_clips(), tmp_path / "clips.csv")

    with out.open("r", encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))

    assert rows[0]["confidence"] == "high"
    assert rows[0]["confidence_score"] == "0.9000"
    assert rows[1]["confidence"] == "low"
    assert rows[1]["label"] == "hello"


def test_export_report_writes_all_artifacts(tmp_path) -> None:
    report = VideoReport(
        resolution=SectionResolution(sections=tuple(_sample_sections()), source=SectionSource.DESCRIPTION),
        clip_candidates=tuple(_sample_clips()),
        mode=ClipMode.COMBINED,
    )

    exported = export_report(report, tmp_path, basename="video-1")

    assert exported["sections"].name == "video-1_sections.json"
    assert all(path.exists() for path in exported.values())
    assert load_clip_candidates(exported["clips_json"]) == _sample_clips()


def test_load_rejects_non_array_contracts(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{"title": "x"}', encoding="utf-8")

    with pytest.raises(ValueError, match="must be a JSON array"):
        load_sections(path)


def test_load_rejects_unknown_section_source(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('[{"title": "x", "start_seconds": 0, "end_seconds": 5, "source": "RADIO"}]', encoding="utf-8")

    with pytest.raises(ValueError, match="unknown source"):
        load_sections(path)


@pytest.mark.parametrize(("score", "label"), [(0.9, "high"), (0.8, "high"), (0.6, "medium"), (0.4, "low")])
def test_confidence_label(score: float, label: str) -> None:
    assert confidence_label(score) == label
