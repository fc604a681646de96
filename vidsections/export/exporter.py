from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from vidsections.models import ClipCandidate, Section, SectionSource
from vidsections.pipeline_report import VideoReport

SECTION_FIELDS = ["title", "start_seconds", "end_seconds", "source"]
CLIP_FIELDS = ["start_seconds", "end_seconds", "confidence_score", "confidence", "label"]


def export_sections(sections: Sequence[Section], output_path: str | Path) -> Path:
    """Export sections to JSON (default) or CSV, based on file extension."""

    path = _prepare(output_path)
    if path.suffix.lower() == ".csv":
        _write_csv(path, SECTION_FIELDS, [section.to_dict() for section in sections])
    else:
        _write_json(path, [section.to_dict() for section in sections])
    return path


def export_clip_candidates(candidates: Sequence[ClipCandidate], output_path: str | Path) -> Path:
    """Export clip candidates to JSON (default) or CSV, based on file extension."""

    path = _prepare(output_path)
    if path.suffix.lower() == ".csv":
        rows = [
            {
                **candidate.to_dict(),
                "confidence_score": f"{candidate.confidence_score:.4f}",
                "confidence": confidence_label(candidate.confidence_score),
            }
            for candidate in candidates
        ]
        _write_csv(path, CLIP_FIELDS, rows)
    else:
        _write_json(path, [candidate.to_dict() for candidate in candidates])
    return path


def export_report(
    report: VideoReport,
    output_dir: str | Path,
    *,
    basename: str = "video",
) -> dict[str, Path]:
    """Export a video report as section JSON plus clip JSON/CSV files."""

    resolved_output_dir = Path(output_dir)
    resolved_output_dir.mkdir(parents=True, exist_ok=True)

    sections_path = export_sections(report.resolution.sections, resolved_output_dir / f"{basename}_sections.json")
    clips_json_path = export_clip_candidates(report.clip_candidates, resolved_output_dir / f"{basename}_clips.json")
    clips_csv_path = export_clip_candidates(report.clip_candidates, resolved_output_dir / f"{basename}_clips.csv")

    return {
        "sections": sections_path,
        "clips_json": clips_json_path,
        "clips_csv": clips_csv_path,
    }


def load_sections(path: str | Path) -> list[Section]:
    """Load sections from the exporter JSON contract."""

    sections: list[Section] = []
    for idx, row in enumerate(_load_rows(path, "Section"), start=1):
        try:
            source = SectionSource[str(row["source"])]
        except KeyError as exc:
            raise ValueError(f"Section row {idx} has an unknown source: {row.get('source')!r}.") from exc
        sections.append(
            Section(
                title=str(row["title"]),
                start_seconds=int(row["start_seconds"]),
                end_seconds=int(row["end_seconds"]),
                source=source,
            )
        )
    return sections


def load_clip_candidates(path: str | Path) -> list[ClipCandidate]:
    """Load clip candidates from the exporter JSON contract."""

    return [
        ClipCandidate(
            start_seconds=int(row["start_seconds"]),
            end_seconds=int(row["end_seconds"]),
            confidence_score=float(row["confidence_score"]),
            label=str(row.get("label", "")),
        )
        for row in _load_rows(path, "Clip candidate")
    ]


def confidence_label(score: float) -> str:
    if score >= 0.8:
        return "high"
    if score >= 0.6:
        return "medium"
    return "low"


def _load_rows(path: str | Path, kind: str) -> list[dict[str, Any]]:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"{kind} contract must be a JSON array.")
    for idx, row in enumerate(payload, start=1):
        if not isinstance(row, dict):
            raise ValueError(f"{kind} row {idx} must be an object.")
    return payload


def _prepare(output_path: str | Path) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _write_json(path: Path, rows: list[dict[str, Any]]) -> None:
    path.write_text(json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8")


def _write_csv(path: Path, fields: list[str], rows: list[dict[str, Any]]) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fields)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field, "") for field in fields})
