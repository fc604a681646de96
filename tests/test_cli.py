from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

import vidsections.cli as cli
from vidsections.config import Settings


def _write_materials(tmp_path: Path, **overrides) -> Path:
    payload = {
        "description": "0:00 Intro\n1:30 Verse\n3:10 Chorus",
        "captions": [{"start": 95, "text": "the hook lands"}, {"start": 12, "text": "la la"}],
        "duration_seconds": 200,
        "comments": ["great video"],
    }
    payload.update(overrides)
    path = tmp_path / "song.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_sections_resolve_prints_resolution(tmp_path: Path, monkeypatch) -> None:
    materials_path = _write_materials(tmp_path)
    monkeypatch.setattr(cli, "_bootstrap", lambda _: Settings())

    result = CliRunner().invoke(cli.app, ["sections", "resolve", str(materials_path)])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["source"] == "DESCRIPTION"
    assert [section["end_seconds"] for section in payload["sections"]] == [90, 190, 200]


def test_sections_resolve_prefers_comment_chapters(tmp_path: Path, monkeypatch) -> None:
    materials_path = _write_materials(tmp_path, comments=["0:00 A\n0:40 B"])
    monkeypatch.setattr(cli, "_bootstrap", lambda _: Settings())

    result = CliRunner().invoke(cli.app, ["sections", "resolve", str(materials_path)])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["source"] == "COMMENT"


def test_clips_detect_in_captions_mode(tmp_path: Path, monkeypatch) -> None:
    materials_path = _write_materials(tmp_path)
    monkeypatch.setattr(cli, "_bootstrap", lambda _: Settings())

    result = CliRunner().invoke(cli.app, ["clips", "detect", str(materials_path), "--mode", "captions"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [
        {"start_seconds": 95, "end_seconds": 125, "confidence_score": 0.8, "label": "the hook lands"}
    ]


def test_run_command_shows_progress_and_writes_outputs(tmp_path: Path, monkeypatch) -> None:
    materials_path = _write_materials(tmp_path)
    output_dir = tmp_path / "out"
    monkeypatch.setattr(cli, "_bootstrap", lambda _: Settings())

    result = CliRunner().invoke(cli.app, ["run", str(materials_path), "-o", str(output_dir)])

    assert result.exit_code == 0
    assert "[1/3] Load materials..." in result.output
    assert "[3/3] Export outputs done" in result.output
    assert '"status": "ok"' in result.output
    assert (output_dir / "song_sections.json").exists()
    assert (output_dir / "song_clips.json").exists()
    assert (output_dir / "song_clips.csv").exists()


def test_run_command_prints_clean_error_for_missing_materials(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(cli, "_bootstrap", lambda _: Settings())

    result = CliRunner().invoke(cli.app, ["run", str(tmp_path / "missing.json"), "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "[1/3] Load materials failed" in result.output
    assert "Error: Materials file not found" in result.output
    assert "Traceback" not in result.output


def test_sections_resolve_rejects_non_object_materials(tmp_path: Path, monkeypatch) -> None:
    materials_path = tmp_path / "list.json"
    materials_path.write_text("[1, 2]", encoding="utf-8")
    monkeypatch.setattr(cli, "_bootstrap", lambda _: Settings())

    result = CliRunner().invoke(cli.app, ["sections", "resolve", str(materials_path)])

    assert result.exit_code == 1
    assert "Error: Materials file must contain a JSON object." in result.output


def test_clips_detect_rejects_non_string_description(tmp_path: Path, monkeypatch) -> None:
    materials_path = _write_materials(tmp_path, description=123)
    monkeypatch.setattr(cli, "_bootstrap", lambda _: Settings())

    result = CliRunner().invoke(cli.app, ["clips", "detect", str(materials_path)])

    assert result.exit_code == 1
    assert "Error: description must be a string." in result.output
    assert "Traceback" not in result.output


def test_sections_resolve_rejects_non_numeric_duration(tmp_path: Path, monkeypatch) -> None:
    materials_path = _write_materials(tmp_path, duration_seconds={"x": 1})
    monkeypatch.setattr(cli, "_bootstrap", lambda _: Settings())

    result = CliRunner().invoke(cli.app, ["sections", "resolve", str(materials_path)])

    assert result.exit_code == 1
    assert "Error: duration_seconds must be a whole number of seconds" in result.output
    assert "Traceback" not in result.output


def test_config_show_prints_resolved_settings(tmp_path: Path, monkeypatch) -> None:
    config_path = tmp_path / "custom.yaml"
    config_path.write_text("clips:\n  fallback_line_count: 2\n", encoding="utf-8")
    monkeypatch.setattr(cli, "configure_logging", lambda _: None)

    result = CliRunner().invoke(cli.app, ["config", "show", "--config", str(config_path)])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["clips"]["fallback_line_count"] == 2
