from __future__ import annotations

import json
import logging
from pathlib import Path
from time import perf_counter
from typing import Any, Callable, TypeVar

import typer

from vidsections.clips.detector import detect_clip_candidates
from vidsections.config import Settings, load_settings
from vidsections.export.exporter import export_report
from vidsections.logging_config import configure_logging
from vidsections.models import VideoMaterials
from vidsections.pipeline_report import build_video_report
from vidsections.sections.resolver import resolve_materials

app = typer.Typer(help="Extract chapter sections and clip suggestions from video text.")
config_app = typer.Typer(help="Configuration commands.")
sections_app = typer.Typer(help="Section (chapter) commands.")
clips_app = typer.Typer(help="Clip suggestion commands.")

app.add_typer(config_app, name="config")
app.add_typer(sections_app, name="sections")
app.add_typer(clips_app, name="clips")

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIG_OPTION_HELP = "Path to YAML configuration file."


def _config_option() -> Any:
    return typer.Option(
        None,
        "--config",
        "-c",
        envvar="VIDSECTIONS_CONFIG",
        help=CONFIG_OPTION_HELP,
    )


def _run_with_progress(step_index: int, total_steps: int, label: str, work: Callable[[], T]) -> T:
    typer.echo(f"[{step_index}/{total_steps}] {label}...", err=True)
    started_at = perf_counter()
    try:
        result = work()
    except Exception:
        elapsed = perf_counter() - started_at
        typer.echo(f"[{step_index}/{total_steps}] {label} failed after {elapsed:.1f}s", err=True)
        raise
    elapsed = perf_counter() - started_at
    typer.echo(f"[{step_index}/{total_steps}] {label} done in {elapsed:.1f}s", err=True)
    return result


def _bootstrap(config_path: Path | None) -> Settings:
    settings = load_settings(config_path)
    configure_logging(settings.logging)
    logger.debug("Loaded runtime settings from %s", config_path)
    return settings


def _load_materials(materials_path: Path) -> VideoMaterials:
    """Read a materials JSON file (description, captions, duration_seconds, official_chapters, comments)."""

    if not materials_path.exists():
        raise ValueError(f"Materials file not found: {materials_path}")
    try:
        payload = json.loads(materials_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Materials file is not valid JSON: {materials_path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Materials file must contain a JSON object.")

    captions = payload.get("captions")
    if captions is not None and not isinstance(captions, str):
        # Already-decoded caption arrays are accepted and re-encoded for the decoder.
        payload = {**payload, "captions": json.dumps(captions)}
    return VideoMaterials.from_dict(payload)


def _fail(exc: Exception) -> typer.Exit:
    logger.error("Command failed: %s", exc)
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)


@config_app.command("show")
def show_config(config_path: Path | None = _config_option()) -> None:
    """Print resolved runtime configuration."""

    settings = _bootstrap(config_path)
    typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))


@sections_app.command("resolve")
def resolve_sections_command(
    materials_path: Path = typer.Argument(..., help="Path to a video materials JSON file."),
    config_path: Path | None = _config_option(),
) -> None:
    """Resolve the authoritative section list (official chapters > comments > description)."""

    settings = _bootstrap(config_path)
    try:
        materials = _load_materials(materials_path)
    except (ValueError, OSError) as exc:
        raise _fail(exc) from exc

    resolution = resolve_materials(materials, settings.sections)
    typer.echo(json.dumps(resolution.to_dict(), indent=2, ensure_ascii=False))


@clips_app.command("detect")
def detect_clips_command(
    materials_path: Path = typer.Argument(..., help="Path to a video materials JSON file."),
    mode: str = typer.Option("chapters", help="Detection mode: chapters, captions or combined."),
    config_path: Path | None = _config_option(),
) -> None:
    """Suggest highlight clips from description chapters and/or caption keywords."""

    settings = _bootstrap(config_path)
    try:
        materials = _load_materials(materials_path)
    except (ValueError, OSError) as exc:
        raise _fail(exc) from exc

    candidates = detect_clip_candidates(
        materials.description,
        materials.captions_payload,
        materials.duration_seconds,
        mode,
        settings=settings.clips,
    )
    typer.echo(json.dumps([candidate.to_dict() for candidate in candidates], indent=2, ensure_ascii=False))


@app.command("run")
def run_report(
    materials_path: Path = typer.Argument(..., help="Path to a video materials JSON file."),
    output_dir: Path = typer.Option(Path("data/outputs"), "--output-dir", "-o", help="Directory for JSON/CSV outputs."),
    basename: str | None = typer.Option(None, help="Base filename for exported artifacts. Defaults to the materials file stem."),
    mode: str = typer.Option("combined", help="Clip detection mode: chapters, captions or combined."),
    config_path: Path | None = _config_option(),
) -> None:
    """Resolve sections, detect clips and export both for one video."""

    settings = _bootstrap(config_path)
    total_steps = 3

    try:
        materials = _run_with_progress(1, total_steps, "Load materials", lambda: _load_materials(materials_path))
        report = _run_with_progress(
            2,
            total_steps,
            "Build sections and clip candidates",
            lambda: build_video_report(materials, mode=mode, settings=settings),
        )
        exported = _run_with_progress(
            3,
            total_steps,
            "Export outputs",
            lambda: export_report(report, output_dir, basename=basename or materials_path.stem),
        )
    except (ValueError, OSError) as exc:
        raise _fail(exc) from exc

    typer.echo(
        json.dumps(
            {
                "status": "ok",
                "source": report.resolution.source.value if report.resolution.source else None,
                "section_count": len(report.resolution.sections),
                "clip_count": len(report.clip_candidates),
                "mode": report.mode.value,
                "outputs": {key: str(path) for key, path in exported.items()},
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    app()
