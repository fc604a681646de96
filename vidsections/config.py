from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

DEFAULT_CONFIG_PATH = Path("configs/default.yaml")
ENV_PREFIX = "VIDSECTIONS_"

logger = logging.getLogger(__name__)


class SectionSettings(BaseModel):
    default_length_seconds: int = 45
    min_length_seconds: int = 5
    min_candidates: int = 2
    max_title_length: int = 120
    placeholder_title: str = "Track"


class ClipSettings(BaseModel):
    chapter_length_seconds: int = 30
    caption_length_seconds: int = 30
    min_length_seconds: int = 5
    fallback_window_seconds: int = 45
    fallback_line_count: int = 5
    fallback_label_length: int = 40
    placeholder_label: str = "Chapter"
    keywords: list[str] = Field(default_factory=lambda: ["chorus", "hook", "verse", "intro", "outro"])
    chapter_base_confidence: float = 0.6
    chapter_keyword_confidence: float = 0.9
    caption_keyword_confidence: float = 0.8
    fallback_confidence: float = 0.4


class LoggingSettings(BaseModel):
    level: str = "INFO"


class Settings(BaseModel):
    sections: SectionSettings = Field(default_factory=SectionSettings)
    clips: ClipSettings = Field(default_factory=ClipSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load typed settings from YAML with environment-variable overrides.

    A missing file at the default location yields built-in defaults; an
    explicitly requested file must exist. Overrides use
    ``VIDSECTIONS_<GROUP>__<FIELD>`` and are coerced to the field's type.
    """

    explicit_path = config_path or os.getenv(f"{ENV_PREFIX}CONFIG")
    resolved_path = Path(explicit_path or DEFAULT_CONFIG_PATH)
    if explicit_path or resolved_path.exists():
        raw_config = yaml.safe_load(resolved_path.read_text(encoding="utf-8")) or {}
    else:
        raw_config = {}
    data = Settings.model_validate(raw_config).model_dump(mode="python")

    for key, raw_value in os.environ.items():
        if not key.startswith(ENV_PREFIX) or key == f"{ENV_PREFIX}CONFIG":
            continue
        if not _apply_override(data, key[len(ENV_PREFIX) :], raw_value):
            logger.debug("Ignoring unknown settings override %s", key)

    return Settings.model_validate(data)


def _apply_override(data: dict[str, Any], override_key: str, raw_value: str) -> bool:
    group_name, separator, field_name = override_key.lower().partition("__")
    group = data.get(group_name)
    if not separator or not isinstance(group, dict) or field_name not in group:
        return False

    group[field_name] = _coerce_value(raw_value, group[field_name])
    return True


def _coerce_value(raw_value: str, existing_value: Any) -> Any:
    if isinstance(existing_value, bool):
        return raw_value.lower() in {"1", "true", "yes", "on"}
    if isinstance(existing_value, int) and not isinstance(existing_value, bool):
        return int(raw_value)
    if isinstance(existing_value, float):
        return float(raw_value)
    if isinstance(existing_value, list):
        if raw_value.lstrip().startswith("["):
            return json.loads(raw_value)
        return [item.strip() for item in raw_value.split(",") if item.strip()]
    if isinstance(existing_value, dict):
        return json.loads(raw_value)
    return raw_value
