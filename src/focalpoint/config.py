"""YAML configuration for the picker.

The config is small and entirely optional: every key has a default. Unknown
keys are rejected so that typos surface instead of silently doing nothing.

Example ``focalpoint.yaml``::

    default_value: "50,50"
    indicator_size: 21
    indicator_color: "#ff3b30"
    max_preview_size: 640
    theme: dark
    log_level: INFO
    preview_href: "https://cms.example.org/image/preview/42/50%2C50"
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from focalpoint.coords import normalize
from focalpoint.log import LEVELS


class ConfigError(ValueError):
    """Config file could not be read or failed validation."""


class FocalPointConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default_value: str = "50,50"
    indicator_size: int = Field(default=21, ge=5, le=200)
    indicator_color: str = "#ff3b30"
    # Longest edge of the preview pixmap (pixels); larger images are scaled down.
    max_preview_size: int = Field(default=640, ge=16)
    theme: str = "dark"  # dark|light
    log_level: Optional[str] = None
    preview_href: Optional[str] = None

    @field_validator("default_value")
    @classmethod
    def _normalize_default(cls, v: str) -> str:
        return normalize(v)

    @field_validator("theme")
    @classmethod
    def _check_theme(cls, v: str) -> str:
        v = (v or "dark").strip().lower()
        if v not in {"dark", "light"}:
            raise ValueError("theme must be 'dark' or 'light'")
        return v

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().upper()
        if v not in LEVELS:
            raise ValueError("log_level must be one of " + "|".join(LEVELS))
        return v


@dataclass(frozen=True)
class ConfigReport:
    ok: bool
    errors: List[str]


def config_validate(cfg: Dict[str, Any]) -> ConfigReport:
    """Validate a config dict without raising."""
    try:
        FocalPointConfig.model_validate(cfg)
    except ValidationError as e:
        errors = [f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors()]
        return ConfigReport(ok=False, errors=errors)
    return ConfigReport(ok=True, errors=[])


def load_config(cfg_path: str | Path | None = None) -> FocalPointConfig:
    """Load and validate a YAML config; ``None`` returns the defaults."""
    if cfg_path is None:
        return FocalPointConfig()

    cfg_path = Path(cfg_path).expanduser().resolve()
    try:
        raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config {cfg_path} must be a mapping, got {type(raw).__name__}")

    try:
        return FocalPointConfig.model_validate(raw)
    except ValidationError as e:
        report = config_validate(raw)
        msg = "\n".join(report.errors) or str(e)
        raise ConfigError(f"Invalid config {cfg_path}:\n{msg}") from e
