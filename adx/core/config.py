"""
Schema cache configuration.

Reads an optional YAML/JSON settings file and applies environment overrides
on top of it.

Settings file format (YAML or JSON):
    schema_dir: /var/cache/adx/schema
    page_size: 500

Environment variables:
    ADX_CONFIG_FILE       path to the settings file (optional)
    ADX_SCHEMA_DIR        overrides schema_dir
    ADX_SCHEMA_PAGE_SIZE  overrides page_size
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

_log = logging.getLogger("adx.config")

DEFAULT_PAGE_SIZE = 500


def _default_schema_dir() -> Path:
    return Path.home() / ".adx" / "schema"


@dataclass(frozen=True)
class SchemaConfig:
    schema_dir: Path
    page_size: int = DEFAULT_PAGE_SIZE


def _coerce_page_size(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        _log.warning("Ignoring invalid page_size %r, using %d", raw, default)
        return default
    if value <= 0:
        _log.warning("Ignoring non-positive page_size %r, using %d", raw, default)
        return default
    return value


def _read_settings_file(path: Optional[Path]) -> Dict[str, Any]:
    resolved = _resolve_path(path)
    if resolved is None or not resolved.exists():
        return {}

    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        _log.warning("Cannot read settings file %s: %s", resolved, exc)
        return {}

    # JSON is a subset of YAML, one parser covers both formats
    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        _log.warning("Failed to parse settings file %s: %s", resolved, exc)
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        _log.warning("Settings file %s must be a mapping, got %s", resolved, type(data).__name__)
        return {}
    return data


def _resolve_path(path: Optional[Path]) -> Optional[Path]:
    if path is not None:
        return Path(path)
    env_path = os.getenv("ADX_CONFIG_FILE", "").strip()
    if env_path:
        return Path(env_path)
    return None


def load_schema_config(path: Optional[Path] = None) -> SchemaConfig:
    """
    Resolve the schema cache settings.

    Precedence (lowest to highest): built-in defaults, settings file,
    environment variables.
    """
    data = _read_settings_file(path)

    schema_dir = Path(str(data["schema_dir"])).expanduser() if data.get("schema_dir") else _default_schema_dir()
    page_size = _coerce_page_size(data.get("page_size", DEFAULT_PAGE_SIZE), DEFAULT_PAGE_SIZE)

    env_dir = os.getenv("ADX_SCHEMA_DIR", "").strip()
    if env_dir:
        schema_dir = Path(env_dir).expanduser()

    env_page_size = os.getenv("ADX_SCHEMA_PAGE_SIZE", "").strip()
    if env_page_size:
        page_size = _coerce_page_size(env_page_size, page_size)

    return SchemaConfig(schema_dir=schema_dir, page_size=page_size)
