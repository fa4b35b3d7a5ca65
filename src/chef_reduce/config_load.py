"""
Reducer settings and their YAML loader.

A settings file is optional. Keys mirror the ``ReducerSettings`` fields:

    root_manifest: Cargo.toml
    dependency_tables: [dependencies]
    lock_package_table: package
    json_indent: null
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .models import DEFAULT_DEPENDENCY_TABLES, LOCK_PACKAGE_TABLE, ROOT_MANIFEST

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReducerSettings:
    root_manifest: str = ROOT_MANIFEST
    dependency_tables: Tuple[str, ...] = DEFAULT_DEPENDENCY_TABLES
    lock_package_table: str = LOCK_PACKAGE_TABLE
    json_indent: Optional[int] = None

    def with_overrides(self, overrides: Dict[str, Any]) -> "ReducerSettings":
        """Return a copy with ``overrides`` applied (None values are ignored)."""
        cleaned = {k: v for k, v in (overrides or {}).items() if v is not None}
        if not cleaned:
            return self
        return replace(self, **_normalize(cleaned))


_FIELD_NAMES = {f.name for f in fields(ReducerSettings)}


def _normalize(payload: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(payload) - _FIELD_NAMES
    if unknown:
        raise ValueError(f"Unknown reducer setting(s): {sorted(unknown)}")
    out: Dict[str, Any] = {}
    for key, value in payload.items():
        if key == "dependency_tables":
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) and v for v in value):
                raise ValueError("'dependency_tables' must be a list of table names.")
            out[key] = tuple(value)
        elif key in ("root_manifest", "lock_package_table"):
            text = str(value or "").strip()
            if not text:
                raise ValueError(f"'{key}' cannot be empty.")
            out[key] = text
        elif key == "json_indent":
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
                raise ValueError("'json_indent' must be a non-negative integer or null.")
            out[key] = value
    return out


def safe_yaml_load(filepath: str | Path, default=None):
    """Safe YAML loader: returns default when the file is missing."""
    try:
        with Path(filepath).open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or default
    except FileNotFoundError:
        logger.warning("YAML file not found: %s, returning default", filepath)
        return default


def load_settings(filepath: str | Path | None = None) -> ReducerSettings:
    """Load ``ReducerSettings`` from a YAML file; defaults when no file is given."""
    if filepath is None:
        return ReducerSettings()
    data = safe_yaml_load(filepath, default={})
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping in {filepath}, got {type(data).__name__}")
    settings = ReducerSettings(**_normalize(data))
    logger.debug("Loaded reducer settings from %s: %s", filepath, settings)
    return settings


__all__ = ["ReducerSettings", "load_settings", "safe_yaml_load"]
