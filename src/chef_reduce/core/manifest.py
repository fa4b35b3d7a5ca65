"""Manifest inspection helpers.

Both helpers are best-effort: a manifest that is not valid TOML has no crate
name and no dependencies. Callers that need a hard failure (root manifest,
lock file) parse on their own.
"""
from __future__ import annotations

import logging
import tomllib
from typing import Any, Dict, Iterable, Optional, Set

from chef_reduce.models import DEFAULT_DEPENDENCY_TABLES, Manifest

logger = logging.getLogger(__name__)


def _parse(manifest: Manifest) -> Optional[Dict[str, Any]]:
    try:
        return tomllib.loads(manifest.contents)
    except tomllib.TOMLDecodeError as exc:
        logger.debug("Skipping unparseable manifest %s: %s", manifest.relative_path, exc)
        return None


def crate_name(manifest: Manifest) -> Optional[str]:
    """Return ``[package].name``, or None for virtual/unparseable manifests."""
    doc = _parse(manifest)
    if doc is None:
        return None
    package = doc.get("package")
    if not isinstance(package, dict):
        return None
    name = package.get("name")
    return name if isinstance(name, str) else None


def workspace_dependencies(
    manifest: Manifest,
    known_members: Set[str],
    tables: Iterable[str] = DEFAULT_DEPENDENCY_TABLES,
) -> Set[str]:
    """Dependency names declared by ``manifest`` that are workspace members."""
    doc = _parse(manifest)
    if doc is None:
        return set()
    deps: Set[str] = set()
    for table_name in tables:
        table = doc.get(table_name)
        if not isinstance(table, dict):
            continue
        deps.update(name for name in table if name in known_members)
    return deps


def all_workspace_members(manifests: Iterable[Manifest]) -> Set[str]:
    names = set()
    for m in manifests:
        name = crate_name(m)
        if name is not None:
            names.add(name)
    return names


__all__ = [
    "crate_name",
    "workspace_dependencies",
    "all_workspace_members",
]
