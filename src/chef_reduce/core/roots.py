"""Root set resolution from the workspace manifest.

Every entry of ``[workspace].members`` is a root. The recipe is expected to be
produced for the members being built, so listing several members keeps the
union of their dependency closures.
"""
from __future__ import annotations

import logging
import tomllib
from typing import Set

from chef_reduce.models import ROOT_MANIFEST, Manifest, Recipe

from .errors import RootManifestNotFoundError, RootManifestParseError, WorkspaceMembersError

logger = logging.getLogger(__name__)


def find_root_manifest(recipe: Recipe, root_path: str = ROOT_MANIFEST) -> Manifest:
    for manifest in recipe.skeleton.manifests:
        if manifest.relative_path == root_path:
            return manifest
    raise RootManifestNotFoundError(root_path)


def resolve_root_members(root: Manifest) -> Set[str]:
    """Return the names listed in ``[workspace].members``."""
    try:
        doc = tomllib.loads(root.contents)
    except tomllib.TOMLDecodeError as exc:
        raise RootManifestParseError(f"root {root.relative_path} is not valid toml") from exc

    workspace = doc.get("workspace")
    if not isinstance(workspace, dict) or "members" not in workspace:
        raise WorkspaceMembersError(f"[workspace].members missing from {root.relative_path}")
    members = workspace["members"]
    if not isinstance(members, list):
        raise WorkspaceMembersError(
            f"[workspace].members must be an array, got {type(members).__name__}"
        )
    bad = [m for m in members if not isinstance(m, str)]
    if bad:
        raise WorkspaceMembersError(f"[workspace].members must contain only strings, got {bad!r}")

    roots = set(members)
    logger.debug("Root members from %s: %s", root.relative_path, sorted(roots))
    return roots


__all__ = ["find_root_manifest", "resolve_root_members"]
