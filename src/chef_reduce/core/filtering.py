"""Pruning of manifests and lock-file entries against a keep set.

Both filters mutate the recipe they are given; callers pass a copy.
"""
from __future__ import annotations

import logging
from typing import List, Set

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import AoT

from chef_reduce.models import LOCK_PACKAGE_TABLE, Manifest, Recipe

from .errors import LockfileParseError
from .manifest import crate_name

logger = logging.getLogger(__name__)


def filter_manifests(recipe: Recipe, keep_members: Set[str]) -> List[Manifest]:
    """Keep virtual manifests and manifests of kept crates; return the dropped ones.

    Order of the remaining manifests is preserved.
    """
    kept: List[Manifest] = []
    dropped: List[Manifest] = []
    for manifest in recipe.skeleton.manifests:
        name = crate_name(manifest)
        if name is None or name in keep_members:
            kept.append(manifest)
        else:
            dropped.append(manifest)
            logger.debug("Dropping manifest %s (%s)", manifest.relative_path, name)
    recipe.skeleton.manifests = kept
    return dropped


def _keep_lock_entry(entry, all_members: Set[str], keep_members: Set[str]) -> bool:
    name = entry.get("name") if hasattr(entry, "get") else None
    if not isinstance(name, str):
        return True
    # external crates are never pruned
    return name not in all_members or name in keep_members


def filter_lockfile(
    recipe: Recipe,
    all_members: Set[str],
    keep_members: Set[str],
    table: str = LOCK_PACKAGE_TABLE,
) -> List[str]:
    """Drop lock entries of workspace crates outside ``keep_members``.

    Returns the names of the dropped entries. Formatting of the remaining
    document is preserved.
    """
    lock_txt = recipe.skeleton.lock_file
    if lock_txt is None:
        return []

    try:
        doc = tomlkit.parse(lock_txt)
    except TOMLKitError as exc:
        raise LockfileParseError("lock file is not valid toml") from exc

    dropped: List[str] = []
    packages = doc.get(table)
    if isinstance(packages, AoT):
        for idx in reversed(range(len(packages))):
            entry = packages[idx]
            if not _keep_lock_entry(entry, all_members, keep_members):
                dropped.append(str(entry["name"]))
                del packages[idx]
        dropped.reverse()
    else:
        logger.debug("Lock file has no [[%s]] array; leaving it untouched", table)

    if dropped:
        logger.debug("Dropping lock entries: %s", dropped)
    recipe.skeleton.lock_file = tomlkit.dumps(doc)
    return dropped


__all__ = ["filter_manifests", "filter_lockfile"]
