"""
Recipe reduction pipeline.

Steps:
  1) find the root manifest and read the root members from it
  2) collect every workspace crate name and build the dependency graph
  3) close the root set over the graph (the keep set)
  4) prune manifests and lock-file entries on a copy of the recipe

The input recipe is never mutated.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from chef_reduce.config_load import ReducerSettings
from chef_reduce.models import Recipe

from .filtering import filter_lockfile, filter_manifests
from .graph import build_workspace_graph, transitive_members
from .io import dumps_recipe, load_recipe, save_recipe
from .manifest import all_workspace_members
from .roots import find_root_manifest, resolve_root_members

logger = logging.getLogger(__name__)


@dataclass
class ReductionReport:
    """What a reduction kept and dropped."""

    roots: Set[str] = field(default_factory=set)
    all_members: Set[str] = field(default_factory=set)
    keep_members: Set[str] = field(default_factory=set)
    dropped_manifests: List[str] = field(default_factory=list)
    dropped_lock_entries: List[str] = field(default_factory=list)

    @property
    def dropped_members(self) -> Set[str]:
        return self.all_members - self.keep_members

    def summary(self) -> Dict[str, Any]:
        return {
            "roots": ",".join(sorted(self.roots)),
            "members": len(self.all_members),
            "kept": len(self.keep_members & self.all_members),
            "dropped_manifests": len(self.dropped_manifests),
            "dropped_lock_entries": len(self.dropped_lock_entries),
        }


def reduce_workspace_recipe_with_report(
    recipe: Recipe,
    settings: Optional[ReducerSettings] = None,
) -> Tuple[Recipe, ReductionReport]:
    settings = settings or ReducerSettings()

    root_manifest = find_root_manifest(recipe, settings.root_manifest)
    roots = resolve_root_members(root_manifest)

    manifests = recipe.skeleton.manifests
    all_members = all_workspace_members(manifests)
    missing = roots - all_members
    if missing:
        logger.warning("Root members without a manifest in the recipe: %s", sorted(missing))

    graph = build_workspace_graph(manifests, all_members, settings.dependency_tables)
    keep = transitive_members(roots, graph)

    reduced = recipe.copy()
    dropped_manifests = filter_manifests(reduced, keep)
    dropped_entries = filter_lockfile(reduced, all_members, keep, settings.lock_package_table)

    report = ReductionReport(
        roots=roots,
        all_members=all_members,
        keep_members=keep,
        dropped_manifests=[m.relative_path for m in dropped_manifests],
        dropped_lock_entries=dropped_entries,
    )
    logger.info(
        "Reduced workspace to %d of %d members (%d manifests, %d lock entries dropped)",
        len(keep & all_members), len(all_members), len(dropped_manifests), len(dropped_entries),
    )
    return reduced, report


def reduce_workspace_recipe(recipe: Recipe, settings: Optional[ReducerSettings] = None) -> Recipe:
    """Return a copy of ``recipe`` reduced to the members reachable from the root set."""
    reduced, _ = reduce_workspace_recipe_with_report(recipe, settings)
    return reduced


def reduce_recipe_to_json(
    recipe: Recipe,
    settings: Optional[ReducerSettings] = None,
) -> str:
    settings = settings or ReducerSettings()
    reduced = reduce_workspace_recipe(recipe, settings)
    return dumps_recipe(reduced, indent=settings.json_indent)


def reduce_workspace_recipe_file(
    input_path: str | Path,
    output_path: str | Path,
    settings: Optional[ReducerSettings] = None,
) -> ReductionReport:
    """Load a recipe, reduce it and write the reduced recipe to ``output_path``."""
    settings = settings or ReducerSettings()
    recipe = load_recipe(input_path)
    reduced, report = reduce_workspace_recipe_with_report(recipe, settings)
    save_recipe(dumps_recipe(reduced, indent=settings.json_indent), output_path)
    logger.info("Wrote reduced recipe to %s", output_path)
    return report


__all__ = [
    "ReductionReport",
    "reduce_workspace_recipe",
    "reduce_workspace_recipe_with_report",
    "reduce_recipe_to_json",
    "reduce_workspace_recipe_file",
]
