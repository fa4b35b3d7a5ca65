"""Workspace dependency graph and reachability closure."""
from __future__ import annotations

import logging
from collections import deque
from typing import Dict, Iterable, Set

from chef_reduce.models import DEFAULT_DEPENDENCY_TABLES, Manifest

from .manifest import crate_name, workspace_dependencies

logger = logging.getLogger(__name__)


def build_workspace_graph(
    manifests: Iterable[Manifest],
    all_members: Set[str],
    tables: Iterable[str] = DEFAULT_DEPENDENCY_TABLES,
) -> Dict[str, Set[str]]:
    """Map each named workspace crate to the workspace crates it depends on.

    Edges to crates outside ``all_members`` are dropped. Manifests without a
    crate name (virtual or unparseable) contribute no node.
    """
    tables = tuple(tables)
    graph: Dict[str, Set[str]] = {}
    for manifest in manifests:
        name = crate_name(manifest)
        if name is None:
            continue
        graph[name] = workspace_dependencies(manifest, all_members, tables)
    logger.debug(
        "Workspace graph: %d crates, %d edges", len(graph), sum(len(d) for d in graph.values())
    )
    return graph


def transitive_members(roots: Iterable[str], graph: Dict[str, Set[str]]) -> Set[str]:
    """Roots plus everything reachable from them over ``graph``.

    Roots with no node in the graph are kept as-is. Cycles are fine: a crate
    is expanded only the first time it is seen.
    """
    keep: Set[str] = set()
    queue = deque(roots)
    while queue:
        member = queue.pop()
        if member in keep:
            continue
        keep.add(member)
        queue.extend(graph.get(member, ()))
    return keep


__all__ = ["build_workspace_graph", "transitive_members"]
