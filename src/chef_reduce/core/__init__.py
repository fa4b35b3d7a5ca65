"""
Core package façade.

Submodules:
  - manifest: crate name / workspace dependency extraction
  - roots: root manifest lookup and root member resolution
  - graph: workspace dependency graph and reachability closure
  - filtering: manifest and lock-file pruning
  - io: recipe JSON load/save
  - reduce: the end-to-end reduction and its entry points
"""

from . import errors, manifest, roots, graph, filtering, io, reduce

__all__ = [
    "errors",
    "manifest",
    "roots",
    "graph",
    "filtering",
    "io",
    "reduce",
]
