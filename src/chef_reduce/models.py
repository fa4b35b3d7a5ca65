"""Recipe data models.

A recipe is the JSON document cargo-chef writes for its ``cook`` step:

    {"skeleton": {"manifests": [{"relative_path": ..., "contents": ...}],
                  "lock_file": "..." | null, ...}}

Only the fields the reducer reads are modelled explicitly. Everything else is
carried in ``extra`` so a reduced recipe keeps the input's shape.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


ROOT_MANIFEST = "Cargo.toml"
DEFAULT_DEPENDENCY_TABLES = ("dependencies",)
LOCK_PACKAGE_TABLE = "package"


@dataclass
class Manifest:
    """One ``Cargo.toml`` captured in the recipe."""

    relative_path: str
    contents: str
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Manifest":
        if not isinstance(payload, dict):
            raise TypeError(f"Manifest entry must be a mapping, got {type(payload).__name__}")
        try:
            relative_path = payload["relative_path"]
            contents = payload["contents"]
        except KeyError as exc:
            raise ValueError(f"Manifest entry missing required key {exc.args[0]!r}") from exc
        if not isinstance(relative_path, str) or not isinstance(contents, str):
            raise ValueError("Manifest 'relative_path' and 'contents' must be strings.")
        extra = {k: v for k, v in payload.items() if k not in ("relative_path", "contents")}
        return cls(relative_path=relative_path, contents=contents, extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        return {"relative_path": self.relative_path, "contents": self.contents, **self.extra}


@dataclass
class Skeleton:
    manifests: List[Manifest] = field(default_factory=list)
    lock_file: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Skeleton":
        if not isinstance(payload, dict):
            raise TypeError(f"Skeleton must be a mapping, got {type(payload).__name__}")
        manifests_raw = payload.get("manifests") or []
        if not isinstance(manifests_raw, list):
            raise ValueError("'manifests' must be a list of manifest entries.")
        lock_file = payload.get("lock_file")
        if lock_file is not None and not isinstance(lock_file, str):
            raise ValueError("'lock_file' must be a string or null.")
        extra = {k: v for k, v in payload.items() if k not in ("manifests", "lock_file")}
        return cls(
            manifests=[Manifest.from_dict(m) for m in manifests_raw],
            lock_file=lock_file,
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "manifests": [m.to_dict() for m in self.manifests],
            "lock_file": self.lock_file,
            **self.extra,
        }


@dataclass
class Recipe:
    """Top-level recipe document."""

    skeleton: Skeleton = field(default_factory=Skeleton)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Recipe":
        if not isinstance(payload, dict):
            raise TypeError(f"Recipe must be a mapping, got {type(payload).__name__}")
        if "skeleton" not in payload:
            raise ValueError("Recipe missing required key 'skeleton'.")
        extra = {k: v for k, v in payload.items() if k != "skeleton"}
        return cls(skeleton=Skeleton.from_dict(payload["skeleton"]), extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        return {"skeleton": self.skeleton.to_dict(), **self.extra}

    def copy(self) -> "Recipe":
        return copy.deepcopy(self)


__all__ = [
    "ROOT_MANIFEST",
    "DEFAULT_DEPENDENCY_TABLES",
    "LOCK_PACKAGE_TABLE",
    "Manifest",
    "Skeleton",
    "Recipe",
]
