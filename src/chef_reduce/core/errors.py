"""Fatal errors raised while reducing a recipe.

Per-manifest parse failures are not errors; they are tolerated by the
inspector and never reach this hierarchy.
"""
from __future__ import annotations


class ReductionError(Exception):
    """Base class for every fatal reduction failure."""


class RootManifestNotFoundError(ReductionError, LookupError):
    def __init__(self, root_path: str):
        super().__init__(f"no root {root_path} found in recipe")
        self.root_path = root_path


class RootManifestParseError(ReductionError):
    """Root manifest is present but is not valid TOML."""


class WorkspaceMembersError(ReductionError, ValueError):
    """``[workspace].members`` is missing or is not an array of strings."""


class LockfileParseError(ReductionError):
    """Lock file text is present but is not valid TOML."""


class RecipeLoadError(ReductionError):
    pass


class RecipeWriteError(ReductionError):
    pass


class RecipeSerializationError(ReductionError):
    pass


__all__ = [
    "ReductionError",
    "RootManifestNotFoundError",
    "RootManifestParseError",
    "WorkspaceMembersError",
    "LockfileParseError",
    "RecipeLoadError",
    "RecipeWriteError",
    "RecipeSerializationError",
]
