"""Reduce cargo-chef recipes to the workspace members a build actually needs."""

from .config_load import ReducerSettings, load_settings
from .core.errors import (
    LockfileParseError,
    RecipeLoadError,
    RecipeSerializationError,
    RecipeWriteError,
    ReductionError,
    RootManifestNotFoundError,
    RootManifestParseError,
    WorkspaceMembersError,
)
from .core.io import dumps_recipe, load_recipe, save_recipe
from .core.reduce import (
    ReductionReport,
    reduce_recipe_to_json,
    reduce_workspace_recipe,
    reduce_workspace_recipe_file,
    reduce_workspace_recipe_with_report,
)
from .models import Manifest, Recipe, Skeleton

__version__ = "0.1.0"

__all__ = [
    "Manifest",
    "Recipe",
    "Skeleton",
    "ReducerSettings",
    "load_settings",
    "ReductionReport",
    "reduce_workspace_recipe",
    "reduce_workspace_recipe_with_report",
    "reduce_recipe_to_json",
    "reduce_workspace_recipe_file",
    "load_recipe",
    "dumps_recipe",
    "save_recipe",
    "ReductionError",
    "RootManifestNotFoundError",
    "RootManifestParseError",
    "WorkspaceMembersError",
    "LockfileParseError",
    "RecipeLoadError",
    "RecipeWriteError",
    "RecipeSerializationError",
]
