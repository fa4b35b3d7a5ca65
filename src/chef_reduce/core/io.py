"""Recipe JSON I/O."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from chef_reduce.models import Recipe

from .errors import RecipeLoadError, RecipeSerializationError, RecipeWriteError

logger = logging.getLogger(__name__)


def load_recipe(path: str | Path) -> Recipe:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise RecipeLoadError(f"Failed to read {p}") from exc
    try:
        recipe = Recipe.from_dict(json.loads(text))
    except (json.JSONDecodeError, TypeError, ValueError) as exc:
        raise RecipeLoadError(f"Failed to parse recipe {p}") from exc
    logger.debug("Loaded recipe %s (%d manifests)", p, len(recipe.skeleton.manifests))
    return recipe


def dumps_recipe(recipe: Recipe, indent: Optional[int] = None) -> str:
    """Serialize like serde_json: compact unless ``indent`` is given."""
    separators = (",", ":") if indent is None else None
    try:
        return json.dumps(recipe.to_dict(), indent=indent, separators=separators, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise RecipeSerializationError("failed to serialize reduced recipe") from exc


def save_recipe(text: str, path: str | Path) -> Path:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise RecipeWriteError(f"Failed to write {p}") from exc
    return p


__all__ = ["load_recipe", "dumps_recipe", "save_recipe"]
