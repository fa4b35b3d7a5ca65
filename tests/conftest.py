from pathlib import Path
import json
import sys
import tomllib
import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from chef_reduce.models import Manifest, Recipe, Skeleton

LOCK_HEADER = (
    "# This file is automatically @generated by Cargo.\n"
    "# It is not intended for manual editing.\n"
    "version = 3\n"
)


def crate_toml(name, deps=(), dev_deps=()):
    lines = ["[package]", f'name = "{name}"', 'version = "0.1.0"', 'edition = "2021"', ""]
    lines.append("[dependencies]")
    for dep in deps:
        if dep == "serde":
            lines.append('serde = { version = "1.0", features = ["derive"] }')
        else:
            lines.append(f'{dep} = {{ path = "../{dep}" }}')
    if dev_deps:
        lines.append("")
        lines.append("[dev-dependencies]")
        for dep in dev_deps:
            lines.append(f'{dep} = {{ path = "../{dep}" }}')
    return "\n".join(lines) + "\n"


def root_toml(members):
    quoted = ", ".join(f'"{m}"' for m in members)
    return f'[workspace]\nmembers = [{quoted}]\nresolver = "2"\n'


def lock_toml(packages):
    """``packages`` is a list of (name, deps, external) tuples."""
    chunks = [LOCK_HEADER]
    for name, deps, external in packages:
        chunk = f'\n[[package]]\nname = "{name}"\nversion = "{"1.0.210" if external else "0.1.0"}"\n'
        if external:
            chunk += 'source = "registry+https://github.com/rust-lang/crates.io-index"\n'
            chunk += 'checksum = "8f0e2c6ed6606019b4e29e69dbaba95b11854410e5347d525002456dbbb786b6"\n'
        if deps:
            chunk += "dependencies = [\n" + "".join(f' "{d}",\n' for d in deps) + "]\n"
        chunks.append(chunk)
    return "".join(chunks)


@pytest.fixture
def make_recipe():
    """Build a recipe from ``{crate: [deps]}`` plus root members.

    Dependencies named ``serde`` are treated as an external registry crate.
    """
    def _make(crates, members, lock=True, extra_manifests=()):
        manifests = [Manifest(relative_path="Cargo.toml", contents=root_toml(members))]
        for name, deps in crates.items():
            manifests.append(Manifest(relative_path=f"{name}/Cargo.toml", contents=crate_toml(name, deps)))
        manifests.extend(extra_manifests)
        lock_file = None
        if lock:
            packages = [(name, list(deps), False) for name, deps in crates.items()]
            if any("serde" in deps for deps in crates.values()):
                packages.append(("serde", [], True))
            lock_file = lock_toml(sorted(packages))
        return Recipe(skeleton=Skeleton(manifests=manifests, lock_file=lock_file))
    return _make


@pytest.fixture
def write_recipe(tmp_path):
    def _write(recipe, name="recipe.json"):
        path = tmp_path / name
        path.write_text(json.dumps(recipe.to_dict()), encoding="utf-8")
        return path
    return _write


def lock_names(lock_text):
    return {pkg["name"] for pkg in tomllib.loads(lock_text).get("package", [])}


def manifest_paths(recipe):
    return [m.relative_path for m in recipe.skeleton.manifests]
