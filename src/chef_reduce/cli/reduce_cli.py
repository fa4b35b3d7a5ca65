#!/usr/bin/env python3
"""
Recipe reducer CLI.

Reduce a single recipe:

    chef-reduce reduce recipe.json reduced.json

or a batch described by a YAML/JSON spec:

    chef-reduce batch --spec configs/reduce.yml --output summary.csv

Spec files can be either a list of runs or a mapping containing ``defaults`` and
``runs``. Each run entry supports:

    name: Optional label for summaries
    input: Path to the recipe.json to reduce
    output: Path to write the reduced recipe to
    settings: Optional mapping of reducer settings
      dependency_tables: [dependencies, build-dependencies]

Relative paths are resolved against the spec file's directory.
"""

from __future__ import annotations

import argparse
import copy
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd
import yaml

from chef_reduce.config_load import ReducerSettings, load_settings
from chef_reduce.core.errors import ReductionError
from chef_reduce.core.reduce import ReductionReport, reduce_workspace_recipe_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_REDUCTION_FAILED = 3
EXIT_SUMMARY_FAILED = 4
EXIT_BATCH_FAILURES = 5


@dataclass
class RunPlan:
    name: str
    input_path: Path
    output_path: Path
    settings: ReducerSettings = field(default_factory=ReducerSettings)


# -----------------------------
# Utilities
# -----------------------------

def _format_error(exc: BaseException) -> str:
    """Render an exception and its ``__cause__`` chain, one line per link."""
    lines = [f"error: {exc}"]
    cause = exc.__cause__
    while cause is not None:
        lines.append(f"  caused by: {cause}")
        cause = cause.__cause__
    return "\n".join(lines)


def _deep_merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in (update or {}).items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _load_mapping_or_list(path: Path) -> Any:
    """Load a JSON or YAML document from disk."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yml", ".yaml"}:
        return yaml.safe_load(text)
    return json.loads(text)


def _resolve_path(value: Any, base_dir: Path) -> Path:
    if not value or not isinstance(value, (str, Path)):
        raise ValueError(f"Expected a path, got {value!r}")
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path


# -----------------------------
# Spec handling
# -----------------------------

def _plans_from_spec(spec_path: Path, base_settings: ReducerSettings) -> List[RunPlan]:
    spec_data = _load_mapping_or_list(spec_path)
    if spec_data is None:
        return []
    base_dir = spec_path.parent
    if isinstance(spec_data, list):
        runs_raw = spec_data
        defaults: Dict[str, Any] = {}
    elif isinstance(spec_data, dict):
        if "runs" in spec_data:
            runs_raw = spec_data.get("runs") or []
        else:
            runs_raw = [spec_data]
        defaults = spec_data.get("defaults") or {}
    else:
        raise ValueError("Spec must be a list or mapping.")

    if not isinstance(runs_raw, list):
        raise ValueError("'runs' must be a list of run definitions.")
    if not isinstance(defaults, dict):
        raise ValueError("'defaults' must be a mapping.")

    plans: List[RunPlan] = []
    seen = set()
    for idx, raw in enumerate(runs_raw):
        if not isinstance(raw, dict):
            raise ValueError("Each run entry must be a dict.")
        combined = _deep_merge(copy.deepcopy(defaults), raw)
        input_path = _resolve_path(combined.get("input"), base_dir)
        output_path = _resolve_path(combined.get("output"), base_dir)
        settings_raw = combined.get("settings") or {}
        if not isinstance(settings_raw, dict):
            raise ValueError(f"Run #{idx + 1}: 'settings' must be a mapping.")
        name = str(combined.get("name") or input_path.parent.name or f"run{idx + 1}")
        if name in seen:
            name = f"{name}_{idx + 1}"
        seen.add(name)
        plans.append(
            RunPlan(
                name=name,
                input_path=input_path,
                output_path=output_path,
                settings=base_settings.with_overrides(settings_raw),
            )
        )
    return plans


def run_batch(
    plans: List[RunPlan],
    fail_fast: bool = False,
) -> Tuple[List[Dict[str, Any]], int, List[ReductionReport]]:
    summaries: List[Dict[str, Any]] = []
    failures = 0
    reports: List[ReductionReport] = []
    for plan in plans:
        try:
            report = reduce_workspace_recipe_file(plan.input_path, plan.output_path, plan.settings)
        except ReductionError as exc:
            failures += 1
            print(f"{plan.name}: FAILED", file=sys.stderr)
            print(_format_error(exc), file=sys.stderr)
            if fail_fast:
                raise
            summaries.append({"name": plan.name, "input": str(plan.input_path), "error": str(exc)})
            continue
        reports.append(report)
        summary = {"name": plan.name, "input": str(plan.input_path), "output": str(plan.output_path)}
        summary.update(report.summary())
        summaries.append(summary)
        print(f"{plan.name}: kept {summary['kept']}/{summary['members']} members")
    return summaries, failures, reports


def _write_summary(path: Path, rows: List[Dict[str, Any]]) -> None:
    if not rows:
        return
    suffix = path.suffix.lower()
    frame = pd.DataFrame(rows)
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".json":
        frame.to_json(path, orient="records", indent=2)
        return
    if suffix == ".csv":
        frame.to_csv(path, index=False)
        return
    raise ValueError(f"Unsupported output format for '{path}'. Use .csv or .json.")


# -----------------------------
# Commands
# -----------------------------

def _settings_from_args(args: argparse.Namespace) -> ReducerSettings:
    settings = load_settings(args.config)
    return settings.with_overrides({
        "root_manifest": args.root_manifest,
        "dependency_tables": args.dependency_table,
        "json_indent": args.indent,
    })


def _cmd_reduce(args: argparse.Namespace, settings: ReducerSettings) -> int:
    try:
        report = reduce_workspace_recipe_file(args.input, args.output, settings)
    except ReductionError as exc:
        print(_format_error(exc), file=sys.stderr)
        return EXIT_REDUCTION_FAILED
    if args.report:
        payload = {
            "roots": sorted(report.roots),
            "keep": sorted(report.keep_members),
            "dropped_manifests": report.dropped_manifests,
            "dropped_lock_entries": report.dropped_lock_entries,
        }
        print(json.dumps(payload, indent=2))
    return EXIT_OK


def _cmd_batch(args: argparse.Namespace, settings: ReducerSettings) -> int:
    try:
        plans = _plans_from_spec(args.spec, settings)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Failed to build run plans: {exc}", file=sys.stderr)
        return EXIT_USAGE
    if not plans:
        print(f"No runs defined in {args.spec}", file=sys.stderr)
        return EXIT_USAGE
    logger.debug("Loaded %d run plan(s) from %s", len(plans), args.spec)
    try:
        summaries, failures, _ = run_batch(plans, fail_fast=args.fail_fast)
    except ReductionError:
        return EXIT_REDUCTION_FAILED
    if args.output:
        try:
            _write_summary(args.output, summaries)
            print(f"Summary written to {args.output}")
        except (OSError, ValueError) as exc:
            print(f"Failed to write summary: {exc}", file=sys.stderr)
            return EXIT_SUMMARY_FAILED
    return EXIT_OK if failures == 0 else EXIT_BATCH_FAILURES


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, help="YAML file with reducer settings.")
    parser.add_argument("--root-manifest", default=None, help="Relative path of the workspace manifest (default: Cargo.toml).")
    parser.add_argument(
        "--dependency-table",
        action="append",
        help="Manifest table to read dependencies from; repeatable (default: dependencies).",
    )
    parser.add_argument("--indent", type=int, default=None, help="Pretty-print the output JSON with this indent.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reduce cargo-chef recipes to the workspace members reachable from the workspace roots.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")
    subparsers = parser.add_subparsers(dest="command")

    reduce_parser = subparsers.add_parser("reduce", help="Reduce a single recipe file.")
    reduce_parser.add_argument("input", type=Path, help="Input recipe.json.")
    reduce_parser.add_argument("output", type=Path, help="Where to write the reduced recipe.")
    reduce_parser.add_argument("--report", action="store_true", help="Print what was kept and dropped as JSON.")
    _add_common_arguments(reduce_parser)

    batch_parser = subparsers.add_parser("batch", help="Reduce several recipes described by a spec file.")
    batch_parser.add_argument("--spec", type=Path, required=True, help="YAML/JSON file describing the runs.")
    batch_parser.add_argument("--output", type=Path, help="Optional CSV/JSON summary output path.")
    batch_parser.add_argument("--fail-fast", action="store_true", help="Abort on first failure.")
    _add_common_arguments(batch_parser)
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.command not in ("reduce", "batch"):
        parser.print_help()
        return EXIT_USAGE

    level = logging.DEBUG if args.verbose else logging.ERROR if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = _settings_from_args(args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Invalid settings: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if args.command == "reduce":
        return _cmd_reduce(args, settings)
    return _cmd_batch(args, settings)


if __name__ == "__main__":
    sys.exit(main())
