from __future__ import annotations

"""
config_loader.py
================

TOML run configuration for batch peak localization.

A run file may name a base file through ``include``; the base is loaded first
and the run file is merged over it. ``--set key=value`` overrides are applied
last. Example run file::

    include = "config/base.toml"

    [locator]
    error_range = 4

    [input]
    signals_tsv = "data/signals.tsv"

    [output]
    out_dir = "output/positions"
"""

import os
import tomllib
from typing import Any, Dict, Iterable, Optional, Tuple

import tomli_w

from .model import DEFAULT_ERROR_RANGE, LocatorConfig


def load_toml(path: str) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def merge_dicts(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = merge_dicts(out[k], v)
        else:
            out[k] = v
    return out


def apply_sets(cfg: Dict[str, Any], sets: Iterable[str]) -> Dict[str, Any]:
    for item in sets:
        if "=" not in item:
            raise ValueError(f"--set requires key=value, got: {item}")
        key, val = item.split("=", 1)
        path = key.strip().split(".")
        cursor = cfg
        for p in path[:-1]:
            if p not in cursor or not isinstance(cursor[p], dict):
                cursor[p] = {}
            cursor = cursor[p]
        value = parse_scalar(val.strip())
        if path[0] == "locator" and (
            isinstance(value, bool) or not isinstance(value, (int, float))
        ):
            raise ValueError(f"--set {key.strip()} requires a number, got: {val.strip()}")
        cursor[path[-1]] = value
    return cfg


def parse_scalar(s: str):
    sl = s.lower()
    if sl in ("true", "false"):
        return sl == "true"
    try:
        if "." in s:
            return float(s)
        return int(s)
    except ValueError:
        return s


def _resolve(project_root: str, path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.normpath(os.path.join(project_root, path))


def load_run_config(
    project_root: str,
    config_path: Optional[str],
    set_overrides: Iterable[str] = (),
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Load a run file (plus its ``include``), then apply --set.
    Returns (effective_cfg, summary_paths) with keys config_path, include_path.
    Without a run file, only the defaults and overrides are used.
    """
    summary: Dict[str, Any] = {"config_path": None, "include_path": None}
    cfg: Dict[str, Any] = {}

    if config_path:
        config_path = _resolve(project_root, config_path)
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Run config not found: {config_path}")
        run_cfg = load_toml(config_path)
        summary["config_path"] = config_path

        include = run_cfg.pop("include", None)
        if include:
            include_path = _resolve(project_root, include)
            if not os.path.exists(include_path):
                raise FileNotFoundError(f"Included config not found: {include_path}")
            cfg = load_toml(include_path)
            summary["include_path"] = include_path
        cfg = merge_dicts(cfg, run_cfg)

    cfg = apply_sets(cfg, set_overrides)

    cfg.setdefault("locator", {})
    cfg["locator"].setdefault("error_range", DEFAULT_ERROR_RANGE)
    cfg.setdefault("input", {})
    cfg.setdefault("output", {})

    return cfg, summary


def locator_config_from(cfg: Dict[str, Any]) -> LocatorConfig:
    """Build the validated LocatorConfig from the ``[locator]`` table."""
    loc = cfg.get("locator", {})
    return LocatorConfig(error_range=loc.get("error_range", DEFAULT_ERROR_RANGE))


def dump_effective_config(cfg: Dict[str, Any]) -> str:
    return tomli_w.dumps(cfg)


__all__ = [
    "load_toml",
    "merge_dicts",
    "apply_sets",
    "parse_scalar",
    "load_run_config",
    "locator_config_from",
    "dump_effective_config",
]
