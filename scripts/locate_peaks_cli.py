from __future__ import annotations

import argparse
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from subpeak.peak_algorithms.locator import locate_many
from subpeak.peak_core.config_loader import (
    dump_effective_config,
    load_run_config,
    locator_config_from,
)
from subpeak.peak_core.model import LocateOutcome
from subpeak.peak_io.tsv import (
    PositionsMetadata,
    read_signals_tsv,
    write_positions_tsv,
)

SOFTWARE_VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="locate_peaks_cli",
        description="Locate the dominant peak of each signal in a TSV file.",
    )
    p.add_argument("--config", help="Run file path (TOML)")
    p.add_argument("--signals", help="Input signals TSV (overrides input.signals_tsv)")
    p.add_argument("--out", help="Output positions TSV (overrides output.out_tsv)")
    p.add_argument(
        "--error-range",
        type=int,
        help="Plateau tolerance and neighbour search radius, in samples.",
    )
    p.add_argument(
        "--set",
        action="append",
        default=[],
        help="Override config key=value (repeatable).",
    )
    p.add_argument(
        "--dump-effective-config",
        action="store_true",
        help="Print final merged config and exit.",
    )
    p.add_argument(
        "--log-dir",
        default="logs",
        help="Directory where the run log will be created.",
    )
    return p


def _init_logger(project_root: str, log_dir: str) -> Tuple[str, Any]:
    log_root = log_dir if os.path.isabs(log_dir) else os.path.join(project_root, log_dir)
    os.makedirs(log_root, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")
    path = os.path.join(log_root, f"run_{stamp}.log")

    def _log(msg: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(msg.rstrip() + "\n")

    return path, _log


def _log_header(log, project_root: str, paths: Dict[str, Any], cfg: Dict[str, Any]):
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    log(f"[{now}] Run started")
    log(f"Project root: {project_root}")
    if paths.get("config_path"):
        log(f"Run config: {os.path.relpath(paths['config_path'], project_root)}")
    if paths.get("include_path"):
        log(f"Included config: {os.path.relpath(paths['include_path'], project_root)}")
    log("")
    log("----- Effective configuration -----")
    log(dump_effective_config(cfg).rstrip())
    log("-----------------------------------")
    log("")


def _apply_cli_overrides(cfg: Dict[str, Any], args: argparse.Namespace) -> None:
    if args.signals:
        cfg["input"]["signals_tsv"] = args.signals
    if args.out:
        cfg["output"]["out_tsv"] = args.out
    if args.error_range is not None:
        cfg["locator"]["error_range"] = args.error_range


def _output_path(cfg: Dict[str, Any], project_root: str) -> str:
    out_cfg = cfg.get("output", {})
    out_path = out_cfg.get("out_tsv", "")
    if not out_path:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")
        template = out_cfg.get("filename_template", "positions_{stamp}.tsv")
        out_dir = out_cfg.get("out_dir", os.path.join("output", "positions"))
        out_path = os.path.join(out_dir, template.format(stamp=stamp))
    if not os.path.isabs(out_path):
        out_path = os.path.join(project_root, out_path)
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    return out_path


def _describe(o: LocateOutcome) -> str:
    if o.estimate is not None:
        est = o.estimate
        return (
            f"  -> {o.signal_id}: position={est.position:.4f} "
            f"({est.shape.value}, max {est.peak.value} at {est.peak.index})"
        )
    return f"  -> {o.signal_id}: ERROR: {o.error.kind}: {o.error}"


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    project_root = os.getcwd()
    try:
        cfg, paths = load_run_config(
            project_root=project_root,
            config_path=args.config,
            set_overrides=args.set,
        )
        _apply_cli_overrides(cfg, args)
        locator_cfg = locator_config_from(cfg)
    except (ValueError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        return 2

    print("----- Effective configuration -----")
    print(dump_effective_config(cfg).rstrip())
    print("-----------------------------------")

    if args.dump_effective_config:
        return 0

    log_path, log = _init_logger(project_root, args.log_dir)
    _log_header(log, project_root, paths, cfg)
    print(f"Log file: {os.path.relpath(log_path, project_root)}")

    signals_path = cfg["input"].get("signals_tsv", os.path.join("data", "signals.tsv"))
    if not os.path.isabs(signals_path):
        signals_path = os.path.join(project_root, signals_path)
    if not os.path.exists(signals_path):
        msg = f"Signals file not found: {signals_path}"
        print(f"ERROR: {msg}"); log(f"ERROR: {msg}")
        return 2

    try:
        records = read_signals_tsv(signals_path)
    except ValueError as e:
        # pandas EmptyDataError is a ValueError too
        msg = f"Cannot read signals from {signals_path}: {e}"
        print(f"ERROR: {msg}"); log(f"ERROR: {msg}")
        return 2
    print(f"Read {len(records)} signals"); log(f"Read {len(records)} signals")
    if not records:
        msg = "No signals were found. Check input.signals_tsv"
        print(f"ERROR: {msg}"); log(f"ERROR: {msg}")
        return 2

    outcomes = locate_many(records, locator_cfg.error_range)
    for o in outcomes:
        msg = _describe(o)
        print(msg); log(msg)

    out_path = _output_path(cfg, project_root)
    md = PositionsMetadata(
        software_version=SOFTWARE_VERSION,
        error_range=locator_cfg.error_range,
    )
    write_positions_tsv(out_path, md, outcomes, append=False)
    print(f"Output TSV: {os.path.relpath(out_path, project_root)}")
    log(f"Output TSV: {out_path}")

    failed = sum(1 for o in outcomes if not o.ok)
    summary = f"Done. {len(outcomes) - failed} located, {failed} failed."
    print(summary); log(summary)
    return 1 if failed == len(outcomes) else 0


if __name__ == "__main__":
    raise SystemExit(main())
