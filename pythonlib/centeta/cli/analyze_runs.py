# centeta/cli/analyze_runs.py
from __future__ import annotations

import argparse
import glob
import os
import sys

import yaml

from ..analyses.alice_2013_i1225979 import ANALYSIS_NAME
from ..analyses.run_analysis import run_analysis


def get_by_path(d, dotted, default=None):
    cur = d
    for p in dotted.split("."):
        if not isinstance(cur, dict) or p not in cur:
            return default
        cur = cur[p]
    return cur


def parse_keys(keys):
    """'ALIAS=Dot.Path' or 'Dot.Path' (alias defaults to last segment)."""
    out = []
    for k in keys or []:
        if "=" in k:
            alias, path = k.split("=", 1)
        else:
            alias, path = k.split(".")[-1], k
        if not alias or not path:
            raise ValueError(f"bad key spec: {k!r}")
        out.append((alias, path))
    return out


def build_meta(cfg, keys, missing="NA"):
    if not keys:
        return "all"
    return ",".join(f"{alias}={get_by_path(cfg, path, missing)}" for alias, path in keys)


def _find_event_files_in_run(run_dir: str, candidates: str) -> list[str]:
    """
    Find all matching event files in a run directory.

    `candidates` is a comma-separated list of names or glob patterns.
    """
    pats = [p.strip() for p in (candidates or "").split(",") if p.strip()]
    if not pats:
        pats = ["events.npz"]

    found: list[str] = []
    for pat in pats:
        full = os.path.join(run_dir, pat)
        if any(ch in pat for ch in ["*", "?", "["]):
            found.extend(m for m in glob.glob(full) if os.path.isfile(m))
        elif os.path.isfile(full):
            found.append(full)

    # dedupe + sort for stability
    found = sorted(set(found))

    if not found:
        raise FileNotFoundError(
            f"No event file found in '{run_dir}' matching pattern(s): {', '.join(pats)}"
        )
    return found


def main(argv=None):
    ap = argparse.ArgumentParser(
        description=(
            f"Scan run dirs, build meta labels from config keys, run {ANALYSIS_NAME}."
        )
    )
    ap.add_argument("output_dir", help="Top directory containing run subfolders")
    ap.add_argument(
        "--pattern", default="out-*", help="Glob for run folders (default: out-*)"
    )
    ap.add_argument(
        "--keys",
        nargs="+",
        required=False,
        help=(
            "Alias-qualified dotted keys for labels. "
            "Use 'ALIAS=Dot.Path' or 'Dot.Path' (alias defaults to last segment). "
            "Example: Sqrtsnn=Collider.Sqrtsnn Gen=Generator.Name"
        ),
    )
    ap.add_argument(
        "--results-subdir",
        default="data",
        help="Where to store analysis results (default: data)",
    )
    ap.add_argument(
        "--event-names",
        default="events.npz",
        help=(
            "Comma-separated candidate filenames or glob patterns searched inside "
            "each run dir. Default: events.npz"
        ),
    )
    ap.add_argument(
        "--calibration",
        default=None,
        help=(
            "YAML V0M centrality calibration. Without it the centrality stored "
            "in the event files is used."
        ),
    )
    ap.add_argument(
        "--max-events",
        type=int,
        default=None,
        help="Analyse at most this many events per file.",
    )
    ap.add_argument(
        "--nproc",
        type=int,
        default=None,
        help="Number of processes for multiprocessing (default: no multiprocessing).",
    )
    ap.add_argument(
        "--show-progressbar", action="store_true", help="Show tqdm progress bar"
    )
    ap.add_argument("-v", "--verbose", action="store_true")

    args = ap.parse_args(argv)

    try:
        keys = parse_keys(args.keys)
    except ValueError as e:
        ap.error(str(e))

    if args.calibration is not None and not os.path.isfile(args.calibration):
        print(f"[ERROR] calibration file not found: {args.calibration}", file=sys.stderr)
        return 2

    out_top = os.path.abspath(args.output_dir)
    runs = sorted(d for d in glob.glob(os.path.join(out_top, args.pattern)) if os.path.isdir(d))
    if not runs:
        print(f"[ERROR] no runs match {args.pattern} under {out_top}", file=sys.stderr)
        return 2

    file_and_meta: list[tuple[str, str]] = []

    for rd in runs:
        try:
            evfs = _find_event_files_in_run(rd, args.event_names)
        except FileNotFoundError as e:
            print(f"[ERROR] {e}", file=sys.stderr)
            return 2

        ymlf = os.path.join(rd, "config.yaml")
        if not os.path.isfile(ymlf):
            print(f"[ERROR] Missing config YAML in {rd}: {ymlf}", file=sys.stderr)
            return 2

        try:
            with open(ymlf, "r") as f:
                cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            print(f"[WARN] bad YAML {ymlf}: {e}", file=sys.stderr)
            continue

        meta = build_meta(cfg, keys)
        for evf in evfs:
            file_and_meta.append((evf, meta))

        if args.verbose:
            print(f"[OK] {rd} -> {meta} (n_event_files={len(evfs)})")

    if not file_and_meta:
        print("[ERROR] no valid runs found.", file=sys.stderr)
        return 2

    results_dir = os.path.join(out_top, args.results_subdir)
    os.makedirs(results_dir, exist_ok=True)

    if args.verbose:
        print(f"[INFO] N files: {len(file_and_meta)}")
        print(f"[INFO] Centrality: {args.calibration or 'stored in events'}")
        print(f"[INFO] Results dir: {results_dir}")

    opts = {}
    if args.max_events is not None:
        opts["max_events"] = args.max_events

    run_analysis(
        file_and_meta=file_and_meta,
        output_dir=results_dir,
        calibration=args.calibration,
        opts=opts,
        nproc=args.nproc,
        show_progressbar=args.show_progressbar,
    )

    if args.verbose:
        print("[DONE]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
