#!/usr/bin/env python3
import argparse
import pickle
from pathlib import Path

import numpy as np

from ..analyses.alice_2013_i1225979 import ANALYSIS_NAME


def format_state(state):
    lines = [
        f"  events={state['n_events']} vetoed={state['n_vetoed']} "
        f"unmatched={state['n_unmatched']}"
    ]
    lower = 0.0
    for edge, rec in state["bins"].items():
        h, sow = rec["hist"], rec["sow"]
        flag = rec.get("normalized")
        status = "raw" if flag is None else ("normalized" if flag else "UNNORMALIZED")
        lines.append(
            f"  {lower:>4g}-{edge:<4g}%  sumw={sow.sumw:<12g} n={sow.entries:<8d} "
            f"[{status}]"
        )
        lines.append(f"      H = {np.array2string(h.H, precision=4)}")
        lower = edge
    return lines


def main(argv=None):
    parser = argparse.ArgumentParser(
        description=f"Print a summary of {ANALYSIS_NAME} results"
    )
    parser.add_argument("file", help="Result pickle (raw or finalized)")
    parser.add_argument(
        "--full", action="store_true", help="Print every bin content (no truncation)"
    )
    args = parser.parse_args(argv)

    path = Path(args.file)
    with path.open("rb") as f:
        results = pickle.load(f)

    np.set_printoptions(
        edgeitems=3,
        threshold=1_000_000 if args.full else 10,
        linewidth=120,
        suppress=True,
    )

    for meta, analyses in results.items():
        state = analyses.get(ANALYSIS_NAME)
        if state is None:
            continue
        print(f"{meta}:")
        print("\n".join(format_state(state)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
