#!/usr/bin/env python3
"""
Run the centrality-binned dN/deta analysis over one event file and print
the normalized distributions.

    python examples/centrality_eta.py events.npz [calib.yaml]
"""
import sys

import numpy as np
import centeta as ce


def main(argv):
    if len(argv) not in (2, 3):
        print(__doc__, file=sys.stderr)
        return 1

    if len(argv) == 3:
        cal = ce.CentralityCalibration.from_yaml(argv[2])
        centrality = ce.CentralityEstimator(ce.V0MMultiplicity(), cal)
    else:
        centrality = ce.StoredCentrality()

    ana = ce.CentralityBinnedEta.with_default_projections(centrality)
    for event in ce.read_events(argv[1]):
        ana.on_event(event)

    state = ana.finalize()
    print(
        f"events={ana.n_events} vetoed={ana.n_vetoed} unmatched={ana.n_unmatched}"
    )

    lower = 0.0
    for b in ana.bins:
        if not state["bins"][b.upper_edge]["normalized"]:
            lower = b.upper_edge
            continue
        # per unit eta
        dndeta = b.hist.density()
        err = b.hist.errors() / b.hist.widths()
        print(f"{lower:g}-{b.upper_edge:g}%  (sumw={b.sow.sumw:g})")
        for c, v, e in zip(b.hist.centers(), dndeta, err):
            print(f"  {c:+5.2f}  {v:10.3f} +- {e:.3f}")
        print(f"  mean dN/deta = {np.mean(dndeta):.3f}")
        lower = b.upper_edge
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
