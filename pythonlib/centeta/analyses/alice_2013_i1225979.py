# alice_2013_i1225979.py
"""
ALICE Pb-Pb at 2.76 TeV: charged-particle pseudorapidity distributions
in centrality classes 0-5%, 5-10%, 10-20% and 20-30%.

Events must pass a 2-out-of-3 coincidence of the VZERO1 (forward),
VZERO2 (backward) and SPD (central) acceptances. Each accepted event is
assigned to the first centrality class whose upper edge is strictly above
its centrality; events at 30% or above are not used. Histograms are
normalized per class by the sum of event weights of that class.
"""
import sys

import numpy as np

from .. import cuts
from ..counter import WeightCounter
from ..hist1d import Hist1D
from ..selections import ChargedFinalState, PrimaryParticles


ANALYSIS_NAME = "ALICE_2013_I1225979"

# upper edges of the centrality classes, in percent
CENTRALITY_EDGES = (5.0, 10.0, 20.0, 30.0)

# measured range -3.5 < eta < 5 in steps of 0.5
ETA_EDGES = np.linspace(-3.5, 5.0, 18)

TRIGGER_MIN_VOTES = 2


def default_projections():
    return {
        "forward": ChargedFinalState(
            (cuts.eta > 2.8) & (cuts.eta < 5.1) & (cuts.pt > 0.1), name="VZERO1"
        ),
        "backward": ChargedFinalState(
            (cuts.eta > -3.7) & (cuts.eta < -1.7) & (cuts.pt > 0.1), name="VZERO2"
        ),
        "central": ChargedFinalState(
            (cuts.abseta < 1.0) & (cuts.pt > 0.15), name="SPD"
        ),
        "primaries": PrimaryParticles(cuts.abseta < 5.6, name="APRIM"),
    }


class CentralityBin:
    def __init__(self, upper_edge, eta_edges):
        self.upper_edge = float(upper_edge)
        self.hist = Hist1D(eta_edges)
        self.sow = WeightCounter()

    def __repr__(self):
        return f"CentralityBin(<{self.upper_edge:g}%, {self.sow!r}, {self.hist!r})"


def _check_edges(edges):
    edges = np.asarray(edges, dtype=float).reshape(-1)
    if edges.size == 0:
        raise ValueError("need at least one centrality bin edge")
    if not np.all(np.isfinite(edges)):
        raise ValueError("centrality bin edges must be finite")
    edges = np.sort(edges)
    if np.any(np.diff(edges) <= 0):
        raise ValueError("centrality bin edges must be distinct")
    return edges


class CentralityBinnedEta:
    """
    Accumulates dN/deta of charged primaries per centrality class.

    The four particle selections and the centrality estimator are
    injected; each is a callable taking an Event. Use
    with_default_projections() for the published acceptances.
    """

    name = ANALYSIS_NAME

    def __init__(
        self,
        forward,
        backward,
        central,
        primaries,
        centrality,
        centrality_edges=CENTRALITY_EDGES,
        eta_edges=ETA_EDGES,
    ):
        self.forward = forward
        self.backward = backward
        self.central = central
        self.primaries = primaries
        self.centrality = centrality

        self.edges = _check_edges(centrality_edges)
        self.eta_edges = np.asarray(eta_edges, dtype=float)
        self.bins = [CentralityBin(e, self.eta_edges) for e in self.edges]

        self.n_events = 0
        self.n_vetoed = 0
        self.n_unmatched = 0
        self.finalized = False

    def _check_open(self, what):
        if self.finalized:
            raise RuntimeError(f"{self.name}: cannot {what} after finalize()")

    @classmethod
    def with_default_projections(cls, centrality, **kwargs):
        return cls(centrality=centrality, **default_projections(), **kwargs)

    # ------------------- per event -------------------

    def trigger_votes(self, event):
        fwd = 1 if len(self.forward(event)) > 0 else 0
        bwd = 1 if len(self.backward(event)) > 0 else 0
        cen = 1 if len(self.central(event)) > 0 else 0
        return fwd, bwd, cen

    def passes_trigger(self, event):
        return sum(self.trigger_votes(event)) >= TRIGGER_MIN_VOTES

    def find_bin(self, c):
        """First bin whose upper edge is strictly greater than c, or None."""
        if np.isnan(c):
            return None
        i = int(np.searchsorted(self.edges, c, side="right"))
        if i >= len(self.bins):
            return None
        return self.bins[i]

    def on_event(self, event):
        self._check_open("fill events")
        self.n_events += 1

        if not self.passes_trigger(event):
            self.n_vetoed += 1
            return

        c = float(self.centrality(event))
        cbin = self.find_bin(c)
        if cbin is None:
            self.n_unmatched += 1
            return

        weight = event.weight
        cbin.sow.fill(weight)

        prim = self.primaries(event)
        charged = prim.abscharge > 0
        if charged.any():
            cbin.hist.fill(prim.eta, mask=charged, weights=weight)

    # ------------------- state -------------------

    def to_state_dict(self):
        return {
            "n_events": int(self.n_events),
            "n_vetoed": int(self.n_vetoed),
            "n_unmatched": int(self.n_unmatched),
            "bins": {
                b.upper_edge: {"hist": b.hist, "sow": b.sow} for b in self.bins
            },
        }

    def merge_from(self, other):
        self._check_open("merge")
        other._check_open("be merged")
        if not np.array_equal(self.edges, other.edges):
            raise ValueError("centrality bin edges differ")
        for mine, theirs in zip(self.bins, other.bins):
            mine.hist.merge_(theirs.hist)
            mine.sow.merge_(theirs.sow)
        self.n_events += other.n_events
        self.n_vetoed += other.n_vetoed
        self.n_unmatched += other.n_unmatched
        return self

    def finalize(self):
        """Normalize the bins in place; the accumulator is closed afterwards."""
        self._check_open("finalize again")
        state = finalize_state(self.to_state_dict(), label=self.name)
        self.finalized = True
        return state


def finalize_state(state, label=ANALYSIS_NAME):
    """
    Normalize every bin histogram of a state by 1/sumw of its counter.

    Works in place and returns the state. A bin without accumulated weight
    is left unscaled, reported on stderr and flagged normalized=False.
    A state that already carries normalized flags raises TypeError.
    """
    if any("normalized" in rec for rec in state["bins"].values()):
        raise TypeError(f"{label}: state is already finalized")

    for edge, rec in state["bins"].items():
        sumw = rec["sow"].sumw
        if sumw == 0.0 or not np.isfinite(sumw):
            print(
                f"[WARN] {label}: centrality bin <{edge:g}% has sum of weights "
                f"{sumw:g}; histogram left unnormalized",
                file=sys.stderr,
            )
            rec["normalized"] = False
            continue
        rec["hist"].scale_(1.0 / sumw)
        rec["normalized"] = True
    return state


def finalize_results(results):
    """Finalize every analysis state of a merged {meta: {name: state}} dict."""
    for meta, analyses in results.items():
        state = analyses.get(ANALYSIS_NAME)
        if state is None:
            continue
        finalize_state(state, label=f"{ANALYSIS_NAME} [{meta}]")
    return results
