"""
Centrality estimation.

A centrality value is a percentile of the total cross section: 0 is the
most central (head-on) collision, 100 the most peripheral. The V0M
estimator counts charged particles in the two forward scintillator
acceptances and maps that multiplicity to a percentile through a
calibration, a reference sample of V0M multiplicities from
minimum-bias events.
"""
import numpy as np
import yaml

from . import cuts
from .selections import ChargedFinalState


V0A_CUT = (cuts.eta > 2.8) & (cuts.eta < 5.1) & (cuts.pt > 0.1)
V0C_CUT = (cuts.eta > -3.7) & (cuts.eta < -1.7) & (cuts.pt > 0.1)


class V0MMultiplicity:
    """Charged multiplicity in V0A + V0C."""

    name = "V0M"

    def __init__(self):
        self.v0a = ChargedFinalState(V0A_CUT, name="V0A")
        self.v0c = ChargedFinalState(V0C_CUT, name="V0C")

    def __call__(self, event):
        return float(len(self.v0a(event)) + len(self.v0c(event)))


class CentralityCalibration:
    """
    Maps an estimator value to a centrality percentile.

    percentile(m) = 100 * (number of reference values > m) / N
    """

    def __init__(self, reference, estimator="V0M"):
        ref = np.asarray(reference, dtype=float).reshape(-1)
        if ref.size == 0:
            raise ValueError("calibration reference sample is empty")
        if not np.all(np.isfinite(ref)):
            raise ValueError("calibration reference sample must be finite")
        self.reference = np.sort(ref)
        self.estimator = estimator

    @classmethod
    def from_yaml(cls, path):
        with open(path, "r") as f:
            cfg = yaml.safe_load(f) or {}
        if not isinstance(cfg, dict) or "multiplicity" not in cfg:
            raise ValueError(f"calibration file {path} has no 'multiplicity' list")
        return cls(cfg["multiplicity"], estimator=cfg.get("estimator", "V0M"))

    def to_yaml(self, path):
        with open(path, "w") as f:
            yaml.safe_dump(
                {
                    "estimator": self.estimator,
                    "multiplicity": self.reference.tolist(),
                },
                f,
                sort_keys=False,
            )

    def percentile(self, value):
        n = self.reference.size
        n_above = n - np.searchsorted(self.reference, value, side="right")
        return 100.0 * n_above / n

    def __len__(self):
        return self.reference.size


class CentralityEstimator:
    """Observable + calibration, called per event to give a percentile."""

    def __init__(self, observable, calibration):
        if calibration.estimator != observable.name:
            raise ValueError(
                f"calibration is for '{calibration.estimator}', "
                f"estimator is '{observable.name}'"
            )
        self.observable = observable
        self.calibration = calibration
        self.name = observable.name

    def __call__(self, event):
        return float(self.calibration.percentile(self.observable(event)))


class StoredCentrality:
    """Centrality value stored with the event by its source."""

    name = "GEN"

    def __call__(self, event):
        if event.centrality is None:
            raise ValueError(f"event {event.number} carries no stored centrality")
        return event.centrality
