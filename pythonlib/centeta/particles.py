import numpy as np


FLOAT_COLUMNS = ("px", "py", "pz", "charge")
INT_COLUMNS = ("pdg",)
BOOL_COLUMNS = ("primary",)
COLUMNS = FLOAT_COLUMNS + INT_COLUMNS + BOOL_COLUMNS


class Particles:
    """
    Columnar set of particles.

    Columns are 1D numpy arrays of equal length: px, py, pz (GeV),
    charge (e), pdg and the primary flag. Kinematics (pt, eta) are
    derived on access. Order is the order the particles were stored in.
    """

    def __init__(self, cols):
        missing = [k for k in COLUMNS if k not in cols]
        if missing:
            raise ValueError(f"missing particle columns: {', '.join(missing)}")

        self.cols = {}
        for k in FLOAT_COLUMNS:
            self.cols[k] = np.asarray(cols[k], dtype=float).reshape(-1)
        for k in INT_COLUMNS:
            self.cols[k] = np.asarray(cols[k], dtype=np.int64).reshape(-1)
        for k in BOOL_COLUMNS:
            self.cols[k] = np.asarray(cols[k], dtype=bool).reshape(-1)

        n = len(self.cols["px"])
        for k, v in self.cols.items():
            if len(v) != n:
                raise ValueError(
                    f"column length mismatch: '{k}' has {len(v)}, expected {n}"
                )

    @classmethod
    def empty(cls):
        return cls({k: [] for k in COLUMNS})

    @classmethod
    def from_eta_pt(cls, eta, pt, charge, phi=None, pdg=None, primary=None):
        """Build particles from (eta, pt, phi) instead of momenta."""
        eta = np.asarray(eta, dtype=float).reshape(-1)
        pt = np.asarray(pt, dtype=float).reshape(-1)
        n = len(eta)
        phi = np.zeros(n) if phi is None else np.asarray(phi, dtype=float)
        pdg = np.full(n, 211) if pdg is None else pdg
        primary = np.ones(n, dtype=bool) if primary is None else primary
        return cls(
            {
                "px": pt * np.cos(phi),
                "py": pt * np.sin(phi),
                "pz": pt * np.sinh(eta),
                "charge": charge,
                "pdg": pdg,
                "primary": primary,
            }
        )

    def __len__(self):
        return len(self.cols["px"])

    def __getitem__(self, sel):
        return Particles({k: v[sel] for k, v in self.cols.items()})

    def __repr__(self):
        return f"Particles(n={len(self)})"

    @property
    def pt(self):
        return np.hypot(self.cols["px"], self.cols["py"])

    @property
    def eta(self):
        pt = self.pt
        pz = self.cols["pz"]
        with np.errstate(divide="ignore", invalid="ignore"):
            eta = np.arcsinh(pz / pt)
        # along the beam axis
        on_axis = pt == 0.0
        if on_axis.any():
            eta[on_axis] = np.copysign(np.inf, pz[on_axis])
        return eta

    @property
    def abseta(self):
        return np.abs(self.eta)

    @property
    def charge(self):
        return self.cols["charge"]

    @property
    def abscharge(self):
        return np.abs(self.cols["charge"])

    @property
    def pdg(self):
        return self.cols["pdg"]

    @property
    def primary(self):
        return self.cols["primary"]


def concatenate(parts):
    """Join several particle sets, keeping their order."""
    parts = list(parts)
    if not parts:
        return Particles.empty()
    return Particles({k: np.concatenate([p.cols[k] for p in parts]) for k in COLUMNS})
