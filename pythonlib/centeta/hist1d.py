import numpy as np


class Hist1D:
    """
    Weighted 1D histogram over fixed edges.

    Bins are left-closed, right-open [e[i], e[i+1]). Fills outside the edges
    go to underflow/overflow and never into H.
    """

    def __init__(self, edges):
        self.edges = np.array(edges, dtype=float, copy=True)
        if self.edges.ndim != 1 or len(self.edges) < 2:
            raise ValueError("edges must have at least 2 entries.")
        if not np.all(np.isfinite(self.edges)):
            raise ValueError("edges must be finite.")
        if np.any(np.diff(self.edges) <= 0):
            raise ValueError("edges must be strictly increasing.")

        self.nbins = len(self.edges) - 1
        self.H = np.zeros(self.nbins, dtype=float)
        self.sumw2 = np.zeros(self.nbins, dtype=float)
        self.underflow = 0.0
        self.overflow = 0.0
        self.entries = 0

    @staticmethod
    def _bin_idx(edges, vals):
        return np.searchsorted(edges, vals, side="right") - 1

    def fill(self, x, mask=None, weights=None):
        x = np.asarray(x, dtype=float)
        if x.ndim == 0:
            x = x[None]
        if weights is not None:
            w = np.asarray(weights, dtype=float)
            weights = np.full(x.shape, float(w)) if w.ndim == 0 else w
        if mask is not None:
            x = x[mask]
            if weights is not None:
                weights = weights[mask]
        if weights is None:
            weights = np.ones(x.shape, dtype=float)

        self.entries += len(x)

        b = self._bin_idx(self.edges, x)
        under = b < 0
        over = (b >= self.nbins) | np.isnan(x)
        self.underflow += float(weights[under].sum())
        self.overflow += float(weights[over].sum())

        ok = ~under & ~over
        if not ok.any():
            return
        np.add.at(self.H, b[ok], weights[ok])
        np.add.at(self.sumw2, b[ok], weights[ok] * weights[ok])

    def merge_(self, other):
        self._check_compat(other)
        self.H += other.H
        self.sumw2 += other.sumw2
        self.underflow += other.underflow
        self.overflow += other.overflow
        self.entries += other.entries
        return self

    def scale_(self, factor):
        """Scale contents in place: H by factor, sumw2 by factor^2."""
        factor = float(factor)
        self.H *= factor
        self.sumw2 *= factor * factor
        self.underflow *= factor
        self.overflow *= factor
        return self

    def normalized_copy(self, norm):
        out = self.copy()
        return out.scale_(1.0 / float(norm))

    def copy(self):
        out = Hist1D(self.edges)
        out.H = self.H.copy()
        out.sumw2 = self.sumw2.copy()
        out.underflow = self.underflow
        out.overflow = self.overflow
        out.entries = self.entries
        return out

    def sumw(self):
        """In-range sum of weights."""
        return float(self.H.sum())

    def errors(self):
        return np.sqrt(self.sumw2)

    def centers(self):
        return 0.5 * (self.edges[1:] + self.edges[:-1])

    def widths(self):
        return np.diff(self.edges)

    def density(self):
        return self.H / self.widths()

    def _check_compat(self, other):
        if not isinstance(other, Hist1D):
            raise TypeError("Can only combine Hist1D with Hist1D.")
        if not np.array_equal(self.edges, other.edges):
            raise ValueError("Histogram edges differ.")

    def __eq__(self, other):
        if not isinstance(other, Hist1D):
            return NotImplemented
        return (
            np.array_equal(self.edges, other.edges)
            and np.array_equal(self.H, other.H)
            and np.array_equal(self.sumw2, other.sumw2)
            and self.underflow == other.underflow
            and self.overflow == other.overflow
            and self.entries == other.entries
        )

    __hash__ = None

    def __repr__(self):
        return f"Hist1D(nbins={self.nbins}, entries={self.entries}, sumw={self.sumw():g})"
