"""
Kinematic cuts on particle sets.

    from centeta.cuts import eta, pt, abseta
    cut = (eta > 2.8) & (eta < 5.1) & (pt > 0.1)
    mask = cut(particles)
"""
import numpy as np


class Cut:
    def __init__(self, fn, desc):
        self._fn = fn
        self.desc = desc

    def __call__(self, particles):
        return np.asarray(self._fn(particles), dtype=bool)

    def __and__(self, other):
        if not isinstance(other, Cut):
            return NotImplemented
        return Cut(lambda p: self(p) & other(p), f"({self.desc} && {other.desc})")

    def __or__(self, other):
        if not isinstance(other, Cut):
            return NotImplemented
        return Cut(lambda p: self(p) | other(p), f"({self.desc} || {other.desc})")

    def __invert__(self):
        return Cut(lambda p: ~self(p), f"!{self.desc}")

    def __repr__(self):
        return f"Cut({self.desc})"


class Quantity:
    """A per-particle quantity; comparing it with a number gives a Cut."""

    def __init__(self, name, getter):
        self.name = name
        self.getter = getter

    def _cmp(self, op, sym, value):
        value = float(value)
        return Cut(lambda p: op(self.getter(p), value), f"{self.name} {sym} {value:g}")

    def __gt__(self, value):
        return self._cmp(np.greater, ">", value)

    def __ge__(self, value):
        return self._cmp(np.greater_equal, ">=", value)

    def __lt__(self, value):
        return self._cmp(np.less, "<", value)

    def __le__(self, value):
        return self._cmp(np.less_equal, "<=", value)

    def __repr__(self):
        return f"Quantity({self.name})"


eta = Quantity("eta", lambda p: p.eta)
abseta = Quantity("abseta", lambda p: p.abseta)
pt = Quantity("pT", lambda p: p.pt)
abscharge = Quantity("abscharge", lambda p: p.abscharge)

OPEN = Cut(lambda p: np.ones(len(p), dtype=bool), "open")
