class WeightCounter:
    """Running sum of event weights."""

    def __init__(self):
        self.sumw = 0.0
        self.sumw2 = 0.0
        self.entries = 0

    def fill(self, weight=1.0):
        weight = float(weight)
        self.sumw += weight
        self.sumw2 += weight * weight
        self.entries += 1

    def merge_(self, other):
        if not isinstance(other, WeightCounter):
            raise TypeError("Can only combine WeightCounter with WeightCounter.")
        self.sumw += other.sumw
        self.sumw2 += other.sumw2
        self.entries += other.entries
        return self

    def copy(self):
        out = WeightCounter()
        out.sumw = self.sumw
        out.sumw2 = self.sumw2
        out.entries = self.entries
        return out

    def __eq__(self, other):
        if not isinstance(other, WeightCounter):
            return NotImplemented
        return (self.sumw, self.sumw2, self.entries) == (
            other.sumw,
            other.sumw2,
            other.entries,
        )

    __hash__ = None

    def __repr__(self):
        return f"WeightCounter(sumw={self.sumw:g}, entries={self.entries})"
