from .cuts import OPEN


class ChargedFinalState:
    """Charged final-state particles of an event passing a cut."""

    def __init__(self, cut=None, name=None):
        self.cut = cut if cut is not None else OPEN
        self.name = name or "ChargedFinalState"

    def __call__(self, event):
        p = event.particles
        msk = (p.abscharge > 0) & self.cut(p)
        return p[msk]

    def __repr__(self):
        return f"{type(self).__name__}({self.name}: {self.cut.desc})"


class PrimaryParticles:
    """
    Particles flagged primary by the event source, passing a cut.

    Neutral primaries are kept; callers filter on charge when they need to.
    """

    def __init__(self, cut=None, name=None):
        self.cut = cut if cut is not None else OPEN
        self.name = name or "PrimaryParticles"

    def __call__(self, event):
        p = event.particles
        msk = p.primary & self.cut(p)
        return p[msk]

    def __repr__(self):
        return f"{type(self).__name__}({self.name}: {self.cut.desc})"
