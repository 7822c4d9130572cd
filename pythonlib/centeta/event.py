import math

from .particles import Particles


class Event:
    """
    One collision event as seen by an analysis.

    centrality is whatever the event source stored (e.g. a generator-level
    percentile); None when absent.
    """

    def __init__(self, particles=None, weight=1.0, number=0, centrality=None):
        self.particles = particles if particles is not None else Particles.empty()
        self.weight = float(weight)
        self.number = int(number)
        if centrality is not None and math.isnan(float(centrality)):
            centrality = None
        self.centrality = None if centrality is None else float(centrality)

    def __repr__(self):
        return (
            f"Event(number={self.number}, weight={self.weight:g}, "
            f"n_particles={len(self.particles)}, centrality={self.centrality})"
        )
