"""
Event files: one .npz per file, particles of all events stored flat.

    version      ()        int, FORMAT_VERSION
    weights      (nev,)    float
    numbers      (nev,)    int
    centrality   (nev,)    float, NaN where the source stored none
    offsets      (nev+1,)  int, particles of event i are [offsets[i], offsets[i+1])
    px py pz charge (npart,) float
    pdg          (npart,)  int
    primary      (npart,)  bool
"""
import os

import numpy as np

from .event import Event
from .particles import COLUMNS, Particles, concatenate


FORMAT_VERSION = 1
EVENT_ARRAYS = ("version", "weights", "numbers", "centrality", "offsets")


def write_events(path, events):
    events = list(events)
    counts = [len(ev.particles) for ev in events]
    offsets = np.zeros(len(events) + 1, dtype=np.int64)
    offsets[1:] = np.cumsum(counts, dtype=np.int64)

    flat = concatenate(ev.particles for ev in events)
    np.savez(
        path,
        version=np.int64(FORMAT_VERSION),
        weights=np.array([ev.weight for ev in events], dtype=float),
        numbers=np.array([ev.number for ev in events], dtype=np.int64),
        centrality=np.array(
            [np.nan if ev.centrality is None else ev.centrality for ev in events],
            dtype=float,
        ),
        offsets=offsets,
        **flat.cols,
    )


class EventFile:
    """Reads an event file written by write_events()."""

    def __init__(self, path):
        self.path = os.fspath(path)
        if not os.path.isfile(self.path):
            raise FileNotFoundError(f"event file not found: {self.path}")

        with np.load(self.path, allow_pickle=False) as data:
            missing = [k for k in EVENT_ARRAYS + COLUMNS if k not in data.files]
            if missing:
                raise ValueError(
                    f"{self.path}: missing arrays: {', '.join(missing)}"
                )
            arrays = {k: data[k] for k in data.files}

        version = int(arrays["version"])
        if version != FORMAT_VERSION:
            raise ValueError(
                f"{self.path}: unsupported format version {version} "
                f"(expected {FORMAT_VERSION})"
            )

        self.weights = arrays["weights"]
        self.numbers = arrays["numbers"]
        self.centrality = arrays["centrality"]
        self.offsets = arrays["offsets"]
        self.particles = Particles({k: arrays[k] for k in COLUMNS})
        self._validate()

    def _validate(self):
        nev = len(self.weights)
        if len(self.numbers) != nev or len(self.centrality) != nev:
            raise ValueError(f"{self.path}: per-event arrays differ in length")
        off = self.offsets
        if len(off) != nev + 1:
            raise ValueError(f"{self.path}: offsets must have {nev + 1} entries")
        if off[0] != 0 or off[-1] != len(self.particles) or np.any(np.diff(off) < 0):
            raise ValueError(f"{self.path}: inconsistent particle offsets")

    def __len__(self):
        return len(self.weights)

    def __iter__(self):
        for i in range(len(self)):
            lo, hi = int(self.offsets[i]), int(self.offsets[i + 1])
            yield Event(
                particles=self.particles[lo:hi],
                weight=self.weights[i],
                number=self.numbers[i],
                centrality=self.centrality[i],
            )


def read_events(path):
    return iter(EventFile(path))
