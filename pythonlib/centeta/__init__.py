from .particles import Particles
from .event import Event
from .selections import ChargedFinalState, PrimaryParticles
from .centrality import (
    CentralityCalibration,
    CentralityEstimator,
    StoredCentrality,
    V0MMultiplicity,
)
from .hist1d import Hist1D
from .counter import WeightCounter
from .eventfile import EventFile, read_events, write_events
from .merging.merge import merge_state_list, merge_two_states
from .analyses.alice_2013_i1225979 import (
    ANALYSIS_NAME,
    CentralityBin,
    CentralityBinnedEta,
    finalize_results,
    finalize_state,
)
from .analyses.run_analysis import run_analysis, run_analysis_one_file

__all__ = [name for name in dir() if not name.startswith("_")]
