from __future__ import annotations

import copy
import multiprocessing as mp
import os
import pickle
from typing import Any, Dict, Iterable, Tuple

from tqdm import tqdm

from ..centrality import (
    CentralityCalibration,
    CentralityEstimator,
    StoredCentrality,
    V0MMultiplicity,
)
from ..eventfile import EventFile
from ..merging.merge import merge_state_list
from .alice_2013_i1225979 import ANALYSIS_NAME, CentralityBinnedEta, finalize_results


def make_centrality(calibration=None):
    """Calibrated V0M when a calibration file is given, else the stored value."""
    if calibration is None:
        return StoredCentrality()
    return CentralityEstimator(
        V0MMultiplicity(), CentralityCalibration.from_yaml(calibration)
    )


def make_analysis(calibration=None):
    return CentralityBinnedEta.with_default_projections(make_centrality(calibration))


def run_analysis_one_file(
    filename: str, meta: str, calibration=None, opts=None
) -> Dict[str, Any]:
    opts = opts or {}

    analysis = make_analysis(calibration)
    max_events = opts.get("max_events")
    for i, event in enumerate(EventFile(filename)):
        if max_events is not None and i >= max_events:
            break
        analysis.on_event(event)

    return {meta: {ANALYSIS_NAME: analysis.to_state_dict()}}


def _worker_run(args) -> Dict[str, Any]:
    filename, meta, calibration, opts = args
    return run_analysis_one_file(
        filename=filename, meta=meta, calibration=calibration, opts=opts
    )


def run_analysis(
    file_and_meta: Iterable[Tuple[str, str]],
    output_dir=".",
    calibration=None,
    opts=None,
    nproc: int | None = None,
    show_progressbar: bool = False,
) -> Dict[str, Any]:
    """
    Run over all files, merge per-file states in input order and finalize.

    Writes <name>.raw.pkl (merged, unnormalized) and <name>.pkl (finalized)
    into output_dir and returns the finalized results.
    """
    opts = opts or {}
    jobs = [(fname, meta, calibration, opts) for (fname, meta) in file_and_meta]

    if not jobs:
        raise ValueError("run_analysis: no jobs")

    bar = dict(
        total=len(jobs),
        desc=ANALYSIS_NAME,
        colour="cyan",
        dynamic_ncols=True,
        disable=not show_progressbar,
    )
    if nproc is None or nproc <= 1:
        states = [_worker_run(j) for j in tqdm(jobs, **bar)]
    else:
        with mp.Pool(processes=nproc) as pool:
            # imap keeps input order, so merging stays deterministic
            states = list(tqdm(pool.imap(_worker_run, jobs), **bar))

    raw: Dict[str, Any] = merge_state_list(states)

    os.makedirs(output_dir, exist_ok=True)
    with open(os.path.join(output_dir, f"{ANALYSIS_NAME}.raw.pkl"), "wb") as f:
        pickle.dump(raw, f)

    results = finalize_results(copy.deepcopy(raw))
    with open(os.path.join(output_dir, f"{ANALYSIS_NAME}.pkl"), "wb") as f:
        pickle.dump(results, f)

    return results
