import pickle

import numpy as np
import pytest

import centeta as ce
from centeta import ANALYSIS_NAME
from centeta.cli.merge_pickle import main

from writing_utils import make_event


def write_pickle(path, obj):
    """Small helper so we don't repeat boilerplate."""
    with open(path, "wb") as f:
        pickle.dump(obj, f)


def read_pickle(path):
    with open(path, "rb") as f:
        return pickle.load(f)


def raw_state(meta, events):
    ana = ce.CentralityBinnedEta.with_default_projections(ce.StoredCentrality())
    for ev in events:
        ana.on_event(ev)
    return {meta: {ANALYSIS_NAME: ana.to_state_dict()}}


def test_main_merges_raw_states(tmp_path):
    f1 = tmp_path / "a.raw.pkl"
    f2 = tmp_path / "b.raw.pkl"
    d1 = raw_state("A", [make_event([0.25], centrality=1.0, weight=2.0)])
    d2 = raw_state("A", [make_event([0.25, 1.25], centrality=2.0, weight=1.0)])
    write_pickle(f1, d1)
    write_pickle(f2, d2)

    out = tmp_path / "out.pkl"
    main(["--input", str(f1), str(f2), "--output", str(out)])

    result = read_pickle(out)
    assert result == ce.merge_state_list([d1, d2])

    rec = result["A"][ANALYSIS_NAME]["bins"][5.0]
    assert rec["sow"].sumw == 3.0
    assert rec["hist"].sumw() == 4.0
    assert result["A"][ANALYSIS_NAME]["n_events"] == 2


def test_main_finalize(tmp_path, capsys):
    f1 = tmp_path / "a.raw.pkl"
    f2 = tmp_path / "b.raw.pkl"
    write_pickle(f1, raw_state("A", [make_event([0.25], centrality=1.0, weight=2.0)]))
    write_pickle(f2, raw_state("A", [make_event([0.25], centrality=1.0, weight=2.0)]))

    out = tmp_path / "out.pkl"
    main(["-i", str(f1), str(f2), "-o", str(out), "--finalize"])

    rec = read_pickle(out)["A"][ANALYSIS_NAME]["bins"][5.0]
    assert rec["normalized"] is True
    assert rec["hist"].sumw() == pytest.approx(1.0)
    # the three other bins never saw an event
    assert capsys.readouterr().err.count("[WARN]") == 3


def test_main_keeps_meta_labels_apart(tmp_path):
    f1 = tmp_path / "a.raw.pkl"
    f2 = tmp_path / "b.raw.pkl"
    write_pickle(f1, raw_state("A", [make_event([0.25], centrality=1.0)]))
    write_pickle(f2, raw_state("B", [make_event([0.25], centrality=15.0)]))

    out = tmp_path / "out.pkl"
    main(["--input", str(f1), str(f2), "--output", str(out)])

    result = read_pickle(out)
    assert set(result) == {"A", "B"}
    assert result["B"][ANALYSIS_NAME]["bins"][20.0]["sow"].sumw == 1.0


def test_merging_finalized_results_is_refused(tmp_path):
    state = raw_state("A", [make_event([0.25], centrality=1.0)])
    ce.finalize_results(state)
    f1 = tmp_path / "a.pkl"
    write_pickle(f1, state)

    with pytest.raises(TypeError):
        main(["--input", str(f1), str(f1), "--output", str(tmp_path / "out.pkl")])


def test_finalizing_a_finalized_pickle_is_refused(tmp_path):
    state = raw_state("A", [make_event([1.25], centrality=1.0, weight=2.0)])
    ce.finalize_results(state)
    fin = tmp_path / "fin.pkl"
    write_pickle(fin, state)
    out = tmp_path / "out.pkl"

    with pytest.raises(TypeError, match="already finalized"):
        main(["-i", str(fin), "-o", str(out), "--finalize"])
    assert not out.exists()


def test_merging_different_centrality_classes_fails(tmp_path):
    a = ce.CentralityBinnedEta.with_default_projections(ce.StoredCentrality())
    b = ce.CentralityBinnedEta.with_default_projections(
        ce.StoredCentrality(), centrality_edges=[10.0, 50.0]
    )
    write_pickle(tmp_path / "a.pkl", {"A": {ANALYSIS_NAME: a.to_state_dict()}})
    write_pickle(tmp_path / "b.pkl", {"A": {ANALYSIS_NAME: b.to_state_dict()}})

    with pytest.raises(ValueError, match="bin mismatch"):
        main(
            [
                "--input",
                str(tmp_path / "a.pkl"),
                str(tmp_path / "b.pkl"),
                "--output",
                str(tmp_path / "out.pkl"),
            ]
        )


def test_merging_different_binning_fails(tmp_path):
    h1 = ce.Hist1D([0.0, 1.0])
    h2 = ce.Hist1D([0.0, 2.0])
    write_pickle(tmp_path / "a.pkl", {"A": {"x": {"h": h1}}})
    write_pickle(tmp_path / "b.pkl", {"A": {"x": {"h": h2}}})

    with pytest.raises(ValueError):
        main(
            [
                "--input",
                str(tmp_path / "a.pkl"),
                str(tmp_path / "b.pkl"),
                "--output",
                str(tmp_path / "out.pkl"),
            ]
        )


def test_merge_does_not_touch_inputs():
    d1 = raw_state("A", [make_event([0.25], centrality=1.0)])
    d2 = raw_state("A", [make_event([0.25], centrality=1.0)])
    before = d1["A"][ANALYSIS_NAME]["bins"][5.0]["hist"].H.copy()

    ce.merge_state_list([d1, d2])

    assert np.array_equal(d1["A"][ANALYSIS_NAME]["bins"][5.0]["hist"].H, before)


def test_main_fails_when_input_file_missing(tmp_path):
    """Non-existent input should raise an error (FileNotFoundError)."""
    missing = tmp_path / "does_not_exist.pkl"
    out = tmp_path / "out.pkl"

    with pytest.raises(FileNotFoundError):
        main(["--input", str(missing), "--output", str(out)])


def test_main_requires_input_arg(tmp_path):
    """argparse should error if --input is missing."""
    out = tmp_path / "out.pkl"

    with pytest.raises(SystemExit) as excinfo:
        main(["--output", str(out)])

    # argparse uses exit code 2 for usage errors
    assert excinfo.value.code == 2
