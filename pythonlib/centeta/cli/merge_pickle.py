import argparse
import pickle
from pathlib import Path

from ..analyses.alice_2013_i1225979 import finalize_results
from ..merging.merge import merge_state_list


def main(argv=None):

    parser = argparse.ArgumentParser(
        description=(
            "Merge raw (unnormalized) result pickles; histograms and weight "
            "counters are summed"
        )
    )

    parser.add_argument(
        "--input", "-i", nargs="+", required=True, help="List of raw pickle files to merge"
    )
    parser.add_argument("--output", "-o", required=True, help="Output pickle file")
    parser.add_argument(
        "--finalize",
        action="store_true",
        help="Normalize the merged histograms by their sum of weights",
    )

    args = parser.parse_args(argv)

    output = Path(args.output).resolve()

    dicts = []
    for p in args.input:
        p = Path(p).resolve()
        with open(p, "rb") as f:
            dicts.append(pickle.load(f))

    merged = merge_state_list(dicts)
    if args.finalize:
        merged = finalize_results(merged)

    with open(output, "wb") as f:
        pickle.dump(merged, f)

    print(f"Merged {len(args.input)} files → {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
