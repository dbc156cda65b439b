"""
Run the tilted focal-plane correction over an event-builder ROOT file.
"""

import argparse
import time

import numpy as np

from focal_plane.filters.tilt_correction import compute_batch
from focal_plane.geom.tilt_params import DEFAULT_TILT_PARAMETERS, load_tilt_parameters
from focal_plane.kinematics import calculate_weights, weighted_average
from focal_plane.reco_constants import (
    INVALID_VALUE, TREE_NAME, X1_BRANCH, X2_BRANCH, XAVG_BRANCH, XSHAP_BRANCH
)
from focal_plane.utils.io_helpers import read_flat_branches, write_corrected


def correct_event_branches(branches, params, **kwargs):
    """
    Add the corrected position (and optionally Xavg) to a dict of branches.

    kwargs:
        x1_branch, x2_branch: names of the wire-position branches
        zoffset: kinematic z offset in cm; when given, Xavg is recomputed
    """
    x1_branch = kwargs.get("x1_branch", X1_BRANCH)
    x2_branch = kwargs.get("x2_branch", X2_BRANCH)
    for branch in (x1_branch, x2_branch):
        if branch not in branches:
            raise RuntimeError(f"Could not find branch '{branch}' in input tree")

    x1 = np.asarray(branches[x1_branch], dtype=np.float64)
    x2 = np.asarray(branches[x2_branch], dtype=np.float64)

    out = dict(branches)
    xshap, valid = compute_batch(x1, x2, params)
    out[XSHAP_BRANCH] = xshap

    zoffset = kwargs.get("zoffset", None)
    if zoffset is not None:
        xavg = weighted_average(x1, x2, calculate_weights(zoffset))
        bad = (x1 == INVALID_VALUE) | (x2 == INVALID_VALUE) | ~np.isfinite(xavg)
        out[XAVG_BRANCH] = np.where(bad, INVALID_VALUE, xavg)

    return out, valid


def run_correction(input_file, output_file, params=None, **kwargs):
    """
    Read ROOT file, apply the tilt correction, and write new ROOT file.
    """
    params = params or DEFAULT_TILT_PARAMETERS
    tree_name = kwargs.get("tree", TREE_NAME)

    print(f"[INFO] Tilt parameters: {params.to_dict()}")

    total_start = time.perf_counter()
    read_start = time.perf_counter()
    branches = read_flat_branches(input_file, tree_name)
    read_end = time.perf_counter()

    correct_start = time.perf_counter()
    out, valid = correct_event_branches(branches, params, **kwargs)
    correct_end = time.perf_counter()

    n_events = valid.size
    n_valid = int(np.count_nonzero(valid))
    if n_events and n_valid < n_events:
        print(f"[WARNING] {n_events - n_valid} of {n_events} events have no defined corrected position.")

    write_start = time.perf_counter()
    write_corrected(output_file, tree_name, out)
    write_end = time.perf_counter()

    plot_path = kwargs.get("plot", None)
    if plot_path:
        from focal_plane.utils.plotting import plot_focal_plane_comparison

        reference = out.get(XAVG_BRANCH, out[kwargs.get("x1_branch", X1_BRANCH)])
        keep = valid & (reference != INVALID_VALUE)
        plot_focal_plane_comparison(reference[keep], out[XSHAP_BRANCH][keep], plot_path)
        print(f"[INFO] Comparison plot saved to {plot_path}")

    total_end = time.perf_counter()

    print("\n--- Timing Summary ---")
    print(f"Events:          {n_events} ({n_valid} corrected)")
    print(f"Read time:       {read_end - read_start:.2f} s")
    print(f"Correction time: {correct_end - correct_start:.2f} s")
    print(f"Write time:      {write_end - write_start:.2f} s")
    print(f"Total runtime:   {total_end - total_start:.2f} s")

    return n_events, n_valid


def main(argv=None):
    parser = argparse.ArgumentParser(description="Apply the tilted focal-plane correction to a ROOT file.")
    parser.add_argument("input_file", help="Event-builder ROOT file")
    parser.add_argument("output_file", help="Output ROOT file")
    parser.add_argument("--params", help="Tilt parameters (.json or .tsv); default parameters if omitted")
    parser.add_argument("--tree", default=TREE_NAME, help=f"Tree name (default: {TREE_NAME})")
    parser.add_argument("--x1", default=X1_BRANCH, help="Front wire branch")
    parser.add_argument("--x2", default=X2_BRANCH, help="Back wire branch")
    parser.add_argument("--zoffset", type=float, help="Kinematic z offset (cm) for recomputing Xavg")
    parser.add_argument("--plot", help="Save an Xavg/Xshap comparison histogram to this path")
    args = parser.parse_args(argv)

    params = load_tilt_parameters(args.params) if args.params else DEFAULT_TILT_PARAMETERS

    run_correction(
        input_file=args.input_file,
        output_file=args.output_file,
        params=params,
        tree=args.tree,
        x1_branch=args.x1,
        x2_branch=args.x2,
        zoffset=args.zoffset,
        plot=args.plot,
    )


if __name__ == "__main__":
    main()
